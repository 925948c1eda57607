"""Configuration for Step 02: Platform height aggregation."""

from pydantic import BaseModel, Field


class StepAggregationConfig(BaseModel):
    strict_pairing: bool = Field(
        False, description="Fail on an odd edge count instead of dropping the unpaired edge"
    )
