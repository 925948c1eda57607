"""I/O contracts for Step 02: Platform height aggregation."""

from pydantic import BaseModel, Field

from stepheight.core.contracts import ProfileData, StepMeta, StepResult


class StepAggregationInput(BaseModel):
    profile: ProfileData = Field(..., description="Scanned profile")
    edge_indices: list[int] = Field(..., description="Platform boundaries from edge detection, ascending")


class StepAggregationOutput(BaseModel):
    platforms: list[ProfileData] = Field(default_factory=list, description="Raw profile of each platform")
    steps: list[StepResult] = Field(default_factory=list, description="Median height of each platform")
    unpaired_edges: list[int] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    meta: StepMeta | None = None
