"""I/O contracts for Step 01: Platform edge detection."""

from pydantic import BaseModel, Field

from stepheight.core.contracts import ProfileData, StepMeta


class EdgeDetectionInput(BaseModel):
    profile: ProfileData = Field(..., description="Scanned profile")


class EdgeDetectionOutput(BaseModel):
    first_derivative: ProfileData = Field(..., description="Amplified first derivative")
    binarized_derivative: ProfileData = Field(..., description="Flat samples marked, slopes 0")
    second_derivative: ProfileData = Field(..., description="Clamped second derivative of the binarized signal")
    edge_indices: list[int] = Field(default_factory=list, description="Platform boundaries, ascending")
    degenerate: bool = Field(False, description="Odd edge count, last edge cannot be paired")
    meta: StepMeta | None = None
