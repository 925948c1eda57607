"""I/O contracts for Step 00: Synthetic profile scan."""

from pydantic import BaseModel, Field

from stepheight.core.contracts import Point, ProfileData, StepMeta


class BuildProfileInput(BaseModel):
    polygon: list[Point] = Field(..., description="Object outline as an open polyline, X non-decreasing (mm)")


class BuildProfileOutput(BaseModel):
    profile: ProfileData = Field(..., description="Scanned (noisy, optionally smoothed) profile")
    sample_count: int = Field(..., description="Number of samples in the profile")
    noise_applied: bool = Field(False)
    smoothed: bool = Field(False)
    meta: StepMeta | None = None
