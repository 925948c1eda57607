"""Configuration for Step 01: Platform edge detection."""

from pydantic import BaseModel, Field, field_validator


class EdgeDetectionConfig(BaseModel):
    # First derivative
    derivative_kernel_size: int = Field(25, ge=3, description="Gaussian derivative kernel size (odd, samples)")
    derivative_gain: float = Field(10.0, description="Factor applied to the first derivative")

    # Flat-region marking: |gain * slope| <= threshold -> flat_value, else 0
    flat_slope_threshold: float = Field(0.25, gt=0, description="Band half-width on the amplified derivative")
    flat_value: float = Field(10.0, gt=0, description="Value marking flat samples in the binarized derivative")

    # Second derivative of the binarized derivative
    curvature_gain: float = Field(100.0, description="Factor applied to the second derivative")
    curvature_max: float = Field(10000.0, gt=0, description="Upper clamp; negative curvature is clamped to 0")

    # Peak picking
    min_edge_separation: int = Field(5, ge=1, description="Minimum distance between edges (samples)")
    min_edge_prominence: float = Field(2.0, ge=0, description="Minimum peak prominence")

    @field_validator("derivative_kernel_size")
    @classmethod
    def _odd_kernel(cls, v: int) -> int:
        if v % 2 == 0:
            raise ValueError(f"derivative_kernel_size must be odd, got {v}")
        return v
