"""Configuration for Step 00: Synthetic profile scan."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class BuildProfileConfig(BaseModel):
    sample_resolution: int = Field(
        10, gt=0, description="Samples per millimetre along X (10 -> 0.1mm sample spacing)"
    )

    # Noise
    enable_noise: bool = Field(True, description="Perturb the scanned profile with random noise")
    noise_distribution: Literal["uniform", "gaussian"] = Field(
        "uniform", description="'uniform': range is [low, high], 'gaussian': range is (mean, std)"
    )
    noise_range: tuple[float, float] = Field((-0.1, 0.1), description="Noise parameters (mm)")
    noise_seed: int | None = Field(None, description="Random seed (None = unseeded)")

    # Smoothing
    smooth_profile: bool = Field(False, description="Gaussian-smooth the profile before detection")
    smoothing_kernel_size: int = Field(9, ge=1, description="Smoothing kernel size (odd, samples)")

    @field_validator("smoothing_kernel_size")
    @classmethod
    def _odd_kernel(cls, v: int) -> int:
        if v % 2 == 0:
            raise ValueError(f"smoothing_kernel_size must be odd, got {v}")
        return v

    @model_validator(mode="after")
    def _noise_range_order(self) -> "BuildProfileConfig":
        low, high = self.noise_range
        if self.noise_distribution == "uniform" and low > high:
            raise ValueError(f"noise_range low > high: {self.noise_range}")
        if self.noise_distribution == "gaussian" and high < 0:
            raise ValueError(f"gaussian noise std must be >= 0: {self.noise_range}")
        return self
