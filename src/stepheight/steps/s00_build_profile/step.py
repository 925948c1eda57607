"""Step 00: Synthetic profile scan.

Turns the object polygon into the profile a line sensor would report:
  1. Sample the polygon at ``sample_resolution`` samples per mm
  2. Add random noise (optional, reproducible with ``noise_seed``)
  3. Gaussian smoothing (optional)
"""

from __future__ import annotations

import logging
from typing import ClassVar

from stepheight.core.contracts import ProfileData
from stepheight.core.step_base import BaseStep
from ._polygon import build_from_polygon, sample_count_for
from .config import BuildProfileConfig
from .contracts import BuildProfileInput, BuildProfileOutput

logger = logging.getLogger(__name__)


class BuildProfileStep(BaseStep[BuildProfileInput, BuildProfileOutput, BuildProfileConfig]):
    name: ClassVar[str] = "build_profile"
    input_type: ClassVar = BuildProfileInput
    output_type: ClassVar = BuildProfileOutput
    config_type: ClassVar = BuildProfileConfig

    def validate_inputs(self, inputs: BuildProfileInput) -> bool:
        if len(inputs.polygon) < 2:
            logger.error(f"Polygon needs at least 2 vertices, got {len(inputs.polygon)}")
            return False
        return True

    def run(self, inputs: BuildProfileInput) -> BuildProfileOutput:
        cfg = self.config

        # --- 1. Scan polygon ---
        sample_count = sample_count_for(inputs.polygon, cfg.sample_resolution)
        profile = build_from_polygon(inputs.polygon, sample_count)
        logger.info(
            f"Scanned polygon: {sample_count} samples over "
            f"[{profile.positions[0]:g}, {profile.positions[-1]:g}]mm"
        )

        # --- 2. Noise ---
        if cfg.enable_noise:
            low, high = cfg.noise_range
            profile = profile.add_noise(cfg.noise_distribution, low, high, seed=cfg.noise_seed)
            logger.info(f"Added {cfg.noise_distribution} noise {cfg.noise_range} (seed={cfg.noise_seed})")

        # --- 3. Smoothing ---
        if cfg.smooth_profile:
            profile = profile.gaussian_smooth(cfg.smoothing_kernel_size)
            logger.info(f"Smoothed profile (kernel={cfg.smoothing_kernel_size})")

        return BuildProfileOutput(
            profile=ProfileData.from_profile(profile),
            sample_count=sample_count,
            noise_applied=cfg.enable_noise,
            smoothed=cfg.smooth_profile,
        )
