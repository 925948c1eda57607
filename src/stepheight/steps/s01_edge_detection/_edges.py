"""Platform boundary detection on a height profile.

Algorithm:
1. Gaussian first derivative, amplified
2. Mark samples whose amplified slope lies inside the flat band
   (flat -> ``flat_value``, slope -> 0)
3. Second derivative of that marking, amplified, negative part clamped away:
   what remains are the positive curvature lobes just outside each flat run
4. Local maxima of the clamped curvature = platform boundaries
5. A profile that starts (ends) flat gets its first (last) index as boundary
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from stepheight.utils.profile import Profile
from .config import EdgeDetectionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeTrace:
    """Intermediate signals and the resulting boundary indices."""

    first_derivative: Profile
    binarized_derivative: Profile
    second_derivative: Profile
    edge_indices: list[int] = field(default_factory=list)

    @property
    def degenerate(self) -> bool:
        return len(self.edge_indices) % 2 == 1


def detect_edges(profile: Profile, config: EdgeDetectionConfig | None = None) -> EdgeTrace:
    """Find the start and end index of every flat platform in ``profile``."""
    cfg = config or EdgeDetectionConfig()

    first = profile.gaussian_derivative(cfg.derivative_kernel_size, "first")
    first = first.multiply_constant(cfg.derivative_gain)

    binarized = first.binarize(-cfg.flat_slope_threshold, cfg.flat_slope_threshold, cfg.flat_value)

    second = binarized.gaussian_derivative(cfg.derivative_kernel_size, "second")
    second = second.multiply_constant(cfg.curvature_gain)
    second = second.clamp(0.0, cfg.curvature_max)

    edges = set(second.find_local_extrema("max", cfg.min_edge_separation, cfg.min_edge_prominence))
    logger.debug(f"Curvature peaks: {sorted(edges)}")

    last = binarized.size - 1
    if binarized.get_value(0) > 0:
        edges.add(0)
    if binarized.get_value(last) > 0:
        edges.add(last)

    trace = EdgeTrace(
        first_derivative=first,
        binarized_derivative=binarized,
        second_derivative=second,
        edge_indices=sorted(edges),
    )
    if trace.degenerate:
        logger.warning(
            f"Odd number of edges ({len(trace.edge_indices)}): "
            f"index {trace.edge_indices[-1]} cannot be paired"
        )
    return trace
