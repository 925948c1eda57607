"""Polygon to profile sampling.

The polygon is read as an open polyline that is monotonic in X, so sampling
it along the path reduces to interpolating Y over X.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from stepheight.core.contracts import Point
from stepheight.core.errors import InvalidArgumentError
from stepheight.utils.profile import Profile

logger = logging.getLogger(__name__)


def _as_xy(vertices: Sequence[Point | tuple[float, float]]) -> tuple[np.ndarray, np.ndarray]:
    """Vertex coordinates as two float arrays."""
    pts = [Point.model_validate(v) if not isinstance(v, Point) else v for v in vertices]
    return (
        np.array([p.x for p in pts], dtype=float),
        np.array([p.y for p in pts], dtype=float),
    )


def _validate_polygon(x: np.ndarray, y: np.ndarray) -> None:
    if len(x) < 2:
        raise InvalidArgumentError(f"Polygon needs at least 2 vertices, got {len(x)}")
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        raise InvalidArgumentError("Polygon coordinates must be finite")
    backwards = np.flatnonzero(np.diff(x) < 0)
    if len(backwards) > 0:
        i = int(backwards[0])
        raise InvalidArgumentError(
            f"Polygon X must be non-decreasing: vertex {i + 1} (x={x[i + 1]:g}) "
            f"comes after x={x[i]:g}"
        )
    if x[-1] <= x[0]:
        raise InvalidArgumentError("Polygon has zero extent along X")


def sample_count_for(
    vertices: Sequence[Point | tuple[float, float]],
    sample_resolution: int,
) -> int:
    """Samples needed to cover the polygon's X extent at ``sample_resolution`` per mm."""
    if sample_resolution <= 0:
        raise InvalidArgumentError(f"sample_resolution must be > 0, got {sample_resolution}")
    x, y = _as_xy(vertices)
    _validate_polygon(x, y)
    return int(round((x[-1] - x[0]) * sample_resolution)) + 1


def build_from_polygon(
    vertices: Sequence[Point | tuple[float, float]],
    sample_count: int,
) -> Profile:
    """Sample the polyline at ``sample_count`` evenly spaced X positions.

    Vertical polygon edges (repeated X) are allowed; the sample landing on
    such an X takes one of the two edge heights.
    """
    if sample_count < 2:
        raise InvalidArgumentError(f"sample_count must be >= 2, got {sample_count}")
    x, y = _as_xy(vertices)
    _validate_polygon(x, y)

    positions = np.linspace(x[0], x[-1], int(sample_count))
    values = np.interp(positions, x, y)
    logger.debug(
        f"Sampled {len(x)}-vertex polygon over [{x[0]:g}, {x[-1]:g}]mm "
        f"with {sample_count} samples"
    )
    return Profile.from_samples(values, positions)
