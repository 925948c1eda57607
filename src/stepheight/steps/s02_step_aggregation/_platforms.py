"""Platform pairing and robust height estimation."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from stepheight.core.contracts import StepResult
from stepheight.core.errors import InvalidArgumentError
from stepheight.utils.profile import Profile

logger = logging.getLogger(__name__)


def pair_edges(edge_indices: Sequence[int]) -> tuple[list[tuple[int, int]], list[int]]:
    """Split ascending edges into ``(e0, e1), (e2, e3), ...`` plus the unpaired tail.

    Gaps between pairs are never platforms: one spurious edge shifts every
    later pairing by one.
    """
    edges = [int(e) for e in edge_indices]
    if any(b <= a for a, b in zip(edges, edges[1:])):
        raise InvalidArgumentError(f"Edge indices must be strictly ascending: {edges}")
    pairs = [(edges[i - 1], edges[i]) for i in range(1, len(edges), 2)]
    unpaired = edges[2 * len(pairs):]
    return pairs, unpaired


def measure_platform(profile: Profile, start_index: int, end_index: int) -> tuple[Profile, StepResult]:
    """Crop one platform and take its median as the height."""
    platform = profile.crop(start_index, end_index)
    start_position, end_position = profile.get_coordinate([start_index, end_index])
    result = StepResult(
        start_index=start_index,
        end_index=end_index,
        start_position=start_position,
        end_position=end_position,
        height=platform.get_median(),
    )
    return platform, result


def aggregate_steps(
    profile: Profile,
    edge_indices: Sequence[int],
) -> tuple[list[Profile], list[StepResult], list[int]]:
    """Measure every edge pair.

    Returns:
        (platform profiles, step results, unpaired edges).
    """
    pairs, unpaired = pair_edges(edge_indices)

    platforms: list[Profile] = []
    results: list[StepResult] = []
    for start, end in pairs:
        platform, result = measure_platform(profile, start, end)
        platforms.append(platform)
        results.append(result)
        logger.debug(
            f"Platform [{result.start_position:.3f}, {result.end_position:.3f}]mm: "
            f"height {result.height:.3f}mm over {platform.size} samples"
        )
    return platforms, results, unpaired
