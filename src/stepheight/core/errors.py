"""Error types raised by the step-height pipeline."""

from __future__ import annotations


class StepHeightError(Exception):
    """Base class for all pipeline errors."""


class InvalidArgumentError(StepHeightError, ValueError):
    """Malformed polygon, mismatched sample sequences, bad kernel size, ..."""


class IndexOutOfRangeError(StepHeightError, IndexError):
    """Sample index (or crop range) outside the profile."""


class DegenerateEdgeSetError(StepHeightError):
    """Odd number of detected edges, cannot be paired into closed platforms."""

    def __init__(self, edge_indices: list[int]):
        self.edge_indices = list(edge_indices)
        super().__init__(
            f"{len(self.edge_indices)} edges detected, expected an even count: {self.edge_indices}"
        )


class PipelineStageError(StepHeightError):
    """A pipeline step failed; ``stage`` names the step."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"[{stage}] {message}")
