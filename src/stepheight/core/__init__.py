"""stepheight core: pipeline runner, base step, shared contracts, errors."""

from .errors import (
    DegenerateEdgeSetError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    PipelineStageError,
    StepHeightError,
)
from .contracts import PipelineConfig, PipelineResult, Point, ProfileData, StepEntry, StepMeta, StepResult
from .step_base import BaseStep
from .pipeline_runner import run_pipeline, run_pipeline_from_file, load_pipeline_config
from .logging import setup_logging

__all__ = [
    "BaseStep",
    "DegenerateEdgeSetError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "PipelineConfig",
    "PipelineResult",
    "PipelineStageError",
    "Point",
    "ProfileData",
    "StepEntry",
    "StepHeightError",
    "StepMeta",
    "StepResult",
    "run_pipeline",
    "run_pipeline_from_file",
    "load_pipeline_config",
    "setup_logging",
]
