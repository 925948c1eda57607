"""Pipeline orchestrator: executes the configured steps in order on one polygon."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Sequence
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from .contracts import PipelineConfig, PipelineResult, Point, StepEntry
from .errors import InvalidArgumentError, PipelineStageError

logger = logging.getLogger(__name__)

# Step outputs every PipelineResult is assembled from
REQUIRED_STEPS = ("build_profile", "edge_detection", "step_aggregation")


def _read_mapping(path: Path, what: str) -> dict:
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InvalidArgumentError(
            f"{what} {path} must be a mapping, got {type(raw).__name__}"
        )
    return raw


def load_pipeline_config(config_path: Path) -> PipelineConfig:
    """Load and validate pipeline.yaml.

    Relative step ``config_file`` paths resolve against the YAML file's
    directory unless the file sets ``config_root`` itself.
    """
    config_path = Path(config_path)
    raw = _read_mapping(config_path, "Pipeline config")
    raw.setdefault("config_root", str(config_path.parent))
    return PipelineConfig(**raw)


def load_step_config(
    entry: StepEntry,
    config_class: type[BaseModel],
    config_root: Path | None = None,
) -> BaseModel:
    """Build a step config from its YAML file (if any) plus inline params."""
    raw: dict = {}
    if entry.config_file:
        path = Path(entry.config_file)
        if not path.is_absolute() and config_root is not None:
            path = Path(config_root) / path
        raw = _read_mapping(path, "Step config")
    raw.update(entry.params)
    return config_class(**raw)


def import_step_class(module_path: str):
    """Dynamically import a step class from its module path.

    Expects module_path like 'stepheight.steps.s00_build_profile'
    and looks for a class ending in 'Step' in that module's step.py.
    """
    step_module = importlib.import_module(f"{module_path}.step")
    for attr_name in dir(step_module):
        attr = getattr(step_module, attr_name)
        if (
            isinstance(attr, type)
            and hasattr(attr, "run")
            and attr_name.endswith("Step")
            and attr_name != "BaseStep"
        ):
            return attr
    raise ImportError(f"No Step class found in {module_path}.step")


def _collect_result(results: dict[str, BaseModel]) -> PipelineResult:
    missing = [name for name in REQUIRED_STEPS if name not in results]
    if missing:
        raise PipelineStageError("pipeline", f"No output from required steps: {missing}")

    built = results["build_profile"]
    edges = results["edge_detection"]
    steps = results["step_aggregation"]
    return PipelineResult(
        scanned_profile=built.profile,
        first_derivative=edges.first_derivative,
        binarized_derivative=edges.binarized_derivative,
        second_derivative=edges.second_derivative,
        edge_indices=edges.edge_indices,
        raw_steps=steps.platforms,
        median_steps=steps.steps,
        warnings=steps.warnings,
        meta=[out.meta for out in results.values() if getattr(out, "meta", None) is not None],
    )


def run_pipeline(
    polygon: Sequence[Point | tuple[float, float]],
    config: PipelineConfig | None = None,
) -> PipelineResult:
    """Scan ``polygon``, detect its platforms and return every intermediate profile.

    Steps without ``depends_on`` receive the polygon; the others receive the
    merged outputs of the steps they depend on.
    """
    config = config or PipelineConfig()
    results: dict[str, BaseModel] = {}

    enabled_steps = [s for s in config.steps if s.enabled]
    logger.info(
        f"Pipeline '{config.project_name}' with {len(enabled_steps)} steps, "
        f"{len(polygon)} polygon vertices"
    )

    for entry in enabled_steps:
        logger.info(f"--- Step: {entry.name} ---")

        # ValidationError and InvalidArgumentError are ValueErrors
        try:
            step_cls = import_step_class(entry.module)
            step_config = load_step_config(entry, step_cls.config_type, config.config_root)
        except (ImportError, OSError, yaml.YAMLError, ValueError) as e:
            raise PipelineStageError(entry.name, f"Cannot set up step: {e}") from e
        step_instance = step_cls(config=step_config)

        if entry.depends_on:
            input_data = {}
            for dep in entry.depends_on:
                if dep not in results:
                    raise PipelineStageError(entry.name, f"Depends on '{dep}', which did not run")
                input_data.update(results[dep].model_dump(exclude={"meta"}))
        else:
            input_data = {"polygon": list(polygon)}

        try:
            step_input = step_cls.input_type(**input_data)
        except ValidationError as e:
            raise PipelineStageError(entry.name, f"Invalid step input: {e}") from e
        results[entry.name] = step_instance.execute(step_input)

    result = _collect_result(results)
    logger.info(f"Pipeline complete: {len(result.median_steps)} platforms")
    return result


def run_pipeline_from_file(config_path: Path) -> PipelineResult:
    """Execute the full pipeline from a config file (polygon included)."""
    pipeline_cfg = load_pipeline_config(config_path)
    return run_pipeline(pipeline_cfg.polygon, pipeline_cfg)
