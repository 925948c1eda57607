"""Base class for all pipeline steps.

Every step declares typed Input, Output, Config via Pydantic models, so the
runner can chain steps by field name and the CLI can print their JSON schemas.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel

from .contracts import StepMeta
from .errors import PipelineStageError, StepHeightError

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)
ConfigT = TypeVar("ConfigT", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseStep(ABC, Generic[InputT, OutputT, ConfigT]):
    """Abstract base for pipeline steps.

    Subclasses must:
    1. Define concrete Pydantic models for InputT, OutputT, ConfigT
    2. Set class variables: name, input_type, output_type, config_type
    3. Implement run() and validate_inputs()

    Outputs that declare a ``meta`` field get a StepMeta filled in by execute().
    """

    name: ClassVar[str] = ""
    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[BaseModel]]
    config_type: ClassVar[type[BaseModel]]

    def __init__(self, config: ConfigT):
        self.config = config

    @property
    def step_name(self) -> str:
        return self.name or self.__class__.__name__

    @abstractmethod
    def run(self, inputs: InputT) -> OutputT:
        """Execute this pipeline step. Returns output model."""
        ...

    @abstractmethod
    def validate_inputs(self, inputs: InputT) -> bool:
        """Check that the inputs can be processed; log the reason when not."""
        ...

    def execute(self, inputs: InputT) -> OutputT:
        """Run with logging, timing, and validation.

        Raises PipelineStageError naming this step when validation fails or
        run() raises a StepHeightError.
        """
        step_name = self.step_name
        logger.info(f"[{step_name}] Validating inputs...")

        if not self.validate_inputs(inputs):
            raise PipelineStageError(step_name, "Input validation failed")

        logger.info(f"[{step_name}] Starting...")
        t0 = time.perf_counter()
        try:
            result = self.run(inputs)
        except PipelineStageError:
            raise
        except StepHeightError as e:
            logger.error(f"[{step_name}] {e}")
            raise PipelineStageError(step_name, str(e)) from e
        elapsed = time.perf_counter() - t0
        logger.info(f"[{step_name}] Done in {elapsed * 1000:.1f}ms")

        if "meta" in type(result).model_fields:
            result.meta = StepMeta(
                step_name=step_name,
                elapsed_seconds=elapsed,
                params=self.config.model_dump(mode="json"),
            )
        return result

    @classmethod
    def get_input_schema(cls) -> dict:
        """Return JSON schema for inputs."""
        return cls.input_type.model_json_schema()

    @classmethod
    def get_output_schema(cls) -> dict:
        """Return JSON schema for outputs."""
        return cls.output_type.model_json_schema()

    @classmethod
    def get_config_schema(cls) -> dict:
        """Return JSON schema for config."""
        return cls.config_type.model_json_schema()
