"""Common Pydantic models shared across pipeline steps."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

if TYPE_CHECKING:
    from stepheight.utils.profile import Profile


def format_number(value: float) -> str:
    """Render a number the way the console report prints it (14 significant digits)."""
    return f"{value:.14g}"


class StepMeta(BaseModel):
    """Metadata attached to every step output for reproducibility."""

    step_name: str
    elapsed_seconds: float = 0.0
    params: dict[str, Any] = Field(default_factory=dict)


class Point(BaseModel):
    """Polygon vertex in millimetres. Also validates from an ``[x, y]`` pair."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError(f"Point needs exactly 2 coordinates, got {len(data)}")
            return {"x": data[0], "y": data[1]}
        return data


class ProfileData(BaseModel):
    """Serializable form of a Profile, used in step inputs and outputs."""

    positions: list[float] = Field(..., description="Sample positions (mm), strictly increasing")
    values: list[float] = Field(..., description="Sample values (mm)")

    @classmethod
    def from_profile(cls, profile: Profile) -> ProfileData:
        return cls(positions=profile.positions.tolist(), values=profile.values.tolist())

    def to_profile(self) -> Profile:
        from stepheight.utils.profile import Profile

        return Profile.from_samples(self.values, self.positions)

    @property
    def size(self) -> int:
        return len(self.values)


class StepResult(BaseModel):
    """One detected platform with its robust (median) height."""

    model_config = ConfigDict(frozen=True)

    start_index: int
    end_index: int
    start_position: float = Field(..., description="Position of the first platform sample (mm)")
    end_position: float = Field(..., description="Position of the last platform sample (mm)")
    height: float = Field(..., description="Median value of the platform samples (mm)")

    @computed_field
    @property
    def length(self) -> float:
        return self.end_position - self.start_position

    def describe(self, number: int) -> str:
        """Console report line; ``number`` counts from 1."""
        return (
            f"Step nr. {number}: range = [{format_number(self.start_position)}mm, "
            f"{format_number(self.end_position)}mm], height = {format_number(self.height)}mm, "
            f"length = {format_number(self.length)}mm"
        )

    def to_profile(self) -> Profile:
        """Two-sample profile at ``height`` spanning the platform, for plotting.

        A single-sample platform gives a single-sample profile.
        """
        from stepheight.utils.profile import Profile

        if self.end_position <= self.start_position:
            return Profile.from_samples([self.height], [self.start_position])
        return Profile.from_samples(
            [self.height, self.height], [self.start_position, self.end_position]
        )


class StepEntry(BaseModel):
    """One entry in the pipeline step list."""

    name: str
    module: str
    config_file: str | None = Field(None, description="YAML file with the step config")
    params: dict[str, Any] = Field(
        default_factory=dict, description="Inline config values, override config_file"
    )
    depends_on: list[str] = Field(default_factory=list)
    enabled: bool = True


def default_steps(**params: dict[str, Any]) -> list[StepEntry]:
    """The three-step detection chain, with optional inline params per step name."""
    return [
        StepEntry(
            name="build_profile",
            module="stepheight.steps.s00_build_profile",
            params=params.get("build_profile", {}),
        ),
        StepEntry(
            name="edge_detection",
            module="stepheight.steps.s01_edge_detection",
            params=params.get("edge_detection", {}),
            depends_on=["build_profile"],
        ),
        StepEntry(
            name="step_aggregation",
            module="stepheight.steps.s02_step_aggregation",
            params=params.get("step_aggregation", {}),
            depends_on=["build_profile", "edge_detection"],
        ),
    ]


class PipelineConfig(BaseModel):
    """Top-level pipeline configuration loaded from pipeline.yaml."""

    project_name: str = "stepheight_project"
    polygon: list[Point] = Field(default_factory=list, description="Scanned object outline (mm)")
    steps: list[StepEntry] = Field(default_factory=default_steps)
    config_root: Path | None = Field(
        None, description="Base directory for relative step config_file paths"
    )


class PipelineResult(BaseModel):
    """Everything a presentation layer needs from one pipeline run."""

    scanned_profile: ProfileData
    first_derivative: ProfileData
    binarized_derivative: ProfileData
    second_derivative: ProfileData
    edge_indices: list[int] = Field(default_factory=list)
    raw_steps: list[ProfileData] = Field(default_factory=list)
    median_steps: list[StepResult] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    meta: list[StepMeta] = Field(default_factory=list)

    def report_lines(self) -> list[str]:
        lines = [f"Number of platforms found: {len(self.median_steps)}"]
        lines.extend(step.describe(i) for i, step in enumerate(self.median_steps, 1))
        return lines
