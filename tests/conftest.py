"""Shared pytest fixtures for step-height pipeline tests."""

from pathlib import Path

import numpy as np
import pytest

from stepheight.core.contracts import PipelineConfig, Point, default_steps
from stepheight.utils.profile import Profile

CONFIGS_DIR = Path(__file__).resolve().parents[1] / "configs"


@pytest.fixture
def staircase_polygon() -> list[Point]:
    """Two-platform outline: y=0 on [0, 15], a sloped top, y=5 on [27, 35]."""
    return [
        Point(x=0, y=0),
        Point(x=15, y=0),
        Point(x=15.5, y=10),
        Point(x=25, y=10.5),
        Point(x=27, y=5),
        Point(x=35, y=5),
    ]


@pytest.fixture
def demo_polygon() -> list[Point]:
    """The full 16-vertex staircase from configs/pipeline.yaml."""
    pairs = [
        (0, 0), (15, 0), (15.5, 10), (25, 10.5), (27, 5), (35, 5), (37, 18), (45, 17.5),
        (47, 15), (57, 15), (60, 19), (63, 19), (70, 6), (72, 6), (75, 0), (80, 0),
    ]
    return [Point(x=x, y=y) for x, y in pairs]


@pytest.fixture
def pipeline_config_path() -> Path:
    return CONFIGS_DIR / "pipeline.yaml"


@pytest.fixture
def clean_config() -> PipelineConfig:
    """50 samples/mm, noise off."""
    return PipelineConfig(
        project_name="test",
        steps=default_steps(build_profile={"sample_resolution": 50, "enable_noise": False}),
    )


@pytest.fixture
def two_level_profile() -> Profile:
    """10 samples at 0 followed by 10 samples at 5, 0.5mm spacing."""
    values = [0.0] * 10 + [5.0] * 10
    positions = np.arange(20) * 0.5
    return Profile.from_samples(values, positions)
