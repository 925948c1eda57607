"""Step 01: Platform edge detection.

Derivative -> flat band marking -> curvature peaks -> boundary indices.
See ``_edges.detect_edges`` for the algorithm.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from stepheight.core.contracts import ProfileData
from stepheight.core.step_base import BaseStep
from ._edges import detect_edges
from .config import EdgeDetectionConfig
from .contracts import EdgeDetectionInput, EdgeDetectionOutput

logger = logging.getLogger(__name__)


class EdgeDetectionStep(BaseStep[EdgeDetectionInput, EdgeDetectionOutput, EdgeDetectionConfig]):
    name: ClassVar[str] = "edge_detection"
    input_type: ClassVar = EdgeDetectionInput
    output_type: ClassVar = EdgeDetectionOutput
    config_type: ClassVar = EdgeDetectionConfig

    def validate_inputs(self, inputs: EdgeDetectionInput) -> bool:
        if inputs.profile.size < 2:
            logger.error(f"Profile too short for edge detection: {inputs.profile.size} samples")
            return False
        return True

    def run(self, inputs: EdgeDetectionInput) -> EdgeDetectionOutput:
        trace = detect_edges(inputs.profile.to_profile(), self.config)
        logger.info(f"Detected {len(trace.edge_indices)} edges: {trace.edge_indices}")

        return EdgeDetectionOutput(
            first_derivative=ProfileData.from_profile(trace.first_derivative),
            binarized_derivative=ProfileData.from_profile(trace.binarized_derivative),
            second_derivative=ProfileData.from_profile(trace.second_derivative),
            edge_indices=trace.edge_indices,
            degenerate=trace.degenerate,
        )
