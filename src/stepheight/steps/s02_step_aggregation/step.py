"""Step 02: Platform height aggregation.

Pairs consecutive edges into platforms, crops each one out of the scanned
profile and reports its median height.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from stepheight.core.contracts import ProfileData
from stepheight.core.errors import DegenerateEdgeSetError
from stepheight.core.step_base import BaseStep
from ._platforms import aggregate_steps
from .config import StepAggregationConfig
from .contracts import StepAggregationInput, StepAggregationOutput

logger = logging.getLogger(__name__)


class StepAggregationStep(
    BaseStep[StepAggregationInput, StepAggregationOutput, StepAggregationConfig]
):
    name: ClassVar[str] = "step_aggregation"
    input_type: ClassVar = StepAggregationInput
    output_type: ClassVar = StepAggregationOutput
    config_type: ClassVar = StepAggregationConfig

    def validate_inputs(self, inputs: StepAggregationInput) -> bool:
        size = inputs.profile.size
        out_of_range = [i for i in inputs.edge_indices if not 0 <= i < size]
        if out_of_range:
            logger.error(f"Edge indices outside [0, {size - 1}]: {out_of_range}")
            return False
        if len(set(inputs.edge_indices)) != len(inputs.edge_indices):
            logger.error(f"Duplicate edge indices: {inputs.edge_indices}")
            return False
        return True

    def run(self, inputs: StepAggregationInput) -> StepAggregationOutput:
        edges = sorted(inputs.edge_indices)
        if len(edges) % 2 == 1 and self.config.strict_pairing:
            raise DegenerateEdgeSetError(edges)

        platforms, steps, unpaired = aggregate_steps(inputs.profile.to_profile(), edges)

        warnings = []
        if unpaired:
            msg = (
                f"DegenerateEdgeSet: {len(edges)} edges detected, "
                f"edge(s) {unpaired} left unpaired and reported as no step"
            )
            logger.warning(msg)
            warnings.append(msg)

        logger.info(f"Measured {len(steps)} platforms")
        return StepAggregationOutput(
            platforms=[ProfileData.from_profile(p) for p in platforms],
            steps=steps,
            unpaired_edges=unpaired,
            warnings=warnings,
        )
