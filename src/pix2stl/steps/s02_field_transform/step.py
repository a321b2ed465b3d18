"""Step 02: Field transform — luminance grid to height field or outline field.

- heightmap: min/max normalisation to [0, 1]
- outline: threshold to occupancy, then 3x3 boundary test
"""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from pix2stl.core.errors import DegenerateInputError
from pix2stl.core.step_base import BaseStep
from .config import FieldTransformConfig
from .contracts import FieldTransformInput, FieldTransformOutput

logger = logging.getLogger(__name__)


class FieldTransformStep(BaseStep[FieldTransformInput, FieldTransformOutput, FieldTransformConfig]):
    name: ClassVar[str] = "field_transform"
    input_type: ClassVar = FieldTransformInput
    output_type: ClassVar = FieldTransformOutput
    config_type: ClassVar = FieldTransformConfig

    def validate_inputs(self, inputs: FieldTransformInput) -> bool:
        if inputs.values.ndim != 2 or inputs.values.size == 0:
            logger.error(f"Expected a non-empty 2D grid, got shape {inputs.values.shape}")
            return False
        return True

    def run(self, inputs: FieldTransformInput) -> FieldTransformOutput:
        if inputs.strategy == "outline":
            return self._run_outline(inputs.values)
        return self._run_heightmap(inputs.values)

    def _run_heightmap(self, values: np.ndarray) -> FieldTransformOutput:
        from ._normalize import normalize_field

        heights = normalize_field(
            values,
            require_variation=self.config.require_variation,
            invert=self.config.invert_heights,
        )
        is_flat = bool(heights.max() == heights.min())
        feature_cells = int(np.count_nonzero(heights))
        logger.info(
            f"Height field {heights.shape[1]}x{heights.shape[0]}: "
            f"{feature_cells} raised cells{' (flat)' if is_flat else ''}"
        )
        return FieldTransformOutput(
            field=heights,
            strategy="heightmap",
            is_flat=is_flat,
            feature_cells=feature_cells,
        )

    def _run_outline(self, values: np.ndarray) -> FieldTransformOutput:
        from ._outline import binarize, outline_field

        occupancy = binarize(values, self.config.threshold)
        outline = outline_field(occupancy, drop_isolated=self.config.drop_isolated_pixels)
        num_outline = int(outline.sum())

        if num_outline == 0 and self.config.require_variation:
            raise DegenerateInputError(
                f"No silhouette outline found ({int(occupancy.sum())} foreground pixels)"
            )

        logger.info(
            f"Outline field {outline.shape[1]}x{outline.shape[0]}: "
            f"{int(occupancy.sum())} foreground, {num_outline} outline cells"
        )
        return FieldTransformOutput(
            field=outline,
            occupancy=occupancy,
            strategy="outline",
            is_flat=num_outline == 0,
            feature_cells=num_outline,
        )
