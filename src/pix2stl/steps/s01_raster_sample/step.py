"""Step 01: Raster sampling — decode image bytes into a luminance grid.

PNG/JPEG bytes are decoded with OpenCV, downscaled so the longer side fits
the configured cap, and reduced to luminance. For the outline strategy,
transparent pixels are forced to background (white) before thresholding.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from pix2stl.core.errors import DecodeError
from pix2stl.core.step_base import BaseStep
from .config import RasterSampleConfig
from .contracts import RasterSampleInput, RasterSampleOutput

logger = logging.getLogger(__name__)

BACKGROUND_LUMINANCE = 255.0


class RasterSampleStep(BaseStep[RasterSampleInput, RasterSampleOutput, RasterSampleConfig]):
    name: ClassVar[str] = "raster_sample"
    input_type: ClassVar = RasterSampleInput
    output_type: ClassVar = RasterSampleOutput
    config_type: ClassVar = RasterSampleConfig
    input_error: ClassVar = DecodeError

    def validate_inputs(self, inputs: RasterSampleInput) -> bool:
        if not inputs.image_bytes:
            logger.error("No image data supplied")
            return False
        return True

    def run(self, inputs: RasterSampleInput) -> RasterSampleOutput:
        from ._decode import decode_rgba, downscale, luminance, sniff_image_type, to_unit_255

        image_format = sniff_image_type(inputs.image_bytes)
        rgba = decode_rgba(inputs.image_bytes)
        source_height, source_width = rgba.shape[:2]

        rgba = downscale(rgba, self.config.max_dimension, self.config.resample)
        rgba = to_unit_255(rgba)
        values = luminance(rgba)

        if inputs.strategy == "outline":
            transparent = rgba[:, :, 3] <= self.config.alpha_cutoff
            values[transparent] = BACKGROUND_LUMINANCE
            logger.debug(f"Masked {int(transparent.sum())} transparent pixels")

        if self.config.flip_vertical:
            values = values[::-1].copy()

        height, width = values.shape
        if width == 0 or height == 0:
            raise DecodeError("Sampling produced an empty grid")

        logger.info(
            f"Sampled {image_format} {source_width}x{source_height} -> {width}x{height} grid"
        )
        return RasterSampleOutput(
            values=values,
            width=width,
            height=height,
            source_width=source_width,
            source_height=source_height,
            image_format=image_format,
            strategy=inputs.strategy,
        )
