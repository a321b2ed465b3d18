"""I/O contracts for Step 01: Raster sampling (image bytes -> luminance grid)."""

from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class RasterSampleInput(BaseModel):
    image_bytes: bytes = Field(..., description="Raw PNG or JPEG file contents")
    strategy: Literal["heightmap", "outline"] = Field(
        "heightmap", description="Generation strategy; outline masks transparent pixels"
    )


class RasterSampleOutput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    values: np.ndarray = Field(
        ..., description="(height, width) float64 luminance on a 0-255 scale, origin top-left"
    )
    width: int = Field(..., ge=1, description="Grid width after downscaling")
    height: int = Field(..., ge=1, description="Grid height after downscaling")
    source_width: int = Field(..., description="Decoded image width")
    source_height: int = Field(..., description="Decoded image height")
    image_format: Literal["png", "jpeg"] = Field(..., description="Sniffed image format")
    strategy: Literal["heightmap", "outline"] = "heightmap"
