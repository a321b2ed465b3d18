"""Configuration for Step 01: Raster sampling."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RasterSampleConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_dimension: int = Field(
        512, ge=1, description="Downscale so that max(width, height) <= this"
    )
    resample: Literal["nearest", "area"] = Field(
        "nearest", description="Downscale filter: 'nearest' neighbour or 'area' box filter"
    )
    alpha_cutoff: int = Field(
        200, ge=0, le=255,
        description="Outline path: alpha <= cutoff is forced to background",
    )
    flip_vertical: bool = Field(
        False, description="Flip rows so that row 0 is the bottom of the image"
    )
