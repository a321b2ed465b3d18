"""Configuration for Step 02: Field transform."""

from pydantic import BaseModel, ConfigDict, Field


class FieldTransformConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    threshold: float = Field(
        128.0, ge=0.0, le=255.0,
        description="Outline path: luminance below this is foreground",
    )
    require_variation: bool = Field(
        False,
        description="Fail with DegenerateInputError on a flat field or an empty outline",
    )
    invert_heights: bool = Field(
        False, description="Height-map path: bright pixels become low (lithophane)"
    )
    drop_isolated_pixels: bool = Field(
        True, description="Outline path: foreground pixels with no foreground neighbour are not outline"
    )
