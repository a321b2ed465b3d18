"""I/O contracts for Step 02: Field transform (luminance -> height or outline field)."""

from typing import Literal, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class FieldTransformInput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    values: np.ndarray = Field(..., description="(height, width) luminance grid from s01")
    strategy: Literal["heightmap", "outline"] = "heightmap"


class FieldTransformOutput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    field: np.ndarray = Field(
        ..., description="Height field in [0, 1] (heightmap) or bool outline field (outline)"
    )
    occupancy: Optional[np.ndarray] = Field(
        None, description="Bool foreground grid (outline strategy only)"
    )
    strategy: Literal["heightmap", "outline"] = "heightmap"
    is_flat: bool = Field(False, description="True when the field carries no feature")
    feature_cells: int = Field(
        0, description="Cells above zero height (heightmap) or outline cells (outline)"
    )
