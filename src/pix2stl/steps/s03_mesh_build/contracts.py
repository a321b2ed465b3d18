"""I/O contracts for Step 03: Mesh build (field -> triangle list)."""

from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from pix2stl.core.mesh import Mesh


class MeshBuildInput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    field: np.ndarray = Field(..., description="Height field or outline field from s02")
    strategy: Literal["heightmap", "outline"] = "heightmap"


class MeshBuildOutput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    mesh: Mesh = Field(..., description="Flat-shaded triangle list")
    strategy: Literal["heightmap", "outline"] = "heightmap"
    num_triangles: int = Field(0, description="Total triangle count")
    bounds: list[list[float]] = Field(
        default_factory=list, description="[[xmin, ymin, zmin], [xmax, ymax, zmax]]"
    )
