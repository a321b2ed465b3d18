"""I/O contracts for Step 04: STL serialization (triangle list -> ASCII STL text)."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from pix2stl.core.mesh import Mesh


class StlSerializeInput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    mesh: Mesh = Field(..., description="Triangle list from s03")
    strategy: Literal["heightmap", "outline"] = "heightmap"


class StlSerializeOutput(BaseModel):
    stl_text: str = Field(..., description="ASCII STL document")
    solid_name: str = Field(..., description="Name used in the solid header")
    num_facets: int = Field(0, description="Number of facet blocks written")
    num_bytes: int = Field(0, description="UTF-8 size of stl_text")
