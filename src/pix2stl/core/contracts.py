"""Common Pydantic models shared across pipeline steps."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from pix2stl.steps.s01_raster_sample.config import RasterSampleConfig
from pix2stl.steps.s02_field_transform.config import FieldTransformConfig
from pix2stl.steps.s03_mesh_build.config import MeshBuildConfig
from pix2stl.steps.s04_stl_serialize.config import StlSerializeConfig

from .errors import FailureKind

Strategy = Literal["heightmap", "outline"]


class StepMeta(BaseModel):
    """Metadata attached to every step run for reproducibility."""

    step_name: str
    elapsed_seconds: float = 0.0
    params: dict[str, Any] = Field(default_factory=dict)


class StepEntry(BaseModel):
    """One entry in the pipeline step list."""

    name: str
    module: str
    config_key: str = Field(..., description="GenerationConfig attribute holding this step's config")


class GenerationConfig(BaseModel):
    """Everything one run needs besides the image bytes. Immutable."""

    model_config = ConfigDict(frozen=True)

    strategy: Strategy = Field("heightmap", description="'heightmap' or 'outline' (cookie cutter)")
    sampling: RasterSampleConfig = Field(default_factory=RasterSampleConfig)
    field: FieldTransformConfig = Field(default_factory=FieldTransformConfig)
    mesh: MeshBuildConfig = Field(default_factory=MeshBuildConfig)
    stl: StlSerializeConfig = Field(default_factory=StlSerializeConfig)


class PipelineFailure(BaseModel):
    """Tagged failure returned instead of STL text."""

    kind: FailureKind
    message: str
    step: Optional[str] = Field(None, description="Name of the step that failed")


class GenerationResult(BaseModel):
    """Successful run: the STL text plus run statistics."""

    stl_text: str
    strategy: Strategy
    num_triangles: int = 0
    grid_width: int = 0
    grid_height: int = 0
    steps: list[StepMeta] = Field(default_factory=list)
