"""Configuration for Step 03: Mesh build (height-map and outline extrusion)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HeightMapConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_thickness: float = Field(
        2.0, ge=0.0, description="Floor sits at z = -base_thickness (mm)"
    )
    max_height: Optional[float] = Field(
        None, gt=0.0, description="World Z of a height of 1.0 (None = use scale)"
    )


class OutlineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    wall_height: float = Field(15.0, gt=0.0, description="Total cutter wall height (mm)")
    top_width: float = Field(
        4.0, ge=0.0, description="Wall width at layer 0, next to the base plate (mm)"
    )
    bottom_width: float = Field(
        0.5, ge=0.0, description="Wall width at the last (uppermost) layer (mm)"
    )
    base_height: float = Field(0.8, ge=0.0, description="Base plate thickness (mm)")
    num_layers: int = Field(8, ge=2, description="Layer boundaries in the taper profile")
    margin: Optional[float] = Field(
        None, ge=0.0, description="Base plate margin beyond the footprint (None = 1.5 * top_width)"
    )

    @property
    def effective_margin(self) -> float:
        return self.margin if self.margin is not None else self.top_width * 1.5


class MeshBuildConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    scale: float = Field(60.0, gt=0.0, description="Footprint edge length (mm)")
    heightmap: HeightMapConfig = Field(default_factory=HeightMapConfig)
    outline: OutlineConfig = Field(default_factory=OutlineConfig)
