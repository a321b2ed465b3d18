"""Configuration for Step 04: ASCII STL serialization."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StlSerializeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    solid_name: Optional[str] = Field(
        None,
        pattern=r"^\S+$",
        description="Name after 'solid'/'endsolid' (None = per strategy)",
    )
    float_precision: Optional[int] = Field(
        None, ge=0, le=17,
        description="Digits after the decimal point (None = shortest round-trip repr)",
    )
