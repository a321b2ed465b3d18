"""Strategy name -> MeshBuilder lookup."""

from __future__ import annotations

from ._base import MeshBuilder
from ._heightmap import HeightMapBuilder
from ._outline_extrusion import OutlineBuilder

BUILDERS: dict[str, type[MeshBuilder]] = {
    HeightMapBuilder.strategy: HeightMapBuilder,
    OutlineBuilder.strategy: OutlineBuilder,
}


def get_builder(strategy: str) -> MeshBuilder:
    try:
        return BUILDERS[strategy]()
    except KeyError:
        raise ValueError(
            f"Unknown mesh strategy '{strategy}' (expected one of {sorted(BUILDERS)})"
        ) from None
