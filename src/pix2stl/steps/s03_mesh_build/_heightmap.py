"""Height-map extrusion: normalised heights become a displaced surface over a flat floor.

Grid cell (row, col) maps to world
    x = ((col / width) - 0.5) * scale
    y = ((row / height) - 0.5) * scale
    z = h * (max_height or scale)

Every 2x2 neighbourhood becomes two triangles, each with its own normal
(flat shading). The floor at z = -base_thickness is not joined to the
surface by side walls.
"""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from pix2stl.core.errors import DegenerateInputError
from pix2stl.core.mesh import Mesh, MeshAccumulator
from pix2stl.utils.geometry import grid_to_world, quads_to_triangles
from ._base import MeshBuilder
from .config import MeshBuildConfig

logger = logging.getLogger(__name__)

BASE_NORMAL = (0.0, 0.0, -1.0)


class HeightMapBuilder(MeshBuilder):
    strategy: ClassVar[str] = "heightmap"

    def build(self, field: np.ndarray, config: MeshBuildConfig) -> Mesh:
        heights = np.asarray(field, dtype=np.float64)
        self.check_field(heights)
        rows, cols = heights.shape
        if rows < 2 or cols < 2:
            raise DegenerateInputError(
                f"Height map needs at least 2x2 samples, got {cols}x{rows}"
            )

        acc = MeshAccumulator()
        if heights.max() == heights.min():
            logger.info("Height field is flat; emitting base only")
        else:
            acc.add_triangles(self.surface_triangles(heights, config))
        acc.add_triangles(self.base_triangles(heights.shape, config), normals=BASE_NORMAL)

        mesh = acc.freeze()
        logger.info(f"Height map mesh: {len(mesh)} triangles from {cols}x{rows} grid")
        return mesh

    def surface_triangles(self, heights: np.ndarray, config: MeshBuildConfig) -> np.ndarray:
        """(2 * (H-1) * (W-1), 3, 3) surface triangles, quads in row-major order."""
        rows, cols = heights.shape
        z_scale = config.heightmap.max_height or config.scale

        xs = grid_to_world(np.arange(cols), cols, config.scale)
        ys = grid_to_world(np.arange(rows), rows, config.scale)
        gx, gy = np.meshgrid(xs, ys)
        grid = np.stack([gx, gy, heights * z_scale], axis=-1)  # (H, W, 3)

        # Counter-clockwise seen from +Z
        v00 = grid[:-1, :-1]
        v10 = grid[:-1, 1:]
        v11 = grid[1:, 1:]
        v01 = grid[1:, :-1]
        quads = np.stack([v00, v10, v11, v01], axis=2).reshape(-1, 4, 3)
        return quads_to_triangles(quads)

    def base_triangles(self, shape: tuple[int, int], config: MeshBuildConfig) -> np.ndarray:
        """Two floor triangles under the surface footprint, wound to face -Z."""
        rows, cols = shape
        x0, x1 = grid_to_world(np.array([0, cols - 1]), cols, config.scale)
        y0, y1 = grid_to_world(np.array([0, rows - 1]), rows, config.scale)
        z = -config.heightmap.base_thickness
        return np.array([
            [[x0, y0, z], [x0, y1, z], [x1, y1, z]],
            [[x0, y0, z], [x1, y1, z], [x1, y0, z]],
        ])
