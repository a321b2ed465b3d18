"""Outline extrusion: a tapered cookie-cutter wall on a boxed base plate.

For each outline cell, every 8-neighbour that is not itself an outline cell
gets a wall strip pointing that way. A strip is a stack of num_layers - 1
quads, each joining the cell position (inner) to a point offset along the
direction (outer) between two layer heights. The stack ends with a
horizontal cap quad. A closed box of base_height under the whole footprint
(plus margin) holds the walls.
"""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from pix2stl.core.mesh import Mesh, MeshAccumulator
from pix2stl.utils.geometry import grid_to_world, quads_to_triangles
from ._base import MeshBuilder
from .config import MeshBuildConfig, OutlineConfig

logger = logging.getLogger(__name__)

# (dx, dy) neighbour order; edges first, then diagonals
DIRECTIONS = np.array([
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (1, -1), (-1, 1), (1, 1),
])

# Width names are inverted relative to the geometry: "top_width" is applied
# at layer 0 (against the base plate) and "bottom_width" at the last layer,
# so the wall narrows going up. Swap the two names below to taper the other
# way.
FIRST_LAYER_WIDTH = "top_width"
LAST_LAYER_WIDTH = "bottom_width"

# Base box faces as corner indices, each wound to face outward.
# Corners 0-3 are the bottom ring, 4-7 the top ring, counter-clockwise from +Z.
BOX_FACES = np.array([
    [0, 3, 2, 1],  # bottom
    [4, 5, 6, 7],  # top
    [0, 1, 5, 4],  # front (-Y)
    [1, 2, 6, 5],  # right (+X)
    [2, 3, 7, 6],  # back (+Y)
    [3, 0, 4, 7],  # left (-X)
])


def layer_widths(config: OutlineConfig) -> np.ndarray:
    """Wall offset width at each layer boundary, k = 0 .. num_layers - 1."""
    start = getattr(config, FIRST_LAYER_WIDTH)
    end = getattr(config, LAST_LAYER_WIDTH)
    k = np.arange(config.num_layers)
    return start - k * (start - end) / (config.num_layers - 1)


def layer_heights(config: OutlineConfig) -> np.ndarray:
    """Z of each layer boundary, from base_height to base_height + wall_height."""
    k = np.arange(config.num_layers)
    return config.base_height + config.wall_height * k / (config.num_layers - 1)


def _with_z(xy: np.ndarray, z: np.ndarray | float) -> np.ndarray:
    """Append z (broadcast over the leading axes) to an (..., 2) array."""
    z = np.broadcast_to(np.asarray(z, dtype=np.float64), xy.shape[:-1])
    return np.concatenate([xy, z[..., None]], axis=-1)


class OutlineBuilder(MeshBuilder):
    strategy: ClassVar[str] = "outline"

    def build(self, field: np.ndarray, config: MeshBuildConfig) -> Mesh:
        outline = np.asarray(field, dtype=bool)
        self.check_field(outline)

        acc = MeshAccumulator()
        walls = self.wall_quads(outline, config)
        acc.add_triangles(quads_to_triangles(walls))
        num_wall = len(acc)
        acc.add_triangles(quads_to_triangles(self.base_plate(config)))

        mesh = acc.freeze()
        logger.info(
            f"Outline mesh: {len(mesh)} triangles "
            f"({num_wall} wall, {len(mesh) - num_wall} base)"
        )
        return mesh

    def wall_directions(self, outline: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Outline cells and the directions that need a wall.

        Returns:
            rows, cols: (P,) grid position of each wall strip.
            directions: (P, 2) integer (dx, dy) of each strip.
            Strips are ordered by cell (row-major), then by DIRECTIONS order.
        """
        rows, cols = np.nonzero(outline)
        # Out-of-bounds neighbours count as outline, so they never get a wall
        padded = np.pad(outline, 1, constant_values=True)
        dx = DIRECTIONS[:, 0]
        dy = DIRECTIONS[:, 1]
        neighbour = padded[rows[:, None] + 1 + dy[None, :], cols[:, None] + 1 + dx[None, :]]
        cell_idx, dir_idx = np.nonzero(~neighbour)
        return rows[cell_idx], cols[cell_idx], DIRECTIONS[dir_idx]

    def wall_quads(self, outline: np.ndarray, config: MeshBuildConfig) -> np.ndarray:
        """(P * num_layers, 4, 3) quads: each strip's layer segments then its cap."""
        cfg = config.outline
        height, width = outline.shape
        rows, cols, directions = self.wall_directions(outline)
        num_strips = len(rows)
        if num_strips == 0:
            return np.zeros((0, 4, 3))

        unit = directions / np.linalg.norm(directions, axis=1, keepdims=True)
        inner = np.column_stack([
            grid_to_world(cols, width, config.scale),
            grid_to_world(rows, height, config.scale),
        ])  # (P, 2)

        z = layer_heights(cfg)  # (L,)
        widths = layer_widths(cfg)  # (L,)
        num_layers = cfg.num_layers

        outer_xy = inner[:, None, :] + unit[:, None, :] * widths[None, :, None]  # (P, L, 2)
        inner_xy = np.broadcast_to(inner[:, None, :], outer_xy.shape)
        outer3 = _with_z(outer_xy, z)
        inner3 = _with_z(inner_xy, z)

        segments = np.stack(
            [outer3[:, :-1], inner3[:, :-1], inner3[:, 1:], outer3[:, 1:]], axis=2
        )  # (P, L-1, 4, 3)

        # Cap spans half a cell pitch either side of the strip
        pitch = np.array([config.scale / width, config.scale / height])
        half = np.column_stack([-unit[:, 1], unit[:, 0]]) * pitch * 0.5  # (P, 2)
        top_inner = inner
        top_outer = outer_xy[:, -1]
        inner_edge = _with_z(np.stack([top_inner - half, top_inner + half], axis=1), z[-1])
        outer_edge = _with_z(np.stack([top_outer - half, top_outer + half], axis=1), z[-1])
        caps = self.cap_layer(inner_edge, outer_edge)  # (P, 4, 3)

        quads = np.concatenate([segments, caps[:, None]], axis=1)
        logger.debug(f"{num_strips} wall strips x {num_layers - 1} layers + cap")
        return quads.reshape(-1, 4, 3)

    @staticmethod
    def cap_layer(inner_edge: np.ndarray, outer_edge: np.ndarray) -> np.ndarray:
        """Quad closing the top of a wall strip.

        Args:
            inner_edge: (..., 2, 3) the two ends of the top edge at the cell.
            outer_edge: (..., 2, 3) the matching ends at the outer offset.

        Returns:
            (..., 4, 3) quad (inner[0], outer[0], outer[1], inner[1]).
            Counter-clockwise from +Z when edge[1] lies to the left of the
            inner->outer direction.
        """
        inner_edge = np.asarray(inner_edge, dtype=np.float64)
        outer_edge = np.asarray(outer_edge, dtype=np.float64)
        return np.stack(
            [inner_edge[..., 0, :], outer_edge[..., 0, :], outer_edge[..., 1, :], inner_edge[..., 1, :]],
            axis=-2,
        )

    def base_plate(self, config: MeshBuildConfig) -> np.ndarray:
        """(6, 4, 3) outward-facing box from z=0 to base_height."""
        cfg = config.outline
        half = config.scale / 2 + cfg.effective_margin
        ring = np.array([[-half, -half], [half, -half], [half, half], [-half, half]])
        corners = np.vstack([_with_z(ring, 0.0), _with_z(ring, cfg.base_height)])
        return corners[BOX_FACES]
