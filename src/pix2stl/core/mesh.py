"""Triangle soup representation shared by the mesh builders and the serializer.

Vertices are never deduplicated: every triangle owns its three corners, the
same layout an STL file uses. Triangles are stored as numpy blocks so that
builders can emit whole grids at once.
"""

from __future__ import annotations

import logging
from typing import Iterator, NamedTuple

import numpy as np

from pix2stl.utils.geometry import face_normals

logger = logging.getLogger(__name__)


class Triangle(NamedTuple):
    """One facet: its normal and three (x, y, z) vertices."""

    normal: tuple[float, float, float]
    vertices: tuple[
        tuple[float, float, float],
        tuple[float, float, float],
        tuple[float, float, float],
    ]


class Mesh:
    """Immutable, ordered triangle list.

    Attributes:
        vertices: (F, 3, 3) float64, triangle -> corner -> xyz.
        normals: (F, 3) float64, one normal per triangle.
    """

    __slots__ = ("vertices", "normals")

    def __init__(self, vertices: np.ndarray, normals: np.ndarray) -> None:
        if vertices.ndim != 3 or vertices.shape[1:] != (3, 3):
            raise ValueError(f"vertices must be (F, 3, 3), got {vertices.shape}")
        if normals.shape != (len(vertices), 3):
            raise ValueError(f"normals must be ({len(vertices)}, 3), got {normals.shape}")
        self.vertices = vertices
        self.normals = normals

    def __repr__(self) -> str:
        return f"Mesh(triangles={len(self)})"

    def __len__(self) -> int:
        return len(self.vertices)

    def triangles(self) -> Iterator[Triangle]:
        """Iterate triangles in insertion order."""
        for normal, tri in zip(self.normals.tolist(), self.vertices.tolist()):
            yield Triangle(tuple(normal), tuple(tuple(v) for v in tri))

    def bounds(self) -> np.ndarray:
        """(2, 3) array of min and max corner. Zeros for an empty mesh."""
        if len(self) == 0:
            return np.zeros((2, 3))
        pts = self.vertices.reshape(-1, 3)
        return np.stack([pts.min(axis=0), pts.max(axis=0)])


class MeshAccumulator:
    """Append-only collector of triangle blocks, frozen into a Mesh at the end."""

    def __init__(self) -> None:
        self._vertices: list[np.ndarray] = []
        self._normals: list[np.ndarray] = []
        self._frozen = False

    def __len__(self) -> int:
        return sum(len(v) for v in self._vertices)

    def add_triangles(self, vertices: np.ndarray, normals: np.ndarray | None = None) -> None:
        """Append (N, 3, 3) triangles. Normals are computed when not given."""
        if self._frozen:
            raise RuntimeError("MeshAccumulator is frozen")
        vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3, 3)
        if len(vertices) == 0:
            return
        if normals is None:
            normals = face_normals(vertices)
        else:
            normals = np.broadcast_to(
                np.asarray(normals, dtype=np.float64), (len(vertices), 3)
            ).copy()
        self._vertices.append(vertices)
        self._normals.append(normals)

    def freeze(self) -> Mesh:
        """Concatenate all blocks into a read-only Mesh."""
        self._frozen = True
        if self._vertices:
            vertices = np.concatenate(self._vertices, axis=0)
            normals = np.concatenate(self._normals, axis=0)
        else:
            vertices = np.zeros((0, 3, 3))
            normals = np.zeros((0, 3))
        vertices.setflags(write=False)
        normals.setflags(write=False)
        logger.debug(f"Mesh frozen with {len(vertices)} triangles")
        return Mesh(vertices=vertices, normals=normals)
