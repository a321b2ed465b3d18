"""3D geometry utilities: face normals, quad splitting, grid-to-world mapping."""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)


def face_normals(triangles: np.ndarray) -> np.ndarray:
    """Unit normal of each triangle from the right-hand rule.

    Normal = normalize((v2 - v1) x (v3 - v1)). Degenerate (zero-area)
    triangles get (0, 0, 0).

    Args:
        triangles: (F, 3, 3) array, triangle -> corner -> xyz.

    Returns:
        (F, 3) float64 array.
    """
    triangles = np.asarray(triangles, dtype=np.float64)
    if len(triangles) == 0:
        return np.zeros((0, 3))
    e1 = triangles[:, 1] - triangles[:, 0]
    e2 = triangles[:, 2] - triangles[:, 0]
    normals = np.cross(e1, e2)
    norms = np.linalg.norm(normals, axis=1, keepdims=True)
    degenerate = norms[:, 0] < 1e-12
    # Avoid division by zero for degenerate faces
    normals = normals / np.maximum(norms, 1e-12)
    normals[degenerate] = 0.0
    return normals


def quads_to_triangles(quads: np.ndarray) -> np.ndarray:
    """Split quads (a, b, c, d) into triangles (a, b, c) and (a, c, d).

    The two halves of each quad stay adjacent in the output, so quad order is
    preserved.

    Args:
        quads: (N, 4, 3) array of quad corners in winding order.

    Returns:
        (2N, 3, 3) array.
    """
    quads = np.asarray(quads, dtype=np.float64).reshape(-1, 4, 3)
    first = quads[:, [0, 1, 2]]
    second = quads[:, [0, 2, 3]]
    return np.stack([first, second], axis=1).reshape(-1, 3, 3)


def grid_to_world(index: np.ndarray, size: int, scale: float) -> np.ndarray:
    """Map grid indices to centred world coordinates: ((i / size) - 0.5) * scale."""
    return (np.asarray(index, dtype=np.float64) / size - 0.5) * scale
