"""Binarisation and silhouette outline extraction.

A cell is on the outline when it is foreground and at least one of its
8 neighbours is background. Border rows and columns are never outline, so
the neighbour test never reads outside the grid.
"""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)

NEIGHBOUR_OFFSETS = [
    (dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dy, dx) != (0, 0)
]


def binarize(values: np.ndarray, threshold: float = 128.0) -> np.ndarray:
    """Foreground where luminance < threshold (dark ink on light paper)."""
    return np.asarray(values) < threshold


def foreground_neighbour_count(occupancy: np.ndarray) -> np.ndarray:
    """Number of foreground 8-neighbours for each interior cell, shape (H-2, W-2)."""
    h, w = occupancy.shape
    occ = occupancy.astype(np.int8)
    count = np.zeros((h - 2, w - 2), dtype=np.int8)
    for dy, dx in NEIGHBOUR_OFFSETS:
        count += occ[1 + dy:h - 1 + dy, 1 + dx:w - 1 + dx]
    return count


def outline_field(occupancy: np.ndarray, drop_isolated: bool = True) -> np.ndarray:
    """Boundary cells of an occupancy grid.

    Args:
        occupancy: (H, W) bool grid, True = foreground.
        drop_isolated: Skip foreground cells with no foreground neighbour.
            Such a single pixel has no inside to bound.

    Returns:
        (H, W) bool grid, False on every border row/column.
    """
    occupancy = np.asarray(occupancy, dtype=bool)
    outline = np.zeros_like(occupancy)
    h, w = occupancy.shape
    if h < 3 or w < 3:
        return outline

    count = foreground_neighbour_count(occupancy)
    edge = occupancy[1:-1, 1:-1] & (count < len(NEIGHBOUR_OFFSETS))
    if drop_isolated:
        edge &= count > 0
    outline[1:-1, 1:-1] = edge

    logger.debug(f"Outline: {int(outline.sum())} of {int(occupancy.sum())} foreground cells")
    return outline
