"""Min/max normalisation of a luminance grid into a height field."""

from __future__ import annotations

import logging

import numpy as np

from pix2stl.core.errors import DegenerateInputError

logger = logging.getLogger(__name__)


def normalize_field(
    values: np.ndarray,
    require_variation: bool = False,
    invert: bool = False,
) -> np.ndarray:
    """Rescale values to [0, 1] with (v - min) / (max - min).

    A flat grid (max == min) has no defined scale; every output cell is 0.0.

    Args:
        values: (H, W) scalar grid.
        require_variation: Raise instead of returning the all-zero field.
        invert: Return 1 - h (bright = low). Not applied to a flat grid.

    Returns:
        (H, W) float64 array.

    Raises:
        DegenerateInputError: flat grid and require_variation is set.
    """
    values = np.asarray(values, dtype=np.float64)
    lo = float(values.min())
    hi = float(values.max())

    if hi == lo:
        if require_variation:
            raise DegenerateInputError(
                f"Image has no luminance variation (all samples = {lo:g})"
            )
        logger.warning(f"Flat field (all samples = {lo:g}); heights set to 0")
        return np.zeros_like(values)

    heights = (values - lo) / (hi - lo)
    if invert:
        heights = 1.0 - heights
    return heights
