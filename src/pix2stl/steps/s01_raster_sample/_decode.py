"""Image decoding and sampling helpers for Step 01.

Decoding goes through OpenCV; every image is normalised to an RGBA array on a
0-255 scale before it is reduced to luminance.
"""

from __future__ import annotations

import logging
import math
from typing import Literal, Optional

import cv2
import numpy as np

from pix2stl.core.errors import DecodeError

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"

# ITU-R BT.601 luma weights (R, G, B)
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])

_INTERPOLATION = {
    "nearest": cv2.INTER_NEAREST,
    "area": cv2.INTER_AREA,
}


def sniff_image_type(data: bytes) -> Optional[Literal["png", "jpeg"]]:
    """Return 'png' or 'jpeg' from the leading magic bytes, None otherwise."""
    if data.startswith(PNG_SIGNATURE):
        return "png"
    if data.startswith(JPEG_SIGNATURE):
        return "jpeg"
    return None


def decode_rgba(data: bytes) -> np.ndarray:
    """Decode PNG/JPEG bytes to an (H, W, 4) RGBA array in its native dtype.

    Raises:
        DecodeError: unsupported format, corrupt data, or zero-area image.
    """
    if not data:
        raise DecodeError("Image data is empty")
    if sniff_image_type(data) is None:
        raise DecodeError("Unsupported image format (expected PNG or JPEG)")

    buf = np.frombuffer(data, dtype=np.uint8)
    try:
        img = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
        raise DecodeError(f"Could not decode image: {e}") from e
    if img is None:
        raise DecodeError("Could not decode image data")
    if img.size == 0 or img.shape[0] == 0 or img.shape[1] == 0:
        raise DecodeError("Decoded image has zero area")

    if img.ndim == 3 and img.shape[2] == 1:
        img = img[:, :, 0]

    opaque = np.iinfo(img.dtype).max if img.dtype.kind in "ui" else 1.0

    if img.ndim == 2:
        alpha = np.full_like(img, opaque)
        rgba = np.stack([img, img, img, alpha], axis=-1)
    elif img.shape[2] == 2:
        gray, alpha = img[:, :, 0], img[:, :, 1]
        rgba = np.stack([gray, gray, gray, alpha], axis=-1)
    elif img.shape[2] == 3:
        alpha = np.full(img.shape[:2], opaque, dtype=img.dtype)
        rgba = np.dstack([img[:, :, ::-1], alpha])
    elif img.shape[2] == 4:
        # OpenCV decodes to BGRA
        rgba = img[:, :, [2, 1, 0, 3]]
    else:
        raise DecodeError(f"Unsupported channel count: {img.shape[2]}")

    return np.ascontiguousarray(rgba)


def target_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Aspect-preserving size with max(w, h) <= max_dimension. Never upscales.

    Dimensions are rounded half up and clamped to at least 1.
    """
    scale = min(1.0, max_dimension / max(width, height))
    new_w = max(1, int(math.floor(width * scale + 0.5)))
    new_h = max(1, int(math.floor(height * scale + 0.5)))
    return min(new_w, max_dimension), min(new_h, max_dimension)


def downscale(rgba: np.ndarray, max_dimension: int, resample: str = "nearest") -> np.ndarray:
    """Resize so that the longer side fits max_dimension."""
    h, w = rgba.shape[:2]
    new_w, new_h = target_size(w, h, max_dimension)
    if (new_w, new_h) == (w, h):
        return rgba
    logger.debug(f"Downscaling {w}x{h} -> {new_w}x{new_h} ({resample})")
    resized = cv2.resize(rgba, (new_w, new_h), interpolation=_INTERPOLATION[resample])
    if resized.ndim == 2:
        resized = resized[:, :, None]
    return resized


def to_unit_255(rgba: np.ndarray) -> np.ndarray:
    """Convert any integer RGBA array to float64 on a 0-255 scale."""
    if rgba.dtype == np.uint8:
        return rgba.astype(np.float64)
    if rgba.dtype.kind in "ui":
        return rgba.astype(np.float64) * (255.0 / np.iinfo(rgba.dtype).max)
    return np.clip(rgba.astype(np.float64), 0.0, 1.0) * 255.0


def luminance(rgba: np.ndarray) -> np.ndarray:
    """0.299 R + 0.587 G + 0.114 B for a float (H, W, 4) array."""
    return rgba[:, :, :3] @ LUMA_WEIGHTS
