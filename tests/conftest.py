"""Shared pytest fixtures for pix2stl tests.

Images are synthesised with numpy and encoded in memory with OpenCV, so no
test depends on files on disk.
"""

import cv2
import numpy as np
import pytest


def encode_png(img: np.ndarray) -> bytes:
    """Encode a gray (H, W), BGR (H, W, 3) or BGRA (H, W, 4) array as PNG bytes."""
    ok, buf = cv2.imencode(".png", img)
    assert ok
    return buf.tobytes()


def encode_jpeg(img: np.ndarray, quality: int = 95) -> bytes:
    ok, buf = cv2.imencode(".jpg", img, [cv2.IMWRITE_JPEG_QUALITY, quality])
    assert ok
    return buf.tobytes()


def make_square_image(size: int = 20, margin: int = 5) -> np.ndarray:
    """White gray image with a black filled square inset by margin."""
    img = np.full((size, size), 255, dtype=np.uint8)
    img[margin:size - margin, margin:size - margin] = 0
    return img


@pytest.fixture
def png_bytes():
    """The encode_png helper, for tests that build their own images."""
    return encode_png


@pytest.fixture
def white_png_4x4() -> bytes:
    return encode_png(np.full((4, 4), 255, dtype=np.uint8))


@pytest.fixture
def gradient_png() -> bytes:
    """16 x 8 horizontal gray ramp from 0 to 255."""
    row = np.linspace(0, 255, 16).astype(np.uint8)
    return encode_png(np.tile(row, (8, 1)))


@pytest.fixture
def square_png() -> bytes:
    """20 x 20 black square on white."""
    return encode_png(make_square_image())


@pytest.fixture
def square_jpeg() -> bytes:
    return encode_jpeg(cv2.cvtColor(make_square_image(), cv2.COLOR_GRAY2BGR))


@pytest.fixture
def transparent_black_png() -> bytes:
    """10 x 10 all-black BGRA image whose left half is fully transparent."""
    img = np.zeros((10, 10, 4), dtype=np.uint8)
    img[:, :, 3] = 255
    img[:, :5, 3] = 0
    return encode_png(img)


@pytest.fixture
def large_png() -> bytes:
    """1000 x 600 noise image, larger than the default downscale cap."""
    rng = np.random.default_rng(0)
    return encode_png(rng.integers(0, 256, (600, 1000), dtype=np.uint8))
