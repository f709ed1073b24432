"""
Pytest fixtures for BlurStag tests
"""

import io

import numpy as np
import PIL.Image
import pytest

from blurstag import Settings, SourceImage


def encode_pil(image: PIL.Image.Image, fmt: str = "png", **params) -> bytes:
    """Encodes a PILLOW image to bytes."""
    stream = io.BytesIO()
    image.save(stream, format=fmt, **params)
    return stream.getvalue()


def checkerboard(width: int, height: int, cell: int = 20) -> np.ndarray:
    """Creates a black/white RGB checkerboard."""
    ys, xs = np.mgrid[0:height, 0:width]
    board = ((xs // cell + ys // cell) % 2 * 255).astype(np.uint8)
    return np.repeat(board[:, :, np.newaxis], 3, axis=2)


def sharpness(pixels: np.ndarray) -> float:
    """Mean absolute difference between horizontal and vertical neighbours."""
    data = pixels.astype(np.float64)
    dx = np.abs(np.diff(data, axis=1)).mean()
    dy = np.abs(np.diff(data, axis=0)).mean()
    return float(dx + dy)


@pytest.fixture(scope="module")
def checker_png() -> bytes:
    """An 800x600 checkerboard PNG."""
    return encode_pil(PIL.Image.fromarray(checkerboard(800, 600)))


@pytest.fixture
def checker_image() -> SourceImage:
    """A small 160x120 checkerboard image."""
    return SourceImage.from_array(checkerboard(160, 120, cell=8))


@pytest.fixture
def noise_image() -> SourceImage:
    """A 160x120 image of seeded random noise."""
    rng = np.random.default_rng(42)
    pixels = rng.integers(0, 256, size=(120, 160, 3), dtype=np.uint8)
    return SourceImage.from_array(pixels)


@pytest.fixture
def bar_image() -> SourceImage:
    """A 320x240 dark image with a 40 pixel wide bright vertical bar in the middle.

    Every blur keeps its rows identical and single peaked, so rounding can
    not add neighbour differences and sharpness only depends on the peak and
    edge values.
    """
    pixels = np.full((240, 320, 3), 40, dtype=np.uint8)
    pixels[:, 140:180] = 200
    return SourceImage.from_array(pixels)


@pytest.fixture
def small_settings() -> Settings:
    """Settings rendering at a width of 320 pixels to keep tests fast."""
    return Settings(OUTPUT_WIDTH=320)
