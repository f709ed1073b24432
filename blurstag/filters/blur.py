# BlurStag Filters - Blur
"""
Blur filters.

:func:`stack_blur` approximates a Gaussian with a triangular kernel, the same
result the classic stack blur algorithm produces. The triangle is built from
two box passes per axis, each a running sum, so the cost is independent of
the radius. The edge pixels are repeated once before the passes, so every
output pixel is a triangle average of the edge-extended input, also when the
radius exceeds the image size.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import PIL.Image
from PIL import ImageFilter

from .base import Filter, register_filter


def _window_mean(data: np.ndarray, width: int, axis: int) -> np.ndarray:
    """Mean of every run of ``width`` consecutive values along one axis.

    :param data: Float array
    :param width: Run length
    :param axis: The axis to average along
    :returns: Array shorter by ``width - 1`` along ``axis`` (float64)
    """
    pad = [(0, 0)] * data.ndim
    pad[axis] = (1, 0)
    csum = np.cumsum(np.pad(data, pad, mode="constant"), axis=axis, dtype=np.float64)
    count = data.shape[axis] - width + 1
    upper = [slice(None)] * data.ndim
    lower = [slice(None)] * data.ndim
    upper[axis] = slice(width, width + count)
    lower[axis] = slice(0, count)
    return (csum[tuple(upper)] - csum[tuple(lower)]) / width


def _triangle_pass(data: np.ndarray, radius: int, axis: int) -> np.ndarray:
    """Triangle blur along one axis with weights ``radius + 1 - |k|``.

    :param data: Float array
    :param radius: Kernel reach in pixels
    :param axis: The axis to blur along
    :returns: The blurred array (float64), same shape as ``data``
    """
    pad = [(0, 0)] * data.ndim
    pad[axis] = (radius, radius)
    extended = np.pad(data, pad, mode="edge")
    forward = _window_mean(extended, radius + 1, axis)
    return _window_mean(forward, radius + 1, axis)


def stack_blur(pixels: np.ndarray, radius: int, out: np.ndarray | None = None) -> np.ndarray:
    """Stack blur a float pixel buffer.

    :param pixels: Array of shape (H, W) or (H, W, C)
    :param radius: Blur radius in pixels. Values <= 0 leave the data unchanged.
    :param out: Optional array receiving the result, may be ``pixels`` itself
    :returns: The blurred buffer (``out`` if given)
    """
    radius = int(round(radius))
    if out is None:
        out = np.array(pixels, dtype=pixels.dtype, copy=True)
    elif out is not pixels:
        out[...] = pixels
    if radius <= 0:
        return out
    result = out.astype(np.float64)
    for axis in (0, 1):
        result = _triangle_pass(result, radius, axis)
    out[...] = result
    return out


@register_filter
@dataclass
class GaussianBlur(Filter):
    """Gaussian blur filter.

    radius: Standard deviation in pixels, like a canvas ``blur(10px)``
    """

    radius: float = 2.0

    def apply(self, image: PIL.Image.Image) -> PIL.Image.Image:
        if self.radius <= 0:
            return image
        return image.filter(ImageFilter.GaussianBlur(radius=self.radius))


@register_filter
@dataclass
class StackBlur(Filter):
    """Stack blur filter.

    Faster and more uniform than chained downsampling, visually close to a
    Gaussian blur of the same radius.

    radius: Blur radius in pixels (rounded to an integer)
    """

    radius: int = 10

    def apply(self, image: PIL.Image.Image) -> PIL.Image.Image:
        if int(round(self.radius)) <= 0:
            return image
        pixels = np.asarray(image, dtype=np.float32)
        blurred = stack_blur(pixels, self.radius)
        result = np.clip(np.rint(blurred), 0, 255).astype(np.uint8)
        return PIL.Image.fromarray(result)
