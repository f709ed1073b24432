# BlurStag Filters - Color
"""
Brightness and contrast adjustment.
"""

from __future__ import annotations

from dataclasses import dataclass

import PIL.Image
from PIL import ImageEnhance

from .base import Filter, register_filter


@register_filter
@dataclass
class Brightness(Filter):
    """Adjust image brightness.

    factor: 0.0 = black, 1.0 = original, 1.2 = 20% brighter
    """

    factor: float = 1.0

    def apply(self, image: PIL.Image.Image) -> PIL.Image.Image:
        if self.factor == 1.0:
            return image
        return ImageEnhance.Brightness(image).enhance(self.factor)


@register_filter
@dataclass
class Contrast(Filter):
    """Adjust image contrast.

    factor: 0.0 = gray, 1.0 = original, 1.3 = 30% more contrast
    """

    factor: float = 1.0

    def apply(self, image: PIL.Image.Image) -> PIL.Image.Image:
        if self.factor == 1.0:
            return image
        return ImageEnhance.Contrast(image).enhance(self.factor)
