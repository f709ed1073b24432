"""
Native filter blur.

Used where a per-draw Gaussian blur filter is available. Three layers are
drawn onto the output:
1. The source, scaled and blurred with radius = intensity
2. The source again, blurred a bit less, brightened and with raised
   contrast, at 40% opacity
3. The sharp source in overlay mode at 10% opacity

The result is a bright, slightly saturated "ambient wallpaper" look on top of
a strong blur base.

The detail layer keeps a fixed share of the sharp source at every intensity.
Once the base is nearly flat that share dominates the remaining neighbour
differences, so blur strength grows with intensity for the base and glow
layers while the detail texture stays constant.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from ..blend import BlendMode
from ..filters import Brightness, Contrast, GaussianBlur
from ..image import SourceImage
from ..surface import RasterSurface, SurfaceManager
from .base import BlurStrategy

logger = logging.getLogger(__name__)


class NativeFilterBlur(BlurStrategy):
    """Layered Gaussian blur using per-draw filters."""

    name: ClassVar[str] = "native"

    GLOW_RADIUS_FACTOR: ClassVar[float] = 0.8
    GLOW_BRIGHTNESS: ClassVar[float] = 1.2
    GLOW_CONTRAST: ClassVar[float] = 1.3
    GLOW_OPACITY: ClassVar[float] = 0.4
    DETAIL_OPACITY: ClassVar[float] = 0.1

    def render(
        self,
        image: SourceImage,
        intensity: float,
        output: RasterSurface,
        surfaces: SurfaceManager,
    ):
        if intensity <= 0:
            output.draw_scaled(image)
            return
        logger.debug("Native blur base layer, radius %.1f", intensity)
        output.draw_scaled(image, filters=[GaussianBlur(radius=intensity)])
        logger.debug("Native blur glow layer")
        output.composite(
            image,
            blend_mode=BlendMode.NORMAL,
            opacity=self.GLOW_OPACITY,
            filters=[
                GaussianBlur(radius=intensity * self.GLOW_RADIUS_FACTOR),
                Brightness(factor=self.GLOW_BRIGHTNESS),
                Contrast(factor=self.GLOW_CONTRAST),
            ],
        )
        logger.debug("Native blur detail layer")
        output.composite(image, blend_mode=BlendMode.OVERLAY, opacity=self.DETAIL_OPACITY)
