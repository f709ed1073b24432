"""
Multi-scale downsample blur.

Fallback for environments without any blur primitive. The source is drawn
into three small surfaces and scaled back up; the lossy round trip destroys
detail the way a blur does. Stronger intensities shrink the intermediate
surfaces further.

Layer order on the output:
1. Solid black base
2. The three downsampled layers, smallest first, largest (sharpest) last
3. The smallest layer again in overlay mode for vibrancy
4. The sharp source in soft-light mode as a final contrast touch
"""

from __future__ import annotations

import logging
from typing import ClassVar

from ..blend import BlendMode
from ..image import SourceImage
from ..surface import RasterSurface, SurfaceManager
from .base import BlurStrategy

logger = logging.getLogger(__name__)

MAX_BLUR_FACTOR = 2.0
"blur_factor is clamped to 0 - MAX_BLUR_FACTOR (intensity 0 - 200)"


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(max(value, low), high)


class MultiScaleBlur(BlurStrategy):
    """Blur approximation composed from downsampled copies."""

    name: ClassVar[str] = "multiscale"

    BASE_SCALES: ClassVar[tuple[float, ...]] = (0.4, 0.2, 0.1)
    SHRINK_PER_FACTOR: ClassVar[float] = 0.48

    @classmethod
    def blur_factor(cls, intensity: float) -> float:
        """The intensity relative to 100, clamped to 0.0 - 2.0"""
        return _clamp(intensity / 100.0, 0.0, MAX_BLUR_FACTOR)

    @classmethod
    def scales(cls, blur_factor: float) -> list[float]:
        """
        The downsample factors, largest first

        :param blur_factor: See :meth:`blur_factor`
        :return: One factor per base scale
        """
        shrink = 1.0 - blur_factor * cls.SHRINK_PER_FACTOR
        return [base * shrink for base in cls.BASE_SCALES]

    @classmethod
    def layer_opacities(cls, blur_factor: float) -> list[float]:
        """
        Opacities of the upscaled layers, in the order they are composited
        (smallest surface first)
        """
        return [
            _clamp(0.7 * blur_factor),
            _clamp(0.6 * blur_factor),
            _clamp(max(0.2, 0.5 * (1.0 - blur_factor))),
        ]

    @classmethod
    def overlay_opacity(cls, blur_factor: float) -> float:
        return _clamp(0.2 * (1.0 - blur_factor * 0.5))

    @classmethod
    def soft_light_opacity(cls, blur_factor: float) -> float:
        return _clamp(max(0.1, 0.3 * (1.0 - blur_factor)))

    def render(
        self,
        image: SourceImage,
        intensity: float,
        output: RasterSurface,
        surfaces: SurfaceManager,
    ):
        blur_factor = self.blur_factor(intensity)
        layers = []
        for scale in self.scales(blur_factor):
            small = surfaces.create_surface(output.width * scale, output.height * scale)
            small.draw_scaled(image)
            layers.append(small)
        logger.debug(
            "Multi-scale blur factor %.2f, layers %s",
            blur_factor,
            [layer.size for layer in layers],
        )
        output.fill((0, 0, 0))
        for layer, opacity in zip(reversed(layers), self.layer_opacities(blur_factor)):
            output.composite(layer, blend_mode=BlendMode.NORMAL, opacity=opacity)
        output.composite(
            layers[-1],
            blend_mode=BlendMode.OVERLAY,
            opacity=self.overlay_opacity(blur_factor),
        )
        output.composite(
            image,
            blend_mode=BlendMode.SOFT_LIGHT,
            opacity=self.soft_light_opacity(blur_factor),
        )
