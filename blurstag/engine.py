"""
The blur engine: picks a blur strategy from injected capability flags and
renders a source image at the presentation size.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from .config import Settings, settings as default_settings
from .image import SourceImage
from .parameters import BlurParameters
from .strategies import BlurStrategy, MultiScaleBlur, NativeFilterBlur, StackBlurStrategy
from .surface import RasterSurface, SurfaceManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capabilities:
    """Facts about the rendering environment, supplied by the caller.

    :ivar native_blur_filter: A per-draw Gaussian blur filter is available
    :ivar stack_blur: A stack blur routine is available
    """
    native_blur_filter: bool = False
    stack_blur: bool = True


def select_strategy(capabilities: Capabilities) -> BlurStrategy:
    """
    Chooses the blur strategy for an environment.

    Stack blur is preferred, the native filter path comes second and the
    multi-scale fallback works everywhere.

    :param capabilities: The environment's capabilities
    :return: The strategy instance
    """
    if capabilities.stack_blur:
        return StackBlurStrategy()
    if capabilities.native_blur_filter:
        return NativeFilterBlur()
    return MultiScaleBlur()


def output_size(width: int, height: int, output_width: int = 1920) -> tuple[int, int]:
    """
    Computes the presentation size for a source.

    The width is fixed, the height follows from the source's aspect ratio.

    :param width: Source width in pixels
    :param height: Source height in pixels
    :param output_width: The fixed output width
    :return: The size as tuple (width, height)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid source size {width}x{height}")
    aspect_ratio = width / height
    return output_width, max(1, round(output_width / aspect_ratio))


class BlurEngine:
    """
    Renders blurred images with one strategy.

    Example:
        >>> engine = BlurEngine(Capabilities(native_blur_filter=True, stack_blur=False))
        >>> surface = engine.apply(image, BlurParameters(intensity=100))
        >>> surface.size
        (1920, 1440)
    """

    def __init__(
        self,
        capabilities: Capabilities | None = None,
        strategy: BlurStrategy | None = None,
        surfaces: SurfaceManager | None = None,
        settings: Settings | None = None,
    ):
        """
        :param capabilities: The environment's capabilities. Defaults to stack
            blur being available.
        :param strategy: Explicit strategy, overrides the capability based
            selection
        :param surfaces: The surface manager. A new one by default.
        :param settings: Optional settings overriding the defaults
        """
        self.capabilities = capabilities or Capabilities()
        self.strategy = strategy or select_strategy(self.capabilities)
        self.surfaces = surfaces or SurfaceManager()
        self.settings = settings or default_settings

    def __repr__(self) -> str:
        return f"BlurEngine({self.strategy!r})"

    def output_size_for(self, image: SourceImage) -> tuple[int, int]:
        """
        The output size for an image

        :param image: The source image
        :return: The size as tuple (width, height)
        """
        return output_size(image.width, image.height, self.settings.OUTPUT_WIDTH)

    def apply(self, image: SourceImage, params: BlurParameters | None = None) -> RasterSurface:
        """
        Blurs an image

        :param image: The source image
        :param params: Blur parameters snapshot. The engine settings' default
            intensity if None. Intensities above the engine settings'
            ``MAX_INTENSITY`` are lowered to it.
        :return: The output surface. The caller owns it and should release it
            once encoded.

        Raises :class:`~blurstag.errors.RenderError` if rendering fails.
        """
        params = params or BlurParameters.from_settings(self.settings)
        intensity = min(params.intensity, self.settings.MAX_INTENSITY)
        size = self.output_size_for(image)
        start = time.perf_counter()
        surface = self.strategy.apply(image, intensity, size, self.surfaces)
        logger.debug(
            "%s blurred %dx%d to %dx%d at intensity %.1f in %.1f ms",
            self.strategy.name,
            image.width,
            image.height,
            size[0],
            size[1],
            intensity,
            (time.perf_counter() - start) * 1000.0,
        )
        return surface
