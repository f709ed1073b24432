"""
Base class for all blur strategies.

A strategy turns a :class:`~blurstag.image.SourceImage` into a blurred
:class:`~blurstag.surface.RasterSurface` of a given size. Each strategy:
- Allocates its output surface through the surface manager
- Runs its drawing steps strictly in order, each one reading what the
  previous ones left on the surface
- Releases every intermediate surface before returning, also on failure
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar

from ..errors import RenderError
from ..image import SourceImage
from ..surface import RasterSurface, SurfaceManager

logger = logging.getLogger(__name__)


class BlurStrategy(ABC):
    """
    Base class for all blur strategies.

    Subclasses must implement:
    - name: Class variable with the strategy's registry name
    - render(): Draws the blurred image onto the prepared output surface
    """

    name: ClassVar[str] = "base"

    # Registry of strategy classes by name
    _registry: ClassVar[dict[str, type[BlurStrategy]]] = {}

    def __init_subclass__(cls, **kwargs):
        """Register strategy subclass in registry."""
        super().__init_subclass__(**kwargs)
        if cls.name != "base":
            BlurStrategy._registry[cls.name] = cls

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    def apply(
        self,
        image: SourceImage,
        intensity: float,
        size: tuple[int, int],
        surfaces: SurfaceManager,
    ) -> RasterSurface:
        """
        Renders the blurred image.

        :param image: The source image
        :param intensity: Blur intensity, nominally 0 - 200
        :param size: The output size (width, height)
        :param surfaces: Manager used to allocate output and scratch surfaces
        :return: The output surface. The caller owns it.

        Raises :class:`RenderError` if any step fails. No partial result is
        returned in that case.
        """
        output = surfaces.create_surface(*size)
        try:
            with surfaces.scope():
                self.render(image, intensity, output, surfaces)
        except RenderError:
            output.release()
            raise
        except Exception as exc:
            output.release()
            raise RenderError(f"{self.name} blur failed: {exc}") from exc
        return output

    @abstractmethod
    def render(
        self,
        image: SourceImage,
        intensity: float,
        output: RasterSurface,
        surfaces: SurfaceManager,
    ):
        """
        Draws the blurred image onto the output surface.

        :param image: The source image
        :param intensity: Blur intensity
        :param output: The output surface, black initially
        :param surfaces: Manager for scratch surfaces, released after the call
        """
        pass

    @classmethod
    def get_registry(cls) -> dict[str, type[BlurStrategy]]:
        """Returns all registered strategy classes by name."""
        return dict(BlurStrategy._registry)

    @classmethod
    def from_name(cls, name: str) -> BlurStrategy:
        """
        Creates a strategy by its registry name

        :param name: E.g. "stack", "native" or "multiscale"
        :return: The strategy instance
        """
        strategy_cls = BlurStrategy._registry.get(name.lower())
        if strategy_cls is None:
            raise ValueError(f"Unknown blur strategy: {name}")
        return strategy_cls()
