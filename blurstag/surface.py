"""
Off-screen raster surfaces and the manager which allocates them.

A :class:`RasterSurface` is a fixed-size RGB buffer stored as float32 values
between 0.0 and 1.0. It supports the three drawing primitives the blur
strategies are built from: a scaled draw, an alpha-blended composite and a
solid fill. All operations are synchronous and modify the surface in place.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from typing import Iterable, Iterator, NamedTuple, Union

import numpy as np
import PIL.Image

from .blend import BlendMode, mix
from .errors import RenderError
from .filters.base import Filter, apply_filters
from .image import SourceImage

logger = logging.getLogger(__name__)

RGBColor = Union[tuple[int, int, int], str]
"A color as (r, g, b) tuple with values 0-255 or as hex string"

Resampling = PIL.Image.Resampling


class Rect(NamedTuple):
    """A destination rectangle in integer pixel coordinates."""

    x: int
    y: int
    width: int
    height: int


def _parse_color(color: RGBColor) -> tuple[int, int, int]:
    """Convert a hex string or RGB tuple to an RGB tuple."""
    if isinstance(color, str):
        hex_str = color.lstrip('#')
        if len(hex_str) != 6:
            raise ValueError(f"Invalid color: {color}")
        return (
            int(hex_str[0:2], 16),
            int(hex_str[2:4], 16),
            int(hex_str[4:6], 16),
        )
    r, g, b = color[:3]
    return int(r), int(g), int(b)


class RasterSurface:
    """
    A mutable, fixed-size RGB pixel buffer.

    Surfaces are created through :meth:`SurfaceManager.create_surface`. Once
    released, every operation raises :class:`RenderError`.
    """

    def __init__(self, width: int, height: int, manager: SurfaceManager | None = None):
        """
        :param width: Width in pixels, at least 1
        :param height: Height in pixels, at least 1
        :param manager: The manager tracking this surface
        """
        self.width = width
        self.height = height
        self._manager = manager
        self._pixels: np.ndarray | None = np.zeros((height, width, 3), dtype=np.float32)

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"RasterSurface({self.width}x{self.height}, {state})"

    @property
    def size(self) -> tuple[int, int]:
        """The surface size as tuple (width, height)"""
        return self.width, self.height

    @property
    def released(self) -> bool:
        """True once the surface's memory was released"""
        return self._pixels is None

    @property
    def buffer(self) -> np.ndarray:
        """
        The raw float32 pixel buffer of shape (height, width, 3).

        Modifications are visible to the surface.
        """
        self._ensure_alive()
        return self._pixels

    def _ensure_alive(self):
        if self._pixels is None:
            raise RenderError(f"Surface {self.width}x{self.height} was already released")

    def release(self):
        """Frees the pixel memory. Calling it again has no effect."""
        if self._pixels is None:
            return
        self._pixels = None
        if self._manager is not None:
            self._manager._forget(self)

    def to_pil(self) -> PIL.Image.Image:
        """
        Converts the surface to a PILLOW image

        :return: An RGB image
        """
        return PIL.Image.fromarray(self.get_pixels())

    def get_pixels(self) -> np.ndarray:
        """
        Returns a copy of the pixel data

        :return: uint8 array of shape (height, width, 3)
        """
        self._ensure_alive()
        return np.clip(np.rint(self._pixels * 255.0), 0, 255).astype(np.uint8)

    def fill(self, color: RGBColor):
        """
        Fills the whole surface with a solid color

        :param color: The color, e.g. (0, 0, 0) or "#000000"
        """
        self._ensure_alive()
        rgb = np.asarray(_parse_color(color), dtype=np.float32) / 255.0
        self._pixels[...] = rgb

    def draw_scaled(
        self,
        source: SourceImage | RasterSurface,
        dest_rect: Rect | None = None,
        resample: Resampling = Resampling.BILINEAR,
        filters: Iterable[Filter] = (),
    ):
        """
        Draws the source resampled into a rectangle, overwriting its content

        :param source: The image or surface to draw
        :param dest_rect: Target rectangle. The whole surface by default.
        :param resample: The PILLOW resampling method
        :param filters: Filters applied to the resampled source before drawing
        """
        self.composite(
            source,
            dest_rect,
            blend_mode=BlendMode.NORMAL,
            opacity=1.0,
            resample=resample,
            filters=filters,
        )

    def composite(
        self,
        source: SourceImage | RasterSurface,
        dest_rect: Rect | None = None,
        blend_mode: BlendMode | str = BlendMode.NORMAL,
        opacity: float = 1.0,
        resample: Resampling = Resampling.BILINEAR,
        filters: Iterable[Filter] = (),
    ):
        """
        Blends the source resampled into a rectangle onto the surface

        ``result = dst * (1 - opacity) + blend(dst, src) * opacity``

        :param source: The image or surface to draw
        :param dest_rect: Target rectangle. The whole surface by default.
        :param blend_mode: How source and destination colors are combined
        :param opacity: The layer opacity, clamped to 0.0 - 1.0
        :param resample: The PILLOW resampling method
        :param filters: Filters applied to the resampled source before blending
        """
        self._ensure_alive()
        blend_mode = BlendMode.parse(blend_mode)
        if dest_rect is None:
            dest_rect = Rect(0, 0, self.width, self.height)
        if dest_rect.width <= 0 or dest_rect.height <= 0:
            raise RenderError(f"Invalid target rectangle {tuple(dest_rect)}")
        x0, y0 = max(dest_rect.x, 0), max(dest_rect.y, 0)
        x1 = min(dest_rect.x + dest_rect.width, self.width)
        y1 = min(dest_rect.y + dest_rect.height, self.height)
        if x1 <= x0 or y1 <= y0:
            return  # completely outside
        layer = self._prepare_layer(source, dest_rect, resample, filters)
        layer = layer[y0 - dest_rect.y:y1 - dest_rect.y, x0 - dest_rect.x:x1 - dest_rect.x]
        region = self._pixels[y0:y1, x0:x1]
        region[...] = mix(region, layer, blend_mode, opacity)

    @staticmethod
    def _prepare_layer(
        source: SourceImage | RasterSurface,
        dest_rect: Rect,
        resample: Resampling,
        filters: Iterable[Filter],
    ) -> np.ndarray:
        """Resample and filter a source, returning float32 pixels."""
        pil_image = source.to_pil()
        size = (dest_rect.width, dest_rect.height)
        if pil_image.size != size:
            pil_image = pil_image.resize(size, resample=resample)
        pil_image = apply_filters(pil_image, filters)
        return np.asarray(pil_image, dtype=np.float32) / 255.0


class SurfaceManager:
    """
    Allocates raster surfaces and keeps track of the live ones.

    Surfaces created inside a :meth:`scope` block are released when the block
    is left, whether it completed or raised.
    """

    def __init__(self):
        self._live: list[RasterSurface] = []
        self._scopes: list[list[RasterSurface]] = []

    @property
    def live_count(self) -> int:
        """The number of surfaces not yet released"""
        return len(self._live)

    def create_surface(self, width: float, height: float) -> RasterSurface:
        """
        Creates a new black surface

        :param width: Width in pixels, rounded and raised to at least 1
        :param height: Height in pixels, rounded and raised to at least 1
        :return: The surface
        """
        if not (math.isfinite(width) and math.isfinite(height)) or width < 0 or height < 0:
            raise RenderError(f"Invalid surface size {width}x{height}")
        width = max(1, int(round(width)))
        height = max(1, int(round(height)))
        surface = RasterSurface(width, height, manager=self)
        self._live.append(surface)
        if self._scopes:
            self._scopes[-1].append(surface)
        logger.debug("Created surface %dx%d", width, height)
        return surface

    def _forget(self, surface: RasterSurface):
        if surface in self._live:
            self._live.remove(surface)

    @contextmanager
    def scope(self) -> Iterator[SurfaceManager]:
        """Releases all surfaces created within the block on exit."""
        created: list[RasterSurface] = []
        self._scopes.append(created)
        try:
            yield self
        finally:
            self._scopes.pop()
            for surface in created:
                surface.release()
            if created:
                logger.debug("Released %d scoped surfaces", len(created))

    def release_all(self):
        """Releases every live surface."""
        for surface in list(self._live):
            surface.release()
