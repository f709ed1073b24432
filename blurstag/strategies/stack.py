"""
Stack blur.

Draws the source at output size and runs a stack blur over the pixel buffer
in place. Simpler and more uniform than the layered strategies.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from ..filters import stack_blur
from ..image import SourceImage
from ..surface import RasterSurface, SurfaceManager
from .base import BlurStrategy

logger = logging.getLogger(__name__)


class StackBlurStrategy(BlurStrategy):
    """Single pass stack blur with radius = intensity."""

    name: ClassVar[str] = "stack"

    def render(
        self,
        image: SourceImage,
        intensity: float,
        output: RasterSurface,
        surfaces: SurfaceManager,
    ):
        output.draw_scaled(image)
        if intensity <= 0:
            return
        logger.debug("Stack blur radius %d", int(round(intensity)))
        buffer = output.buffer
        stack_blur(buffer, int(round(intensity)), out=buffer)
