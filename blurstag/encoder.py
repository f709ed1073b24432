"""
Encodes a finished raster surface as a downloadable JPEG.
"""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass

from .config import Settings, settings as default_settings
from .errors import RenderError
from .surface import RasterSurface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodedOutput:
    """The encoded result of one pipeline run.

    :ivar data: The compressed file data
    :ivar mime_type: The data's MIME type
    :ivar width: Image width in pixels
    :ivar height: Image height in pixels
    :ivar filename: Suggested download file name
    """
    data: bytes
    mime_type: str
    width: int
    height: int
    filename: str = "blurred.jpg"

    def __len__(self) -> int:
        return len(self.data)

    @property
    def size(self) -> tuple[int, int]:
        """The image size as tuple (width, height)"""
        return self.width, self.height

    def save(self, target: str | os.PathLike | None = None) -> str:
        """
        Writes the data to disk

        :param target: The file name. :attr:`filename` if None.
        :return: The file name written to
        """
        target = os.fspath(target) if target is not None else self.filename
        with open(target, "wb") as output_file:
            output_file.write(self.data)
        return target


def encode(
    surface: RasterSurface,
    quality: int | None = None,
    settings: Settings | None = None,
) -> EncodedOutput:
    """
    Compresses a surface as JPEG

    :param surface: The fully composited surface
    :param quality: The JPEG quality between 0 (worst) and 100 (best). The
        configured quality (95) if None.
    :param settings: Optional settings overriding the defaults
    :return: The encoded output

    Raises :class:`RenderError` if the surface was already released.
    """
    settings = settings or default_settings
    quality = settings.JPEG_QUALITY if quality is None else quality
    if not 0 <= quality <= 100:
        raise ValueError(f"JPEG quality out of range: {quality}")
    pil_image = surface.to_pil()
    output_stream = io.BytesIO()
    try:
        pil_image.save(output_stream, format="jpeg", quality=quality)
    except OSError as exc:
        raise RenderError(f"JPEG encoding failed: {exc}") from exc
    data = output_stream.getvalue()
    logger.debug("Encoded %dx%d JPEG, %d bytes", surface.width, surface.height, len(data))
    return EncodedOutput(
        data=data,
        mime_type=settings.OUTPUT_MIME_TYPE,
        width=surface.width,
        height=surface.height,
        filename=settings.OUTPUT_FILENAME,
    )
