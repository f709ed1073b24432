"""
Implements the class :class:`.SourceImage` which holds the decoded bitmap a
blur run samples from, and the decoder turning uploaded bytes into it.
"""

from __future__ import annotations
import asyncio
import io
import logging

import PIL.Image
import PIL.ImageOps
import filetype
import numpy as np

from .config import Settings, settings as default_settings
from .errors import DecodeError, UnsupportedInputError

logger = logging.getLogger(__name__)

IMAGE_MIME_PREFIX = "image/"
"Every accepted input MIME type starts with this prefix"


class SourceImage:
    """
    A decoded, immutable RGB bitmap.

    The data is stored as a PILLOW image in RGB mode. Transparent sources are
    flattened onto black when decoded, the same way an opaque canvas shows
    them. Pixel data handed out by :meth:`get_pixels` is a read-only array,
    so the image can safely be shared between surfaces and threads.
    """

    def __init__(self, pil_image: PIL.Image.Image, mime_type: str | None = None):
        """
        :param pil_image: The PILLOW image. Converted to RGB if necessary.
        :param mime_type: The MIME type the image was decoded from (if known)
        """
        pil_image = _to_rgb(pil_image)
        self._pil_handle: PIL.Image.Image = pil_image
        "The PILLOW handle"
        self.width: int = pil_image.width
        "The image's width in pixels"
        self.height: int = pil_image.height
        "The image's height in pixels"
        self.mime_type: str | None = mime_type
        "The MIME type of the source data"
        self._pixels: np.ndarray | None = None
        self._read_only = {"width", "height", "mime_type", "_pil_handle"}

    def __setattr__(self, key, value):
        if "_read_only" in self.__dict__:
            if key in self._read_only:
                raise ValueError(f"{key} can not be modified after initialization")
        self.__dict__[key] = value

    def __repr__(self) -> str:
        return f"SourceImage({self.width}x{self.height}, {self.mime_type})"

    @classmethod
    def from_pil(cls, pil_image: PIL.Image.Image) -> SourceImage:
        """
        Creates an image from a PILLOW image (the image is copied)

        :param pil_image: The source image
        :return: The new image
        """
        return cls(pil_image.copy())

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> SourceImage:
        """
        Creates an image from a numpy array

        :param pixels: uint8 array of shape (H, W), (H, W, 3) or (H, W, 4)
        :return: The new image
        """
        if pixels.dtype != np.uint8:
            raise ValueError("Unsupported array source")
        return cls(PIL.Image.fromarray(np.ascontiguousarray(pixels)))

    @property
    def size(self) -> tuple[int, int]:
        """
        Returns the image's size in pixels

        :return: The size as tuple (width, height)
        """
        return self.width, self.height

    @property
    def aspect_ratio(self) -> float:
        """The ratio width / height"""
        return self.width / self.height

    def to_pil(self) -> PIL.Image.Image:
        """
        Returns the PILLOW handle. Do not modify it, copy it first.

        :return: The RGB PILLOW image
        """
        return self._pil_handle

    def get_pixels(self) -> np.ndarray:
        """
        Returns the pixel data

        :return: Read-only uint8 array of shape (height, width, 3)
        """
        if self._pixels is None:
            pixels = np.asarray(self._pil_handle, dtype=np.uint8).copy()
            pixels.flags.writeable = False
            self._pixels = pixels
        return self._pixels


def _to_rgb(pil_image: PIL.Image.Image) -> PIL.Image.Image:
    """
    Converts any PILLOW mode to opaque RGB, compositing alpha onto black.

    :param pil_image: The source image
    :return: An RGB image
    """
    if pil_image.mode == "P":
        if "transparency" in pil_image.info:
            pil_image = pil_image.convert("RGBA")
        else:
            pil_image = pil_image.convert("RGB")
    if pil_image.mode in ("LA", "PA"):
        pil_image = pil_image.convert("RGBA")
    if pil_image.mode == "RGBA":
        background = PIL.Image.new("RGB", pil_image.size, (0, 0, 0))
        background.paste(pil_image, (0, 0), pil_image)
        return background
    if pil_image.mode != "RGB":
        return pil_image.convert("RGB")
    return pil_image


def detect_mime_type(data: bytes) -> str | None:
    """Detect the MIME type from magic bytes.

    :param data: Raw file bytes
    :returns: MIME type string or None if the type is unknown
    """
    return filetype.guess_mime(data)


def decode(
    data: bytes, mime_type: str | None = None, settings: Settings | None = None
) -> SourceImage:
    """
    Decodes raw image bytes

    :param data: The raw file data, e.g. from a file picker or drag & drop
    :param mime_type: The declared MIME type. Sniffed from the data if None,
        formats the sniffer does not know are left to PILLOW to identify.
    :param settings: Optional settings overriding the defaults
    :return: The decoded image

    Raises :class:`UnsupportedInputError` if the data is not an image and
    :class:`DecodeError` if the image data is malformed.
    """
    settings = settings or default_settings
    if not data:
        raise DecodeError("No image data")
    if len(data) > settings.MAX_INPUT_BYTES:
        raise UnsupportedInputError(
            f"Input too large: {len(data)} bytes (max {settings.MAX_INPUT_BYTES})"
        )
    if mime_type is None:
        mime_type = detect_mime_type(data)
    if mime_type is not None and not mime_type.lower().startswith(IMAGE_MIME_PREFIX):
        raise UnsupportedInputError(f"Not an image: {mime_type}")
    unknown_type = mime_type is None
    try:
        pil_image = PIL.Image.open(io.BytesIO(data))
        pil_image.load()
        if unknown_type:
            # formats filetype does not know, e.g. PPM or TGA
            mime_type = pil_image.get_format_mimetype()
        pil_image = PIL.ImageOps.exif_transpose(pil_image)
    except Exception as exc:  # Pillow raises various types for damaged data
        if unknown_type:
            raise DecodeError("Unknown or damaged image data") from exc
        raise DecodeError("Invalid or damaged image data") from exc
    image = SourceImage(pil_image, mime_type=mime_type)
    logger.debug("Decoded %s image of %dx%d", mime_type, image.width, image.height)
    return image


async def decode_async(
    data: bytes, mime_type: str | None = None, settings: Settings | None = None
) -> SourceImage:
    """
    Decodes raw image bytes in a worker thread.

    See :func:`decode` for parameters and errors.
    """
    return await asyncio.to_thread(decode, data, mime_type, settings)
