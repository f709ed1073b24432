"""
BlurPipeline - decode, blur and encode with a single current result.

The pipeline keeps exactly one current ``(image, output)`` pair. A run only
replaces it after every step succeeded, in a single assignment, so callers
never observe a new image next to an old output. Failed runs leave the
previous pair untouched.

Runs are serialized: a run started while another one is in flight waits for
it to finish. Each run works on its own :class:`BlurParameters` snapshot, so
changing the intensity afterwards can not affect a run in progress.

A pipeline belongs to one event loop. Its lock binds to the loop of the
first run that has to wait for it, so overlapping runs must not come from
different loops. Sequential :meth:`BlurPipeline.run_sync` calls, each with
a fresh loop, are fine as they never contend.
"""

from __future__ import annotations

import asyncio
import logging
import time

from .config import Settings, settings as default_settings
from .encoder import EncodedOutput, encode
from .engine import BlurEngine, Capabilities
from .image import SourceImage, decode_async
from .parameters import BlurParameters
from .strategies import BlurStrategy

logger = logging.getLogger(__name__)


class BlurPipeline:
    """
    Turns uploaded image bytes into a blurred JPEG.

    Example:
        >>> pipeline = BlurPipeline(Capabilities(stack_blur=True))
        >>> output = await pipeline.run(png_bytes, BlurParameters(intensity=80))
        >>> output.mime_type
        'image/jpeg'
    """

    def __init__(
        self,
        capabilities: Capabilities | None = None,
        strategy: BlurStrategy | None = None,
        settings: Settings | None = None,
    ):
        """
        :param capabilities: The environment's capabilities
        :param strategy: Explicit strategy, overrides capability based
            selection
        :param settings: Optional settings overriding the defaults
        """
        self.settings = settings or default_settings
        self.engine = BlurEngine(capabilities, strategy=strategy, settings=self.settings)
        self._current: tuple[SourceImage, EncodedOutput] | None = None
        self._lock = asyncio.Lock()

    @property
    def current_image(self) -> SourceImage | None:
        """The image of the last successful run"""
        return self._current[0] if self._current is not None else None

    @property
    def current_output(self) -> EncodedOutput | None:
        """The output of the last successful run"""
        return self._current[1] if self._current is not None else None

    @property
    def is_processing(self) -> bool:
        """True while a run is in progress"""
        return self._lock.locked()

    def reset(self):
        """Forgets the current image and output."""
        self._current = None

    async def run(
        self,
        data: bytes,
        params: BlurParameters | None = None,
        mime_type: str | None = None,
    ) -> EncodedOutput:
        """
        Decodes, blurs and encodes an image.

        :param data: The raw image file data
        :param params: Blur parameters snapshot. Default intensity if None.
        :param mime_type: The declared MIME type, sniffed from data if None
        :return: The encoded output, also available as :attr:`current_output`

        Raises :class:`~blurstag.errors.UnsupportedInputError`,
        :class:`~blurstag.errors.DecodeError` or
        :class:`~blurstag.errors.RenderError`.
        """
        params = params or BlurParameters.from_settings(self.settings)
        async with self._lock:
            start = time.perf_counter()
            image = await decode_async(data, mime_type, self.settings)
            output = await asyncio.to_thread(self._render, image, params)
            self._current = (image, output)
            logger.info(
                "Blurred %dx%d image to %dx%d (%s, intensity %.1f, %d bytes) in %.1f ms",
                image.width,
                image.height,
                output.width,
                output.height,
                self.engine.strategy.name,
                params.intensity,
                len(output),
                (time.perf_counter() - start) * 1000.0,
            )
            return output

    def _render(self, image: SourceImage, params: BlurParameters) -> EncodedOutput:
        surface = self.engine.apply(image, params)
        try:
            return encode(surface, settings=self.settings)
        finally:
            surface.release()

    def run_sync(
        self,
        data: bytes,
        params: BlurParameters | None = None,
        mime_type: str | None = None,
    ) -> EncodedOutput:
        """
        Synchronous variant of :meth:`run` for callers without an event loop.

        Starts a new event loop per call, so it must not overlap with runs
        awaited on another loop.
        """
        return asyncio.run(self.run(data, params, mime_type))
