"""Tests for the end-to-end BlurPipeline."""

import asyncio
import io

import PIL.Image
import pytest

from blurstag import (
    BlurParameters,
    BlurPipeline,
    Capabilities,
    DecodeError,
    MultiScaleBlur,
    RenderError,
    UnsupportedInputError,
)


def jpeg_size(data: bytes) -> tuple[int, int]:
    with PIL.Image.open(io.BytesIO(data)) as image:
        assert image.format == "JPEG"
        return image.size


class TestEndToEnd:
    """Full size scenarios from PNG upload to JPEG download."""

    @pytest.mark.asyncio
    async def test_native_filter_variant(self, checker_png):
        pipeline = BlurPipeline(Capabilities(native_blur_filter=True, stack_blur=False))
        output = await pipeline.run(checker_png, BlurParameters(intensity=100))
        assert output.mime_type == "image/jpeg"
        assert output.size == (1920, 1440)
        assert jpeg_size(output.data) == (1920, 1440)

    @pytest.mark.asyncio
    async def test_multiscale_variant(self, checker_png):
        pipeline = BlurPipeline(Capabilities(native_blur_filter=False, stack_blur=False))
        assert isinstance(pipeline.engine.strategy, MultiScaleBlur)
        output = await pipeline.run(checker_png, BlurParameters(intensity=100))
        assert jpeg_size(output.data) == (1920, 1440)

    @pytest.mark.asyncio
    async def test_stack_blur_variant(self, checker_png):
        pipeline = BlurPipeline(Capabilities(stack_blur=True))
        output = await pipeline.run(checker_png, BlurParameters(intensity=0))
        assert jpeg_size(output.data) == (1920, 1440)
        assert output.filename == "blurred.jpg"


class TestCurrentResult:
    """Tests for the current image/output pair."""

    @pytest.mark.asyncio
    async def test_run_publishes_pair(self, checker_png, small_settings):
        pipeline = BlurPipeline(settings=small_settings)
        assert pipeline.current_image is None
        assert pipeline.current_output is None
        output = await pipeline.run(checker_png)
        assert pipeline.current_output is output
        assert pipeline.current_image.size == (800, 600)
        assert not pipeline.is_processing

    @pytest.mark.asyncio
    async def test_failed_run_keeps_previous_output(self, checker_png, small_settings):
        pipeline = BlurPipeline(settings=small_settings)
        first = await pipeline.run(checker_png)
        image = pipeline.current_image
        with pytest.raises(DecodeError):
            await pipeline.run(b"definitely not an image, just some text bytes")
        with pytest.raises(UnsupportedInputError):
            await pipeline.run(checker_png, mime_type="application/pdf")
        assert pipeline.current_output is first
        assert pipeline.current_image is image

    @pytest.mark.asyncio
    async def test_render_error_keeps_previous_output(self, checker_png, small_settings, monkeypatch):
        pipeline = BlurPipeline(settings=small_settings)
        first = await pipeline.run(checker_png)

        def broken(*args, **kwargs):
            raise RuntimeError("canvas lost")

        monkeypatch.setattr(pipeline.engine.strategy, "render", broken)
        with pytest.raises(RenderError):
            await pipeline.run(checker_png)
        assert pipeline.current_output is first
        assert pipeline.engine.surfaces.live_count == 0

    @pytest.mark.asyncio
    async def test_surfaces_are_released_after_run(self, checker_png, small_settings):
        pipeline = BlurPipeline(Capabilities(stack_blur=False), settings=small_settings)
        await pipeline.run(checker_png)
        assert pipeline.engine.surfaces.live_count == 0

    def test_reset(self, checker_png, small_settings):
        pipeline = BlurPipeline(settings=small_settings)
        pipeline.run_sync(checker_png)
        assert pipeline.current_output is not None
        pipeline.reset()
        assert pipeline.current_image is None
        assert pipeline.current_output is None


class TestConcurrency:
    """Tests for serialized runs and determinism."""

    @pytest.mark.asyncio
    async def test_concurrent_runs_are_serialized(self, checker_png, small_settings):
        pipeline = BlurPipeline(settings=small_settings)
        first, second = await asyncio.gather(
            pipeline.run(checker_png, BlurParameters(intensity=10)),
            pipeline.run(checker_png, BlurParameters(intensity=150)),
        )
        assert pipeline.current_output is second
        assert first.data != second.data

    def test_pipeline_reused_across_event_loops(self, checker_png, small_settings):
        """Runs that never overlap may come from different loops."""
        pipeline = BlurPipeline(settings=small_settings)

        async def overlapping_runs():
            return await asyncio.gather(pipeline.run(checker_png), pipeline.run(checker_png))

        asyncio.run(overlapping_runs())
        first = pipeline.run_sync(checker_png, BlurParameters(intensity=30))
        second = pipeline.run_sync(checker_png, BlurParameters(intensity=60))
        assert pipeline.current_output is second
        assert first.data != second.data
        assert not pipeline.is_processing

    @pytest.mark.parametrize("caps", [
        Capabilities(stack_blur=True),
        Capabilities(native_blur_filter=True, stack_blur=False),
        Capabilities(native_blur_filter=False, stack_blur=False),
    ])
    def test_identical_input_gives_identical_bytes(self, checker_png, small_settings, caps):
        a = BlurPipeline(caps, settings=small_settings).run_sync(checker_png, BlurParameters(intensity=70))
        b = BlurPipeline(caps, settings=small_settings).run_sync(checker_png, BlurParameters(intensity=70))
        assert a.data == b.data
