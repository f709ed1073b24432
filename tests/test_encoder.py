"""Tests for the JPEG encoder."""

import io

import numpy as np
import PIL.Image
import pytest

from blurstag import EncodedOutput, RenderError, Settings, SurfaceManager, encode


@pytest.fixture
def surface():
    s = SurfaceManager().create_surface(64, 48)
    s.fill((200, 100, 50))
    return s


class TestEncode:
    """Tests for encode()."""

    def test_jpeg_output(self, surface):
        output = encode(surface)
        assert isinstance(output, EncodedOutput)
        assert output.mime_type == "image/jpeg"
        assert output.filename == "blurred.jpg"
        assert output.size == (64, 48)
        assert output.data[:3] == b"\xff\xd8\xff"
        with PIL.Image.open(io.BytesIO(output.data)) as decoded:
            assert decoded.size == (64, 48)
            assert decoded.mode == "RGB"
            r, g, b = decoded.getpixel((10, 10))
            assert abs(r - 200) < 4 and abs(g - 100) < 4 and abs(b - 50) < 4

    def test_quality_affects_size(self):
        s = SurfaceManager().create_surface(64, 64)
        s.buffer[...] = np.random.default_rng(3).random((64, 64, 3))
        assert len(encode(s, quality=10)) < len(encode(s))

    def test_invalid_quality(self, surface):
        with pytest.raises(ValueError):
            encode(surface, quality=101)

    def test_released_surface(self, surface):
        surface.release()
        with pytest.raises(RenderError):
            encode(surface)

    def test_configured_filename_and_quality(self, surface):
        settings = Settings(OUTPUT_FILENAME="wallpaper.jpg", JPEG_QUALITY=50)
        output = encode(surface, settings=settings)
        assert output.filename == "wallpaper.jpg"

    def test_deterministic(self, surface):
        assert encode(surface).data == encode(surface).data


class TestEncodedOutput:
    """Tests for the EncodedOutput value object."""

    def test_frozen(self, surface):
        output = encode(surface)
        with pytest.raises(AttributeError):
            output.data = b""

    def test_save(self, surface, tmp_path):
        output = encode(surface)
        target = output.save(tmp_path / "out.jpg")
        assert (tmp_path / "out.jpg").read_bytes() == output.data
        assert target.endswith("out.jpg")
