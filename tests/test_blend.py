"""Tests for blend modes."""

import numpy as np
import pytest

from blurstag.blend import BlendMode, blend, mix


def const(value: float) -> np.ndarray:
    return np.full((2, 2, 3), value, dtype=np.float32)


class TestBlendModeParse:
    """Tests for parsing blend mode names."""

    @pytest.mark.parametrize("name, expected", [
        ("normal", BlendMode.NORMAL),
        ("overlay", BlendMode.OVERLAY),
        ("soft-light", BlendMode.SOFT_LIGHT),
        ("SOFT_LIGHT", BlendMode.SOFT_LIGHT),
    ])
    def test_parse(self, name, expected):
        assert BlendMode.parse(name) == expected

    def test_parse_enum_passthrough(self):
        assert BlendMode.parse(BlendMode.OVERLAY) is BlendMode.OVERLAY

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            BlendMode.parse("multiply")


class TestBlendFormulas:
    """Tests for the per-mode color formulas."""

    def test_normal_returns_layer(self):
        result = blend(const(0.2), const(0.7), BlendMode.NORMAL)
        assert result[0, 0, 0] == pytest.approx(0.7)

    def test_overlay_dark_base_multiplies(self):
        result = blend(const(0.25), const(0.5), BlendMode.OVERLAY)
        assert result[0, 0, 0] == pytest.approx(2 * 0.25 * 0.5)

    def test_overlay_bright_base_screens(self):
        result = blend(const(0.75), const(0.5), BlendMode.OVERLAY)
        assert result[0, 0, 0] == pytest.approx(1 - 2 * 0.25 * 0.5)

    def test_soft_light_neutral_gray_keeps_base(self):
        base = np.linspace(0, 1, 12, dtype=np.float32).reshape(2, 2, 3)
        result = blend(base, np.full_like(base, 0.5), BlendMode.SOFT_LIGHT)
        np.testing.assert_allclose(result, base, atol=1e-6)

    def test_soft_light_dark_layer_darkens(self):
        result = blend(const(0.6), const(0.1), BlendMode.SOFT_LIGHT)
        assert result[0, 0, 0] < 0.6

    def test_soft_light_bright_layer_brightens(self):
        result = blend(const(0.6), const(0.9), BlendMode.SOFT_LIGHT)
        expected = 0.6 + (2 * 0.9 - 1) * (np.sqrt(0.6) - 0.6)
        assert result[0, 0, 0] == pytest.approx(expected, rel=1e-5)


class TestMix:
    """Tests for opacity mixing."""

    def test_half_opacity(self):
        result = mix(const(0.0), const(1.0), BlendMode.NORMAL, 0.5)
        assert result[0, 0, 0] == pytest.approx(0.5)

    def test_zero_opacity_keeps_base(self):
        result = mix(const(0.3), const(1.0), BlendMode.OVERLAY, 0.0)
        assert result[0, 0, 0] == pytest.approx(0.3)

    def test_opacity_is_clamped(self):
        over = mix(const(0.0), const(0.8), BlendMode.NORMAL, 1.4)
        under = mix(const(0.2), const(0.8), BlendMode.NORMAL, -1.0)
        assert over[0, 0, 0] == pytest.approx(0.8)
        assert under[0, 0, 0] == pytest.approx(0.2)

    def test_result_is_float32(self):
        assert mix(const(0.1), const(0.2), BlendMode.NORMAL, 1.0).dtype == np.float32
