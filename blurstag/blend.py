"""
Blend modes for compositing one layer onto another.

All functions operate on float arrays with values between 0.0 and 1.0.
"""

from __future__ import annotations

from enum import Enum

import numpy as np


class BlendMode(Enum):
    """Blend modes for combining a layer with the surface below it."""
    NORMAL = "normal"
    OVERLAY = "overlay"
    SOFT_LIGHT = "soft-light"

    @classmethod
    def parse(cls, value: BlendMode | str) -> BlendMode:
        """Parse a blend mode from its CSS name (``soft-light``) or enum name.

        :param value: Mode or mode name
        :returns: The blend mode
        """
        if isinstance(value, BlendMode):
            return value
        key = value.strip().lower().replace("_", "-")
        for mode in cls:
            if mode.value == key:
                return mode
        raise ValueError(f"Unknown blend mode: {value}")


def blend(base: np.ndarray, layer: np.ndarray, mode: BlendMode) -> np.ndarray:
    """Apply a blend mode.

    :param base: The backdrop (destination) pixels
    :param layer: The source pixels, same shape as base
    :param mode: The blend mode
    :returns: The blended color, not yet mixed by opacity
    """
    if mode == BlendMode.NORMAL:
        return layer
    elif mode == BlendMode.OVERLAY:
        # Overlay: multiply if base < 0.5, screen if base >= 0.5
        mask = base < 0.5
        return np.where(mask, 2 * base * layer, 1 - 2 * (1 - base) * (1 - layer))
    elif mode == BlendMode.SOFT_LIGHT:
        # W3C compositing formula, as used by canvas and CSS
        d = np.where(base <= 0.25, ((16 * base - 12) * base + 4) * base, np.sqrt(base))
        return np.where(
            layer <= 0.5,
            base - (1 - 2 * layer) * base * (1 - base),
            base + (2 * layer - 1) * (d - base),
        )
    raise ValueError(f"Unsupported blend mode: {mode}")


def mix(
    base: np.ndarray, layer: np.ndarray, mode: BlendMode, opacity: float
) -> np.ndarray:
    """Blend a layer onto a base and mix the result by opacity.

    :param base: The backdrop pixels
    :param layer: The layer pixels
    :param mode: The blend mode
    :param opacity: Layer opacity, clamped to 0.0 - 1.0
    :returns: The composited pixels, clipped to 0.0 - 1.0
    """
    opacity = min(max(float(opacity), 0.0), 1.0)
    blended = blend(base, layer, mode)
    if opacity < 1.0:
        result = base * (1 - opacity) + blended * opacity
    else:
        result = blended
    return np.clip(result, 0.0, 1.0).astype(np.float32, copy=False)
