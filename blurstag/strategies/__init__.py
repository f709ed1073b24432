"""
Blur strategies.

- :class:`StackBlurStrategy` - stack blur on the pixel buffer (preferred)
- :class:`NativeFilterBlur` - layered Gaussian blur via per-draw filters
- :class:`MultiScaleBlur` - downsample/upsample fallback
"""

from .base import BlurStrategy
from .multiscale import MultiScaleBlur
from .native import NativeFilterBlur
from .stack import StackBlurStrategy

STRATEGY_REGISTRY = BlurStrategy.get_registry()
"Strategy classes by name"

__all__ = [
    "BlurStrategy",
    "MultiScaleBlur",
    "NativeFilterBlur",
    "StackBlurStrategy",
    "STRATEGY_REGISTRY",
]
