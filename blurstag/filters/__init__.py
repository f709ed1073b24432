# BlurStag Filters
"""
Per-draw filters for raster surfaces.
"""

from .base import Filter, FILTER_REGISTRY, register_filter, apply_filters
from .blur import GaussianBlur, StackBlur, stack_blur
from .color import Brightness, Contrast

__all__ = [
    "Filter",
    "FILTER_REGISTRY",
    "register_filter",
    "apply_filters",
    "GaussianBlur",
    "StackBlur",
    "stack_blur",
    "Brightness",
    "Contrast",
]
