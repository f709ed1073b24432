"""
BlurStag - Soft, wallpaper-style blurred variants of images
"""

from .blend import BlendMode
from .config import Settings, settings
from .encoder import EncodedOutput, encode
from .engine import BlurEngine, Capabilities, output_size, select_strategy
from .errors import BlurStagError, DecodeError, RenderError, UnsupportedInputError
from .image import SourceImage, decode, decode_async, detect_mime_type
from .parameters import BlurParameters
from .pipeline import BlurPipeline
from .strategies import (
    BlurStrategy,
    MultiScaleBlur,
    NativeFilterBlur,
    StackBlurStrategy,
    STRATEGY_REGISTRY,
)
from .surface import RasterSurface, Rect, SurfaceManager

__all__ = [
    # Pipeline
    "BlurPipeline",
    "BlurParameters",
    # Decoding and encoding
    "SourceImage",
    "decode",
    "decode_async",
    "detect_mime_type",
    "EncodedOutput",
    "encode",
    # Surfaces
    "RasterSurface",
    "Rect",
    "SurfaceManager",
    "BlendMode",
    # Engine and strategies
    "BlurEngine",
    "Capabilities",
    "output_size",
    "select_strategy",
    "BlurStrategy",
    "MultiScaleBlur",
    "NativeFilterBlur",
    "StackBlurStrategy",
    "STRATEGY_REGISTRY",
    # Errors
    "BlurStagError",
    "DecodeError",
    "RenderError",
    "UnsupportedInputError",
    # Configuration
    "Settings",
    "settings",
]

__version__ = "0.1.0"
