"""Exception classes for the blur pipeline."""


class BlurStagError(Exception):
    """Base exception for all pipeline errors."""

    pass


class DecodeError(BlurStagError):
    """Raised when image bytes are malformed or can not be read."""

    pass


class UnsupportedInputError(BlurStagError):
    """Raised for input which is not an image (MIME type not ``image/*``)."""

    pass


class RenderError(BlurStagError):
    """Raised when a drawing or compositing step fails."""

    pass
