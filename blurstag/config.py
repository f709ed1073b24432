"""Application configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Pipeline settings."""

    # Output
    OUTPUT_WIDTH: int = 1920  # Presentation width of every result
    JPEG_QUALITY: int = 95  # Pillow quality scale (0-100)
    OUTPUT_MIME_TYPE: str = "image/jpeg"
    OUTPUT_FILENAME: str = "blurred.jpg"

    # Blur intensity
    DEFAULT_INTENSITY: float = 100.0
    MAX_INTENSITY: float = 200.0

    # Input limits
    MAX_INPUT_BYTES: int = 64 * 1024 * 1024  # 64 MB

    model_config = {"env_prefix": "BLURSTAG_"}


settings = Settings()
