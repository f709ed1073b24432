"""Per-run blur parameters."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .config import Settings, settings as default_settings

MIN_INTENSITY = 0.0
"Intensity values below this are raised to it"


class BlurParameters(BaseModel):
    """
    Immutable snapshot of the user's blur settings for one pipeline run.

    The intensity is clamped into 0 - ``MAX_INTENSITY`` (200 by default)
    instead of being rejected, so a slider overshooting its range still
    produces a result. Plain construction uses the process-wide settings,
    :meth:`from_settings` the limits of a specific :class:`Settings` object.
    """

    model_config = ConfigDict(frozen=True)

    intensity: float = Field(default_factory=lambda: default_settings.DEFAULT_INTENSITY)

    @field_validator('intensity')
    @classmethod
    def _clamp_intensity(cls, value: float, info: ValidationInfo) -> float:
        if value != value:  # NaN
            raise ValueError("intensity must be a number")
        limits = (info.context or {}).get("settings", default_settings)
        return min(max(value, MIN_INTENSITY), limits.MAX_INTENSITY)

    @classmethod
    def from_settings(cls, settings: Settings, intensity: float | None = None) -> BlurParameters:
        """
        Creates a snapshot using the default and limit of the given settings

        :param settings: The settings to take the default and maximum from
        :param intensity: The requested intensity. The settings' default if None.
        :return: The parameters
        """
        if intensity is None:
            intensity = settings.DEFAULT_INTENSITY
        return cls.model_validate({"intensity": intensity}, context={"settings": settings})

    @property
    def blur_factor(self) -> float:
        """The intensity relative to the default of 100 (0.0 - 2.0)"""
        return self.intensity / 100.0
