# BlurStag Filters - Base Classes
"""
Base classes for the filter system.

Filters are dataclasses which transform a PILLOW image. They are used as
per-draw filters by :class:`~blurstag.surface.RasterSurface`, comparable to
a canvas ``filter`` string such as ``blur(10px) brightness(1.2)``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any
import json

import PIL.Image


FILTER_REGISTRY: dict[str, type['Filter']] = {}


def register_filter(cls: type['Filter']) -> type['Filter']:
    """Decorator to register a filter class."""
    FILTER_REGISTRY[cls.__name__] = cls
    # Also register lowercase version
    FILTER_REGISTRY[cls.__name__.lower()] = cls
    return cls


@dataclass
class Filter(ABC):
    """Base class for all filters.

    Example:
        @register_filter
        @dataclass
        class MyFilter(Filter):
            strength: float = 1.0

            def apply(self, image: PIL.Image.Image) -> PIL.Image.Image:
                ...
    """

    @abstractmethod
    def apply(self, image: PIL.Image.Image) -> PIL.Image.Image:
        """Apply filter to image and return result.

        :param image: The input image, not modified.
        :returns: The processed image.
        """
        pass

    def __call__(self, image: PIL.Image.Image) -> PIL.Image.Image:
        return self.apply(image)

    @property
    def type(self) -> str:
        """Filter type name for serialization."""
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        """Serialize filter to dictionary."""
        data = {}
        for f in fields(self):
            if not f.name.startswith('_'):
                value = getattr(self, f.name)
                if isinstance(value, Enum):
                    value = value.value
                data[f.name] = value
        data['type'] = self.type
        return data

    def to_json(self) -> str:
        """Serialize filter to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Filter':
        """Deserialize filter from dictionary."""
        data = data.copy()  # Don't modify original
        filter_type = data.pop('type', cls.__name__)

        filter_cls = FILTER_REGISTRY.get(filter_type) or FILTER_REGISTRY.get(filter_type.lower())
        if filter_cls is None:
            raise ValueError(f"Unknown filter type: {filter_type}")

        return filter_cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> 'Filter':
        """Deserialize filter from JSON string."""
        return cls.from_dict(json.loads(json_str))


def apply_filters(image: PIL.Image.Image, filters) -> PIL.Image.Image:
    """Apply a sequence of filters in order.

    :param image: The input image
    :param filters: Iterable of filters, may be empty
    :returns: The filtered image
    """
    for f in filters:
        image = f.apply(image)
    return image
