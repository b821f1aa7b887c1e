"""Server-side helpers exposed by the Persian date package."""

from . import endpoints, preferences

__all__ = [
    "endpoints",
    "preferences",
]
