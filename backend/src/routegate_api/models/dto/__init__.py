"""Data Transfer Objects package."""

from routegate_api.models.dto.access import (
    AccessCheckResponse,
    AllowedLanguagesResponse,
    AllowedRoutesResponse,
    CanonicalPathResponse,
    MenuResponse,
)

__all__ = [
    "AccessCheckResponse",
    "AllowedLanguagesResponse",
    "AllowedRoutesResponse",
    "CanonicalPathResponse",
    "MenuResponse",
]
