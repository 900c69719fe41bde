"""Access DTOs."""

from pydantic import BaseModel

from routegate_api.models.domain.access import MenuEntry


class AccessCheckResponse(BaseModel):
    """Point access decision."""

    allowed: bool


class AllowedRoutesResponse(BaseModel):
    """Accessible path identifiers in one language."""

    language: str
    routes: list[str]


class AllowedLanguagesResponse(BaseModel):
    """UI languages a user may use."""

    languages: list[str]


class MenuResponse(BaseModel):
    """Navigation menu entries."""

    language: str
    items: list[MenuEntry]
    total: int


class CanonicalPathResponse(BaseModel):
    """Canonical pathname of a canonical or translated path."""

    path: str
    canonical_path: str | None
