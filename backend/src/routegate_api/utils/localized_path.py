"""Helpers for locale-prefixed URL paths such as ``/en/library``."""

from routegate_api.constants.languages import SUPPORTED_LANGUAGES


def normalize_path(path: str) -> str:
    """Normalize a URL path.

    Strips the query string and fragment, guarantees a leading slash,
    collapses duplicate slashes and drops the trailing slash (except for
    the root path).

    Args:
        path: Raw URL path

    Returns:
        Normalized path
    """
    path = path.split("?", 1)[0].split("#", 1)[0].strip()
    parts = [part for part in path.split("/") if part]
    return "/" + "/".join(parts)


def split_localized_path(path: str) -> tuple[str | None, str]:
    """Split the leading locale segment off a URL path.

    Args:
        path: URL path, optionally prefixed by a supported locale

    Returns:
        Tuple of (locale or None, remaining normalized path)

    Example:
        >>> split_localized_path("/en/library/")
        ('en', '/library')
        >>> split_localized_path("/library")
        (None, '/library')
    """
    normalized = normalize_path(path)
    parts = normalized.strip("/").split("/")
    head = parts[0].lower()
    if head in SUPPORTED_LANGUAGES:
        return head, "/" + "/".join(parts[1:])
    return None, normalized
