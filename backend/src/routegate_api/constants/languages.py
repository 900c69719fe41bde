"""UI language constants and parsing."""

from enum import StrEnum

from routegate_api.exceptions import UnsupportedLanguageError


class LanguageCode(StrEnum):
    """UI languages a route can be translated into."""

    ES = "es"
    EN = "en"
    FR = "fr"
    IT = "it"


DEFAULT_LANGUAGE = LanguageCode.ES

SUPPORTED_LANGUAGES: frozenset[str] = frozenset(code.value for code in LanguageCode)


def parse_language(language_code: str | None) -> LanguageCode:
    """Parse a language code strictly.

    Args:
        language_code: Raw language code (case and surrounding whitespace ignored)

    Returns:
        Matching LanguageCode

    Raises:
        UnsupportedLanguageError: If the code is missing or not supported
    """
    if language_code is None:
        raise UnsupportedLanguageError(None)
    normalized = language_code.strip().lower()
    if normalized not in SUPPORTED_LANGUAGES:
        raise UnsupportedLanguageError(language_code)
    return LanguageCode(normalized)


def normalize_language(
    language_code: str | None,
    default: str = DEFAULT_LANGUAGE.value,
) -> LanguageCode:
    """Parse a language code, substituting the default when it is invalid."""
    try:
        return parse_language(language_code)
    except UnsupportedLanguageError:
        return LanguageCode(default)
