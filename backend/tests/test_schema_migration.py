"""Checks on the initial schema migration."""

import importlib.util
from pathlib import Path

from routegate_api.constants.languages import DEFAULT_LANGUAGE, LanguageCode

MIGRATION = Path(__file__).parent.parent / "alembic" / "versions" / "001_route_access_schema.py"


def load_access_function() -> str:
    spec = importlib.util.spec_from_file_location("route_access_schema", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.CAN_ACCESS_ROUTE_FUNCTION


def test_language_code_is_normalized_before_matching() -> None:
    sql = load_access_function()

    assert "lower(btrim(coalesce(p_language_code, 'es')))" in sql
    assert "t.language_code = p_language_code" not in sql
    assert sql.count("t.language_code = v_lang") == 2


def test_unsupported_language_falls_back_to_default() -> None:
    sql = load_access_function()
    supported = ", ".join(f"'{code.value}'" for code in LanguageCode)

    assert f"v_lang NOT IN ({supported})" in sql
    assert f"v_lang := '{DEFAULT_LANGUAGE.value}';" in sql
