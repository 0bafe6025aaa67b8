"""Shared validation helpers for service settings."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


def _split_list_value(value: str, *, allow_empty: bool) -> list[Any]:
    stripped = value.strip()
    if not stripped:
        if allow_empty:
            return []
        raise ValueError("List value must not be empty")

    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON array: {e}") from e
        if not isinstance(parsed, list):
            raise ValueError("JSON value must be an array")
        return parsed

    return [item.strip() for item in stripped.split(",") if item.strip()]


def parse_string_list(value: str | list[str], *, allow_empty: bool = False) -> list[str]:
    """Parse a string list from environment variable or config value.

    Accepts:
    - A list of strings (returned as-is)
    - A JSON array string: '["a","b"]'
    - A comma-separated string: 'a,b'

    Raises ValueError for malformed JSON or non-string items.
    When allow_empty is False (default), also rejects empty lists.
    """
    result = value if isinstance(value, list) else _split_list_value(value, allow_empty=allow_empty)
    if not all(isinstance(item, str) for item in result):
        raise ValueError("List value must contain only strings")
    if not allow_empty and not result:
        raise ValueError("List value must not be empty")
    return result


def parse_int_list(value: str | list[int] | list[str]) -> list[int]:
    """Parse a non-empty integer list, accepting the same shapes as parse_string_list."""
    items = value if isinstance(value, list) else _split_list_value(value, allow_empty=False)
    if not items:
        raise ValueError("List value must not be empty")

    result: list[int] = []
    for item in items:
        if isinstance(item, bool):
            raise ValueError(f"Invalid integer: {item!r}")
        try:
            result.append(int(item))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid integer: {item!r}") from e
    return result


_RAW_LIST_FIELDS = {"accepted_points", "buzz_emojis"}


class ListEnvSettingsSource(EnvSettingsSource):
    """Env settings source that passes list fields as raw strings to validators.

    pydantic-settings tries to JSON-decode list-typed fields from env vars before
    validators run. This subclass bypasses that for list fields so our custom
    parsers handle both JSON and CSV formats.
    """

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name in _RAW_LIST_FIELDS and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
