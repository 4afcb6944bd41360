"""PostgREST filter encoding (query-string operators).

A scalar becomes eq.<value>, a list/tuple/set becomes in.(a,b) and None
becomes is.null. Values inside in.(...) are double-quoted when they contain
characters PostgREST treats as syntax.
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

_RESERVED_CHARS = frozenset(',.:()"\\ ')


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _quote_list_item(value: Any) -> str:
    text = _scalar(value)
    if any(ch in _RESERVED_CHARS for ch in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def encode_filter(value: Any) -> str:
    """Encode one filter value as a PostgREST operator expression."""
    if value is None:
        return "is.null"
    if isinstance(value, (list, tuple, set, frozenset)):
        return f"in.({','.join(_quote_list_item(v) for v in value)})"
    return f"eq.{_scalar(value)}"


def encode_filters(filters: Mapping[str, Any]) -> dict[str, str]:
    """Encode a column -> value mapping into query params (all filters ANDed)."""
    return {column: encode_filter(value) for column, value in filters.items()}
