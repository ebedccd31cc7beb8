"""Positional ``?`` placeholder handling for driver-level SQL text.

Statements are written with ``?`` markers regardless of the driver underneath.
Before execution the markers are rewritten into the DBAPI paramstyle the
driver declares. Markers inside quoted literals, quoted identifiers and
comments are left untouched.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

PARAMSTYLES = frozenset({"qmark", "format", "pyformat", "numeric", "named"})

_QUOTES = ("'", '"', "`")


def _skip_quoted(sql: str, start: int, backslash_escapes: bool) -> int:
    """Return the index just past the quoted run opened at ``start``."""
    quote = sql[start]
    length = len(sql)
    index = start + 1
    while index < length:
        char = sql[index]
        if backslash_escapes and char == "\\" and quote != "`":
            index += 2
            continue
        if char == quote:
            if sql[index + 1 : index + 2] == quote:
                index += 2
                continue
            return index + 1
        index += 1
    return length


def _skip_to(sql: str, start: int, terminator: str) -> int:
    end = sql.find(terminator, start)
    if end == -1:
        return len(sql)
    return end + len(terminator)


def _starts_line_comment(sql: str, index: int) -> bool:
    if sql[index] == "#":
        return True
    if not sql.startswith("--", index):
        return False
    following = sql[index + 2 : index + 3]
    return not following or following.isspace()


def placeholder_positions(sql: str, *, backslash_escapes: bool = False) -> list[int]:
    """Return the offsets of every ``?`` marker outside literals and comments.

    Backslash escapes inside quoted literals are only honoured when
    ``backslash_escapes`` is set, as MySQL does by default. Standard SQL
    (SQLite, PostgreSQL) treats ``\\`` as an ordinary character.
    """
    positions: list[int] = []
    length = len(sql)
    index = 0
    while index < length:
        char = sql[index]
        if char in _QUOTES:
            index = _skip_quoted(sql, index, backslash_escapes)
        elif _starts_line_comment(sql, index):
            index = _skip_to(sql, index, "\n")
        elif sql.startswith("/*", index):
            index = _skip_to(sql, index + 2, "*/")
        else:
            if char == "?":
                positions.append(index)
            index += 1
    return positions


def count_placeholders(sql: str, *, backslash_escapes: bool = False) -> int:
    """Return how many positional values ``sql`` expects."""
    return len(placeholder_positions(sql, backslash_escapes=backslash_escapes))


def _marker(paramstyle: str, number: int) -> str:
    if paramstyle in ("format", "pyformat"):
        return "%s"
    if paramstyle == "numeric":
        return f":{number}"
    return f":p{number}"


def translate_placeholders(
    sql: str,
    paramstyle: str,
    *,
    escape_percent: bool | None = None,
    backslash_escapes: bool = False,
) -> str:
    """Rewrite ``?`` markers into ``paramstyle``.

    ``escape_percent`` doubles every literal ``%``, for drivers that
    interpolate the whole statement text with ``%``. It defaults to on for the
    ``format`` styles; pass ``False`` for drivers such as mysql-connector that
    only substitute ``%s`` and send ``%%`` through unchanged.
    """
    if paramstyle not in PARAMSTYLES:
        raise ValueError(f"Unsupported DBAPI paramstyle: {paramstyle!r}")
    if paramstyle == "qmark":
        return sql

    positions = set(placeholder_positions(sql, backslash_escapes=backslash_escapes))
    if escape_percent is None:
        escape_percent = paramstyle in ("format", "pyformat")
    parts: list[str] = []
    number = 0
    for index, char in enumerate(sql):
        if index in positions:
            number += 1
            parts.append(_marker(paramstyle, number))
        elif escape_percent and char == "%":
            parts.append("%%")
        else:
            parts.append(char)
    return "".join(parts)


def coerce_parameter(value: Any) -> Any:
    """Bind ``value`` as a string parameter.

    ``None`` stays NULL and raw bytes pass through; booleans become ``"1"`` or
    ``"0"``; anything else is passed through ``str``.
    """
    if value is None or isinstance(value, (bytes, bytearray)):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def bind_parameters(values: Sequence[Any], paramstyle: str) -> tuple[Any, ...] | dict[str, Any]:
    """Coerce ``values`` and shape them for ``paramstyle``."""
    coerced = tuple(coerce_parameter(value) for value in values)
    if paramstyle == "named":
        return {f"p{number}": value for number, value in enumerate(coerced, start=1)}
    return coerced


def dialect_rules(dialect: Any) -> tuple[bool, bool]:
    """Return ``(escape_percent, backslash_escapes)`` for a SQLAlchemy dialect."""
    preparer = dialect.identifier_preparer
    escape_percent = getattr(preparer, "_double_percents", dialect.paramstyle in ("format", "pyformat"))
    return bool(escape_percent), dialect.name in ("mysql", "mariadb")


def build_call_statement(name: str, count: int) -> str:
    """Return ``CALL name(?,...)`` with ``count`` markers."""
    return f"CALL {name}({','.join(['?'] * count)})"


__all__ = [
    "PARAMSTYLES",
    "bind_parameters",
    "build_call_statement",
    "coerce_parameter",
    "count_placeholders",
    "dialect_rules",
    "placeholder_positions",
    "translate_placeholders",
]
