"""Translate loosely typed filter values into SQLAlchemy predicates.

Every element query reads its criteria through the same small grammar:

    "foo"                    column = 'foo'
    "foo, bar"               column IN ('foo', 'bar')
    "not foo"                column != 'foo' (NULL rows included)
    ["not", 1, 2]            column NOT IN (1, 2)
    ">= 10"                  column >= 10
    ["and", ">= 1", "< 5"]   both conditions must hold
    "*@example.com"          column LIKE '%@example.com'
    ":empty:"                column IS NULL
    ":notempty:"             column IS NOT NULL

A literal comma inside a string value is written as ``\\,``.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy import and_, func, or_

from commerce.config import settings

EMPTY = ":empty:"
NOT_EMPTY = ":notempty:"

_OPERATOR_RE = re.compile(r"^(!=|not\s+|<=|>=|<|>|=)\s*(.*)$", re.IGNORECASE | re.DOTALL)
_COMMA_RE = re.compile(r"(?<!\\),")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_NEGATED = {
    "=": "!=",
    "!=": "=",
    "<": ">=",
    ">=": "<",
    ">": "<=",
    "<=": ">",
}


class InvalidParamError(ValueError):
    """Raised when a filter value cannot be read for its column."""


def to_list(value: Any) -> list[Any]:
    """Normalize a filter value to a list of items."""
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip():
            return []
        return [part.strip().replace("\\,", ",") for part in _COMMA_RE.split(value)]
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def negate_items(items: list[Any]) -> list[Any]:
    """Rewrite items so each one reads as its own negation.

    ``["not", a, b]`` and ``["and", *negate_items([a, b])]`` describe the same
    condition, which lets callers append further ``and`` bounds.
    """
    negated: list[Any] = []
    for item in items:
        if item is None:
            negated.append(NOT_EMPTY)
            continue
        if isinstance(item, (datetime, date)):
            item = item.isoformat()
        elif not isinstance(item, str):
            negated.append(f"!= {item}")
            continue
        item = item.strip()
        if not item:
            continue
        lowered = item.lower()
        if lowered == EMPTY:
            negated.append(NOT_EMPTY)
        elif lowered == NOT_EMPTY:
            negated.append(EMPTY)
        else:
            op, raw = _split_operator(item)
            negated.append(f"{_NEGATED[op]} {raw}")
    return negated


def _column_name(column) -> str:
    return getattr(column, "key", None) or str(column)


def _split_operator(item: str) -> tuple[str, str]:
    match = _OPERATOR_RE.match(item)
    if not match:
        return "=", item
    op = match.group(1).strip().lower()
    if op == "not":
        op = "!="
    return op, match.group(2).strip()


def _split_items(value: Any) -> tuple[str, list[tuple[str, Any]]]:
    """Return the glue and ``(operator, value)`` pairs; ``None`` values mean NULL."""
    items = to_list(value)
    glue = "or"
    negate = False
    if items and isinstance(items[0], str):
        head = items[0].strip().lower()
        if head in {"and", "or"}:
            glue = head
            items = items[1:]
        elif head == "not":
            glue = "and"
            negate = True
            items = items[1:]

    parsed: list[tuple[str, Any]] = []
    for item in items:
        if isinstance(item, str):
            item = item.strip()
            if not item:
                continue
            lowered = item.lower()
            if lowered == EMPTY:
                op, raw = "=", None
            elif lowered == NOT_EMPTY:
                op, raw = "!=", None
            else:
                op, raw = _split_operator(item)
                if not raw:
                    raise InvalidParamError(f"Missing value after operator '{op}'.")
        elif item is None:
            op, raw = "=", None
        else:
            op, raw = "=", item
        if negate:
            op = _NEGATED[op]
        parsed.append((op, raw))
    return glue, parsed


def _python_type(column) -> type | None:
    try:
        return column.type.python_type
    except (AttributeError, NotImplementedError):
        return None


def _coerce(column, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    py_type = _python_type(column)
    try:
        if py_type is bool:
            lowered = value.lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(value)
        if py_type is int:
            return int(value)
        if py_type is Decimal:
            return Decimal(value)
        if py_type is float:
            return float(value)
    except (ValueError, InvalidOperation) as exc:
        raise InvalidParamError(
            f"Invalid value '{value}' for '{_column_name(column)}'."
        ) from exc
    return value


def _null_check(column, op: str):
    return column.is_(None) if op == "=" else column.is_not(None)


def _like(column, value: str, negate: bool, case_insensitive: bool):
    pattern = (
        value.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
        .replace("*", "%")
    )
    if case_insensitive:
        predicate = column.ilike(pattern, escape="\\")
    else:
        predicate = column.like(pattern, escape="\\")
    if negate:
        return or_(~predicate, column.is_(None))
    return predicate


def _compare(column, op: str, value: Any, case_insensitive: bool = False):
    target = column
    if case_insensitive and isinstance(value, str):
        target = func.lower(column)
        value = value.lower()
    if op == "=":
        return target == value
    if op == "!=":
        return or_(target != value, column.is_(None))
    if op == "<":
        return target < value
    if op == "<=":
        return target <= value
    if op == ">":
        return target > value
    if op == ">=":
        return target >= value
    raise InvalidParamError(f"Unsupported operator '{op}'.")


def _membership(column, values: list[Any], negate: bool, case_insensitive: bool):
    if len(values) == 1:
        return _compare(column, "!=" if negate else "=", values[0], case_insensitive)
    target = column
    if case_insensitive and all(isinstance(v, str) for v in values):
        target = func.lower(column)
        values = [v.lower() for v in values]
    if negate:
        return or_(target.not_in(values), column.is_(None))
    return target.in_(values)


def _combine(glue: str, predicates: list):
    if not predicates:
        return None
    if len(predicates) == 1:
        return predicates[0]
    return and_(*predicates) if glue == "and" else or_(*predicates)


def parse_param(column, value: Any, *, case_insensitive: bool = False):
    """Build a predicate for ``column`` from a filter value.

    Returns ``None`` when the value holds nothing to filter on.
    """
    glue, parsed = _split_items(value)
    if not parsed:
        return None

    # Plain equalities under "or" (or negated ones under "and") fold into one IN list.
    collect_op = "=" if glue == "or" else "!="
    collected: list[Any] = []
    predicates = []
    for op, raw in parsed:
        if raw is None:
            predicates.append(_null_check(column, op))
            continue
        if isinstance(raw, str) and "*" in raw and op in {"=", "!="}:
            predicates.append(_like(column, raw, op == "!=", case_insensitive))
            continue
        coerced = _coerce(column, raw)
        if op == collect_op:
            collected.append(coerced)
            continue
        predicates.append(_compare(column, op, coerced, case_insensitive))

    if collected:
        predicates.insert(
            0, _membership(column, collected, collect_op == "!=", case_insensitive)
        )
    return _combine(glue, predicates)


def parse_datetime(value: Any) -> datetime:
    """Read a date value and return it as an aware UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        raw = value.strip()
        try:
            if len(raw) <= 10:
                parsed = datetime.combine(date.fromisoformat(raw), time.min)
            else:
                parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidParamError(f"Invalid date value '{value}'.") from exc
    else:
        raise InvalidParamError(f"Invalid date value '{value}'.")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo(settings.timezone))
    return parsed.astimezone(UTC)


def parse_date_param(column, value: Any):
    """Build a predicate for a date column; same grammar as :func:`parse_param`."""
    glue, parsed = _split_items(value)
    if not parsed:
        return None
    predicates = []
    for op, raw in parsed:
        if raw is None:
            predicates.append(_null_check(column, op))
            continue
        predicates.append(_compare(column, op, parse_datetime(raw)))
    return _combine(glue, predicates)
