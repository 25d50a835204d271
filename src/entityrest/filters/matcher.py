"""Evaluate filter expressions against plain records.

Used by the reference document stores, which keep records as dicts and
filter in Python. Supports the conditions produced by the translator plus
the comparison operators commonly submitted through ``?q=``:

    {"age": {"$gte": 18}, "status": {"$in": ["active", "lead"]}}
"""

from collections.abc import Mapping, Sequence
from typing import Any

from entityrest.errors import RequestValidationError
from entityrest.filters.translator import RegexPredicate

_MISSING = object()


def _compare(op: str, value: Any, operand: Any) -> bool:
    if value is _MISSING or value is None:
        return False
    try:
        if op == "$gt":
            return value > operand
        if op == "$gte":
            return value >= operand
        if op == "$lt":
            return value < operand
        return value <= operand
    except TypeError:
        return False


def _member(value: Any, candidate: Any) -> bool:
    if isinstance(candidate, RegexPredicate):
        return candidate.matches(value)
    return value == candidate


def _in(value: Any, candidates: Sequence[Any]) -> bool:
    if value is _MISSING:
        return False
    if isinstance(value, list):
        return any(_member(item, c) for item in value for c in candidates)
    return any(_member(value, c) for c in candidates)


def _is_operator_dict(condition: Any) -> bool:
    return (
        isinstance(condition, Mapping)
        and bool(condition)
        and all(isinstance(k, str) and k.startswith("$") for k in condition)
    )


def _match_condition(value: Any, condition: Any) -> bool:
    if isinstance(condition, RegexPredicate):
        return value is not _MISSING and condition.matches(value)

    if not _is_operator_dict(condition):
        if value is _MISSING:
            return False
        if isinstance(value, list) and not isinstance(condition, list):
            return condition in value
        return value == condition

    for op, operand in condition.items():
        if op == "$exists":
            if (value is not _MISSING) != bool(operand):
                return False
        elif op == "$eq":
            if value is _MISSING or value != operand:
                return False
        elif op == "$ne":
            if value is not _MISSING and value == operand:
                return False
        elif op == "$in":
            if not _in(value, operand):
                return False
        elif op == "$nin":
            if _in(value, operand):
                return False
        elif op in ("$gt", "$gte", "$lt", "$lte"):
            if not _compare(op, value, operand):
                return False
        else:
            raise RequestValidationError(f"Unsupported filter operator '{op}'.")
    return True


def _lookup(record: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted field path; returns _MISSING when absent."""
    current: Any = record
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return _MISSING
    return current


def matches(filter: Mapping[str, Any] | None, record: Mapping[str, Any]) -> bool:
    """Return True if ``record`` satisfies every condition in ``filter``."""
    if not filter:
        return True
    return all(
        _match_condition(_lookup(record, field), condition)
        for field, condition in filter.items()
    )


def _sort_key(value: Any) -> tuple:
    # Missing/None sort first; mixed types are grouped by type name.
    if value is _MISSING or value is None:
        return (0, "", 0)
    if isinstance(value, bool):
        return (1, "bool", int(value))
    if isinstance(value, (int, float)):
        return (1, "number", value)
    return (1, type(value).__name__, str(value) if not isinstance(value, str) else value)


def sort_records(
    records: list[dict[str, Any]], sort: Mapping[str, int] | None
) -> list[dict[str, Any]]:
    """Stable multi-key sort. ``sort`` maps field → 1 (asc) or -1 (desc)."""
    result = list(records)
    if not sort:
        return result
    # Apply keys from least to most significant.
    for field, direction in reversed(list(sort.items())):
        result.sort(
            key=lambda r, f=field: _sort_key(_lookup(r, f)),
            reverse=direction < 0,
        )
    return result
