"""Translate request query strings into storage filter expressions.

A filter expression is a plain dict mapping field names to conditions:

    ?status=true&name=/^wid/i&deletedAt=undefined
    → {
        "status": True,
        "name": {"$in": [RegexPredicate("^wid", "i")]},
        "deletedAt": {"$exists": False},
      }

``?q=<json>`` bypasses the per-key translation and is used verbatim.
"""

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from entityrest.errors import RequestValidationError

logger = logging.getLogger(__name__)

RESERVED_QUERY_KEYS = frozenset({"limit", "offset", "sort", "q"})

_REGEX_SYNTAX = re.compile(r"^/(.*)/((?:g|i|m|u|y)*)$")

# Only the flags with a Python counterpart affect compilation; "g" and "y"
# are kept on the predicate but have no meaning for a match test.
_PYTHON_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "u": re.UNICODE,
}


@dataclass(frozen=True)
class RegexPredicate:
    """Pattern-match condition written as ``/source/flags`` in a query string."""

    source: str
    flags: str = ""
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Raises re.error for a malformed source.
        object.__setattr__(self, "pattern", self.compile())

    def compile(self) -> re.Pattern[str]:
        python_flags = 0
        for flag in self.flags:
            python_flags |= _PYTHON_FLAGS.get(flag, 0)
        return re.compile(self.source, python_flags)

    def matches(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return self.pattern.search(value) is not None

    def __str__(self) -> str:
        return f"/{self.source}/{self.flags}"


def translate_value(value: str) -> Any:
    """Translate a single query-string value into a filter condition."""
    if value == "undefined":
        return {"$exists": False}
    if value == "true":
        return True
    if value == "false":
        return False

    match = _REGEX_SYNTAX.match(value)
    if match:
        try:
            predicate = RegexPredicate(match.group(1), match.group(2))
        except re.error as e:
            raise RequestValidationError(
                f"Invalid regular expression '{value}'.", details=str(e)
            ) from e
        return {"$in": [predicate]}

    return value


def translate(query: Mapping[str, Any]) -> dict[str, Any]:
    """Build a filter expression from request query parameters.

    Args:
        query: Query-string parameters (one value per key)

    Returns:
        Filter expression for the Entity's ``find``

    Raises:
        RequestValidationError: If ``q`` is not a JSON object
    """
    raw = query.get("q")
    if raw:
        return parse_raw_filter(raw)

    conditions: dict[str, Any] = {}
    for key, value in query.items():
        if key in RESERVED_QUERY_KEYS or value is None:
            continue
        if not isinstance(value, str):
            conditions[key] = value
            continue
        conditions[key] = translate_value(value)

    logger.debug("Translated query %s into filter %s", dict(query), conditions)
    return conditions


def parse_raw_filter(raw: str) -> dict[str, Any]:
    """Parse the ``q`` escape hatch."""
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise RequestValidationError(
            "Query parameter 'q' must be a JSON object.", details=str(e)
        ) from e

    if not isinstance(parsed, dict):
        raise RequestValidationError("Query parameter 'q' must be a JSON object.")
    return parsed


def merge_filters(*filters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge filter expressions; later filters win on key conflicts."""
    merged: dict[str, Any] = {}
    for condition in filters:
        if condition:
            merged.update(condition)
    return merged
