"""Query-string filter translation and in-memory filter evaluation."""

from entityrest.filters.matcher import matches, sort_records
from entityrest.filters.translator import (
    RESERVED_QUERY_KEYS,
    RegexPredicate,
    merge_filters,
    translate,
)

__all__ = [
    "RESERVED_QUERY_KEYS",
    "RegexPredicate",
    "matches",
    "merge_filters",
    "sort_records",
    "translate",
]
