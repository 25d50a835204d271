"""Tests for query-string filter translation and in-memory matching."""

import re

import pytest

from entityrest.errors import RequestValidationError
from entityrest.filters import RegexPredicate, matches, merge_filters, sort_records, translate
from entityrest.filters.translator import translate_value


# =============================================================================
# Translator
# =============================================================================


class TestTranslateValue:
    def test_undefined_means_field_absent(self):
        assert translate_value("undefined") == {"$exists": False}

    def test_booleans(self):
        assert translate_value("true") is True
        assert translate_value("false") is False

    def test_regex_literal(self):
        assert translate_value("/^wid/i") == {"$in": [RegexPredicate("^wid", "i")]}

    def test_regex_without_flags(self):
        assert translate_value("/abc/") == {"$in": [RegexPredicate("abc", "")]}

    def test_unknown_flag_is_plain_string(self):
        assert translate_value("/abc/x") == "/abc/x"

    def test_malformed_regex_is_400(self):
        with pytest.raises(RequestValidationError, match="Invalid regular expression") as exc_info:
            translate_value("/(/")
        assert exc_info.value.status == 400

    def test_plain_string_passthrough(self):
        assert translate_value("42") == "42"
        assert translate_value("True") == "True"


class TestTranslate:
    def test_reserved_keys_are_skipped(self):
        query = {"limit": "10", "offset": "5", "sort": "-age", "status": "true"}
        assert translate(query) == {"status": True}

    def test_mixed_query(self):
        query = {"status": "true", "name": "/^wid/i", "deletedAt": "undefined", "color": "red"}
        assert translate(query) == {
            "status": True,
            "name": {"$in": [RegexPredicate("^wid", "i")]},
            "deletedAt": {"$exists": False},
            "color": "red",
        }

    def test_q_replaces_per_key_translation(self):
        query = {"q": '{"age": {"$gte": 18}}', "status": "true"}
        assert translate(query) == {"age": {"$gte": 18}}

    def test_q_must_be_json(self):
        with pytest.raises(RequestValidationError) as exc_info:
            translate({"q": "{not json"})
        assert exc_info.value.status == 400

    def test_q_must_be_an_object(self):
        with pytest.raises(RequestValidationError):
            translate({"q": "[1, 2]"})

    def test_non_string_values_pass_through(self):
        assert translate({"ids": ["1", "2"]}) == {"ids": ["1", "2"]}

    def test_empty_query(self):
        assert translate({}) == {}


class TestMergeFilters:
    def test_later_filter_wins(self):
        assert merge_filters({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_none_is_ignored(self):
        assert merge_filters(None, {"a": 1}, None) == {"a": 1}


class TestRegexPredicate:
    def test_case_insensitive_flag(self):
        assert RegexPredicate("^wid", "i").matches("Widget")
        assert not RegexPredicate("^wid", "").matches("Widget")

    def test_global_flag_is_ignored(self):
        assert RegexPredicate("get", "g").matches("widget")

    def test_non_string_never_matches(self):
        assert not RegexPredicate("1").matches(1)

    def test_str(self):
        assert str(RegexPredicate("^a", "im")) == "/^a/im"

    def test_pattern_is_compiled_once(self):
        predicate = RegexPredicate("^wid", "i")
        assert predicate.pattern.flags & re.IGNORECASE
        assert predicate == RegexPredicate("^wid", "i")


# =============================================================================
# Matcher
# =============================================================================


RECORD = {
    "id": "1",
    "name": "Widget",
    "age": 30,
    "tags": ["red", "blue"],
    "address": {"city": "Oslo"},
    "deletedAt": None,
}


class TestMatches:
    def test_empty_filter_matches_everything(self):
        assert matches({}, RECORD)
        assert matches(None, RECORD)

    def test_literal_equality(self):
        assert matches({"name": "Widget"}, RECORD)
        assert not matches({"name": "widget"}, RECORD)

    def test_literal_matches_list_member(self):
        assert matches({"tags": "red"}, RECORD)
        assert not matches({"tags": "green"}, RECORD)

    def test_translated_regex(self):
        assert matches(translate({"name": "/^wid/i"}), RECORD)
        assert not matches(translate({"name": "/^gad/i"}), RECORD)

    def test_exists(self):
        assert matches({"missing": {"$exists": False}}, RECORD)
        assert not matches({"name": {"$exists": False}}, RECORD)
        # A null value still exists.
        assert matches({"deletedAt": {"$exists": True}}, RECORD)

    def test_comparisons(self):
        assert matches({"age": {"$gte": 18, "$lt": 65}}, RECORD)
        assert not matches({"age": {"$gt": 30}}, RECORD)

    def test_comparison_with_incompatible_type_is_false(self):
        assert not matches({"name": {"$gt": 5}}, RECORD)

    def test_in_and_nin(self):
        assert matches({"name": {"$in": ["Widget", "Gadget"]}}, RECORD)
        assert matches({"tags": {"$nin": ["green"]}}, RECORD)
        assert not matches({"tags": {"$nin": ["red"]}}, RECORD)

    def test_ne(self):
        assert matches({"name": {"$ne": "Gadget"}}, RECORD)
        assert matches({"missing": {"$ne": "x"}}, RECORD)

    def test_dotted_path(self):
        assert matches({"address.city": "Oslo"}, RECORD)
        assert not matches({"address.zip": "0150"}, RECORD)

    def test_unknown_operator_is_400(self):
        with pytest.raises(RequestValidationError, match="Unsupported filter operator") as exc_info:
            matches({"age": {"$near": 1}}, RECORD)
        assert exc_info.value.status == 400


class TestSortRecords:
    def test_ascending_and_descending(self):
        records = [{"id": "b", "n": 2}, {"id": "a", "n": 1}, {"id": "c", "n": 3}]
        assert [r["id"] for r in sort_records(records, {"n": 1})] == ["a", "b", "c"]
        assert [r["id"] for r in sort_records(records, {"n": -1})] == ["c", "b", "a"]

    def test_missing_values_sort_first(self):
        records = [{"id": "a", "n": 1}, {"id": "b"}]
        assert [r["id"] for r in sort_records(records, {"n": 1})] == ["b", "a"]

    def test_multi_key(self):
        records = [
            {"id": "1", "g": "x", "n": 2},
            {"id": "2", "g": "y", "n": 1},
            {"id": "3", "g": "x", "n": 1},
        ]
        result = sort_records(records, {"g": 1, "n": 1})
        assert [r["id"] for r in result] == ["3", "1", "2"]

    def test_no_sort_keeps_order(self):
        records = [{"id": "b"}, {"id": "a"}]
        assert sort_records(records, None) == records
