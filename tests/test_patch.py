"""Tests for PATCH body classification and JSON-Patch application."""

import pytest

from entityrest.errors import InvalidPatchError, RequestValidationError
from entityrest.pipeline.patch import (
    FullDocument,
    JsonPatchOps,
    PatchOperation,
    classify_patch_body,
    resolve_patch,
)

EXISTING = {"id": "42", "name": "a", "locked": True, "tags": ["x"]}


class TestClassifyPatchBody:
    def test_object_is_full_document(self):
        body = classify_patch_body({"name": "b"})
        assert body == FullDocument({"name": "b"})

    def test_array_is_json_patch(self):
        ops = [{"op": "replace", "path": "/name", "value": "b"}]
        assert classify_patch_body(ops) == JsonPatchOps(ops)

    @pytest.mark.parametrize("body", ["text", 42, None, True])
    def test_other_shapes_are_rejected(self, body):
        with pytest.raises(RequestValidationError):
            classify_patch_body(body)


class TestPatchOperation:
    def test_from_alias(self):
        op = PatchOperation.model_validate({"op": "move", "from": "/a", "path": "/b"})
        assert op.from_ == "/a"
        assert op.to_dict() == {"op": "move", "from": "/a", "path": "/b"}

    def test_unknown_members_are_ignored(self):
        op = PatchOperation.model_validate({"op": "remove", "path": "/a", "extra": 1})
        assert op.to_dict() == {"op": "remove", "path": "/a"}

    def test_null_value_is_kept(self):
        op = PatchOperation.model_validate({"op": "replace", "path": "/a", "value": None})
        assert op.to_dict() == {"op": "replace", "path": "/a", "value": None}


class TestJsonPatchOps:
    def test_replace(self):
        ops = JsonPatchOps([{"op": "replace", "path": "/name", "value": "b"}])
        assert ops.apply(EXISTING) == {**EXISTING, "name": "b"}

    def test_apply_does_not_mutate_existing(self):
        ops = JsonPatchOps([{"op": "add", "path": "/tags/-", "value": "y"}])
        patched = ops.apply(EXISTING)
        assert patched["tags"] == ["x", "y"]
        assert EXISTING["tags"] == ["x"]

    def test_sequence_of_operations(self):
        ops = JsonPatchOps([
            {"op": "add", "path": "/color", "value": "red"},
            {"op": "remove", "path": "/tags"},
            {"op": "copy", "from": "/name", "path": "/label"},
        ])
        assert ops.apply(EXISTING) == {
            "id": "42", "name": "a", "locked": True, "color": "red", "label": "a",
        }

    def test_unknown_op_is_invalid_patch(self):
        ops = JsonPatchOps([{"op": "frobnicate", "path": "/name"}])
        with pytest.raises(InvalidPatchError) as exc_info:
            ops.apply(EXISTING)
        assert exc_info.value.status is None
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Invalid patch"

    def test_non_object_operation_is_invalid_patch(self):
        with pytest.raises(InvalidPatchError):
            JsonPatchOps(["not an op"]).apply(EXISTING)

    def test_missing_path_is_invalid_patch(self):
        ops = JsonPatchOps([{"op": "remove", "path": "/nope"}])
        with pytest.raises(InvalidPatchError):
            ops.apply(EXISTING)

    def test_failed_test_op_is_invalid_patch(self):
        ops = JsonPatchOps([{"op": "test", "path": "/name", "value": "zzz"}])
        with pytest.raises(InvalidPatchError):
            ops.apply(EXISTING)

    def test_replacing_the_root_with_a_scalar_is_invalid_patch(self):
        ops = JsonPatchOps([{"op": "replace", "path": "", "value": 5}])
        with pytest.raises(InvalidPatchError):
            ops.apply(EXISTING)


class TestResolvePatch:
    def test_full_document_is_used_as_is(self):
        assert resolve_patch(FullDocument({"name": "b"}), EXISTING) == {"name": "b"}

    def test_json_patch_is_applied_to_existing(self):
        body = JsonPatchOps([{"op": "replace", "path": "/name", "value": "b"}])
        assert resolve_patch(body, EXISTING)["name"] == "b"
