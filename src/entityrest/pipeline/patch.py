"""PATCH body resolution.

A PATCH body is either a (partial) document or an RFC 6902 JSON-Patch
operation list. The shape is decided once, at the boundary:

    {"name": "b"}                                      → FullDocument
    [{"op": "replace", "path": "/name", "value": "b"}] → JsonPatchOps

JSON-Patch documents are checked structurally with pydantic, then applied
with the ``jsonpatch`` library to a copy of the stored record.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Literal

import jsonpatch
import jsonpointer
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from entityrest.errors import InvalidPatchError, RequestValidationError

logger = logging.getLogger(__name__)


class PatchOperation(BaseModel):
    """One RFC 6902 operation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    op: Literal["add", "remove", "replace", "move", "copy", "test"]
    path: str
    value: Any = None
    from_: str | None = Field(default=None, alias="from")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


@dataclass(frozen=True)
class FullDocument:
    """A (partial) record submitted as a JSON object."""

    document: dict[str, Any]


@dataclass(frozen=True)
class JsonPatchOps:
    """A JSON-Patch operation list submitted as a JSON array."""

    operations: list[Any]

    def validate(self) -> list[PatchOperation]:
        """Structurally validate every operation.

        Raises:
            InvalidPatchError: If any operation is malformed
        """
        try:
            return [PatchOperation.model_validate(op) for op in self.operations]
        except ValidationError as e:
            logger.debug("Rejected malformed JSON-Patch: %s", e)
            raise InvalidPatchError(details=e.errors(include_url=False)) from e

    def apply(self, document: dict[str, Any]) -> dict[str, Any]:
        """Validate and apply the patch to a deep copy of ``document``.

        Raises:
            InvalidPatchError: If the patch is malformed or does not apply
                to ``document`` (missing path, failed test, ...)
        """
        operations = [op.to_dict() for op in self.validate()]
        try:
            patch = jsonpatch.JsonPatch(operations)
            patched = patch.apply(copy.deepcopy(document), in_place=True)
        except (jsonpatch.JsonPatchException, jsonpointer.JsonPointerException) as e:
            logger.debug("JSON-Patch does not apply: %s", e)
            raise InvalidPatchError(details=str(e)) from e

        if not isinstance(patched, dict):
            raise InvalidPatchError(details="Patch must produce a JSON object")
        return patched


PatchBody = FullDocument | JsonPatchOps


def classify_patch_body(body: Any) -> PatchBody:
    """Decide which PATCH branch a request body takes.

    Raises:
        RequestValidationError: If the body is neither an object nor an array
    """
    if isinstance(body, dict):
        return FullDocument(body)
    if isinstance(body, list):
        return JsonPatchOps(body)
    raise RequestValidationError("PATCH body must be a JSON object or a JSON-Patch array.")


def resolve_patch(body: PatchBody, existing: dict[str, Any]) -> dict[str, Any]:
    """Return the incoming record to reconcile against ``existing``."""
    if isinstance(body, JsonPatchOps):
        return body.apply(existing)
    return body.document
