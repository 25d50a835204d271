"""Request-to-entity operation pipeline.

Usage:
    from entityrest.pipeline import OPERATIONS, OperationOptions

    operation = OPERATIONS["patch_one"]
    await operation(request, sink, spec, capabilities, OperationOptions())
"""

from entityrest.pipeline.operations import (
    DEFAULT_OPTIONS,
    Operation,
    OperationOptions,
    delete_one,
    get_many,
    get_one,
    parse_limit,
    parse_skip,
    parse_sort,
    patch_many,
    patch_one,
    post_one,
    put_one,
)
from entityrest.pipeline.patch import (
    FullDocument,
    JsonPatchOps,
    PatchBody,
    PatchOperation,
    classify_patch_body,
)

OPERATIONS: dict[str, Operation] = {
    "get_one": get_one,
    "get_many": get_many,
    "post_one": post_one,
    "put_one": put_one,
    "patch_one": patch_one,
    "patch_many": patch_many,
    "delete_one": delete_one,
}

__all__ = [
    "DEFAULT_OPTIONS",
    "FullDocument",
    "JsonPatchOps",
    "OPERATIONS",
    "Operation",
    "OperationOptions",
    "PatchBody",
    "PatchOperation",
    "classify_patch_body",
    "delete_one",
    "get_many",
    "get_one",
    "parse_limit",
    "parse_skip",
    "parse_sort",
    "patch_many",
    "patch_one",
    "post_one",
    "put_one",
]
