"""The standard entity operations.

Each operation is a linear pipeline:

    fetch → reconcile / patch → prepare → validate → guard (should_*)
          → mutate → export → respond → notify (did_*)

Guards run after validation and before the mutating storage call, so a
rejecting guard leaves storage untouched. Notifications are queued on the
response sink and only run after the response has been dispatched.

Every fallible step raises; nothing is written to the sink on failure.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from entityrest.core.types import PLACEHOLDER_ID, EndpointSpec, RequestView
from entityrest.entity.capabilities import EntityCapabilities
from entityrest.errors import INVALID_PROPERTIES, NotFoundError, RequestValidationError
from entityrest.filters.translator import merge_filters, translate
from entityrest.core.sink import ResponseSink
from entityrest.pipeline.patch import PatchBody, classify_patch_body, resolve_patch
from entityrest.pipeline.reconcile import build_create_candidate, build_update_candidate

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25
MAX_LIMIT = 500
DEFAULT_SORT = {"id": 1}

_SORT_SYNTAX = re.compile(r"^(-?)(.*)$")


@dataclass(frozen=True)
class OperationOptions:
    """Tunables shared by every operation bound to a route.

    Attributes:
        default_limit: get-many page size when ``limit`` is absent
        max_limit: Upper bound applied to ``limit``
        patch_concurrency: Max records patched at once by patch-many
            (0 means unbounded)
    """

    default_limit: int = DEFAULT_LIMIT
    max_limit: int = MAX_LIMIT
    patch_concurrency: int = 0


DEFAULT_OPTIONS = OperationOptions()

Operation = Callable[
    [RequestView, ResponseSink, EndpointSpec, EntityCapabilities, OperationOptions],
    Awaitable[None],
]


# =============================================================================
# Helpers
# =============================================================================


def parse_limit(raw: Any, options: OperationOptions = DEFAULT_OPTIONS) -> int:
    if raw is None or raw == "":
        return min(options.default_limit, options.max_limit)
    try:
        limit = int(raw)
    except (TypeError, ValueError) as e:
        raise RequestValidationError(f"Invalid limit '{raw}'.") from e
    return max(min(limit, options.max_limit), 0)


def parse_skip(raw: Any) -> int:
    try:
        return max(int(raw), 0)
    except (TypeError, ValueError):
        return 0


def parse_sort(raw: Any) -> dict[str, int]:
    """``-age`` → {"age": -1}, ``age`` → {"age": 1}, absent → {"id": 1}."""
    if not raw:
        return dict(DEFAULT_SORT)
    match = _SORT_SYNTAX.match(str(raw))
    direction = -1 if match.group(1) == "-" else 1
    return {match.group(2): direction}


def require_entity_id(request: RequestView) -> str:
    entity_id = request.entity_id
    if not isinstance(entity_id, str) or not entity_id:
        raise RequestValidationError("Entity id is required.")
    return entity_id


async def require_existing(entity: EntityCapabilities, entity_id: str) -> dict[str, Any]:
    record = await entity.find_by_id(entity_id)
    if not isinstance(record, dict):
        raise NotFoundError()
    return record


def require_object_body(request: RequestView) -> dict[str, Any]:
    if not isinstance(request.body, dict):
        raise RequestValidationError("Request body must be a JSON object.")
    return request.body


async def _filter_for(request: RequestView, spec: EndpointSpec) -> dict[str, Any]:
    return merge_filters(translate(request.query), await spec.extra_query(request))


async def _patch_record(
    request: RequestView,
    entity: EntityCapabilities,
    body: PatchBody,
    existing: dict[str, Any],
    forced: dict[str, Any],
    entity_id: str,
) -> Any:
    """Patch one stored record; returns the exported result."""
    incoming = resolve_patch(body, existing)
    candidate = await build_update_candidate(entity, incoming, existing, forced, entity_id)

    await entity.assert_valid(candidate, INVALID_PROPERTIES)
    await entity.should_update(candidate, request)

    updated = await entity.update_one(candidate)
    return await entity.export_one(updated)


# =============================================================================
# Operations
# =============================================================================


async def get_one(
    request: RequestView,
    sink: ResponseSink,
    spec: EndpointSpec,
    entity: EntityCapabilities,
    options: OperationOptions = DEFAULT_OPTIONS,
) -> None:
    """GET /{plural}/{entityId}"""
    entity_id = require_entity_id(request)
    record = await require_existing(entity, entity_id)

    sink.respond(200, await entity.export_one(record))


async def get_many(
    request: RequestView,
    sink: ResponseSink,
    spec: EndpointSpec,
    entity: EntityCapabilities,
    options: OperationOptions = DEFAULT_OPTIONS,
) -> None:
    """GET /{plural}?field=value&limit=&offset=&sort="""
    limit = parse_limit(request.query.get("limit"), options)
    sort = parse_sort(request.query.get("sort"))
    skip = parse_skip(request.query.get("offset"))
    filter = await _filter_for(request, spec)

    logger.debug(
        "Finding %s: filter=%s limit=%d skip=%d sort=%s",
        entity.plural_name, filter, limit, skip, sort,
    )
    records = await entity.find(filter, limit=limit, skip=skip, sort=sort)

    sink.respond(200, await entity.export_many(records))


async def post_one(
    request: RequestView,
    sink: ResponseSink,
    spec: EndpointSpec,
    entity: EntityCapabilities,
    options: OperationOptions = DEFAULT_OPTIONS,
) -> None:
    """POST /{plural}"""
    body = require_object_body(request)
    forced = await spec.forced_set(request)
    candidate = await build_create_candidate(entity, body, forced)

    # Storage assigns the id, but the schema may require one.
    await entity.assert_valid({"id": PLACEHOLDER_ID, **candidate}, INVALID_PROPERTIES)
    await entity.should_create(candidate, request)

    created = await entity.create_one(candidate)
    exported = await entity.export_one(created)

    sink.respond(201, exported)

    if entity.did_create:
        sink.after_response(entity.did_create, created)


async def put_one(
    request: RequestView,
    sink: ResponseSink,
    spec: EndpointSpec,
    entity: EntityCapabilities,
    options: OperationOptions = DEFAULT_OPTIONS,
) -> None:
    """PUT /{plural}/{entityId}"""
    entity_id = require_entity_id(request)
    existing = await require_existing(entity, entity_id)
    body = require_object_body(request)

    forced = await spec.forced_set(request)
    candidate = await build_update_candidate(entity, body, existing, forced, entity_id)

    await entity.assert_valid(candidate, INVALID_PROPERTIES)
    await entity.should_update(candidate, request)

    replaced = await entity.replace_one(candidate)
    exported = await entity.export_one(replaced)

    sink.respond(200, exported)

    if entity.did_update:
        sink.after_response(entity.did_update, exported)


async def patch_one(
    request: RequestView,
    sink: ResponseSink,
    spec: EndpointSpec,
    entity: EntityCapabilities,
    options: OperationOptions = DEFAULT_OPTIONS,
) -> None:
    """PATCH /{plural}/{entityId} with a partial document or JSON-Patch."""
    entity_id = require_entity_id(request)
    existing = await require_existing(entity, entity_id)
    body = classify_patch_body(request.body)

    forced = await spec.forced_set(request)
    exported = await _patch_record(request, entity, body, existing, forced, entity_id)

    sink.respond(200, exported)

    if entity.did_update:
        sink.after_response(entity.did_update, exported)


async def patch_many(
    request: RequestView,
    sink: ResponseSink,
    spec: EndpointSpec,
    entity: EntityCapabilities,
    options: OperationOptions = DEFAULT_OPTIONS,
) -> None:
    """PATCH /{plural}?field=value: apply one body to every matching record.

    Records are patched concurrently. The first failure is raised and no
    response is written; records already updated by sibling tasks stay
    updated.
    """
    body = classify_patch_body(request.body)
    filter = await _filter_for(request, spec)
    existing_records = await entity.find(filter)

    if not existing_records:
        sink.respond(200, "")
        return

    forced = await spec.forced_set(request)
    semaphore = (
        asyncio.Semaphore(options.patch_concurrency) if options.patch_concurrency > 0 else None
    )

    async def patch(existing: dict[str, Any]) -> Any:
        entity_id = existing.get("id")
        if semaphore is None:
            return await _patch_record(request, entity, body, existing, forced, entity_id)
        async with semaphore:
            return await _patch_record(request, entity, body, existing, forced, entity_id)

    logger.debug("Patching %d %s", len(existing_records), entity.plural_name)
    exported = list(await asyncio.gather(*(patch(r) for r in existing_records)))

    sink.respond(200, exported)

    if entity.did_update:
        for item in exported:
            sink.after_response(entity.did_update, item)


async def delete_one(
    request: RequestView,
    sink: ResponseSink,
    spec: EndpointSpec,
    entity: EntityCapabilities,
    options: OperationOptions = DEFAULT_OPTIONS,
) -> None:
    """DELETE /{plural}/{entityId}"""
    entity_id = require_entity_id(request)
    record = await require_existing(entity, entity_id)

    await entity.should_delete(record, request)
    await entity.delete_one(record)

    sink.respond(200, {})

    if entity.did_delete:
        sink.after_response(entity.did_delete, record)
