"""Candidate-record assembly for create, replace and patch.

Ordering matters and is the same for every mutating operation:

1. read-only fields are reset against the stored record (update paths only)
2. forced ``set`` fields from the endpoint are applied
3. the URL id is forced (update paths only)
4. response-only keys (``_embedded``, ``_links``) and UNSET values are dropped
5. the Entity's prepare hook runs
6. UNSET values it introduced are stripped
"""

from collections.abc import Mapping
from typing import Any

from entityrest.core.types import RESPONSE_ONLY_KEYS, strip_unset
from entityrest.entity.capabilities import EntityCapabilities


def _without_response_keys(props: Mapping[str, Any]) -> dict[str, Any]:
    return strip_unset({k: v for k, v in props.items() if k not in RESPONSE_ONLY_KEYS})


async def build_create_candidate(
    entity: EntityCapabilities,
    body: Mapping[str, Any],
    forced: Mapping[str, Any],
) -> dict[str, Any]:
    """Merge a create body with forced fields and run ``prepare_create``."""
    props = _without_response_keys({**body, **forced})
    return strip_unset(await entity.prepare_create(props))


async def build_update_candidate(
    entity: EntityCapabilities,
    incoming: Mapping[str, Any],
    existing: Mapping[str, Any],
    forced: Mapping[str, Any],
    entity_id: str,
) -> dict[str, Any]:
    """Reconcile ``incoming`` against ``existing`` and run ``prepare_update``.

    Args:
        entity: The bound Entity
        incoming: Client-submitted (or JSON-Patched) record
        existing: Record fetched from storage in the same operation
        forced: Fields forced by the endpoint's ``set``
        entity_id: Id taken from the URL (or the matched record)

    Returns:
        The candidate record to validate and persist
    """
    reconciled = await entity.reset_read_only(dict(incoming), dict(existing))
    props = _without_response_keys({**reconciled, **forced, "id": entity_id})
    return strip_unset(await entity.prepare_update(props))
