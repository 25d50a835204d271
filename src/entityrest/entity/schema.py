"""JSON Schema driven Entity backed by a DocumentStore.

``SchemaEntity`` implements the full Entity interface for a resource
definition: storage delegates to the store, ``assert_valid`` runs the
resource schema through jsonschema, ``reset_read_only`` honours
``readOnly: true`` properties and exports are HAL-shaped.

Lifecycle hooks are added by subclassing:

    class WidgetEntity(SchemaEntity):
        async def should_delete(self, record, request):
            if record.get("locked"):
                raise GuardRejectedError("Locked widgets cannot be deleted.")

        async def did_create(self, record):
            await notify_inventory(record)
"""

import logging
from typing import Any

from jsonschema import Draft202012Validator

from entityrest.core.types import UNSET
from entityrest.errors import ErrorSpec, NotFoundError
from entityrest.hal.shaper import HALExporter
from entityrest.persistence.adapter import DocumentStore
from entityrest.resources.loader import ResourceDefinition

logger = logging.getLogger(__name__)


def _error_path(error: Any) -> str:
    return "/" + "/".join(str(part) for part in error.absolute_path)


class SchemaEntity:
    """Entity for one resource definition."""

    def __init__(self, resource: ResourceDefinition, store: DocumentStore, base_url: str = ""):
        self.resource = resource
        self.store = store
        self.plural_name = resource.plural_name
        self.exporter = HALExporter(base_url, resource.plural_name)
        self._validator = Draft202012Validator(resource.schema)
        self._read_only = tuple(resource.read_only_fields)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.resource.name!r})"

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def find_by_id(self, id: str) -> dict[str, Any] | None:
        return self.store.get(id)

    def find(
        self,
        filter: dict[str, Any],
        *,
        limit: int | None = None,
        skip: int = 0,
        sort: dict[str, int] | None = None,
    ) -> list[dict[str, Any]]:
        return self.store.query(filter, limit=limit, skip=skip, sort=sort)

    def create_one(self, props: dict[str, Any]) -> dict[str, Any]:
        return self.store.insert(props)

    def update_one(self, props: dict[str, Any]) -> dict[str, Any]:
        updated = self.store.update(props["id"], props)
        if updated is None:
            raise NotFoundError()
        return updated

    def replace_one(self, props: dict[str, Any]) -> dict[str, Any]:
        replaced = self.store.replace(props["id"], props)
        if replaced is None:
            raise NotFoundError()
        return replaced

    def delete_one(self, record: dict[str, Any]) -> None:
        self.store.delete(record["id"])

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def reset_read_only(
        self, incoming: dict[str, Any], existing: dict[str, Any]
    ) -> dict[str, Any]:
        """Revert read-only properties to their stored value.

        A read-only property missing from ``existing`` is left UNSET, so it
        is dropped from the candidate.
        """
        props = dict(incoming)
        for name in self._read_only:
            props[name] = existing.get(name, UNSET)
        return props

    def assert_valid(self, props: dict[str, Any], error: ErrorSpec) -> None:
        """Validate ``props`` against the resource schema.

        Raises:
            EntityValidationError: With ``details`` listing each violation
        """
        violations = sorted(self._validator.iter_errors(props), key=_error_path)
        if not violations:
            return

        details = [{"path": _error_path(v), "message": v.message} for v in violations]
        logger.info("Invalid %s: %s", self.resource.name, details)
        raise error.error(details)

    # ------------------------------------------------------------------
    # Shaping
    # ------------------------------------------------------------------

    def export_one(self, record: dict[str, Any]) -> dict[str, Any]:
        return self.exporter.export_one(record)

    def export_many(self, records: list[dict[str, Any]]) -> dict[str, Any]:
        return self.exporter.export_many(records)
