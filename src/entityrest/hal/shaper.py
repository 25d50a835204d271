"""HAL-style response envelopes.

Single resource:

    {"id": "42", "name": "a", "_links": {"self": {"href": "/api/widgets/42"}}}

Collection:

    {
        "_links": {"self": {"href": "/api/widgets/"}},
        "count": 2,
        "_embedded": {"widgets": [...]}
    }
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any


def _join(base_url: str, path: str) -> str:
    if base_url.endswith("/"):
        return f"{base_url}{path}"
    return f"{base_url}/{path}"


def export_hal(base_url: str, plural_name: str, data: Any) -> Any:
    """Wrap ``data`` in a HAL envelope.

    Args:
        base_url: URL prefix the resource collection is mounted under
        plural_name: Collection name used in links and as the embedded key
        data: A single record (mapping) or a sequence of records

    Returns:
        The HAL representation. A single record is shallow-copied with its
        ``_links.self`` injected; a sequence becomes a collection envelope.
    """
    collection = plural_name or "data"

    if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        items = list(data)
        return {
            "_links": {"self": {"href": _join(base_url, f"{collection}/")}},
            "count": len(items),
            "_embedded": {collection: items},
        }

    if not isinstance(data, Mapping):
        return data

    return {
        **data,
        "_links": {"self": {"href": _join(base_url, f"{plural_name}/{data.get('id')}")}},
    }


@dataclass(frozen=True)
class HALExporter:
    """HAL shaper bound to one base URL and one resource collection."""

    base_url: str
    plural_name: str

    def __call__(self, data: Any) -> Any:
        return export_hal(self.base_url, self.plural_name, data)

    def export_one(self, record: Any) -> Any:
        return self(record)

    def export_many(self, records: Sequence[Any]) -> Any:
        return self([self(record) for record in records])
