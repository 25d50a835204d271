"""Load resource definitions from YAML files.

A resource file describes one REST collection:

    resource: Widget
    pluralName: widgets
    schema:
      type: object
      properties:
        id: {type: string, readOnly: true}
        name: {type: string}
        locked: {type: boolean, readOnly: true}
      required: [id, name]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

logger = logging.getLogger(__name__)


@dataclass
class ResourceDefinition:
    name: str
    plural_name: str
    schema: dict[str, Any] = field(default_factory=lambda: {"type": "object"})
    description: str = ""
    source: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> ResourceDefinition:
        """Create a ResourceDefinition from a parsed YAML/JSON dict.

        Raises:
            ValueError: If the name is missing or the schema is invalid
        """
        name = data.get("resource")
        if not name or not isinstance(name, str):
            raise ValueError(f"{source or 'Resource'}: 'resource' name is required")

        schema = data.get("schema") or {"type": "object"}
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as e:
            raise ValueError(f"Resource '{name}' has an invalid schema: {e.message}") from e

        return cls(
            name=name,
            plural_name=data.get("pluralName") or name.lower() + "s",
            schema=schema,
            description=data.get("description", ""),
            source=source,
        )

    @property
    def read_only_fields(self) -> list[str]:
        """Top-level properties marked ``readOnly: true``."""
        properties = self.schema.get("properties", {})
        return [
            name for name, prop in properties.items()
            if isinstance(prop, dict) and prop.get("readOnly")
        ]


class ResourceLoader:
    """Loads resource definitions from ``*.yaml`` / ``*.yml`` files."""

    def __init__(self, resources_path: Path):
        self.resources_path = resources_path
        self.resources: dict[str, ResourceDefinition] = {}

    def load_all(self) -> None:
        """Load every resource file and check plural names are unique.

        Raises:
            ValueError: On an invalid file or a duplicate name
        """
        if not self.resources_path.exists():
            logger.warning("Resources directory not found: %s", self.resources_path)
            return

        files = sorted(
            list(self.resources_path.glob("*.yaml")) + list(self.resources_path.glob("*.yml"))
        )
        for yaml_file in files:
            self.load_file(yaml_file)

        self._validate_plural_names()
        logger.info("Loaded %d resource(s) from %s", len(self.resources), self.resources_path)

    def load_file(self, path: Path) -> ResourceDefinition | None:
        with open(path) as f:
            data = yaml.safe_load(f)
        if not data or "resource" not in data:
            logger.warning("Skipping %s: no 'resource' key", path)
            return None

        resource = ResourceDefinition.from_dict(data, source=path)
        if resource.name in self.resources:
            raise ValueError(f"Duplicate resource '{resource.name}' in {path}")
        self.resources[resource.name] = resource
        return resource

    def _validate_plural_names(self) -> None:
        seen: dict[str, str] = {}  # plural name -> resource name
        for name, resource in self.resources.items():
            if resource.plural_name in seen:
                raise ValueError(
                    f"Duplicate plural name '{resource.plural_name}' used by both "
                    f"'{seen[resource.plural_name]}' and '{name}'"
                )
            seen[resource.plural_name] = name

    def get_resource(self, name: str) -> ResourceDefinition | None:
        return self.resources.get(name)

    def list_resources(self) -> list[str]:
        return list(self.resources.keys())
