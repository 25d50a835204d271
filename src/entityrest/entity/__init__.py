"""Entity contract, capability resolution and the schema-driven Entity."""

from entityrest.entity.capabilities import EntityCapabilities
from entityrest.entity.protocol import OPTIONAL_CAPABILITIES, Entity
from entityrest.entity.schema import SchemaEntity

__all__ = ["Entity", "EntityCapabilities", "OPTIONAL_CAPABILITIES", "SchemaEntity"]
