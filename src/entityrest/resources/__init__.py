"""Resource definitions loaded from YAML."""

from entityrest.resources.loader import ResourceDefinition, ResourceLoader

__all__ = ["ResourceDefinition", "ResourceLoader"]
