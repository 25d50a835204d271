"""EntityREST - standard REST/HAL operations over pluggable entities."""

from entityrest.api.app import create_app
from entityrest.config import RestConfig
from entityrest.core.types import UNSET, EndpointSpec, RequestView
from entityrest.entity.schema import SchemaEntity
from entityrest.errors import (
    AuthenticationError,
    EntityRestError,
    EntityValidationError,
    GuardRejectedError,
    InvalidPatchError,
    NotFoundError,
    RequestValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "AuthenticationError",
    "EndpointSpec",
    "EntityRestError",
    "EntityValidationError",
    "GuardRejectedError",
    "InvalidPatchError",
    "NotFoundError",
    "RequestValidationError",
    "RequestView",
    "RestConfig",
    "SchemaEntity",
    "UNSET",
    "create_app",
]
