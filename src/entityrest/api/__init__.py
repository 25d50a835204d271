"""HTTP API built on FastAPI."""

from entityrest.api.app import create_app, create_app_from_env
from entityrest.api.router import create_entity_router, install_error_handlers

__all__ = ["create_app", "create_app_from_env", "create_entity_router", "install_error_handlers"]
