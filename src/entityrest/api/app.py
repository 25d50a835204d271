"""FastAPI application factory.

    app = create_app(resources, RestConfig.from_env())

Every resource gets its own document store (in-memory unless a database
URL is configured) and a ``SchemaEntity``. Routes are mounted under the
path component of ``base_url`` so HAL self links resolve against the same
server.
"""

import logging
from collections.abc import Callable, Mapping
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import urlparse

from fastapi import FastAPI

from entityrest.api.router import create_entity_router, install_error_handlers
from entityrest.config import RestConfig, configure_logging
from entityrest.core.types import EndpointSpec
from entityrest.entity.schema import SchemaEntity
from entityrest.persistence.adapter import DocumentStore
from entityrest.persistence.config import StoreFactory
from entityrest.resources.loader import ResourceDefinition, ResourceLoader

logger = logging.getLogger(__name__)

EntityFactory = Callable[[ResourceDefinition, DocumentStore, str], Any]


def mount_path(base_url: str) -> str:
    """``http://host/api/`` → ``/api``; ``""`` → ``""``."""
    return urlparse(base_url).path.rstrip("/")


def create_app(
    resources: list[ResourceDefinition],
    config: RestConfig | None = None,
    specs: Mapping[str, Mapping[str, EndpointSpec]] | None = None,
    entity_factory: EntityFactory = SchemaEntity,
) -> FastAPI:
    """Build an app serving one collection per resource.

    Args:
        resources: Resource definitions to expose
        config: Runtime configuration (defaults to ``RestConfig()``)
        specs: Endpoint specifications keyed by plural name, then by
            operation name
        entity_factory: Builds the Entity for a resource; override to plug
            in a ``SchemaEntity`` subclass with lifecycle hooks
    """
    config = config or RestConfig()
    specs = specs or {}
    stores = StoreFactory(config.store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        stores.close()

    app = FastAPI(title="EntityREST API", lifespan=lifespan)
    install_error_handlers(app)

    prefix = mount_path(config.base_url)
    for resource in resources:
        entity = entity_factory(resource, stores.create(resource.plural_name), config.base_url)
        router = create_entity_router(
            entity,
            specs=specs.get(resource.plural_name),
            options=config.operation_options,
        )
        app.include_router(router, prefix=prefix)
        logger.info("Mounted %s at %s/%s", resource.name, prefix, resource.plural_name)

    app.state.config = config
    app.state.stores = stores
    return app


def create_app_from_env() -> FastAPI:
    """App for ``uvicorn --factory``: config and resources from the environment."""
    config = RestConfig.from_env()
    configure_logging(config.log_level)

    loader = ResourceLoader(config.resources_path)
    loader.load_all()
    resources = [loader.get_resource(name) for name in loader.list_resources()]
    return create_app(resources, config)
