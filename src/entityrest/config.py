"""Runtime configuration.

Settings come from environment variables; every one has a default so the
library works unconfigured:

    ENTITYREST_BASE_URL           URL prefix used in HAL self links ("")
    ENTITYREST_DEFAULT_LIMIT      get-many page size (25)
    ENTITYREST_MAX_LIMIT          get-many page size cap (500)
    ENTITYREST_PATCH_CONCURRENCY  patch-many fan-out bound, 0 = unbounded (0)
    ENTITYREST_RESOURCES_PATH     directory of resource YAML files ("resources")
    ENTITYREST_LOG_LEVEL          logging level ("INFO")
    ENTITYREST_DATABASE_URL       SQLAlchemy URL; unset = in-memory stores
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from entityrest.persistence.config import StoreConfig
from entityrest.pipeline.operations import DEFAULT_LIMIT, MAX_LIMIT, OperationOptions


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None


@dataclass
class RestConfig:
    base_url: str = ""
    default_limit: int = DEFAULT_LIMIT
    max_limit: int = MAX_LIMIT
    patch_concurrency: int = 0
    resources_path: Path = Path("resources")
    log_level: str = "INFO"
    store: StoreConfig = field(default_factory=StoreConfig)

    @classmethod
    def from_env(cls) -> RestConfig:
        return cls(
            base_url=os.environ.get("ENTITYREST_BASE_URL", ""),
            default_limit=_env_int("ENTITYREST_DEFAULT_LIMIT", DEFAULT_LIMIT),
            max_limit=_env_int("ENTITYREST_MAX_LIMIT", MAX_LIMIT),
            patch_concurrency=_env_int("ENTITYREST_PATCH_CONCURRENCY", 0),
            resources_path=Path(os.environ.get("ENTITYREST_RESOURCES_PATH", "resources")),
            log_level=os.environ.get("ENTITYREST_LOG_LEVEL", "INFO").upper(),
            store=StoreConfig.from_env(),
        )

    @property
    def operation_options(self) -> OperationOptions:
        return OperationOptions(
            default_limit=self.default_limit,
            max_limit=self.max_limit,
            patch_concurrency=self.patch_concurrency,
        )


def configure_logging(level: str = "INFO") -> None:
    """Basic console logging for the CLI and the dev server."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
