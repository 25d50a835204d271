"""Core types shared across entityrest."""

from entityrest.core.sink import HAL_JSON, ResponseSink, run_notification
from entityrest.core.types import (
    PLACEHOLDER_ID,
    RESPONSE_ONLY_KEYS,
    UNSET,
    EndpointSpec,
    RequestView,
    resolve,
    strip_unset,
)

__all__ = [
    "EndpointSpec",
    "HAL_JSON",
    "PLACEHOLDER_ID",
    "RESPONSE_ONLY_KEYS",
    "RequestView",
    "ResponseSink",
    "UNSET",
    "resolve",
    "run_notification",
    "strip_unset",
]
