"""Transport-independent middleware adapter."""

from entityrest.http.adapter import EndpointHandler

__all__ = ["EndpointHandler"]
