"""Error types for entityrest.

Every failure raised by the request pipeline carries an HTTP status (or
None, meaning "no explicit classification" which renders as 500) and an
optional ``details`` payload. The transport layer renders them as:

    {
        "message": "Resource not found.",
        "details": null
    }

Any other exception type is accepted by the pipeline as well; its status is
inferred from an integer ``status`` attribute when present.
"""

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any


class EntityRestError(Exception):
    """Base class for errors raised by the entity pipeline.

    Attributes:
        message: Human-readable message sent back to the client
        status: HTTP status code, or None when the error carries no
            classification of its own
        details: Optional structured payload (validation errors, etc.)
    """

    default_status: int | None = None
    default_message: str = "Request failed."

    def __init__(
        self,
        message: str | None = None,
        status: int | None = None,
        details: Any = None,
    ):
        self.message = message if message is not None else self.default_message
        self.status = status if status is not None else self.default_status
        self.details = details
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        """Status to send to the client (500 when unclassified)."""
        return self.status or HTTPStatus.INTERNAL_SERVER_ERROR.value

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "details": self.details}


class AuthenticationError(EntityRestError):
    """The endpoint's authenticate check failed."""

    default_status = HTTPStatus.UNAUTHORIZED.value
    default_message = "Authentication failed."


class RequestValidationError(EntityRestError):
    """The request (URL, query string or body shape) is not acceptable."""

    default_status = HTTPStatus.BAD_REQUEST.value
    default_message = "Invalid request."


class EntityValidationError(EntityRestError):
    """A candidate record does not satisfy the resource schema."""

    default_status = HTTPStatus.BAD_REQUEST.value
    default_message = "Invalid entity properties."


class NotFoundError(EntityRestError):
    default_status = HTTPStatus.NOT_FOUND.value
    default_message = "Resource not found."


class InvalidPatchError(EntityRestError):
    """A JSON-Patch document could not be applied to the stored record.

    Carries no status of its own, so it surfaces as a 500.
    """

    default_message = "Invalid patch"


class GuardRejectedError(EntityRestError):
    """Convenience error for should_create / should_update / should_delete."""

    default_status = HTTPStatus.FORBIDDEN.value
    default_message = "Operation not allowed."


@dataclass(frozen=True)
class ErrorSpec:
    """Describes the error an Entity should raise from ``assert_valid``."""

    message: str = EntityValidationError.default_message
    status: int = HTTPStatus.BAD_REQUEST.value

    def error(self, details: Any = None) -> EntityValidationError:
        return EntityValidationError(self.message, status=self.status, details=details)


INVALID_PROPERTIES = ErrorSpec()


def error_status(error: BaseException) -> int | None:
    """Return the explicit HTTP status attached to an exception, if any."""
    status = getattr(error, "status", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    return None


def error_details(error: BaseException) -> Any:
    return getattr(error, "details", None)


def error_message(error: BaseException) -> str:
    message = getattr(error, "message", None)
    if isinstance(message, str):
        return message
    return str(error)
