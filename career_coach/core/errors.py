"""Error taxonomy shared by services, stores, and the HTTP layer.

Every error carries an HTTP-equivalent status and a stable machine code so the
API boundary can render it without inspecting the message text.
"""
from __future__ import annotations

from typing import Any, Literal, Optional


class CoachError(Exception):
    """Base exception for the career coach backend."""

    code = "internal"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(CoachError):
    """Referenced candidate, resume, roadmap, or milestone does not exist."""

    code = "not_found"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, status_code=404, details=details)


class ValidationError(CoachError):
    """A precondition or input check failed."""

    code = "validation_error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class ForbiddenError(CoachError):
    """The caller does not own the resource it tried to act on."""

    code = "forbidden"

    def __init__(self, message: str = "Not allowed to act on this resource"):
        super().__init__(message, status_code=403)


ExternalFailureKind = Literal["auth", "config", "unavailable", "upstream", "malformed"]


class ExternalServiceError(CoachError):
    """The generative service rejected the call, was unreachable, or answered garbage.

    ``kind`` tells callers which failure happened:
    - auth: credential rejected
    - config: no credential or client configured
    - unavailable: network error or timeout
    - upstream: any other error status from the service
    - malformed: a response that is not the expected JSON shape
    """

    code = "external_service_error"

    def __init__(self, service: str, message: str, kind: ExternalFailureKind = "upstream"):
        self.service = service
        self.kind = kind
        full_message = f"External service error ({service}): {message}"
        super().__init__(full_message, status_code=502, details={"service": service, "kind": kind})


class PersistenceError(CoachError):
    """A storage read or write failed."""

    code = "persistence_error"

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, status_code=500)
