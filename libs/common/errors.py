"""Domain error taxonomy shared by every service.

Engine operations raise these and never swallow them; the HTTP layer maps them
to responses in ``libs.common.error_handler``.
"""


class DomainError(Exception):
    """Base class for errors raised by domain operations."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Malformed or missing input, e.g. an unknown target coach."""


class NotFoundError(DomainError):
    """The entity does not exist, or the caller may not know that it exists."""


class IllegalStateError(DomainError):
    """The entity exists but its state (or the actor) forbids the transition."""


class UnauthorizedError(DomainError):
    """Caller identity could not be established."""


class ExternalServiceError(DomainError):
    """A collaborator outside the process (payment gateway, storage) failed."""
