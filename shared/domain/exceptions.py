"""
Domain Errors

Typed failures raised by application services. Each error carries a
machine-readable ``code`` and the HTTP status the API layer responds with,
so views never translate errors by hand.
"""


class DomainError(Exception):
    """Base class for every failure surfaced to API callers."""

    code = "domain_error"
    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(DomainError):
    code = "not_found"
    status_code = 404
    default_message = "Resource not found"


class Forbidden(DomainError):
    code = "forbidden"
    status_code = 403
    default_message = "You don't have permission to perform this action"


class Internal(DomainError):
    """Unexpected datastore or infrastructure failure."""

    code = "internal"
    status_code = 500
    default_message = "Internal server error"
