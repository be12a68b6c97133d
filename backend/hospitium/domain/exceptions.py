class DomainError(Exception):
    """Base class for errors raised by use cases and rendered by the API."""

    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(DomainError):
    status_code = 400
    default_message = "Invalid request"


class NotFoundOrForbidden(DomainError):
    # Missing and forbidden are deliberately indistinguishable to the caller.
    status_code = 404
    default_message = "Manuscript not found or insufficient permissions"


class NotFound(DomainError):
    status_code = 404
    default_message = "Resource not found"


class Forbidden(DomainError):
    status_code = 403
    default_message = "Insufficient permissions"


class Conflict(DomainError):
    status_code = 409
    default_message = "Conflict detected"
