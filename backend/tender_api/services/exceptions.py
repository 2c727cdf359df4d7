"""
Domain errors raised by the service layer.

The app translates them to a JSON response {"reason": message} with the
status code carried by the class. They do not depend on FastAPI.
"""


class DomainError(Exception):
    """Base for business errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthenticatedError(DomainError):
    """Missing or invalid caller identity."""

    status_code = 401


class ForbiddenError(DomainError):
    """Caller is identified but not responsible for the organization."""

    status_code = 403


class NotFoundError(DomainError):
    """Referenced entity, user or version does not exist."""

    status_code = 404


class InvalidInputError(DomainError):
    """Malformed request, unknown enum value or out of range number."""

    status_code = 400


class ConflictError(DomainError):
    """A concurrent write won the race for the same version number."""

    status_code = 409


class InternalFailureError(DomainError):
    """Storage write failed; nothing was committed."""

    status_code = 500
