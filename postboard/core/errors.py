# postboard/core/errors.py

class PostboardError(Exception):
    """
    Base class for errors that map onto an error envelope.
    `errors` holds the detail strings returned under data.error.
    """
    status_code = 400

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(PostboardError):
    status_code = 401

    def __init__(self, errors: list[str], message: str = "Validation failed"):
        super().__init__(message, errors)


class AuthenticationError(PostboardError):
    status_code = 401


class PermissionDeniedError(PostboardError):
    status_code = 403


class NotFoundError(PostboardError):
    status_code = 404


class ConflictError(PostboardError):
    status_code = 409
