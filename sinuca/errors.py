"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when operator input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class SelfMatchError(ValidationError):
    """Raised when a first-round pairing puts a participant against themself.

    The operator has to redraw one of the two tickets.
    """

    def __init__(self, message="A participant cannot face their own ticket in round 1."):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = 409


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class ConflictError(AppError):
    """Raised when the stored snapshot changed since it was read."""

    def __init__(self, message="The tournament was changed by someone else."):
        """Initialize the error."""
        super().__init__(message, 409)


class SyncError(AppError):
    """Raised when the tournament snapshot could not be read or written."""

    def __init__(self, message="The tournament could not be saved."):
        """Initialize the error."""
        super().__init__(message, 503)
