"""Custom exception classes for the application."""

from __future__ import annotations


class AppError(Exception):
    """Base application error class."""

    code = "APP_ERROR"

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    code = "VALIDATION_ERROR"

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    code = "DUPLICATE_RESOURCE"

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    code = "NOT_FOUND"

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class ScheduleError(AppError):
    """Base class for failures while importing a schedule document.

    ``detail`` holds parser-level context (row contents, offending cell) for the
    logs. It is never part of ``message``, which is safe to show to users.
    """

    def __init__(self, message, status_code=400, detail=None):
        """Initialize the error."""
        super().__init__(message, status_code)
        self.detail = detail

    def __str__(self):
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class MalformedDocumentError(ScheduleError):
    """Raised when the schedule document cannot be decoded."""

    code = "MALFORMED_DOCUMENT"

    def __init__(self, detail=None):
        """Initialize the error."""
        super().__init__("The schedule file could not be read.", 400, detail)


class UnsupportedScheduleVersionError(ScheduleError):
    """Raised when the schedule declares a format version we cannot parse."""

    code = "UNSUPPORTED_SCHEDULE_VERSION"

    def __init__(self, version, supported):
        """Initialize the error."""
        super().__init__(
            f"Only version {supported} schedules are supported.",
            400,
            f"declared version: {version!r}",
        )
        self.version = version
        self.supported = supported


class UnresolvedReferenceError(ScheduleError):
    """Raised when a schedule row names a table, room or team that does not exist."""

    code = "UNRESOLVED_REFERENCE"

    def __init__(self, kind, key):
        """Initialize the error."""
        super().__init__(
            f"The schedule references an unknown {kind}.",
            422,
            f"{kind}: {key!r}",
        )
        self.kind = kind
        self.key = key


class StoreFailureError(ScheduleError):
    """Raised when the store rejects or fails to acknowledge an import step."""

    code = "STORE_FAILURE"

    def __init__(self, step, detail=None):
        """Initialize the error."""
        super().__init__(f"Could not save {step}.", 500, detail)
        self.step = step
