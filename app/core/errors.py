"""
Error taxonomy for event operations.

Every error carries the single human-readable message that ends up in the
failure outcome, plus the HTTP status the API layer answers with.
"""


class FastbreakError(Exception):
    """Base class for failures surfaced to callers"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(FastbreakError):
    """Input violated a field-level constraint (first violation only)"""

    status_code = 400


class AuthenticationRequired(FastbreakError):
    """No caller identity could be resolved"""

    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class NotFoundOrUnauthorized(FastbreakError):
    """Nothing matched under ownership scoping.

    Missing ids and ids owned by someone else produce the same message so
    callers cannot probe for other users' records.
    """

    status_code = 404

    def __init__(self, message: str = "Event not found"):
        super().__init__(message)


class BackendError(FastbreakError):
    """The storage layer reported a failure"""

    status_code = 502


class CompensationFailure(FastbreakError):
    """A rollback step failed. Logged, never returned in place of the root cause."""

    def __init__(self, message: str, original: Exception):
        super().__init__(message)
        self.original = original
