"""Error taxonomy for liftbook."""


class LiftbookError(Exception):
    """Base class for all liftbook errors."""


class ValidationRejected(LiftbookError):
    """Payload is structurally unusable; nothing was written."""


class NotFound(LiftbookError):
    """The requested row does not exist."""


class Conflict(LiftbookError):
    """A uniqueness constraint rejected the write."""


class DatabaseUnavailable(LiftbookError):
    """No database connection could be acquired in time."""


class ReconciliationFailed(LiftbookError):
    """A storage error aborted a program transaction.

    The transaction was rolled back; callers must not assume any partial effect.
    """

    def __init__(self, cause: str):
        super().__init__(cause)
        self.cause = cause


class ReferenceViolation(ReconciliationFailed):
    """A referenced parent or catalog row does not exist."""
