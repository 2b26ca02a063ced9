"""
Typed application errors.

Services raise these; ``app.api.errors`` translates them into the standard
JSON envelope with the matching HTTP status.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP status"""

    status_code: int = 500
    # Operational errors are expected failures (bad input, missing rows...)
    operational: bool = True

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class BadRequestError(AppError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class InternalServerError(AppError):
    status_code = 500
    operational = False


class StoreError(InternalServerError):
    """Unclassified failure reported by the remote store"""


class RetryableConflictError(ConflictError):
    """A write lost a race and may succeed if recomputed and retried"""


class TicketCodeCollisionError(RetryableConflictError):
    """A generated ticket code already exists"""


class CapacityConflictError(RetryableConflictError):
    """The category's issued ticket count changed under a generation run"""
