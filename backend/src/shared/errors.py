"""
Error taxonomy for the community review workflow.

Every terminal failure carries the HTTP status it maps to, a short error
label and a human readable message, so handlers never have to inspect
store errors themselves.
"""
from typing import Any, Optional


class ReviewError(Exception):
    """Base class for failures surfaced to API callers."""
    status_code = 500
    error = 'Internal server error'

    def __init__(self, message: str = None, error: str = None, details: Optional[Any] = None):
        self.message = message or self.error
        if error:
            self.error = error
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {'error': self.error, 'message': self.message}
        if self.details is not None:
            body['details'] = self.details
        return body


class ValidationError(ReviewError):
    """Malformed input (bad enum value, out of range number, missing field)."""
    status_code = 400
    error = 'Validation failed'


class AuthorizationError(ReviewError):
    """Actor lacks the privileges needed for the operation."""
    status_code = 403
    error = 'Reviewer access required'


class ConflictError(ReviewError):
    """Request conflicts with current state (duplicate, already decided, own submission)."""
    status_code = 409
    error = 'Conflict'


class NotFoundError(ReviewError):
    """Referenced record does not exist."""
    status_code = 404
    error = 'Not found'


class StoreError(ReviewError):
    """The persistence layer failed; the raw cause is only logged."""
    status_code = 500
    error = 'Internal server error'

    def to_dict(self) -> dict:
        return {'error': self.error}
