"""Error taxonomy for the contact pipeline.

Every error carries the ``ErrorCategory`` the client reports to the user.
"""

from typing import Optional

from app.models.contact import ErrorCategory


class ContactError(Exception):
    """Base exception for contact pipeline errors."""

    category = ErrorCategory.UNKNOWN


class ContactValidationError(ContactError):
    """User input defect, recoverable by correcting and resubmitting."""

    category = ErrorCategory.VALIDATION


class ConfigurationError(ContactError):
    """Deployment defect that only the operator can fix."""

    category = ErrorCategory.SERVER_MISCONFIGURED


class RateLimitError(ContactError):
    """Submission rejected by a throttle, recoverable by waiting."""

    category = ErrorCategory.RATE_LIMITED


class TransportError(ContactError):
    """Network or provider failure, recoverable by retrying."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.category = category
