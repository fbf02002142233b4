"""Contact form models for the portfolio contact pipeline.

This module contains the Pydantic models shared by the form submission client
and the submission relay service.
"""

from enum import Enum
from typing import Optional
from typing_extensions import Annotated
from pydantic import BaseModel, Field, ConfigDict


NAME_MAX_LENGTH = 200
EMAIL_MAX_LENGTH = 200
SUBJECT_MAX_LENGTH = 200
MESSAGE_MAX_LENGTH = 2000

STATUS_TTL_MS = 5000


class ErrorCategory(str, Enum):
    NETWORK = "network"
    RATE_LIMITED = "rate-limited"
    SERVER_MISCONFIGURED = "server-misconfigured"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SENDING = "sending"
    SUCCESS = "success"
    FAILED = "failed"


class StatusKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class SubmissionInput(BaseModel):
    """Raw, untrusted form input as typed by the visitor.

    Attributes:
        name: Visitor name
        email: Visitor email address
        subject: Subject line
        message: Message body
    """
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class SanitizedSubmission(BaseModel):
    """Form input after markup stripping, character filtering and truncation."""

    name: Annotated[str, Field(..., max_length=NAME_MAX_LENGTH)]
    email: Annotated[str, Field(..., max_length=EMAIL_MAX_LENGTH)]
    subject: Annotated[str, Field(..., max_length=SUBJECT_MAX_LENGTH)]
    message: Annotated[str, Field(..., max_length=MESSAGE_MAX_LENGTH)]


class SubmissionOutcome(BaseModel):
    """Result of one submission attempt.

    Attributes:
        ok: Whether both emails were handed to the transport
        error_category: Why the attempt failed, None on success
    """
    ok: bool
    error_category: Optional[ErrorCategory] = None


class StatusMessage(BaseModel):
    """Transient status banner shown under the contact form.

    Attributes:
        text: User-facing text, never internal error detail
        kind: success or error styling
        ttl: Milliseconds before the banner starts fading out
    """
    text: str
    kind: StatusKind
    ttl: int = STATUS_TTL_MS

    model_config = ConfigDict(frozen=True)


class ContactRequest(BaseModel):
    """Request body accepted by ``POST /api/contact``.

    All fields are optional so that missing fields are reported with the
    relay's own error body instead of a schema error.
    """
    name: Annotated[Optional[str], Field(None, description="Name of the visitor")]
    email: Annotated[Optional[str], Field(None, description="Email address to reply to")]
    subject: Annotated[Optional[str], Field(None, description="Subject line of the message")]
    message: Annotated[Optional[str], Field(None, description="The message from the visitor")]

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class ContactResponse(BaseModel):
    """Response body returned by ``POST /api/contact``.

    Attributes:
        ok: Whether the message was delivered
        error: Generic error text, omitted on success
    """
    ok: bool = Field(..., description="Whether the message was delivered")
    error: Optional[str] = Field(None, description="Generic error description")
