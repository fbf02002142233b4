"""Sanitization and validation of contact form input."""

import html
import re
from typing import Optional

import bleach

from app.core.exceptions import ContactValidationError
from app.models.contact import (
    EMAIL_MAX_LENGTH,
    MESSAGE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    SUBJECT_MAX_LENGTH,
    SanitizedSubmission,
    SubmissionInput,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
FORBIDDEN_CHARS = re.compile(r"[<>'\"&]")
# bleach keeps the text inside stripped tags, so executable blocks go first
SCRIPT_BLOCKS = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
LINE_BREAKS = re.compile(r"\s*[\r\n]+\s*")

NAME_MIN_LENGTH = 2
SUBJECT_MIN_LENGTH = 3
MESSAGE_MIN_LENGTH = 10


def sanitize(value: Optional[str], max_length: int, single_line: bool = False) -> str:
    """Strip markup and dangerous characters from a free-text field.

    Args:
        value: Raw field value, may be None
        max_length: Maximum length of the returned string
        single_line: Collapse line breaks to one space, for values used in mail headers

    Returns:
        Trimmed text without ``< > ' " &``, at most ``max_length`` characters
    """
    if not value:
        return ""

    cleaned = SCRIPT_BLOCKS.sub("", value)
    cleaned = bleach.clean(cleaned, tags=set(), attributes={}, strip=True)
    # bleach escapes what it leaves behind; unescape so the filter sees raw chars
    cleaned = html.unescape(cleaned)
    cleaned = FORBIDDEN_CHARS.sub("", cleaned)
    if single_line:
        cleaned = LINE_BREAKS.sub(" ", cleaned)
    cleaned = cleaned.strip()
    return cleaned[:max_length]


def sanitize_submission(submission: SubmissionInput) -> SanitizedSubmission:
    return SanitizedSubmission(
        name=sanitize(submission.name, NAME_MAX_LENGTH, single_line=True),
        email=sanitize(submission.email, EMAIL_MAX_LENGTH, single_line=True),
        subject=sanitize(submission.subject, SUBJECT_MAX_LENGTH, single_line=True),
        message=sanitize(submission.message, MESSAGE_MAX_LENGTH),
    )


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value or ""))


def validate(submission: SubmissionInput) -> SanitizedSubmission:
    """Sanitize a submission and enforce the form rules.

    Rules are checked in order and the first violation is raised: presence,
    name length, email format, subject length, message length.

    Args:
        submission: Raw form input

    Returns:
        The sanitized submission

    Raises:
        ContactValidationError: If any rule is violated
    """
    sanitized = sanitize_submission(submission)

    if not all((sanitized.name, sanitized.email, sanitized.subject, sanitized.message)):
        raise ContactValidationError("Please fill in all fields.")

    if len(sanitized.name) < NAME_MIN_LENGTH:
        raise ContactValidationError("Please enter a name with at least 2 characters.")

    if not is_valid_email(sanitized.email):
        raise ContactValidationError("Please enter a valid email address.")

    if len(sanitized.subject) < SUBJECT_MIN_LENGTH:
        raise ContactValidationError("Please enter a subject with at least 3 characters.")

    if len(sanitized.message) < MESSAGE_MIN_LENGTH:
        raise ContactValidationError("Please enter a message with at least 10 characters.")

    return sanitized
