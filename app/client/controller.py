"""Contact form submission controller.

Gates, validates and submits one contact request at a time and reports the
outcome through the status banner.
"""

import logging
import time
from typing import Optional

import httpx

from app.client.form import ContactForm
from app.client.status import SUCCESS_MESSAGE, StatusBanner, message_for
from app.client.transports import RelayTransport, TransportReadiness
from app.core.exceptions import ContactError, ContactValidationError, RateLimitError
from app.models.contact import (
    ErrorCategory,
    StatusKind,
    SubmissionInput,
    SubmissionOutcome,
    SubmissionState,
)
from app.utils.validation import validate

logger = logging.getLogger(__name__)

THROTTLE_INTERVAL_MS = 10_000

NETWORK_MARKERS = ("network", "timeout", "timed out", "connection", "fetch")
RATE_LIMIT_MARKERS = ("rate limit", "rate-limit", "too many")
MISCONFIGURED_MARKERS = ("not configured", "public key", "service id", "template id")


def throttle(now: float, last_submission_at: Optional[float]) -> bool:
    """Return True when a new submission is allowed at ``now`` (ms)."""
    if last_submission_at is None:
        return True
    return now - last_submission_at >= THROTTLE_INTERVAL_MS


def classify_error(error: Exception) -> ErrorCategory:
    """Map a failed submission to the category shown to the visitor.

    Known error types carry their own category; anything else is classified
    by HTTP status and error text.
    """
    if isinstance(error, ContactError):
        return error.category
    if isinstance(error, (httpx.TimeoutException, httpx.TransportError)):
        return ErrorCategory.NETWORK

    status_code = getattr(getattr(error, "response", None), "status_code", None)
    if status_code == 429:
        return ErrorCategory.RATE_LIMITED

    text = str(error).lower()
    if any(marker in text for marker in NETWORK_MARKERS):
        return ErrorCategory.NETWORK
    if any(marker in text for marker in RATE_LIMIT_MARKERS):
        return ErrorCategory.RATE_LIMITED
    if any(marker in text for marker in MISCONFIGURED_MARKERS):
        return ErrorCategory.SERVER_MISCONFIGURED
    return ErrorCategory.UNKNOWN


def now_ms() -> float:
    return time.monotonic() * 1000


class ContactFormController:
    """
    Submission controller for the contact form.

    State machine: idle -> validating -> sending -> success | failed -> idle.
    A submit while sending is rejected without touching the banner.

    Attributes:
        form: The form whose values are submitted
        readiness: Readiness gate wrapping the relay transport
        banner: Status banner adapter
        state: Current submission state
        last_submission_at: Monotonic ms of the last successful send
    """

    def __init__(
        self,
        transport: Optional[RelayTransport] = None,
        form: Optional[ContactForm] = None,
        banner: Optional[StatusBanner] = None,
        readiness: Optional[TransportReadiness] = None,
    ):
        if readiness is None:
            if transport is None:
                raise ValueError("Either transport or readiness is required")
            readiness = TransportReadiness(transport)
        elif transport is not None and transport is not readiness.transport:
            raise ValueError("transport does not match readiness.transport")

        self.form = form or ContactForm()
        self.banner = banner or StatusBanner()
        self.readiness = readiness
        self.transport = self.readiness.transport
        self.state = SubmissionState.IDLE
        self.last_submission_at: Optional[float] = None

    async def submit(
        self, submission: Optional[SubmissionInput] = None, now: Optional[float] = None
    ) -> SubmissionOutcome:
        """
        Validate, throttle and send one submission.

        Args:
            submission: Form input, defaults to the form's current values
            now: Current time in ms, defaults to the monotonic clock

        Returns:
            The outcome of the attempt
        """
        if self.state == SubmissionState.SENDING:
            logger.warning("Submission ignored, a previous one is still sending")
            return SubmissionOutcome(ok=False, error_category=ErrorCategory.RATE_LIMITED)

        if submission is not None:
            self.form.fill(submission)
        use_clock = now is None
        now = now_ms() if use_clock else now

        self.state = SubmissionState.VALIDATING
        try:
            sanitized = validate(self.form.to_input())
            if not throttle(now, self.last_submission_at):
                raise RateLimitError("Submitted again within the throttle interval")
        except (ContactValidationError, RateLimitError) as e:
            return self._fail(e, str(e) if isinstance(e, ContactValidationError) else None)

        self.state = SubmissionState.SENDING
        self.form.disable_submit()
        try:
            await self.readiness.ensure_ready()
            await self.transport.send(sanitized)
        except Exception as e:
            logger.error(f"Contact form submission failed: {str(e)}", exc_info=True)
            return self._fail(e)
        finally:
            self.form.enable_submit()
            # a cancelled send must not leave the controller locked
            if self.state == SubmissionState.SENDING:
                self.state = SubmissionState.IDLE

        self.last_submission_at = now_ms() if use_clock else now
        self.form.reset()
        self.banner.render_status(SUCCESS_MESSAGE, StatusKind.SUCCESS)
        self.state = SubmissionState.SUCCESS
        logger.info("Contact form submitted")
        self.state = SubmissionState.IDLE
        return SubmissionOutcome(ok=True)

    async def close(self) -> None:
        self.banner.clear()
        await self.transport.close()
        self.readiness.ready = False

    def _fail(self, error: Exception, text: Optional[str] = None) -> SubmissionOutcome:
        category = classify_error(error)
        self.banner.render_status(text or message_for(category), StatusKind.ERROR)
        self.state = SubmissionState.FAILED
        logger.info(f"Contact form submission rejected: {category.value}")
        self.state = SubmissionState.IDLE
        return SubmissionOutcome(ok=False, error_category=category)
