"""Submission relay: turns one contact submission into two outbound emails."""

import logging
from typing import List

from email.mime.multipart import MIMEMultipart

from app.core.config import settings
from app.core.exceptions import ConfigurationError, ContactValidationError, TransportError
from app.models.contact import (
    ContactRequest,
    SanitizedSubmission,
    SubmissionInput,
    SubmissionOutcome,
)
from app.services.mail_service import mail_service
from app.utils.validation import is_valid_email, sanitize_submission

logger = logging.getLogger(__name__)

OWNER_SUBJECT_PREFIX = "[Portfolio Contact]"
AUTOREPLY_SUBJECT = "Thanks for contacting me!"

MISSING_FIELDS_ERROR = "Missing required fields"
INVALID_EMAIL_ERROR = "Invalid email address"


def require_fields(submission: SanitizedSubmission) -> None:
    if not all((submission.name, submission.email, submission.subject, submission.message)):
        raise ContactValidationError(MISSING_FIELDS_ERROR)


class RelayService:
    """Service composing and dispatching the owner notification and auto-reply.

    Each call opens its own SMTP session; nothing is shared between requests.
    """

    def prepare(self, request: ContactRequest) -> SanitizedSubmission:
        """Sanitize a request body, require every field and a well-formed email.

        Raises:
            ContactValidationError: If a field is empty after sanitization or
                the email is malformed
        """
        submission = sanitize_submission(SubmissionInput(**request.model_dump()))
        require_fields(submission)
        if not is_valid_email(submission.email):
            raise ContactValidationError(INVALID_EMAIL_ERROR)
        return submission

    async def build_owner_notification(self, submission: SanitizedSubmission) -> MIMEMultipart:
        text = (
            f"New message from {submission.name} <{submission.email}>\n"
            f"Subject: {submission.subject}\n\n"
            f"{submission.message}"
        )
        body = await mail_service.render_template(
            "contact_notification.html",
            {
                "name": submission.name,
                "email": submission.email,
                "subject": submission.subject,
                "message_lines": submission.message.splitlines(),
            },
        )
        return mail_service.create_email_multipart_message(
            sender=settings.MAIL_FROM,
            recipients=[settings.mail_recipient],
            title=f"{OWNER_SUBJECT_PREFIX} {submission.subject}",
            text=text,
            body=body,
            reply_to=submission.email,
        )

    async def build_auto_reply(self, submission: SanitizedSubmission) -> MIMEMultipart:
        owner = settings.SITE_OWNER_NAME
        text = f"Thanks for contacting me! I will get back to you soon!\n\nBest,\n{owner}"
        body = await mail_service.render_template(
            "contact_autoreply.html", {"owner_name": owner}
        )
        return mail_service.create_email_multipart_message(
            sender=settings.MAIL_FROM,
            recipients=[submission.email],
            title=AUTOREPLY_SUBJECT,
            text=text,
            body=body,
            sender_name=owner,
        )

    async def relay(self, submission: SanitizedSubmission) -> SubmissionOutcome:
        """
        Deliver the owner notification, then the auto-reply.

        There is no transaction across the two sends: if the auto-reply fails,
        the owner notification has already gone out.

        Args:
            submission: Sanitized submission with every field present

        Returns:
            Successful outcome once both messages are sent

        Raises:
            ContactValidationError: If a field is empty
            ConfigurationError: If sender credentials are missing
            TransportError: If building or sending either message fails
        """
        require_fields(submission)

        if not settings.mail_configured:
            logger.error("Contact relay called but MAIL_FROM/MAIL_PASS are not configured")
            raise ConfigurationError("Email is not configured on server")

        try:
            messages: List[MIMEMultipart] = [
                await self.build_owner_notification(submission),
                await self.build_auto_reply(submission),
            ]
            await mail_service.send_messages(messages)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Failed to relay contact message from {submission.email}: {str(e)}", exc_info=True)
            raise TransportError("Failed to send email") from e

        logger.info(f"Contact message from {submission.email} relayed to {settings.mail_recipient}")
        return SubmissionOutcome(ok=True)


relay_service = RelayService()
