import smtplib
import pytest
from app.core.exceptions import ConfigurationError, ContactValidationError, TransportError
from app.models.contact import ContactRequest, SanitizedSubmission
from app.services.relay_service import relay_service
from app.tests.constants.contact import ContactTestConstants, VALID_SUBMISSION


class TestRelayPrepare:
    def test_prepare_sanitizes_fields(self):
        request = ContactRequest(**{**VALID_SUBMISSION, "subject": "<b>Hi</b> there"})

        submission = relay_service.prepare(request)

        assert submission.subject == "Hi there"

    def test_prepare_rejects_malformed_email(self):
        request = ContactRequest(**{**VALID_SUBMISSION, "email": "x"})

        with pytest.raises(ContactValidationError, match="Invalid email address"):
            relay_service.prepare(request)

    def test_prepare_requires_every_field(self):
        request = ContactRequest(**{**VALID_SUBMISSION, "message": "   "})

        with pytest.raises(ContactValidationError):
            relay_service.prepare(request)


class TestRelay:
    @pytest.mark.asyncio
    async def test_relay_sends_two_messages_in_order(self, mail_settings, mock_smtp_server):
        outcome = await relay_service.relay(SanitizedSubmission(**VALID_SUBMISSION))

        assert outcome.ok is True
        assert outcome.error_category is None
        recipients = [c.args[0]["To"] for c in mock_smtp_server.send_message.call_args_list]
        assert recipients == [
            ContactTestConstants.MOCK_OWNER_INBOX.value,
            ContactTestConstants.MOCK_SENDER_EMAIL.value,
        ]

    @pytest.mark.asyncio
    async def test_relay_not_configured(self, missing_mail_settings, mock_smtp):
        with pytest.raises(ConfigurationError):
            await relay_service.relay(SanitizedSubmission(**VALID_SUBMISSION))

        mock_smtp.assert_not_called()

    @pytest.mark.asyncio
    async def test_relay_stops_after_first_failure(self, mail_settings, mock_smtp_server):
        mock_smtp_server.send_message.side_effect = smtplib.SMTPServerDisconnected("gone")

        with pytest.raises(TransportError):
            await relay_service.relay(SanitizedSubmission(**VALID_SUBMISSION))

        assert mock_smtp_server.send_message.call_count == 1

    @pytest.mark.asyncio
    async def test_relay_connection_timeout(self, mail_settings, mock_smtp):
        mock_smtp.side_effect = TimeoutError("timed out")

        with pytest.raises(TransportError, match="Failed to send email"):
            await relay_service.relay(SanitizedSubmission(**VALID_SUBMISSION))


class TestMessageComposition:
    @pytest.mark.asyncio
    async def test_owner_notification_escapes_html(self, mail_settings):
        submission = SanitizedSubmission(
            name="Jo", email="jo@x.com", subject="Hi there", message="line one\nline two"
        )

        message = await relay_service.build_owner_notification(submission)

        text_part, html_part = message.get_payload()
        assert message["Subject"] == "[Portfolio Contact] Hi there"
        assert message["From"] == ContactTestConstants.MOCK_OWNER_EMAIL.value
        assert "New message from Jo <jo@x.com>" in text_part.get_payload(decode=True).decode()
        html = html_part.get_payload(decode=True).decode()
        assert "line one<br>line two" in html
        assert "Jo &lt;jo@x.com&gt;" in html

    @pytest.mark.asyncio
    async def test_auto_reply_is_independent_of_message(self, mail_settings, monkeypatch):
        monkeypatch.setattr(mail_settings, "SITE_OWNER_NAME", "Sam")
        submission = SanitizedSubmission(**VALID_SUBMISSION)

        message = await relay_service.build_auto_reply(submission)

        text = message.get_payload(0).get_payload(decode=True).decode()
        assert message["To"] == "jo@x.com"
        assert message["Subject"] == "Thanks for contacting me!"
        assert "Sam" in message["From"]
        assert "Best,\nSam" in text
        assert VALID_SUBMISSION["message"] not in text
