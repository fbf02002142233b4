"""
MailService Module

This module provides SMTP email sending with template rendering using Jinja2.
"""

import asyncio
import os
import smtplib
from jinja2 import Environment, FileSystemLoader, select_autoescape
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from app.core.config import settings
from app.core.exceptions import ConfigurationError
from typing import Dict, Any, List, Optional
import datetime

import logging

logger = logging.getLogger(__name__)

# Set up Jinja2 environment with proper auto-escaping
template_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
jinja_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(['html', 'xml']),
    enable_async=True
)


class MailService:
    """Mail service sending over an authenticated SMTP session."""

    async def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Asynchronously render a Jinja template with the given context.

        Args:
            template_name: The name of the template file to render
            context: Dictionary of variables to pass to the template

        Returns:
            The rendered template as a string
        """
        try:
            template = jinja_env.get_template(template_name)
            context_with_year = {**context, "current_year": datetime.datetime.now().year}
            return await template.render_async(**context_with_year)
        except Exception as e:
            logger.error(f"Error rendering template {template_name}: {str(e)}")
            raise ValueError(f"Error rendering template: {str(e)}")

    def create_email_multipart_message(
        self,
        sender: str,
        recipients: list,
        title: str,
        text: str = None,
        body: str = None,
        reply_to: Optional[str] = None,
        sender_name: Optional[str] = None,
    ) -> MIMEMultipart:
        """
        Creates a MIME multipart email message with optional plain text and HTML content.

        The message is `multipart/alternative` when both `text` and `body` are
        provided, otherwise `multipart/mixed`.

        Args:
            sender (str): The sender's email address.
            recipients (list): List of primary recipient email addresses.
            title (str): Subject of the email.
            text (str, optional): Plain text version of the email body.
            body (str, optional): HTML version of the email body.
            reply_to (str, optional): Address replies should go to.
            sender_name (str, optional): Display name of the sender.

        Returns:
            MIMEMultipart: The constructed email message ready to be sent.
        """
        if text and body:
            content_subtype = "alternative"
        else:
            content_subtype = "mixed"

        message = MIMEMultipart(content_subtype)
        message["Subject"] = title

        if sender_name is None:
            message["From"] = sender
        else:
            message["From"] = formataddr((sender_name, sender))

        message["To"] = ", ".join(recipients)

        if reply_to:
            message["Reply-To"] = reply_to

        # Record the MIME types of both parts, html last
        if text:
            message.attach(MIMEText(text, "plain", "utf-8"))

        if body:
            message.attach(MIMEText(body, "html", "utf-8"))

        return message

    def _send_messages_sync(self, messages: List[MIMEMultipart]) -> int:
        """Send messages in order over one SMTP session.

        Stops at the first failure; messages already sent stay sent.

        Returns:
            Number of messages handed to the SMTP server
        """
        sent = 0
        with smtplib.SMTP_SSL(
            settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT
        ) as server:
            server.login(settings.MAIL_FROM, settings.MAIL_PASS)
            for message in messages:
                logger.info(f"Sending '{message['Subject']}' to {message['To']}")
                server.send_message(message)
                sent += 1
        return sent

    async def send_messages(self, messages: List[MIMEMultipart]) -> int:
        """
        Send messages sequentially through a fresh SMTP session.

        Args:
            messages: Messages to send, in order

        Returns:
            Number of messages sent

        Raises:
            ConfigurationError: If the sender credentials are not configured
            smtplib.SMTPException, OSError: If the session or a send fails
        """
        if not settings.mail_configured:
            raise ConfigurationError("MAIL_FROM and MAIL_PASS must be set")

        return await asyncio.to_thread(self._send_messages_sync, messages)


mail_service = MailService()
