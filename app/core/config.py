"""Configuration settings for the portfolio contact relay.

This module manages environment variables and application settings.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings.

    Attributes:
        PROJECT_NAME: Name of the project
        DEBUG: Debug mode flag
        LOG_LEVEL: Root logging level
        PORT: Port the relay listens on
        MAIL_FROM: Sender address, also used as the SMTP login
        MAIL_PASS: SMTP app password for MAIL_FROM
        MAIL_TO: Owner inbox, defaults to MAIL_FROM
        SMTP_HOST: SMTP server host
        SMTP_PORT: SMTP server port (implicit TLS)
        SMTP_TIMEOUT: Timeout in seconds for each SMTP operation
        SITE_OWNER_NAME: Name used to sign the auto-reply
    """
    def __init__(self):
        self.PROJECT_NAME = "Portfolio Contact Relay"
        self.DEBUG = os.getenv("DEBUG", "False").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.PORT = int(os.getenv("PORT", 3000))

        # Mail Settings
        # Missing credentials only fail the contact endpoint, never startup.
        self.MAIL_FROM = os.getenv("MAIL_FROM")
        self.MAIL_PASS = os.getenv("MAIL_PASS")
        self.MAIL_TO = os.getenv("MAIL_TO")
        self.SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
        self.SMTP_PORT = int(os.getenv("SMTP_PORT", 465))
        self.SMTP_TIMEOUT = float(os.getenv("SMTP_TIMEOUT", 10))
        self.SITE_OWNER_NAME = os.getenv("SITE_OWNER_NAME", "Yanbo")

        # Client Settings
        self.RELAY_BASE_URL = os.getenv("RELAY_BASE_URL", "http://localhost:3000")
        self.CLIENT_TIMEOUT = float(os.getenv("CLIENT_TIMEOUT", 10))

        # EmailJS Settings
        self.EMAILJS_API_URL = os.getenv(
            "EMAILJS_API_URL", "https://api.emailjs.com/api/v1.0/email/send"
        )
        self.EMAILJS_SERVICE_ID = os.getenv("EMAILJS_SERVICE_ID")
        self.EMAILJS_TEMPLATE_ID = os.getenv("EMAILJS_TEMPLATE_ID")
        self.EMAILJS_AUTOREPLY_TEMPLATE_ID = os.getenv("EMAILJS_AUTOREPLY_TEMPLATE_ID")
        self.EMAILJS_PUBLIC_KEY = os.getenv("EMAILJS_PUBLIC_KEY")

    @property
    def mail_recipient(self):
        """Owner inbox, falling back to the sender address."""
        return self.MAIL_TO or self.MAIL_FROM

    @property
    def mail_configured(self) -> bool:
        return bool(self.MAIL_FROM and self.MAIL_PASS)


settings = Settings()
