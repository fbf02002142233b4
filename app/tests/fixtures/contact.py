import pytest
from unittest.mock import AsyncMock
from app.core.config import settings
from app.tests.constants.contact import ContactTestConstants


@pytest.fixture(scope="function")
def mail_settings(monkeypatch):
    """Fixture configuring sender credentials and owner inbox."""
    monkeypatch.setattr(settings, "MAIL_FROM", ContactTestConstants.MOCK_OWNER_EMAIL.value)
    monkeypatch.setattr(settings, "MAIL_PASS", ContactTestConstants.MOCK_APP_PASSWORD.value)
    monkeypatch.setattr(settings, "MAIL_TO", ContactTestConstants.MOCK_OWNER_INBOX.value)
    return settings


@pytest.fixture(scope="function")
def missing_mail_settings(monkeypatch):
    """Fixture removing sender credentials."""
    monkeypatch.setattr(settings, "MAIL_FROM", None)
    monkeypatch.setattr(settings, "MAIL_PASS", None)
    monkeypatch.setattr(settings, "MAIL_TO", None)
    return settings


@pytest.fixture(scope="function")
def mock_smtp(mocker):
    """Fixture to patch smtplib.SMTP_SSL used by mail_service."""
    return mocker.patch("app.services.mail_service.smtplib.SMTP_SSL")


@pytest.fixture(scope="function")
def mock_smtp_server(mock_smtp):
    """Fixture providing the SMTP session object yielded by the context manager."""
    return mock_smtp.return_value.__enter__.return_value


@pytest.fixture(scope="function")
def mock_httpx_post(mocker):
    """Fixture to patch and provide a mock for httpx.AsyncClient.post."""
    return mocker.patch(
        "app.client.transports.httpx.AsyncClient.post",
        new_callable=AsyncMock,
    )


@pytest.fixture(scope="function")
def mock_sleep(mocker):
    """Fixture to patch asyncio.sleep in the transports module."""
    return mocker.patch(
        "app.client.transports.asyncio.sleep",
        new_callable=AsyncMock,
    )
