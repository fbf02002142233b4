import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock
from app.main import app
from app.client.transports import RelayTransport
from app.client.status import StatusBanner, StatusRenderer
from app.tests.fixtures.contact import *


@pytest.fixture(scope="function")
def client():
    """Fixture providing a TestClient for the relay app."""
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def mock_transport():
    """Fixture providing a relay transport with mocked initialize/send."""
    transport = MagicMock(spec=RelayTransport)
    transport.initialize = AsyncMock()
    transport.send = AsyncMock()
    transport.close = AsyncMock()
    return transport


@pytest.fixture(scope="function")
def mock_renderer():
    """Fixture providing a mock status renderer."""
    return MagicMock(spec=StatusRenderer)


@pytest.fixture(scope="function")
def banner(mock_renderer):
    """Fixture providing a status banner drawing to the mock renderer."""
    return StatusBanner(renderer=mock_renderer)
