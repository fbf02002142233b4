"""Relay transports used by the contact form controller.

Two deployment variants are supported: posting to this project's own
``/api/contact`` endpoint, or calling the EmailJS REST API directly.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import (
    ConfigurationError,
    ContactValidationError,
    RateLimitError,
    TransportError,
)
from app.models.contact import ErrorCategory, SanitizedSubmission

logger = logging.getLogger(__name__)

INIT_ATTEMPTS = 3
INIT_BACKOFF_SECONDS = 0.5

NOT_CONFIGURED_ERROR = "Email is not configured on server"


class RelayTransport:
    """
    Base class for relay transports.

    Subclasses implement ``initialize`` and ``send``; ``send`` raises a
    ``ContactError`` subclass describing any failure.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.CLIENT_TIMEOUT
        self.client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout)

    async def send(self, submission: SanitizedSubmission) -> None:
        raise NotImplementedError("Subclasses must implement send")

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    async def _post(self, url: str, **kwargs: Any) -> httpx.Response:
        if self.client is None:
            raise TransportError("Transport used before initialization")
        try:
            return await self.client.post(url, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {url} timed out", category=ErrorCategory.NETWORK) from e
        except httpx.TransportError as e:
            raise TransportError(
                f"Network error calling {url}: {str(e)}", category=ErrorCategory.NETWORK
            ) from e


class HttpRelayTransport(RelayTransport):
    """Transport posting JSON to the relay service's ``/api/contact``."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        super().__init__(timeout)
        self.base_url = (base_url or settings.RELAY_BASE_URL).rstrip("/")

    @property
    def url(self) -> str:
        return f"{self.base_url}/api/contact"

    async def send(self, submission: SanitizedSubmission) -> None:
        response = await self._post(self.url, json=submission.model_dump())
        if response.status_code == 200:
            return

        error = _error_text(response)
        logger.error(f"Relay responded {response.status_code}: {error}")

        if response.status_code == 400:
            raise ContactValidationError(error)
        if response.status_code == 429:
            raise RateLimitError(error)
        if response.status_code == 500 and error == NOT_CONFIGURED_ERROR:
            raise ConfigurationError(error)
        raise TransportError(error, status_code=response.status_code)


class EmailJSTransport(RelayTransport):
    """
    Transport calling the EmailJS send API without a backend.

    One request sends the notification template; when a distinct auto-reply
    template is configured it is sent in a second request.
    """

    def __init__(
        self,
        service_id: Optional[str] = None,
        template_id: Optional[str] = None,
        public_key: Optional[str] = None,
        autoreply_template_id: Optional[str] = None,
        to_email: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(timeout)
        self.service_id = service_id or settings.EMAILJS_SERVICE_ID
        self.template_id = template_id or settings.EMAILJS_TEMPLATE_ID
        self.public_key = public_key or settings.EMAILJS_PUBLIC_KEY
        self.autoreply_template_id = autoreply_template_id or settings.EMAILJS_AUTOREPLY_TEMPLATE_ID
        self.to_email = to_email or settings.mail_recipient
        self.api_url = api_url or settings.EMAILJS_API_URL

    async def initialize(self) -> None:
        if not (self.service_id and self.template_id and self.public_key):
            raise ConfigurationError("EmailJS service id, template id and public key are required")
        await super().initialize()

    def template_params(self, submission: SanitizedSubmission) -> Dict[str, Any]:
        return {
            "from_name": submission.name,
            "reply_to": submission.email,
            "subject": submission.subject,
            "message": submission.message,
            "to_email": self.to_email,
        }

    async def send(self, submission: SanitizedSubmission) -> None:
        params = self.template_params(submission)
        await self._send_template(self.template_id, params)
        if self.autoreply_template_id and self.autoreply_template_id != self.template_id:
            await self._send_template(self.autoreply_template_id, params)

    async def _send_template(self, template_id: str, params: Dict[str, Any]) -> None:
        logger.info(f"EmailJS sending with service {self.service_id} and template {template_id}")
        response = await self._post(
            self.api_url,
            json={
                "service_id": self.service_id,
                "template_id": template_id,
                "user_id": self.public_key,
                "template_params": params,
            },
        )
        if response.status_code == 200:
            return

        error = response.text
        logger.error(f"EmailJS responded {response.status_code}: {error}")

        if response.status_code == 429:
            raise RateLimitError(error)
        lowered = error.lower()
        if response.status_code in (400, 401, 403, 404) and any(
            marker in lowered for marker in ("public key", "service id", "template id", "not found")
        ):
            raise ConfigurationError(error)
        raise TransportError(error, status_code=response.status_code)


class TransportReadiness:
    """
    Two-state readiness flag for a transport plus its bounded initialization.

    ``ensure_ready`` tries ``initialize`` a fixed number of times with a fixed
    backoff. Configuration errors are raised immediately.
    """

    def __init__(
        self,
        transport: RelayTransport,
        attempts: int = INIT_ATTEMPTS,
        backoff: float = INIT_BACKOFF_SECONDS,
    ):
        self.transport = transport
        self.attempts = attempts
        self.backoff = backoff
        self.ready = False
        self._lock = asyncio.Lock()

    async def ensure_ready(self) -> None:
        """
        Initialize the transport unless it is already ready.

        Raises:
            ConfigurationError: If the transport is not configured
            TransportError: If every initialization attempt failed
        """
        if self.ready:
            return

        async with self._lock:
            if self.ready:
                return

            last_error: Optional[Exception] = None
            for attempt in range(self.attempts):
                try:
                    await self.transport.initialize()
                    self.ready = True
                    logger.info(f"{type(self.transport).__name__} ready after {attempt + 1} attempt(s)")
                    return
                except ConfigurationError:
                    raise
                except Exception as e:
                    last_error = e
                    logger.warning(f"Transport initialization attempt {attempt + 1} failed: {str(e)}")
                    if attempt < self.attempts - 1:
                        await asyncio.sleep(self.backoff)

            raise TransportError(
                f"Transport not ready after {self.attempts} attempts",
                category=ErrorCategory.NETWORK,
            ) from last_error


def _error_text(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return response.text
