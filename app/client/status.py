"""Transient status banner for the contact form.

``build_status`` is pure; ``StatusBanner`` owns the side effects of showing,
fading and removing the single banner region.
"""

import asyncio
import logging
from typing import Optional

from app.models.contact import STATUS_TTL_MS, ErrorCategory, StatusKind, StatusMessage

logger = logging.getLogger(__name__)

FADE_MS = 300

SUCCESS_MESSAGE = "Message sent successfully! You should receive a confirmation email shortly."

ERROR_MESSAGES = {
    ErrorCategory.NETWORK: "Network error. Please check your connection and try again.",
    ErrorCategory.RATE_LIMITED: "Please wait a few seconds before sending another message.",
    ErrorCategory.SERVER_MISCONFIGURED: (
        "The contact form is temporarily unavailable. Please reach out by email instead."
    ),
    ErrorCategory.VALIDATION: "Please check the form and try again.",
    ErrorCategory.UNKNOWN: "Failed to send message. Please try again.",
}


def build_status(message: str, kind: StatusKind, ttl: int = STATUS_TTL_MS) -> StatusMessage:
    return StatusMessage(text=message, kind=kind, ttl=ttl)


def message_for(category: ErrorCategory) -> str:
    return ERROR_MESSAGES.get(category, ERROR_MESSAGES[ErrorCategory.UNKNOWN])


class StatusRenderer:
    """Draws the banner. Subclasses bind it to an actual display."""

    def show(self, status: StatusMessage) -> None:
        raise NotImplementedError("Subclasses must implement show")

    def fade(self, status: StatusMessage) -> None:
        raise NotImplementedError("Subclasses must implement fade")

    def remove(self, status: StatusMessage) -> None:
        raise NotImplementedError("Subclasses must implement remove")


class LoggingStatusRenderer(StatusRenderer):
    """Renderer that writes banner changes to the log."""

    def show(self, status: StatusMessage) -> None:
        level = logging.INFO if status.kind == StatusKind.SUCCESS else logging.WARNING
        logger.log(level, f"[{status.kind.value}] {status.text}")

    def fade(self, status: StatusMessage) -> None:
        logger.debug(f"Fading status: {status.text}")

    def remove(self, status: StatusMessage) -> None:
        logger.debug(f"Removed status: {status.text}")


class StatusBanner:
    """Holds at most one visible status and schedules its dismissal.

    Showing a new status removes the current one first. After ``ttl`` ms the
    status is faded, then removed ``FADE_MS`` later.
    """

    def __init__(self, renderer: Optional[StatusRenderer] = None, fade_ms: int = FADE_MS):
        self.renderer = renderer or LoggingStatusRenderer()
        self.fade_ms = fade_ms
        self.current: Optional[StatusMessage] = None
        self._dismiss_task: Optional[asyncio.Task] = None

    def render_status(self, message: str, kind: StatusKind) -> StatusMessage:
        status = build_status(message, kind)
        self.show(status)
        return status

    def show(self, status: StatusMessage) -> None:
        self.clear()
        self.current = status
        self.renderer.show(status)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop, the caller dismisses the banner itself
            return
        self._dismiss_task = loop.create_task(self._dismiss_later(status))

    def clear(self) -> None:
        if self._dismiss_task is not None and not self._dismiss_task.done():
            self._dismiss_task.cancel()
        self._dismiss_task = None
        if self.current is not None:
            self.renderer.remove(self.current)
            self.current = None

    async def _dismiss_later(self, status: StatusMessage) -> None:
        await asyncio.sleep(status.ttl / 1000)
        self.renderer.fade(status)
        await asyncio.sleep(self.fade_ms / 1000)
        if self.current is status:
            self.renderer.remove(status)
            self.current = None
