import asyncio
import pytest
from app.client.status import StatusBanner, build_status, message_for
from app.models.contact import ErrorCategory, StatusKind


class TestBuildStatus:
    def test_build_status_defaults(self):
        status = build_status("Sent", StatusKind.SUCCESS)

        assert status.text == "Sent"
        assert status.kind == StatusKind.SUCCESS
        assert status.ttl == 5000

    @pytest.mark.parametrize("category", list(ErrorCategory))
    def test_every_category_has_a_message(self, category):
        assert message_for(category)


class TestStatusBanner:
    def test_show_without_loop_keeps_banner(self, banner, mock_renderer):
        status = banner.render_status("Sent", StatusKind.SUCCESS)

        assert banner.current == status
        mock_renderer.show.assert_called_once_with(status)
        mock_renderer.remove.assert_not_called()

    def test_new_status_replaces_previous(self, banner, mock_renderer):
        first = banner.render_status("First", StatusKind.ERROR)
        second = banner.render_status("Second", StatusKind.SUCCESS)

        mock_renderer.remove.assert_called_once_with(first)
        assert banner.current == second

    @pytest.mark.asyncio
    async def test_status_fades_then_is_removed(self, mock_renderer):
        banner = StatusBanner(renderer=mock_renderer, fade_ms=10)
        status = build_status("Sent", StatusKind.SUCCESS, ttl=10)

        banner.show(status)
        await asyncio.sleep(0.1)

        mock_renderer.fade.assert_called_once_with(status)
        mock_renderer.remove.assert_called_once_with(status)
        assert banner.current is None

    @pytest.mark.asyncio
    async def test_replaced_status_is_not_dismissed_twice(self, mock_renderer):
        banner = StatusBanner(renderer=mock_renderer, fade_ms=10)
        first = build_status("First", StatusKind.ERROR, ttl=10)
        second = build_status("Second", StatusKind.SUCCESS, ttl=10_000)

        banner.show(first)
        banner.show(second)
        await asyncio.sleep(0.1)

        mock_renderer.fade.assert_not_called()
        mock_renderer.remove.assert_called_once_with(first)
        assert banner.current == second
        banner.clear()
