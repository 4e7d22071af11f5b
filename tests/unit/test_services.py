"""Unit tests for the process-wide service getters."""

from collections.abc import AsyncGenerator

import pytest

from highway_assist import services
from highway_assist.api import create_app


@pytest.fixture
async def fresh_services() -> AsyncGenerator[None]:
    await services.close_services()
    yield
    await services.close_services()


class TestSharedTracker:
    """Tests for the shared document tracker."""

    async def test_tracker_is_shared(self, fresh_services: None) -> None:
        tracker = services.get_tracker()

        assert services.get_tracker() is tracker

    async def test_app_uses_shared_tracker(self, fresh_services: None) -> None:
        app = create_app()

        assert app.state.tracker is services.get_tracker()

    async def test_close_drops_tracker(self, fresh_services: None) -> None:
        tracker = services.get_tracker()

        await services.close_services()

        assert services.get_tracker() is not tracker
