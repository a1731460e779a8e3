"""Tests for container wiring."""

import asyncio

from nutritrack.adapters.json_file_mirror import JsonFileMirror
from nutritrack.containers import build_container
from nutritrack.services.day_logs import UnconfiguredDayLogStore


def test_build_container_without_remote_services(settings) -> None:
    container = build_container(settings)

    tracker = container.tracker_service
    assert isinstance(tracker.store, UnconfiguredDayLogStore)
    assert isinstance(tracker.mirror, JsonFileMirror)
    assert tracker.settings.tmb == settings.default_tmb
    assert container.insight_service.client is None
    asyncio.run(container.close_resources())


def test_build_container_with_openai_key(settings) -> None:
    container = build_container(settings.model_copy(update={"openai_api_key": "k"}))

    assert container.insight_service.client is not None
    asyncio.run(container.close_resources())
