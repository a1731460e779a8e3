"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from nutritrack.adapters.json_file_mirror import JsonFileMirror
from nutritrack.adapters.openai_insight_client import OpenAIInsightClient
from nutritrack.adapters.supabase_day_log_store import SupabaseDayLogStore
from nutritrack.config import Settings
from nutritrack.services.day_logs import DayLogStore, UnconfiguredDayLogStore
from nutritrack.services.identity import IdentityService
from nutritrack.services.insight import InsightService
from nutritrack.services.tracker import TrackerService

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    tracker_service: TrackerService
    insight_service: InsightService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    defaults = resolved_settings.default_user_settings()

    store: DayLogStore
    if resolved_settings.supabase_configured:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        store = SupabaseDayLogStore(supabase_client, defaults)
    else:
        logger.warning("Supabase is not configured; running in offline mode")
        store = UnconfiguredDayLogStore()

    mirror = JsonFileMirror(resolved_settings.mirror_path)
    tracker_service = TrackerService(
        store=store,
        mirror=mirror,
        identity=IdentityService(mirror),
        default_settings=defaults,
        status_display=timedelta(
            seconds=resolved_settings.sync_status_display_seconds
        ),
    )

    insight_client = None
    if resolved_settings.openai_api_key:
        insight_client = OpenAIInsightClient.create(
            resolved_settings.openai_api_key,
            timeout=resolved_settings.openai_timeout_seconds,
        )
    insight_service = InsightService(
        client=insight_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        if insight_client is not None:
            await insight_client.close()

    return AppContainer(
        settings=resolved_settings,
        tracker_service=tracker_service,
        insight_service=insight_service,
        close_resources=close_resources,
    )
