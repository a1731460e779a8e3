"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request, status

from nutritrack.api.schemas import (
    DashboardModel,
    DayLogIn,
    DayLogOut,
    HistoryRowModel,
    IdentityModel,
    InsightModel,
    SettingsIn,
    SettingsModel,
    SyncStateModel,
)
from nutritrack.app_logging import configure_logging
from nutritrack.containers import AppContainer
from nutritrack.domain.models import DateRange, InvalidDateRangeError, parse_iso_date
from nutritrack.services.aggregation import sum_macros
from nutritrack.services.tracker import TrackerService

_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state = app.state.container.tracker_service.load()
        logger.info(
            "Tracker loaded",
            extra={"online": state.online, "status": state.status.value},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/sync")
    async def sync_state(request: Request) -> SyncStateModel:
        """Return the remote sync indicator."""
        tracker = _tracker(request)
        return SyncStateModel.from_domain(tracker.sync_state(), tracker.user_id)

    @app.get("/settings")
    async def get_settings(request: Request) -> SettingsModel:
        """Return the current user settings."""
        return SettingsModel.from_domain(_tracker(request).settings)

    @app.put("/settings")
    async def save_settings(
        payload: SettingsIn, request: Request, background_tasks: BackgroundTasks
    ) -> SettingsModel:
        """Save settings locally and sync them in the background."""
        tracker = _tracker(request)
        task = tracker.save_settings(payload.to_domain())
        background_tasks.add_task(tracker.sync, task)
        return SettingsModel.from_domain(tracker.settings)

    @app.get("/identity")
    async def get_identity(request: Request) -> IdentityModel:
        """Return the user id this device syncs under."""
        return IdentityModel(user_id=_tracker(request).user_id)

    @app.put("/identity")
    async def switch_identity(
        payload: IdentityModel, request: Request
    ) -> SyncStateModel:
        """Link this device to another user id and reload its data."""
        tracker = _tracker(request)
        try:
            state = tracker.switch_user(payload.user_id)
        except ValueError as exc:
            raise HTTPException(status_code=_UNPROCESSABLE, detail=str(exc)) from exc
        return SyncStateModel.from_domain(state, tracker.user_id)

    @app.get("/logs")
    async def list_logs(request: Request) -> list[DayLogOut]:
        """Return every stored log ordered by date."""
        return [
            DayLogOut.from_domain(log, sum_macros(log))
            for log in _tracker(request).logs
        ]

    @app.get("/logs/{day}")
    async def get_log(day: str, request: Request) -> DayLogOut:
        """Return the log for a date, or an empty one."""
        log = _tracker(request).get_log(_parse_day(day))
        return DayLogOut.from_domain(log, sum_macros(log))

    @app.put("/logs/{day}")
    async def save_log(
        day: str,
        payload: DayLogIn,
        request: Request,
        background_tasks: BackgroundTasks,
    ) -> DayLogOut:
        """Save a day log locally and sync it in the background."""
        tracker = _tracker(request)
        log = payload.to_domain(_parse_day(day))
        background_tasks.add_task(tracker.sync, tracker.save_log(log))
        return DayLogOut.from_domain(log, sum_macros(log))

    @app.delete("/logs/{day}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_log(
        day: str, request: Request, background_tasks: BackgroundTasks
    ) -> None:
        """Delete a day log locally and sync the deletion in the background."""
        tracker = _tracker(request)
        background_tasks.add_task(tracker.sync, tracker.delete_log(_parse_day(day)))

    @app.get("/dashboard")
    async def dashboard(
        request: Request, start_date: str | None = None, end_date: str | None = None
    ) -> DashboardModel:
        """Return aggregated statistics for a date range."""
        date_range = _resolve_range(request, start_date, end_date)
        result = _tracker(request).dashboard(date_range)
        return DashboardModel.from_domain(
            date_range.start_date, date_range.end_date, result
        )

    @app.get("/history")
    async def history(
        request: Request, start_date: str | None = None, end_date: str | None = None
    ) -> list[HistoryRowModel]:
        """Return per-day calories for a date range, newest first."""
        date_range = _resolve_range(request, start_date, end_date)
        return [
            HistoryRowModel.from_domain(row)
            for row in _tracker(request).history(date_range)
        ]

    @app.post("/dashboard/insight")
    async def insight(
        request: Request, start_date: str | None = None, end_date: str | None = None
    ) -> InsightModel:
        """Return an AI-written summary of the period."""
        container: AppContainer = request.app.state.container
        date_range = _resolve_range(request, start_date, end_date)
        tracker = container.tracker_service
        result = tracker.dashboard(date_range)
        text = await container.insight_service.generate_insight(
            result.filtered_logs,
            tracker.settings,
            result.totals,
            result.weight_change_kg,
        )
        return InsightModel(text=text)

    return app


def _tracker(request: Request) -> TrackerService:
    container: AppContainer = request.app.state.container
    return container.tracker_service


def _parse_day(day: str) -> str:
    try:
        parse_iso_date(day)
    except ValueError as exc:
        raise HTTPException(status_code=_UNPROCESSABLE, detail=str(exc)) from exc
    return day


def _resolve_range(
    request: Request, start_date: str | None, end_date: str | None
) -> DateRange:
    """Fill missing bounds from the default window and validate the range."""
    container: AppContainer = request.app.state.container
    default = DateRange.last_days(_utc_today(), container.settings.default_range_days)
    try:
        return DateRange.validated(
            start_date or default.start_date, end_date or default.end_date
        )
    except InvalidDateRangeError as exc:
        raise HTTPException(status_code=_UNPROCESSABLE, detail=str(exc)) from exc


def _utc_today() -> date:
    return datetime.now(tz=UTC).date()
