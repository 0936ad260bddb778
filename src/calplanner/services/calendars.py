"""Calendar subscription lifecycle."""

import logging
from typing import Any, Union

from ..config import DEFAULT_COLOR
from ..models.calendar import CalendarCreate, CalendarInfo, CalendarUpdate
from ..storage.database import Database
from ..storage.repository import CalendarStore, to_calendar_info
from ..sync.engine import ReconciliationEngine, SyncResult
from ..utils.exceptions import CalPlannerError, NotFound
from ..utils.validation import parse_payload

logger = logging.getLogger(__name__)


class CalendarService:
    """Create, update, delete, list and synchronize calendar subscriptions."""

    def __init__(
        self,
        database: Database,
        engine: ReconciliationEngine,
        default_color: str = DEFAULT_COLOR,
    ):
        self.database = database
        self.engine = engine
        self.default_color = default_color

    def list_for_project(self, project_id: int) -> list[CalendarInfo]:
        """Calendars of a project, newest first, with module counts."""
        with self.database.session_scope() as session:
            return [
                to_calendar_info(row, module_count=count, default_color=self.default_color)
                for row, count in CalendarStore(session).list_calendars(project_id)
            ]

    def get(self, calendar_id: int) -> CalendarInfo:
        with self.database.session_scope() as session:
            store = CalendarStore(session)
            calendar = store.get_calendar(calendar_id)
            if calendar is None:
                raise NotFound(f"Calendar {calendar_id} not found")
            return to_calendar_info(
                calendar,
                module_count=store.count_modules(calendar_id),
                default_color=self.default_color,
            )

    def create(self, project_id: int, payload: Union[CalendarCreate, dict[str, Any]]) -> CalendarInfo:
        """
        Subscribe a project to a feed and run its first synchronization.

        A calendar whose first synchronization fails is deleted again, so a
        calendar never exists without having been synchronized.

        Args:
            project_id: Owning project
            payload: Feed URL, selection mode, label and color

        Returns:
            The synchronized calendar

        Raises:
            MalformedInput: If the payload is invalid
            NotFound: If the project does not exist
            FeedUnavailable: If the feed cannot be fetched or decoded
        """
        payload = parse_payload(CalendarCreate, payload)

        with self.database.session_scope() as session:
            store = CalendarStore(session)
            if store.get_project(project_id) is None:
                raise NotFound(f"Project {project_id} not found")
            calendar = store.add_calendar(
                project_id,
                url=payload.url,
                inclusive=payload.type,
                label=payload.label,
                color=payload.color or self.default_color,
            )
            calendar_id = calendar.calendar_id
        logger.info(f"Created calendar {calendar_id} for project {project_id}")

        try:
            self.engine.sync(calendar_id)
        except Exception:
            logger.warning(f"First synchronization of calendar {calendar_id} failed, removing it")
            try:
                self.remove(calendar_id)
            except CalPlannerError as cleanup_error:
                logger.error(f"Could not remove calendar {calendar_id}: {cleanup_error}")
            raise

        return self.get(calendar_id)

    def update(self, calendar_id: int, payload: Union[CalendarUpdate, dict[str, Any]]) -> CalendarInfo:
        """Apply the fields present in the payload; the others are left alone."""
        payload = parse_payload(CalendarUpdate, payload)
        fields = payload.model_fields_set

        with self.database.session_scope() as session:
            calendar = CalendarStore(session).get_calendar(calendar_id)
            if calendar is None:
                raise NotFound(f"Calendar {calendar_id} not found")
            if "label" in fields:
                calendar.label = payload.label
            if "type" in fields and payload.type is not None:
                calendar.type = payload.type
            if "color" in fields:
                calendar.color = payload.color or self.default_color
            session.flush()
            return to_calendar_info(calendar, default_color=self.default_color)

    def remove(self, calendar_id: int) -> None:
        """Delete a calendar together with its modules and events."""
        with self.database.session_scope() as session:
            if not CalendarStore(session).delete_calendar(calendar_id):
                raise NotFound(f"Calendar {calendar_id} not found")
        logger.info(f"Deleted calendar {calendar_id}")

    def sync(self, calendar_id: int) -> SyncResult:
        return self.engine.sync(calendar_id)

    def sync_project(self, project_id: int) -> dict[int, Union[SyncResult, CalPlannerError]]:
        """
        Synchronize every calendar of a project.

        A failing calendar does not stop the others; its error is reported
        in place of its result.
        """
        outcomes: dict[int, Union[SyncResult, CalPlannerError]] = {}
        for calendar in self.list_for_project(project_id):
            try:
                outcomes[calendar.calendar_id] = self.engine.sync(calendar.calendar_id)
            except CalPlannerError as e:
                logger.error(f"Synchronization of calendar {calendar.calendar_id} failed: {e}")
                outcomes[calendar.calendar_id] = e
        return outcomes
