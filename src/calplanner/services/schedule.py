"""Project schedule: visible events within an optional view window."""

from datetime import datetime
from typing import Optional, Union

from ..models.event import ScheduledEvent
from ..storage.database import Database
from ..storage.repository import CalendarStore
from ..utils.date_utils import to_utc
from ..utils.exceptions import MalformedInput

Bound = Optional[Union[datetime, str]]


def parse_bound(value: Bound, name: str) -> Optional[datetime]:
    """
    Normalize a view-window bound to UTC.

    Args:
        value: Datetime, ISO-8601 string, or None/blank for unbounded
        name: Bound name used in the error message

    Raises:
        MalformedInput: If a string bound cannot be parsed
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    bound = to_utc(value)
    if bound is None:
        raise MalformedInput(f"{name} must be an ISO-8601 date or datetime, got {value!r}")
    return bound


class SelectionFilter:
    """Select the events a project's user sees."""

    def __init__(self, database: Database):
        self.database = database

    def list_events(
        self,
        project_id: int,
        view_start: Bound = None,
        view_end: Bound = None,
    ) -> list[ScheduledEvent]:
        """
        Events of visible modules that intersect the view window, by start time.

        Events of hidden modules are never returned. An event is dropped only
        if it ends strictly before ``view_start`` or starts strictly after
        ``view_end``; a missing bound leaves that side open.

        Args:
            project_id: Project whose calendars are read
            view_start: Optional lower bound of the window
            view_end: Optional upper bound of the window

        Returns:
            Ordered list of ScheduledEvent
        """
        start = parse_bound(view_start, "view_start")
        end = parse_bound(view_end, "view_end")
        with self.database.session_scope() as session:
            return CalendarStore(session).list_project_events(project_id, start, end)
