"""Store operations over one session (one unit of work)."""

from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from ..config import DEFAULT_COLOR
from ..models.calendar import CalendarInfo, ModuleInfo
from ..models.event import ParsedEntry, ScheduledEvent
from .tables import Calendar, Event, Module, Project


def to_calendar_info(
    row: Calendar, module_count: Optional[int] = None, default_color: str = DEFAULT_COLOR
) -> CalendarInfo:
    return CalendarInfo(
        calendar_id=row.calendar_id,
        project_id=row.project_id,
        url=row.url,
        type=bool(row.type),
        label=row.label,
        color=row.color or default_color,
        last_synced=row.last_synced,
        created_at=row.created_at,
        module_count=module_count,
    )


def to_module_info(row: Module) -> ModuleInfo:
    return ModuleInfo(
        module_id=row.module_id,
        calendar_id=row.calendar_id,
        name=row.name,
        is_selected=bool(row.is_selected),
    )


class CalendarStore:
    """
    Thin data-access layer bound to a session.

    Nothing here commits; the caller's ``Database.session_scope()`` decides
    whether the whole unit of work is kept or rolled back.
    """

    def __init__(self, session: Session):
        self.session = session

    # Projects

    def create_project(self, name: str) -> int:
        project = Project(name=name)
        self.session.add(project)
        self.session.flush()
        return project.project_id

    def get_project(self, project_id: int) -> Optional[Project]:
        return self.session.get(Project, project_id)

    def delete_project(self, project_id: int) -> bool:
        project = self.get_project(project_id)
        if project is None:
            return False
        self.session.delete(project)
        self.session.flush()
        return True

    # Calendars

    def get_calendar(self, calendar_id: int) -> Optional[Calendar]:
        return self.session.get(Calendar, calendar_id)

    def list_calendars(self, project_id: int) -> list[tuple[Calendar, int]]:
        """Calendars of a project, newest first, with their module count."""
        stmt = (
            select(Calendar, func.count(Module.module_id))
            .outerjoin(Module, Module.calendar_id == Calendar.calendar_id)
            .where(Calendar.project_id == project_id)
            .group_by(Calendar.calendar_id)
            .order_by(Calendar.created_at.desc(), Calendar.calendar_id.desc())
        )
        return [(row, count) for row, count in self.session.execute(stmt)]

    def add_calendar(
        self,
        project_id: int,
        url: str,
        inclusive: bool,
        label: Optional[str],
        color: str,
    ) -> Calendar:
        calendar = Calendar(
            project_id=project_id,
            url=url,
            type=inclusive,
            label=label,
            color=color,
        )
        self.session.add(calendar)
        self.session.flush()
        return calendar

    def delete_calendar(self, calendar_id: int) -> bool:
        calendar = self.get_calendar(calendar_id)
        if calendar is None:
            return False
        self.session.delete(calendar)
        self.session.flush()
        return True

    def count_modules(self, calendar_id: int) -> int:
        return self.session.scalar(
            select(func.count(Module.module_id)).where(Module.calendar_id == calendar_id)
        )

    def touch_calendar(self, calendar_id: int, synced_at: datetime) -> None:
        self.session.execute(
            update(Calendar)
            .where(Calendar.calendar_id == calendar_id)
            .values(last_synced=synced_at)
            .execution_options(synchronize_session=False)
        )

    # Modules

    def list_modules(self, calendar_id: int) -> list[Module]:
        stmt = (
            select(Module)
            .where(Module.calendar_id == calendar_id)
            .order_by(Module.name.asc(), Module.module_id.asc())
        )
        return list(self.session.scalars(stmt))

    def get_module(self, module_id: int) -> Optional[Module]:
        return self.session.get(Module, module_id)

    def insert_module(self, calendar_id: int, name: str, is_selected: bool) -> Module:
        module = Module(calendar_id=calendar_id, name=name, is_selected=is_selected)
        self.session.add(module)
        self.session.flush()
        return module

    def delete_modules(self, module_ids: Iterable[int]) -> int:
        module_ids = list(module_ids)
        if not module_ids:
            return 0
        result = self.session.execute(
            delete(Module)
            .where(Module.module_id.in_(module_ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def set_selection_for_calendar(self, calendar_id: int, is_selected: bool) -> int:
        result = self.session.execute(
            update(Module)
            .where(Module.calendar_id == calendar_id)
            .values(is_selected=is_selected)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # Events

    def delete_events(self, calendar_id: int) -> int:
        calendar_modules = select(Module.module_id).where(Module.calendar_id == calendar_id)
        result = self.session.execute(
            delete(Event)
            .where(Event.module_id.in_(calendar_modules))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def insert_event(self, module_id: int, entry: ParsedEntry) -> None:
        self.session.add(
            Event(
                module_id=module_id,
                external_id=entry.external_id,
                title=entry.title,
                description=entry.description,
                location=entry.location,
                start_time=entry.start,
                end_time=entry.end,
            )
        )

    def list_project_events(
        self,
        project_id: int,
        view_start: Optional[datetime] = None,
        view_end: Optional[datetime] = None,
    ) -> list[ScheduledEvent]:
        """
        Events of a project's visible modules that touch the view window.

        An event is outside the window only if it ends before ``view_start``
        or starts after ``view_end``; a missing bound is unbounded.
        """
        stmt = (
            select(Event, Module.name, Calendar.calendar_id)
            .join(Module, Event.module_id == Module.module_id)
            .join(Calendar, Module.calendar_id == Calendar.calendar_id)
            .where(Calendar.project_id == project_id)
            .where(Module.is_selected.is_(True))
        )
        if view_start is not None:
            stmt = stmt.where(Event.end_time >= view_start)
        if view_end is not None:
            stmt = stmt.where(Event.start_time <= view_end)
        stmt = stmt.order_by(Event.start_time.asc(), Event.event_id.asc())

        return [
            ScheduledEvent(
                event_id=event.event_id,
                calendar_id=calendar_id,
                module_id=event.module_id,
                module_name=module_name,
                title=event.title,
                description=event.description or "",
                location=event.location or "",
                start=event.start_time,
                end=event.end_time,
            )
            for event, module_name, calendar_id in self.session.execute(stmt)
        ]
