"""Module visibility toggles."""

import logging
from collections.abc import Iterable

from ..models.calendar import ModuleInfo
from ..models.project import ModuleSelection
from ..readers.module_name import module_key
from ..storage.database import Database
from ..storage.repository import CalendarStore, to_module_info
from ..utils.exceptions import NotFound

logger = logging.getLogger(__name__)


class ModuleService:
    """List modules and toggle their visibility."""

    def __init__(self, database: Database):
        self.database = database

    def list_by_calendar(self, calendar_id: int) -> list[ModuleInfo]:
        with self.database.session_scope() as session:
            store = CalendarStore(session)
            if store.get_calendar(calendar_id) is None:
                raise NotFound(f"Calendar {calendar_id} not found")
            return [to_module_info(module) for module in store.list_modules(calendar_id)]

    def set_selection(self, module_id: int, is_selected: bool) -> ModuleInfo:
        with self.database.session_scope() as session:
            module = CalendarStore(session).get_module(module_id)
            if module is None:
                raise NotFound(f"Module {module_id} not found")
            module.is_selected = is_selected
            session.flush()
            return to_module_info(module)

    def set_selection_for_calendar(self, calendar_id: int, is_selected: bool) -> list[ModuleInfo]:
        """Show or hide every module of a calendar at once."""
        with self.database.session_scope() as session:
            store = CalendarStore(session)
            if store.get_calendar(calendar_id) is None:
                raise NotFound(f"Calendar {calendar_id} not found")
            count = store.set_selection_for_calendar(calendar_id, is_selected)
            logger.info(
                f"{'Selected' if is_selected else 'Deselected'} {count} modules of calendar {calendar_id}"
            )
        return self.list_by_calendar(calendar_id)

    def apply_selections(self, calendar_id: int, selections: Iterable[ModuleSelection]) -> int:
        """
        Restore saved visibilities by module name.

        Names are matched case-insensitively; saved names that the feed no
        longer produces are ignored.

        Returns:
            Number of modules whose visibility was set
        """
        wanted = {module_key(selection.name): selection.is_selected for selection in selections}
        applied = 0
        with self.database.session_scope() as session:
            for module in CalendarStore(session).list_modules(calendar_id):
                key = module_key(module.name)
                if key in wanted:
                    module.is_selected = wanted[key]
                    applied += 1
        return applied
