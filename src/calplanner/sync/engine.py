"""Feed reconciliation engine."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from ..models.event import ParsedEntry
from ..readers.base import FeedReader
from ..readers.module_name import module_key
from ..storage.database import Database
from ..storage.repository import CalendarStore
from ..utils.date_utils import utc_now
from ..utils.exceptions import NotFound
from .strategies import SelectionMode

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Result of one calendar synchronization."""

    calendar_id: int
    modules_created: int = 0
    modules_removed: int = 0
    events_created: int = 0
    entries_skipped: int = 0


def dedupe_module_names(names: Iterable[str]) -> list[str]:
    """
    Drop case-insensitive duplicates, keeping the first-seen spelling.

    Args:
        names: Module name candidates in feed order

    Returns:
        Unique names in first-seen order
    """
    seen: dict[str, str] = {}
    for name in names:
        seen.setdefault(module_key(name), name.strip())
    return list(seen.values())


class ReconciliationEngine:
    """Bring a calendar's stored modules and events in line with its feed."""

    def __init__(self, database: Database, reader: Optional[FeedReader] = None):
        """
        Initialize the engine.

        Args:
            database: Store holding calendars, modules and events
            reader: Feed reader used by sync() (not needed by reconcile())
        """
        self.database = database
        self.reader = reader

    def sync(self, calendar_id: int) -> SyncResult:
        """
        Fetch a calendar's feed and reconcile the stored state with it.

        The feed is fetched before any write, so a FeedUnavailable leaves
        the store untouched.

        Raises:
            NotFound: If the calendar does not exist
            FeedUnavailable: If the feed cannot be fetched or decoded
        """
        if self.reader is None:
            raise ValueError("A feed reader is required to synchronize calendars")

        with self.database.session_scope() as session:
            calendar = CalendarStore(session).get_calendar(calendar_id)
            if calendar is None:
                raise NotFound(f"Calendar {calendar_id} not found")
            url, inclusive = calendar.url, bool(calendar.type)

        logger.info(f"Synchronizing calendar {calendar_id} from {url}")
        feed = self.reader.read_feed(url)
        return self.reconcile(calendar_id, inclusive, feed.module_names, feed.entries)

    def reconcile(
        self,
        calendar_id: int,
        inclusive: bool,
        module_names: Iterable[str],
        entries: Iterable[ParsedEntry],
    ) -> SyncResult:
        """
        Replace a calendar's stored snapshot with a parsed one, atomically.

        Modules are matched by trimmed, case-insensitive name: matches keep
        their id and visibility, new names are inserted with the calendar's
        default visibility, and names gone from the feed (or stored twice) are
        deleted. Events are always replaced wholesale. Either everything is
        committed or nothing is.

        Args:
            calendar_id: Calendar to reconcile
            inclusive: Calendar selection mode flag
            module_names: Module name candidates, one per entry
            entries: Parsed feed entries

        Returns:
            SyncResult with module and event counts
        """
        mode = SelectionMode.from_flag(inclusive)
        unique_names = dedupe_module_names(module_names)
        result = SyncResult(calendar_id=calendar_id)

        with self.database.session_scope() as session:
            store = CalendarStore(session)

            existing = store.list_modules(calendar_id)
            existing_by_key = {}
            for module in existing:
                existing_by_key.setdefault(module_key(module.name), module)

            # Local to this call: module key -> module_id of every surviving module
            module_ids: dict[str, int] = {}
            for name in unique_names:
                key = module_key(name)
                if key in existing_by_key:
                    module_ids[key] = existing_by_key[key].module_id
                else:
                    module = store.insert_module(calendar_id, name, mode.default_visibility)
                    module_ids[key] = module.module_id
                    result.modules_created += 1

            # Gone from the feed, or a stored duplicate of a kept name
            kept_ids = set(module_ids.values())
            obsolete = [module.module_id for module in existing if module.module_id not in kept_ids]
            store.delete_modules(obsolete)
            result.modules_removed = len(obsolete)

            store.delete_events(calendar_id)

            for entry in entries:
                module_id = module_ids.get(module_key(entry.module_name))
                if module_id is None:
                    logger.debug(
                        f"Skipping entry {entry.external_id}: no module for {entry.module_name!r}"
                    )
                    result.entries_skipped += 1
                    continue
                store.insert_event(module_id, entry)
                result.events_created += 1

            store.touch_calendar(calendar_id, utc_now())

        logger.info(
            f"Calendar {calendar_id} synchronized: "
            f"{result.modules_created} modules created, "
            f"{result.modules_removed} removed, "
            f"{result.events_created} events"
        )
        return result
