"""iCalendar feed writer for project exports."""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any, Optional

from icalendar import Calendar, Event

from ..config import DEFAULT_PRODUCT_ID
from ..models.event import ScheduledEvent
from ..utils.date_utils import to_utc, utc_now
from .base import FeedWriter

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Événement"


def _clean(value: Any) -> str:
    """Trimmed text of an optional field; icalendar escapes it on output."""
    if value is None:
        return ""
    return str(value).strip()


def _second(dt: datetime) -> datetime:
    # The compact UTC form has no sub-second part
    return dt.replace(microsecond=0)


class ICSFeedWriter(FeedWriter):
    """Serialize scheduled events as an iCalendar (RFC 5545) document."""

    def __init__(self, product_id: str = DEFAULT_PRODUCT_ID, uid_domain: str = "calplanner"):
        """
        Initialize the writer.

        Args:
            product_id: PRODID written in the document header
            uid_domain: Domain part of generated event UIDs
        """
        self.product_id = product_id
        self.uid_domain = uid_domain

    def render(self, events: Iterable[ScheduledEvent]) -> str:
        calendar = Calendar()
        calendar.add("version", "2.0")
        calendar.add("prodid", self.product_id)
        calendar.add("calscale", "GREGORIAN")

        generated_at = _second(utc_now())
        exported = 0
        skipped = 0
        for event in events:
            component = self._build_event(event, generated_at)
            if component is None:
                skipped += 1
                continue
            calendar.add_component(component)
            exported += 1

        logger.info(f"Exported {exported} events ({skipped} skipped)")
        return calendar.to_ical().decode("utf-8")

    def _build_event(self, event: ScheduledEvent, generated_at: datetime) -> Optional[Event]:
        """Build one VEVENT, or None when its instants cannot be normalized."""
        start = to_utc(getattr(event, "start", None))
        end = to_utc(getattr(event, "end", None))
        if start is None or end is None:
            logger.warning(
                f"Skipping event {getattr(event, 'event_id', '?')}: "
                f"invalid start/end ({getattr(event, 'start', None)!r}, {getattr(event, 'end', None)!r})"
            )
            return None

        module_name = _clean(getattr(event, "module_name", None))
        summary = _clean(getattr(event, "title", None)) or module_name or FALLBACK_SUMMARY

        component = Event()
        component.add("uid", f"event-{event.event_id}@{self.uid_domain}")
        component.add("dtstamp", generated_at)
        component.add("dtstart", _second(start))
        component.add("dtend", _second(end))
        component.add("summary", summary)
        if module_name:
            component.add("categories", [module_name])

        location = _clean(getattr(event, "location", None))
        if location:
            component.add("location", location)
        description = _clean(getattr(event, "description", None))
        if description:
            component.add("description", description)

        return component
