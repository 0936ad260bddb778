"""iCalendar feed reader."""

import logging
from collections.abc import Iterator
from datetime import datetime
from typing import Any, Optional

import requests
from icalendar import Calendar
from icalendar.error import BrokenCalendarProperty

from ..models.event import ParsedEntry
from ..utils.date_utils import format_iso_utc, to_utc
from ..utils.exceptions import FeedUnavailable
from .base import FeedReader
from .module_name import extract_module_name

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    """Plain text of an optional iCalendar text property."""
    if value is None:
        return ""
    if isinstance(value, list):
        # Repeated property: keep the first occurrence
        return _text(value[0]) if value else ""
    return str(value)


def _instant(prop: Any) -> Optional[datetime]:
    """UTC instant of a DTSTART/DTEND property, or None if unusable."""
    if prop is None:
        return None
    try:
        value = prop.dt
    except (AttributeError, BrokenCalendarProperty, ValueError):
        # Present but unparsable, e.g. DTEND:notadate
        return None
    return to_utc(value)


class ICSFeedReader(FeedReader):
    """Read calendar feeds published as iCalendar documents over HTTP(S)."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        user_agent: str = "CalPlanner/1.0",
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the feed reader.

        Args:
            timeout: Request timeout in seconds (None waits indefinitely)
            user_agent: User-Agent header sent with feed requests
            session: Optional requests session to reuse connections
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session or requests.Session()

    def fetch(self, url: str) -> str:
        """Download the feed; any transport error or non-2xx status is fatal."""
        logger.info(f"Fetching calendar feed {url}")
        try:
            response = self.session.get(
                url,
                timeout=self.timeout,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/calendar",
                },
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise FeedUnavailable(f"Failed to fetch calendar feed {url}: {e}") from e

        response.encoding = "utf-8"
        return response.text

    def parse(self, document: str) -> Calendar:
        """Decode the document; an undecodable feed is unusable."""
        try:
            return Calendar.from_ical(document)
        except ValueError as e:
            raise FeedUnavailable(f"Failed to decode calendar feed: {e}") from e

    def iter_entries(self, document: str) -> Iterator[ParsedEntry]:
        """Yield one entry per VEVENT that has both a start and an end."""
        calendar = self.parse(document)

        kept = 0
        discarded = 0
        for component in calendar.walk("VEVENT"):
            start = _instant(component.get("DTSTART"))
            end = _instant(component.get("DTEND"))
            if start is None or end is None:
                discarded += 1
                continue

            summary = _text(component.get("SUMMARY"))
            module_name = extract_module_name(summary)
            external_id = _text(component.get("UID")).strip()
            if not external_id:
                external_id = f"{module_name}-{format_iso_utc(start)}"

            kept += 1
            yield ParsedEntry(
                module_name=module_name,
                title=summary if summary.strip() else module_name,
                description=_text(component.get("DESCRIPTION")),
                location=_text(component.get("LOCATION")),
                start=start,
                end=end,
                external_id=external_id,
            )

        logger.info(f"Decoded {kept} feed entries ({discarded} without start/end discarded)")
