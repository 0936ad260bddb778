"""Feed and entry builders shared by the tests."""

from datetime import datetime
from typing import Optional

import pytz

from calplanner.models.event import ParsedEntry

FEED_URL = "https://example.com/feeds/timetable.ics"


def utc(year, month, day, hour=0, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=pytz.utc)


def vevent(
    summary: Optional[str] = None,
    start: Optional[str] = "20240115T080000Z",
    end: Optional[str] = "20240115T100000Z",
    uid: Optional[str] = None,
    location: Optional[str] = None,
    description: Optional[str] = None,
) -> str:
    lines = ["BEGIN:VEVENT"]
    if uid:
        lines.append(f"UID:{uid}")
    if summary is not None:
        lines.append(f"SUMMARY:{summary}")
    if start:
        lines.append(f"DTSTART:{start}")
    if end:
        lines.append(f"DTEND:{end}")
    if location:
        lines.append(f"LOCATION:{location}")
    if description:
        lines.append(f"DESCRIPTION:{description}")
    lines.append("END:VEVENT")
    return "\r\n".join(lines)


def ics_document(*events: str) -> str:
    lines = ["BEGIN:VCALENDAR", "VERSION:2.0", "PRODID:-//University//Timetable//EN"]
    lines.extend(events)
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"


def entry(module_name, title=None, start=None, end=None, uid=None, **kwargs) -> ParsedEntry:
    start = start or utc(2024, 1, 15, 8)
    end = end or utc(2024, 1, 15, 10)
    return ParsedEntry(
        module_name=module_name,
        title=title or module_name,
        start=start,
        end=end,
        external_id=uid or f"{module_name}-{start.isoformat()}",
        **kwargs,
    )
