"""Feed entry and scheduled event models."""

from datetime import datetime

from pydantic import BaseModel, Field


class ParsedEntry(BaseModel):
    """One timed entry decoded from a calendar feed."""

    module_name: str
    title: str
    description: str = ""
    location: str = ""
    start: datetime
    end: datetime
    external_id: str

    model_config = {"frozen": True}


class ParsedFeed(BaseModel):
    """
    Decoded feed snapshot.

    ``module_names`` holds one candidate per entry, in entry order, taken from
    the same extraction as the entry's own ``module_name``.
    """

    module_names: list[str] = Field(default_factory=list)
    entries: list[ParsedEntry] = Field(default_factory=list)

    @classmethod
    def from_entries(cls, entries: list[ParsedEntry]) -> "ParsedFeed":
        return cls(
            module_names=[entry.module_name for entry in entries],
            entries=list(entries),
        )


class ScheduledEvent(BaseModel):
    """Stored event as shown in a project's schedule."""

    event_id: int
    calendar_id: int
    module_id: int
    module_name: str
    title: str
    description: str = ""
    location: str = ""
    start: datetime
    end: datetime
