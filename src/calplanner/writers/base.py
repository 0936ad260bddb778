"""Abstract base class for calendar feed writers."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from ..models.event import ScheduledEvent


class FeedWriter(ABC):
    """Abstract base class for calendar feed writers."""

    @abstractmethod
    def render(self, events: Iterable[ScheduledEvent]) -> str:
        """
        Serialize events into a feed document.

        Args:
            events: Events to export, already filtered

        Returns:
            Feed document text
        """

    def write(self, events: Iterable[ScheduledEvent], path: Path) -> int:
        """
        Serialize events into a file.

        Args:
            events: Events to export
            path: Destination file

        Returns:
            Number of bytes written
        """
        payload = self.render(events).encode("utf-8")
        path.write_bytes(payload)
        return len(payload)
