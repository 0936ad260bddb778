"""Abstract base class for calendar feed readers."""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from ..models.event import ParsedEntry, ParsedFeed


class FeedReader(ABC):
    """Abstract base class for calendar feed readers."""

    @abstractmethod
    def fetch(self, url: str) -> str:
        """
        Retrieve the raw feed document.

        Args:
            url: Feed URL

        Returns:
            Document text

        Raises:
            FeedUnavailable: If the feed cannot be retrieved
        """

    @abstractmethod
    def iter_entries(self, document: str) -> Iterator[ParsedEntry]:
        """
        Decode a feed document into timed entries, lazily.

        Args:
            document: Raw feed document

        Yields:
            ParsedEntry for each usable entry

        Raises:
            FeedUnavailable: If the document cannot be decoded
        """

    def read_feed(self, url: str) -> ParsedFeed:
        """Fetch a feed and decode it into a snapshot."""
        return ParsedFeed.from_entries(list(self.iter_entries(self.fetch(url))))
