"""Selection modes deciding the visibility of newly discovered modules."""

from enum import Enum


class SelectionMode(str, Enum):
    """Per-calendar policy for modules that appear in the feed for the first time."""

    INCLUSIVE = "inclusive"  # new modules start visible
    EXCLUSIVE = "exclusive"  # new modules start hidden

    @classmethod
    def from_flag(cls, inclusive: bool) -> "SelectionMode":
        """Map the stored calendar ``type`` flag to a mode."""
        return cls.INCLUSIVE if inclusive else cls.EXCLUSIVE

    @property
    def default_visibility(self) -> bool:
        return self is SelectionMode.INCLUSIVE
