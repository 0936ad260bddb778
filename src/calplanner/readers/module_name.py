"""Module label extraction from feed entry summaries."""

import re

FALLBACK_MODULE_NAME = "Module"

# Checked in this order; the first one present in the summary wins
SEPARATORS = (" - ", "-", ":", "|")

_WHITESPACE = re.compile(r"\s+")


def clean_summary(summary: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE.sub(" ", summary or "").strip()


def extract_module_name(summary: str) -> str:
    """
    Derive a module label from an entry summary.

    "Algorithmique - TD groupe 3" gives "Algorithmique"; a blank summary
    gives "Module"; a summary without separator is returned cleaned.

    Args:
        summary: Free-text summary of a feed entry

    Returns:
        Module label
    """
    cleaned = clean_summary(summary)
    if not cleaned:
        return FALLBACK_MODULE_NAME
    for separator in SEPARATORS:
        if separator in cleaned:
            return cleaned.split(separator, 1)[0].strip()
    return cleaned


def module_key(name: str) -> str:
    """Identity key of a module name: trimmed and case-insensitive."""
    return name.strip().lower()
