"""Calendar and module models."""

import re
from datetime import datetime
from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
MIN_LABEL_LENGTH = 2


def _check_color(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not COLOR_PATTERN.match(value):
        raise ValueError("color must be a hex color like #4c6ef5")
    return value


def _clean_label(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) < MIN_LABEL_LENGTH:
        raise ValueError(f"label must be at least {MIN_LABEL_LENGTH} characters")
    return value


class CalendarInfo(BaseModel):
    """Stored calendar subscription."""

    calendar_id: int
    project_id: int
    url: str
    type: bool  # True = inclusive, False = exclusive
    label: Optional[str] = None
    color: str
    last_synced: Optional[datetime] = None
    created_at: Optional[datetime] = None
    module_count: Optional[int] = None

    model_config = {"frozen": True}


class ModuleInfo(BaseModel):
    """Stored module of a calendar."""

    module_id: int
    calendar_id: int
    name: str
    is_selected: bool

    model_config = {"frozen": True}


class CalendarCreate(BaseModel):
    """Payload for subscribing a project to a new feed."""

    url: str
    type: bool = True
    label: Optional[str] = None
    color: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("url must be an http(s) URL")
        return value

    @field_validator("label", mode="before")
    @classmethod
    def _check_label(cls, value: Any) -> Optional[str]:
        return _clean_label(value)

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: Optional[str]) -> Optional[str]:
        return _check_color(value)


class CalendarUpdate(BaseModel):
    """
    Partial update of a calendar's details.

    Only fields explicitly present in the payload are applied; an explicit
    ``label=None`` clears the label and an explicit empty color resets it.
    """

    label: Optional[str] = None
    type: Optional[bool] = None
    color: Optional[str] = None

    @field_validator("label", mode="before")
    @classmethod
    def _check_label(cls, value: Any) -> Optional[str]:
        return _clean_label(value)

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: Optional[str]) -> Optional[str]:
        return _check_color(value)
