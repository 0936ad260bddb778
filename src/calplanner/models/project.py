"""Project configuration models used for export and import."""

from pydantic import BaseModel, Field, field_validator

from .calendar import CalendarCreate

CONFIG_VERSION = 1


class ModuleSelection(BaseModel):
    """Saved visibility of one module, matched by name on import."""

    name: str
    is_selected: bool


class CalendarConfig(CalendarCreate):
    """Calendar subscription with its saved module selections."""

    modules: list[ModuleSelection] = Field(default_factory=list)


class ProjectConfig(BaseModel):
    """Portable description of a project and its calendars."""

    version: int = CONFIG_VERSION
    name: str
    calendars: list[CalendarConfig] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("project name is required")
        return value
