"""Relational schema for projects, calendars, modules and events."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.types import TypeDecorator

from ..utils.date_utils import ensure_utc, utc_now

Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """Store instants as naive UTC, load them back as aware UTC datetimes."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return ensure_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return ensure_utc(value)


class Project(Base):
    __tablename__ = "projects"

    project_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created_at = Column(UTCDateTime, default=utc_now, nullable=False)

    calendars = relationship(
        "Calendar",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Calendar(Base):
    __tablename__ = "calendars"

    calendar_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(
        Integer,
        ForeignKey("projects.project_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url = Column(Text, nullable=False)
    # True: new modules start visible (inclusive), False: hidden (exclusive)
    type = Column(Boolean, nullable=False, default=True)
    label = Column(String(255))
    color = Column(String(7))
    last_synced = Column(UTCDateTime)
    created_at = Column(UTCDateTime, default=utc_now, nullable=False)

    project = relationship("Project", back_populates="calendars")
    modules = relationship(
        "Module",
        back_populates="calendar",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Module(Base):
    __tablename__ = "modules"

    module_id = Column(Integer, primary_key=True, autoincrement=True)
    calendar_id = Column(
        Integer,
        ForeignKey("calendars.calendar_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    is_selected = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, default=utc_now, nullable=False)

    calendar = relationship("Calendar", back_populates="modules")
    events = relationship(
        "Event",
        back_populates="module",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Event(Base):
    __tablename__ = "events"

    event_id = Column(Integer, primary_key=True, autoincrement=True)
    module_id = Column(
        Integer,
        ForeignKey("modules.module_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    external_id = Column(String(512))
    title = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    location = Column(Text, nullable=False, default="")
    start_time = Column(UTCDateTime, nullable=False, index=True)
    end_time = Column(UTCDateTime, nullable=False)

    module = relationship("Module", back_populates="events")
