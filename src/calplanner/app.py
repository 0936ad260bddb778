"""Wiring of the storage, sync engine and services."""

from typing import Optional

from .config import AppConfig
from .readers.base import FeedReader
from .readers.ics_reader import ICSFeedReader
from .services.calendars import CalendarService
from .services.modules import ModuleService
from .services.projects import ProjectService
from .services.schedule import SelectionFilter
from .storage.database import Database
from .sync.engine import ReconciliationEngine
from .writers.base import FeedWriter
from .writers.ics_writer import ICSFeedWriter


class Planner:
    """All CalPlanner services sharing one database."""

    def __init__(
        self,
        database: Database,
        reader: FeedReader,
        writer: FeedWriter,
        default_color: str,
    ):
        self.database = database
        self.engine = ReconciliationEngine(database, reader)
        self.calendars = CalendarService(database, self.engine, default_color=default_color)
        self.modules = ModuleService(database)
        self.schedule = SelectionFilter(database)
        self.projects = ProjectService(
            database,
            calendars=self.calendars,
            modules=self.modules,
            selection=self.schedule,
            writer=writer,
        )
        self.default_color = default_color

    @classmethod
    def from_config(
        cls,
        app_config: AppConfig,
        reader: Optional[FeedReader] = None,
        migrate: bool = True,
    ) -> "Planner":
        """
        Build the services described by the application settings.

        Args:
            app_config: Application settings
            reader: Feed reader override (defaults to an ICSFeedReader)
            migrate: Run the startup migration

        Raises:
            ConfigurationError: If the database URL cannot be used
        """
        database = Database(app_config.database_url, echo=app_config.database_echo)
        if migrate:
            database.migrate(default_color=app_config.default_color)
        return cls(
            database,
            reader=reader
            or ICSFeedReader(
                timeout=app_config.feed_timeout,
                user_agent=app_config.feed_user_agent,
            ),
            writer=ICSFeedWriter(product_id=app_config.product_id),
            default_color=app_config.default_color,
        )
