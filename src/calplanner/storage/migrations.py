"""Idempotent schema migration, run once at process startup."""

import logging

from sqlalchemy import inspect, text, update
from sqlalchemy.engine import Engine

from ..config import DEFAULT_COLOR
from .tables import Base, Calendar

logger = logging.getLogger(__name__)


def run_migrations(engine: Engine, default_color: str = DEFAULT_COLOR) -> None:
    """
    Bring the database schema up to date.

    Creates missing tables, adds the ``calendars.color`` column to databases
    created before calendars had a color, and backfills missing colors.
    Safe to run on every start.

    Args:
        engine: Database engine
        default_color: Color given to calendars that have none
    """
    Base.metadata.create_all(engine)

    columns = {column["name"] for column in inspect(engine).get_columns("calendars")}
    with engine.begin() as connection:
        if "color" not in columns:
            logger.info("Adding calendars.color column")
            connection.execute(text("ALTER TABLE calendars ADD COLUMN color VARCHAR(7)"))

        result = connection.execute(
            update(Calendar.__table__)
            .where(Calendar.__table__.c.color.is_(None))
            .values(color=default_color)
        )
        if result.rowcount:
            logger.info(f"Backfilled color on {result.rowcount} calendars")
