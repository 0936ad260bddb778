"""Shared fixtures for CalPlanner tests."""

from typing import Optional

import pytest
import responses

from calplanner.app import Planner
from calplanner.config import DEFAULT_COLOR
from calplanner.readers.ics_reader import ICSFeedReader
from calplanner.storage.database import Database
from calplanner.storage.repository import CalendarStore
from calplanner.writers.ics_writer import ICSFeedWriter
from helpers import FEED_URL


@pytest.fixture
def database(tmp_path):
    """Migrated SQLite database in a temporary file."""
    db = Database(f"sqlite:///{tmp_path / 'calplanner.db'}")
    db.migrate()
    yield db
    db.dispose()


@pytest.fixture
def reader():
    return ICSFeedReader(timeout=5)


@pytest.fixture
def planner(database, reader):
    return Planner(database, reader=reader, writer=ICSFeedWriter(), default_color=DEFAULT_COLOR)


@pytest.fixture
def mocked_responses():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def serve_feed(mocked_responses):
    """Serve a feed document at a URL, replacing whatever was served before."""

    def _serve(body: str, url: str = FEED_URL, status: int = 200):
        mocked_responses.upsert(
            responses.GET, url, body=body, status=status, content_type="text/calendar"
        )

    return _serve


@pytest.fixture
def make_calendar(database):
    """Insert a project and a calendar row without synchronizing it."""

    def _make(inclusive: bool = True, url: str = FEED_URL, project_id: Optional[int] = None):
        with database.session_scope() as session:
            store = CalendarStore(session)
            if project_id is None:
                project_id = store.create_project("Semestre 1")
            calendar = store.add_calendar(
                project_id, url=url, inclusive=inclusive, label=None, color=DEFAULT_COLOR
            )
            return project_id, calendar.calendar_id

    return _make
