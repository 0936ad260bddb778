"""Unit tests for the startup migration."""
from sqlalchemy import inspect, text

from calplanner.services.calendars import CalendarService
from calplanner.storage.database import Database
from calplanner.sync.engine import ReconciliationEngine

LEGACY_SCHEMA = [
    "CREATE TABLE projects (project_id INTEGER PRIMARY KEY, name VARCHAR(255) NOT NULL, "
    "created_at DATETIME NOT NULL)",
    "CREATE TABLE calendars (calendar_id INTEGER PRIMARY KEY, project_id INTEGER NOT NULL "
    "REFERENCES projects (project_id) ON DELETE CASCADE, url TEXT NOT NULL, type BOOLEAN NOT NULL, "
    "label VARCHAR(255), last_synced DATETIME, created_at DATETIME NOT NULL)",
    "INSERT INTO projects VALUES (1, 'Ancien projet', '2023-09-01 08:00:00')",
    "INSERT INTO calendars VALUES (1, 1, 'https://example.com/a.ics', 1, NULL, NULL, "
    "'2023-09-01 08:00:00')",
]


def legacy_database(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'legacy.db'}")
    with database.engine.begin() as connection:
        for statement in LEGACY_SCHEMA:
            connection.execute(text(statement))
    return database


def test_fresh_database_gets_all_tables(database):
    assert set(inspect(database.engine).get_table_names()) == {
        "projects",
        "calendars",
        "modules",
        "events",
    }


def test_color_column_is_added_and_backfilled(tmp_path):
    database = legacy_database(tmp_path)

    database.migrate(default_color="#112233")

    columns = {c["name"] for c in inspect(database.engine).get_columns("calendars")}
    assert "color" in columns
    with database.engine.connect() as connection:
        assert connection.execute(text("SELECT color FROM calendars")).scalar_one() == "#112233"
    database.dispose()


def test_migration_is_idempotent(tmp_path):
    database = legacy_database(tmp_path)

    database.migrate(default_color="#112233")
    database.migrate(default_color="#445566")

    with database.engine.connect() as connection:
        assert connection.execute(text("SELECT color FROM calendars")).scalar_one() == "#112233"
    database.dispose()


def test_migrated_rows_are_readable(tmp_path):
    database = legacy_database(tmp_path)
    database.migrate()

    calendars = CalendarService(database, ReconciliationEngine(database)).list_for_project(1)

    assert [(c.url, c.color, c.module_count) for c in calendars] == [
        ("https://example.com/a.ics", "#4c6ef5", 0)
    ]
    assert calendars[0].created_at.tzinfo is not None
    database.dispose()
