"""Tests for the command-line entry point."""
import json
import logging

import pytest

import calplanner.__main__ as cli
from calplanner.config import config
from calplanner.utils.logging import LOGGER_NAME
from helpers import FEED_URL, ics_document, vevent


@pytest.fixture(autouse=True)
def app_config(tmp_path, monkeypatch):
    settings = config.model_copy(
        update={"database_url": f"sqlite:///{tmp_path / 'cli.db'}", "feed_timeout": 5}
    )
    monkeypatch.setattr(cli, "config", settings)
    yield settings
    # main() binds a console handler to the captured stderr
    logging.getLogger(LOGGER_NAME).handlers.clear()


@pytest.fixture
def timetable(serve_feed):
    serve_feed(
        ics_document(
            vevent(summary="Maths - CM", uid="1"),
            vevent(summary="Anglais", uid="2", start="20240116T080000Z", end="20240116T100000Z"),
        )
    )


def run(capsys, *argv):
    code = cli.main(list(argv))
    return code, capsys.readouterr().out


def test_no_action_prints_help(capsys):
    code, out = run(capsys)

    assert code == 0
    assert "usage:" in out


def test_full_workflow(capsys, timetable, tmp_path):
    assert run(capsys, "--create-project", "Semestre 1") == (0, "Created project 1\n")

    code, out = run(capsys, "--add-calendar", FEED_URL, "--project", "1", "--label", "Licence 3")
    assert code == 0
    assert out == "Created calendar 1 (2 modules)\n"

    code, out = run(capsys, "--list-modules", "1")
    assert "[x] Anglais" in out
    assert "[x] Maths" in out

    code, out = run(capsys, "--deselect", "1")
    assert code == 0
    assert "is now hidden" in out

    code, out = run(capsys, "--events", "1", "--view-start", "2024-01-01")
    assert code == 0
    assert "Found 1 event(s):" in out

    output = tmp_path / "export.ics"
    code, _ = run(capsys, "--export-ics", "1", "--output", str(output))
    assert code == 0
    assert output.read_text(encoding="utf-8").count("BEGIN:VEVENT") == 1

    code, out = run(capsys, "--export-config", "1")
    assert code == 0
    exported = json.loads(out)
    assert exported["calendars"][0]["label"] == "Licence 3"

    code, out = run(capsys, "--sync", "1")
    assert code == 0
    assert "Modules created: 0" in out


def test_import_config(capsys, timetable, tmp_path):
    path = tmp_path / "project.yaml"
    path.write_text(f"name: Semestre 2\ncalendars:\n  - url: {FEED_URL}\n    type: false\n", encoding="utf-8")

    code, out = run(capsys, "--import-config", str(path))

    assert code == 0
    assert out == "Imported project 1\n"


def test_add_calendar_requires_project(capsys):
    code, _ = run(capsys, "--add-calendar", FEED_URL)

    assert code == 1


def test_domain_errors_exit_with_failure(capsys):
    code, _ = run(capsys, "--list-modules", "99")

    assert code == 1


def test_failing_project_sync_exits_with_failure(capsys, timetable, serve_feed):
    run(capsys, "--create-project", "Semestre 1")
    run(capsys, "--add-calendar", FEED_URL, "--project", "1")
    serve_feed("Gone", status=404)

    code, out = run(capsys, "--sync-project", "1")

    assert code == 1
    assert "❌ Calendar 1" in out
