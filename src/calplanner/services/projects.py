"""Project-level operations: schedule export and configuration transfer."""

import logging
from typing import Any, Union

import yaml

from ..models.project import CalendarConfig, ModuleSelection, ProjectConfig
from ..storage.database import Database
from ..storage.repository import CalendarStore
from ..utils.exceptions import CalPlannerError, MalformedInput, NotFound
from ..utils.validation import parse_payload
from ..writers.base import FeedWriter
from .calendars import CalendarService
from .modules import ModuleService
from .schedule import SelectionFilter

logger = logging.getLogger(__name__)


class ProjectService:
    """Create projects, export their schedule, and move their configuration around."""

    def __init__(
        self,
        database: Database,
        calendars: CalendarService,
        modules: ModuleService,
        selection: SelectionFilter,
        writer: FeedWriter,
    ):
        self.database = database
        self.calendars = calendars
        self.modules = modules
        self.selection = selection
        self.writer = writer

    def create(self, name: str) -> int:
        name = (name or "").strip()
        if not name:
            raise MalformedInput("Project name is required")
        with self.database.session_scope() as session:
            project_id = CalendarStore(session).create_project(name)
        logger.info(f"Created project {project_id} ({name})")
        return project_id

    def export_ics(self, project_id: int) -> str:
        """Render every visible event of the project as an iCalendar document."""
        return self.writer.render(self.selection.list_events(project_id))

    @staticmethod
    def ics_filename(project_id: int) -> str:
        return f"calplanner-project-{project_id}.ics"

    def export_config(self, project_id: int) -> ProjectConfig:
        """
        Describe a project so it can be recreated elsewhere.

        Args:
            project_id: Project to export

        Returns:
            ProjectConfig with calendars (oldest first) and module selections
        """
        with self.database.session_scope() as session:
            store = CalendarStore(session)
            project = store.get_project(project_id)
            if project is None:
                raise NotFound(f"Project {project_id} not found")

            calendars = sorted(
                (row for row, _ in store.list_calendars(project_id)),
                key=lambda row: row.calendar_id,
            )
            return ProjectConfig(
                name=project.name,
                calendars=[
                    CalendarConfig(
                        url=row.url,
                        type=bool(row.type),
                        label=row.label,
                        color=row.color,
                        modules=[
                            ModuleSelection(name=module.name, is_selected=bool(module.is_selected))
                            for module in store.list_modules(row.calendar_id)
                        ],
                    )
                    for row in calendars
                ],
            )

    def import_config(self, payload: Union[ProjectConfig, dict[str, Any], str]) -> int:
        """
        Recreate a project from an exported configuration.

        Text payloads may be JSON or YAML. The payload is fully validated
        before anything is written. Each calendar is created (and therefore
        synchronized) in turn and its saved module selections reapplied; if
        any calendar fails, the new project is deleted again.

        Args:
            payload: ProjectConfig, mapping, or JSON/YAML text

        Returns:
            Id of the new project

        Raises:
            MalformedInput: If the payload is not a valid configuration
            FeedUnavailable: If one of the feeds cannot be fetched
        """
        if isinstance(payload, str):
            try:
                payload = yaml.safe_load(payload)
            except yaml.YAMLError as e:
                raise MalformedInput(f"Configuration is not valid JSON or YAML: {e}") from e
        config = parse_payload(ProjectConfig, payload)

        project_id = self.create(config.name)
        try:
            for calendar_config in config.calendars:
                calendar = self.calendars.create(project_id, calendar_config)
                applied = self.modules.apply_selections(calendar.calendar_id, calendar_config.modules)
                logger.info(
                    f"Imported calendar {calendar.calendar_id} ({applied} module selections restored)"
                )
        except Exception:
            logger.warning(f"Import of project {config.name!r} failed, removing project {project_id}")
            try:
                with self.database.session_scope() as session:
                    CalendarStore(session).delete_project(project_id)
            except CalPlannerError as cleanup_error:
                logger.error(f"Could not remove project {project_id}: {cleanup_error}")
            raise

        return project_id
