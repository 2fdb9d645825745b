"""Step‑by‑step setup of a Django workspace.

:class:`WorkspaceSetup` runs a fixed, linear list of steps and records each
outcome in a :class:`Transcript`.  Every step first checks whether its work
is already on disk and reports ``skipped`` if so, which makes a second run
over an existing project (``resume=True``) safe.  The first failing step
stops the run; earlier steps are not undone.
"""

from __future__ import annotations

import json
import keyword
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from .config import AssistantConfig, load_config
from .exceptions import FileCreationError, NameValidationError, WorkspaceError
from .file_generator import read_text, write_json, write_lines
from .inserter import add_list_entry, register_app_urls, write_app_templates
from .patcher import ensure_declarations
from .prompts import validate_app_name
from .runner import check_python, create_venv, install_requirements, start_app, start_project, venv_python
from .templates import STATIC_SETTINGS, STATIC_SETTINGS_HEADER

__all__ = ["SetupRequest", "StepRecord", "Transcript", "WorkspaceSetup", "setup_workspace", ]

log = logging.getLogger(__name__)

StepStatus = Literal["done", "skipped", "failed"]
StepOutcome = tuple[StepStatus, str]


class SetupRequest(BaseModel):
    """Validated input of one setup run."""

    base_dir: Path
    project: str
    app: str = ""
    configure_static: bool = True
    add_app_files: bool = True

    @field_validator("project")
    @classmethod
    def check_project(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Project name is required")
        if not value.isidentifier() or keyword.iskeyword(value):
            raise ValueError(f"'{value}' is not a valid Python identifier")
        return value

    @field_validator("app")
    @classmethod
    def check_app(cls, value: str) -> str:
        try:
            return validate_app_name(value)
        except NameValidationError as exc:
            raise ValueError(str(exc)) from exc

    @property
    def project_dir(self) -> Path:
        return self.base_dir / self.project

    @property
    def package_dir(self) -> Path:
        """The inner package holding ``settings.py`` and ``urls.py``."""
        return self.project_dir / self.project


class StepRecord(BaseModel):
    name: str
    status: StepStatus
    detail: str = ""


class Transcript(BaseModel):
    """Ordered record of the steps a run went through."""

    project_dir: Path
    steps: list[StepRecord] = Field(default_factory = list)

    def record(self, name: str, status: StepStatus, detail: str = "") -> StepRecord:
        entry = StepRecord(name = name, status = status, detail = detail)
        self.steps.append(entry)
        return entry

    @property
    def failed(self) -> bool:
        return any(step.status == "failed" for step in self.steps)

    def names(self, status: StepStatus | None = None) -> list[str]:
        return [step.name for step in self.steps if status is None or step.status == status]


class WorkspaceSetup:
    """Run the setup steps for one :class:`SetupRequest`."""

    def __init__(self, config: AssistantConfig | None = None):
        self.config = config or load_config()

    def run(self, request: SetupRequest, *, resume: bool = False) -> Transcript:
        """Execute every planned step, in order.

        Parameters
        ----------
        request:
            The validated names and optional‑step switches.
        resume:
            ``False`` for a new project: an existing entry with the project's
            name aborts the run before any command is executed.  ``True`` to
            re‑apply the steps to an existing project.
        Raises
        ------
        WorkspaceError
            On the first failing step.  ``exc.transcript`` holds the steps
            run so far, the failed one last.
        """
        project_dir = request.project_dir
        transcript = Transcript(project_dir = project_dir)
        if not resume and (project_dir.exists() or project_dir.is_symlink()):
            raise WorkspaceError(f"The project folder {request.project} already exists.", transcript)
        if resume and not (project_dir / "manage.py").is_file():
            raise WorkspaceError(f"{project_dir} is not a Django project (no manage.py).", transcript)

        for name, step in self._plan(request):
            try:
                status, detail = step(request)
            except WorkspaceError as exc:
                transcript.record(name, "failed", str(exc))
                log.error("Step %s failed: %s", name, exc)
                exc.transcript = transcript
                raise
            transcript.record(name, status, detail)
            log.info("Step %s: %s (%s)", name, status, detail)
        return transcript

    def _plan(self, request: SetupRequest) -> list[tuple[str, Callable[[SetupRequest], StepOutcome]]]:
        steps = [("check-python", self._check_python), ("start-project", self._start_project), ]
        if request.app:
            steps.append(("start-app", self._start_app))
        steps += [("write-requirements", self._write_requirements), ("create-venv", self._create_venv),
                ("install-requirements", self._install_requirements),
                ("write-editor-settings", self._write_editor_settings), ]
        if request.configure_static:
            steps.append(("configure-static", self._configure_static))
        if request.app and request.add_app_files:
            steps += [("register-app", self._register_app), ("add-app-templates", self._add_app_templates),
                    ("register-app-urls", self._register_app_urls), ]
        return steps

    # -----------------------------------------------------------------------
    # Steps
    # -----------------------------------------------------------------------

    def _check_python(self, request: SetupRequest) -> StepOutcome:
        return "done", check_python(self.config.python)

    def _start_project(self, request: SetupRequest) -> StepOutcome:
        if (request.project_dir / "manage.py").is_file():
            return "skipped", f"Django project '{request.project}' already exists"
        start_project(self.config.django_admin, request.project, request.base_dir)
        return "done", f"Django project '{request.project}' created successfully!"

    def _start_app(self, request: SetupRequest) -> StepOutcome:
        if (request.project_dir / request.app / "apps.py").is_file():
            return "skipped", f"Django app '{request.app}' already exists"
        start_app(self.config.python, request.app, request.project_dir)
        return "done", f"Django app '{request.app}' created successfully in '{request.project}'!"

    def _write_requirements(self, request: SetupRequest) -> StepOutcome:
        target = request.project_dir / "requirements.txt"
        if read_text(target) == "\n".join(self.config.requirements):
            return "skipped", "requirements.txt is up to date"
        write_lines(target, self.config.requirements)
        return "done", f"Wrote {len(self.config.requirements)} requirements"

    def _create_venv(self, request: SetupRequest) -> StepOutcome:
        if venv_python(request.project_dir, self.config.venv_dir).exists():
            return "skipped", f"Virtual environment '{self.config.venv_dir}' already exists"
        create_venv(self.config.python, request.project_dir, self.config.venv_dir)
        return "done", f"Created virtual environment '{self.config.venv_dir}'"

    def _install_requirements(self, request: SetupRequest) -> StepOutcome:
        install_requirements(request.project_dir, venv_dir = self.config.venv_dir)
        return "done", "Installed requirements.txt"

    def _write_editor_settings(self, request: SetupRequest) -> StepOutcome:
        target = request.project_dir / ".vscode" / "settings.json"
        if read_text(target) == json.dumps(self.config.editor_settings, indent = 2):
            return "skipped", ".vscode/settings.json is up to date"
        write_json(target, self.config.editor_settings)
        return "done", "Wrote .vscode/settings.json"

    def _configure_static(self, request: SetupRequest) -> StepOutcome:
        result = ensure_declarations(
                request.package_dir / "settings.py", STATIC_SETTINGS, header = STATIC_SETTINGS_HEADER)
        try:
            (request.project_dir / "static").mkdir(parents = True, exist_ok = True)
        except OSError as exc:
            raise FileCreationError(f"Failed to create static directory: {exc}") from exc
        return ("done" if result.changed else "skipped"), result.message

    def _register_app(self, request: SetupRequest) -> StepOutcome:
        result = add_list_entry(request.package_dir / "settings.py", "INSTALLED_APPS", request.app)
        return ("done" if result.changed else "skipped"), result.message

    def _add_app_templates(self, request: SetupRequest) -> StepOutcome:
        written = write_app_templates(request.project_dir, request.project, request.app)
        return "done", f"Wrote {len(written)} template files"

    def _register_app_urls(self, request: SetupRequest) -> StepOutcome:
        result = register_app_urls(request.package_dir / "urls.py", request.app)
        return ("done" if result.changed else "skipped"), result.message


def setup_workspace(
        base_dir: Path | str, project: str, app: str = "", *, configure_static: bool = True,
        add_app_files: bool = True, resume: bool = False, config: AssistantConfig | None = None, ) -> Transcript:
    """Validate the names and run :class:`WorkspaceSetup` in one call."""
    try:
        request = SetupRequest(
                base_dir = Path(base_dir).expanduser().resolve(), project = project, app = app,
                configure_static = configure_static, add_app_files = add_app_files, )
    except ValidationError as exc:
        messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in exc.errors())
        raise NameValidationError(messages) from exc
    return WorkspaceSetup(config).run(request, resume = resume)
