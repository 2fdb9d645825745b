"""Interactive collection of the project and app names.

Validation happens inline: a rejected answer prints the reason and asks
again.  Dismissing a prompt (Ctrl‑C, EOF) raises :class:`typer.Abort`
before anything on disk has been touched.
"""

from __future__ import annotations

import keyword
import re
from pathlib import Path

import typer

from .exceptions import NameValidationError

__all__ = ["APP_NAME_PATTERN", "validate_project_name", "validate_app_name", "collect_names", "collect_options", ]

APP_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]*$")


def validate_project_name(value: str, base_dir: Path | str, *, must_exist: bool = False) -> str:
    """Return *value* if it can name a project directory in *base_dir*.

    With ``must_exist=False`` (a new project) any existing entry with that
    name is a collision.  With ``must_exist=True`` (reconfiguring) the
    project has to be there already.
    """
    value = value.strip()
    if not value:
        raise NameValidationError("Project name is required")
    if not value.isidentifier() or keyword.iskeyword(value):
        raise NameValidationError(f"'{value}' is not a valid Python identifier")
    target = Path(base_dir) / value
    if must_exist and not (target / "manage.py").is_file():
        raise NameValidationError(f"No Django project named '{value}' in {base_dir}")
    if not must_exist and (target.exists() or target.is_symlink()):
        raise NameValidationError(f"Project '{value}' already exists")
    return value


def validate_app_name(value: str) -> str:
    """Return *value*; the empty string means no app."""
    value = value.strip()
    if not APP_NAME_PATTERN.match(value):
        raise NameValidationError("App name should contain only letters, numbers, or underscores")
    return value


def _as_param_check(check):
    def proc(value: str) -> str:
        try:
            return check(value)
        except NameValidationError as exc:
            raise typer.BadParameter(str(exc)) from exc

    return proc


def collect_names(base_dir: Path | str, *, existing: bool = False) -> tuple[str, str]:
    """Ask for ``(project_name, app_name)``; the app name may be empty."""
    project = typer.prompt(
            "Django project name", default = "", show_default = False,
            value_proc = _as_param_check(lambda v: validate_project_name(v, base_dir, must_exist = existing)), )
    app = typer.prompt(
            "Django app name (leave empty for none)", default = "", show_default = False,
            value_proc = _as_param_check(validate_app_name), )
    return project, app


def collect_options(app_name: str) -> tuple[bool, bool]:
    """Ask which optional steps to run: ``(configure_static, add_app_files)``."""
    configure_static = typer.confirm("Add static files configuration to settings.py?", default = True)
    add_app_files = False
    if app_name:
        add_app_files = typer.confirm(f"Add templates and URL routes for '{app_name}'?", default = True)
    return configure_static, add_app_files
