"""
Configuration and logging helpers for the workspace assistant.

The defaults ship as ``workspace_assistant/data/defaults.json``; a user
file passed with ``--config`` replaces any of its keys.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .exceptions import WorkspaceError

log = logging.getLogger(__name__)

DEFAULTS_FILE = Path(__file__).parent / "data" / "defaults.json"
PYTHON_ENV_VAR = "WORKSPACE_ASSISTANT_PYTHON"


class AssistantConfig(BaseModel):
    """Commands and fixed documents used while setting up a workspace."""

    python: str = "python"
    django_admin: str = "django-admin"
    venv_dir: str = "venv"
    requirements: list[str] = Field(default_factory = lambda: ["Django==3.2.6", "djangorestframework==3.12.4"])
    editor_settings: dict[str, Any] = Field(
            default_factory = lambda: {"python.pythonPath": "venv/bin/python", "python.linting.enabled": True,
                    "python.linting.pylintEnabled": True, "python.formatting.autopep8Path": "autopep8", })


def _read_json(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding = "utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise WorkspaceError(f"Cannot read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise WorkspaceError(f"Config file {path} must contain a JSON object")
    return data


def load_config(config_path: str | Path | None = None) -> AssistantConfig:
    """Load the configuration, tolerant to a missing defaults file.

    Parameters
    ----------
    config_path:
        Optional user JSON file.  If the path points to a directory, the
        function will look for ``workspace_assistant.json`` inside.

    Returns
    -------
    AssistantConfig
        The validated configuration.  ``$WORKSPACE_ASSISTANT_PYTHON``, when
        set, overrides the interpreter.
    """
    data: dict[str, Any] = {}
    if DEFAULTS_FILE.exists():
        data.update(_read_json(DEFAULTS_FILE))

    if config_path is not None:
        cfg_file = Path(config_path).expanduser()
        if cfg_file.is_dir():
            cfg_file = cfg_file / "workspace_assistant.json"
        if not cfg_file.exists():
            raise WorkspaceError(f"Config file not found: {cfg_file}")
        data.update(_read_json(cfg_file))
        log.debug("Loaded config overrides from %s", cfg_file)

    if os.environ.get(PYTHON_ENV_VAR):
        data["python"] = os.environ[PYTHON_ENV_VAR]

    try:
        return AssistantConfig(**data)
    except ValidationError as exc:
        raise WorkspaceError(f"Invalid configuration: {exc}") from exc


def setup_logging(debug: bool) -> None:
    """
    Setup logging for the workspace assistant.

    The logging level is set to `DEBUG` if the `debug` parameter is `True`,
    otherwise it is set to `WARNING` so that only user‑facing messages reach
    the terminal.
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
            level = level, format = "[%(asctime)s] %(levelname)s %(name)s: %(message)s", datefmt = "%H:%M:%S", )
