"""Blocking wrappers around the external commands a workspace needs.

Every call runs synchronously with an argument list (no shell).  A missing
executable, any other start‑up ``OSError`` or a non‑zero exit is turned
into an :class:`~workspace_assistant.exceptions.ExternalCommandError`; nothing that
was created before the failure is cleaned up.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path

from .exceptions import ExternalCommandError

__all__ = ["run_command", "check_python", "start_project", "start_app", "create_venv", "install_requirements",
        "venv_python", "venv_pip", ]

log = logging.getLogger(__name__)


def run_command(args: Sequence[str], cwd: Path | str | None = None) -> str:
    """Run *args* in *cwd* and return its standard output."""
    args = [str(a) for a in args]
    log.debug("Running %s (cwd=%s)", " ".join(args), cwd)
    try:
        completed = subprocess.run(
                args, cwd = None if cwd is None else str(cwd), capture_output = True, text = True, check = True, )
    except FileNotFoundError as exc:
        if cwd is not None and not Path(cwd).is_dir():
            raise ExternalCommandError(
                    f"Working directory {cwd!s} does not exist for '{args[0]}'", command = args, ) from exc
        raise ExternalCommandError(
                f"Command not found: {args[0]}", command = args, ) from exc
    except OSError as exc:
        raise ExternalCommandError(f"Cannot run {args[0]}: {exc}", command = args, ) from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        log.error("%s exited with %s: %s", args[0], exc.returncode, stderr)
        raise ExternalCommandError(
                f"'{' '.join(args)}' failed with exit code {exc.returncode}", command = args,
                returncode = exc.returncode, stderr = stderr, ) from exc
    return completed.stdout


def check_python(python: str) -> str:
    """Return the interpreter's version banner, e.g. ``"Python 3.11.4"``."""
    try:
        output = run_command([python, "--version"])
    except ExternalCommandError as exc:
        if exc.returncode is None and not isinstance(exc.__cause__, FileNotFoundError):
            raise
        raise ExternalCommandError(
                f"Python ('{python}') is not installed or not on PATH", command = exc.command,
                returncode = exc.returncode, stderr = exc.stderr, ) from exc
    return output.strip()


def start_project(django_admin: str, project_name: str, base_dir: Path | str) -> Path:
    run_command([django_admin, "startproject", project_name], cwd = base_dir)
    return Path(base_dir) / project_name


def start_app(python: str, app_name: str, project_dir: Path | str) -> Path:
    run_command([python, "manage.py", "startapp", app_name], cwd = project_dir)
    return Path(project_dir) / app_name


def _venv_bin(project_dir: Path | str, venv_dir: str) -> Path:
    return Path(project_dir) / venv_dir / ("Scripts" if os.name == "nt" else "bin")


def venv_python(project_dir: Path | str, venv_dir: str = "venv") -> Path:
    return _venv_bin(project_dir, venv_dir) / ("python.exe" if os.name == "nt" else "python")


def venv_pip(project_dir: Path | str, venv_dir: str = "venv") -> Path:
    return _venv_bin(project_dir, venv_dir) / ("pip.exe" if os.name == "nt" else "pip")


def create_venv(python: str, project_dir: Path | str, venv_dir: str = "venv") -> Path:
    run_command([python, "-m", "venv", venv_dir], cwd = project_dir)
    return Path(project_dir) / venv_dir


def install_requirements(project_dir: Path | str, manifest: str = "requirements.txt", venv_dir: str = "venv") -> None:
    """Install *manifest* into the project's virtual environment."""
    run_command([str(venv_pip(project_dir, venv_dir)), "install", "-r", manifest], cwd = project_dir)
