"""Shared fixtures: a fake Django toolchain standing in for ``subprocess.run``.

The fake understands the handful of commands the assistant issues and writes
the same files the real tools would (``manage.py``, ``settings.py``,
``urls.py``, an app package, a venv interpreter), so the pipeline can be
exercised end to end without Django installed.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from workspace_assistant.config import PYTHON_ENV_VAR, AssistantConfig
from workspace_assistant.runner import venv_pip, venv_python

SETTINGS_TEMPLATE = '''"""
Django settings for {name} project.

Generated by 'django-admin startproject' using Django 3.2.6.
"""

from pathlib import Path

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = 'django-insecure-test-key'

DEBUG = True

ALLOWED_HOSTS = []

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
]

ROOT_URLCONF = '{name}.urls'

# Static files (CSS, JavaScript, Images)
STATIC_URL = '/static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
'''

URLS_TEMPLATE = '''"""{name} URL Configuration

The `urlpatterns` list routes URLs to views.
Including another URLconf
    1. Import the include() function: from django.urls import include, path
    2. Add a URL to urlpatterns:  path('blog/', include('blog.urls'))
"""
from django.contrib import admin
from django.urls import path

urlpatterns = [
    path('admin/', admin.site.urls),
]
'''


class FakeToolchain:
    """Callable replacement for :func:`subprocess.run`."""

    def __init__(self):
        self.calls: list[tuple[list[str], Path | None]] = []
        self.fail_on: str | None = None
        self.missing: set[str] = set()
        self.seen_requirements: str | None = None

    def commands(self) -> list[list[str]]:
        return [args for args, _ in self.calls]

    def __call__(self, args, cwd = None, capture_output = False, text = False, check = False):
        args = [str(a) for a in args]
        cwd = Path(cwd) if cwd else None
        self.calls.append((args, cwd))
        if args[0] in self.missing:
            raise FileNotFoundError(2, "No such file or directory", args[0])
        if self.fail_on and self.fail_on in args:
            raise subprocess.CalledProcessError(1, args, output = "", stderr = f"{self.fail_on} blew up")

        stdout = ""
        if args[1:] == ["--version"]:
            stdout = "Python 3.11.4\n"
        elif args[1:2] == ["startproject"]:
            self._start_project(cwd, args[2])
        elif args[1:3] == ["manage.py", "startapp"]:
            self._start_app(cwd, args[3])
        elif args[1:3] == ["-m", "venv"]:
            for exe in (venv_python(cwd, args[3]), venv_pip(cwd, args[3])):
                exe.parent.mkdir(parents = True, exist_ok = True)
                exe.write_text("")
        elif args[1:3] == ["install", "-r"]:
            manifest = cwd / args[3]
            self.seen_requirements = manifest.read_text() if manifest.exists() else None
        return subprocess.CompletedProcess(args, 0, stdout = stdout, stderr = "")

    @staticmethod
    def _start_project(base: Path, name: str) -> None:
        root = base / name
        if root.exists():
            raise subprocess.CalledProcessError(1, ["django-admin"], stderr = f"'{root}' already exists")
        package = root / name
        package.mkdir(parents = True)
        (root / "manage.py").write_text("#!/usr/bin/env python\n")
        (package / "__init__.py").write_text("")
        (package / "settings.py").write_text(SETTINGS_TEMPLATE.format(name = name))
        (package / "urls.py").write_text(URLS_TEMPLATE.format(name = name))

    @staticmethod
    def _start_app(project_dir: Path, name: str) -> None:
        app = project_dir / name
        app.mkdir()
        for module in ("__init__.py", "admin.py", "apps.py", "models.py", "tests.py"):
            (app / module).write_text("")
        (app / "views.py").write_text("from django.shortcuts import render\n\n# Create your views here.\n")


@pytest.fixture(autouse = True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(PYTHON_ENV_VAR, raising = False)


@pytest.fixture
def toolchain(monkeypatch: pytest.MonkeyPatch) -> FakeToolchain:
    fake = FakeToolchain()
    monkeypatch.setattr("workspace_assistant.runner.subprocess.run", fake)
    return fake


@pytest.fixture
def config() -> AssistantConfig:
    return AssistantConfig()


@pytest.fixture
def django_project(tmp_path: Path) -> Path:
    """A freshly ``startproject``‑ed tree named ``blog``; returns its inner package."""
    FakeToolchain._start_project(tmp_path, "blog")
    return tmp_path / "blog" / "blog"
