"""Tests for the idempotent text patchers in ``workspace_assistant.patcher``."""

from pathlib import Path

import pytest

from workspace_assistant import patcher
from workspace_assistant.exceptions import PatchError
from workspace_assistant.patcher import append_block, declared_names, ensure_declarations
from workspace_assistant.templates import STATIC_SETTINGS, STATIC_SETTINGS_HEADER

BLOCK = "\n# feature flags\nFEATURE_X = True\n"
MARKER = "FEATURE_X"


@pytest.fixture
def target(tmp_path: Path) -> Path:
    path = tmp_path / "settings.py"
    path.write_text("DEBUG = True\n", encoding = "utf-8")
    return path


def _forbid_writes(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*args, **kwargs):
        raise AssertionError("no write expected")

    monkeypatch.setattr(patcher, "write_file", boom)


# ---------------------------------------------------------------------------
# append_block
# ---------------------------------------------------------------------------


def test_append_block_appends_once(target: Path) -> None:
    result = append_block(target, BLOCK, MARKER)
    assert result.changed
    text = target.read_text()
    assert text == "DEBUG = True\n" + BLOCK
    assert text.count(BLOCK) == 1


def test_append_block_twice_is_byte_identical(target: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    append_block(target, BLOCK, MARKER)
    once = target.read_bytes()

    _forbid_writes(monkeypatch)
    result = append_block(target, BLOCK, MARKER)

    assert not result.changed
    assert "already configured" in result.message
    assert target.read_bytes() == once


def test_append_block_marker_in_comment_counts_as_applied(target: Path) -> None:
    # substring semantics: any occurrence of the marker counts
    target.write_text("# enable FEATURE_X later\n")
    result = append_block(target, BLOCK, MARKER)
    assert not result.changed
    assert target.read_text() == "# enable FEATURE_X later\n"


def test_append_block_missing_file(tmp_path: Path) -> None:
    with pytest.raises(PatchError, match = "does not exist"):
        append_block(tmp_path / "nope.py", BLOCK, MARKER)
    assert not (tmp_path / "nope.py").exists()


def test_append_block_rejects_empty_marker(target: Path) -> None:
    with pytest.raises(PatchError):
        append_block(target, BLOCK, "")


# ---------------------------------------------------------------------------
# ensure_declarations
# ---------------------------------------------------------------------------


def test_declared_names_collects_top_level_assignments() -> None:
    source = "A = 1\nB: int = 2\nC += [3]\nD, E = 4, 5\ndef f():\n    HIDDEN = 1\n"
    assert declared_names(source) == {"A", "B", "C", "D", "E"}


def test_ensure_declarations_adds_static_block(django_project: Path) -> None:
    settings = django_project / "settings.py"
    original = settings.read_text()

    result = ensure_declarations(settings, STATIC_SETTINGS, header = STATIC_SETTINGS_HEADER)

    assert result.changed
    text = settings.read_text()
    assert text.startswith(original)
    assert text.count("STATICFILES_DIRS = [BASE_DIR / 'static']") == 1
    assert text.count("STATIC_ROOT = BASE_DIR / 'staticfiles'") == 1
    assert text.count(STATIC_SETTINGS_HEADER) == 1
    assert {"STATICFILES_DIRS", "STATIC_ROOT"} <= declared_names(text)


def test_ensure_declarations_is_idempotent(django_project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    settings = django_project / "settings.py"
    ensure_declarations(settings, STATIC_SETTINGS, header = STATIC_SETTINGS_HEADER)
    once = settings.read_bytes()

    _forbid_writes(monkeypatch)
    result = ensure_declarations(settings, STATIC_SETTINGS, header = STATIC_SETTINGS_HEADER)

    assert not result.changed
    assert settings.read_bytes() == once


def test_ensure_declarations_only_adds_missing_statements(target: Path) -> None:
    target.write_text("STATIC_ROOT = '/srv/static'\n")
    ensure_declarations(target, STATIC_SETTINGS)
    text = target.read_text()
    assert "STATIC_ROOT = '/srv/static'" in text
    assert "STATIC_ROOT = BASE_DIR" not in text
    assert "STATICFILES_DIRS = [BASE_DIR / 'static']" in text


def test_ensure_declarations_ignores_names_in_comments(target: Path) -> None:
    target.write_text("# STATICFILES_DIRS and STATIC_ROOT go here\n")
    result = ensure_declarations(target, STATIC_SETTINGS)
    assert result.changed
    assert "STATICFILES_DIRS = [BASE_DIR / 'static']" in target.read_text()


def test_ensure_declarations_adds_newline_before_block(target: Path) -> None:
    target.write_text("DEBUG = True")
    ensure_declarations(target, "X = 1\n")
    assert target.read_text() == "DEBUG = True\n\nX = 1\n"


def test_ensure_declarations_unparsable_target(target: Path) -> None:
    target.write_text("DEBUG = (\n")
    with pytest.raises(PatchError, match = "Cannot parse"):
        ensure_declarations(target, STATIC_SETTINGS)
    assert target.read_text() == "DEBUG = (\n"


def test_ensure_declarations_block_with_import_applies_once(target: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    block = "import os\nX = os.sep\n"
    ensure_declarations(target, block)
    once = target.read_bytes()
    assert target.read_text() == "DEBUG = True\n\nimport os\nX = os.sep\n"

    _forbid_writes(monkeypatch)
    result = ensure_declarations(target, block)

    assert not result.changed
    assert target.read_bytes() == once


def test_ensure_declarations_skips_import_already_present(target: Path) -> None:
    target.write_text("import os\n\nDEBUG = True\n")
    ensure_declarations(target, "import os\nX = os.sep\n")
    assert target.read_text() == "import os\n\nDEBUG = True\n\nX = os.sep\n"
