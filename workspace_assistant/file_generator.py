"""Low‑level file‑system helpers used by the *workspace_assistant* package.

The goal of this module is to provide **pure, synchronous** helpers that
write the plain text and JSON documents a workspace needs.  All functions
are stateless, return a :class:`pathlib.Path` instance pointing to the
written file, and raise a ``FileCreationError`` (defined in
:mod:`workspace_assistant.exceptions`) on failure.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .exceptions import FileCreationError

__all__ = ["write_file", "write_lines", "write_json", "read_text", ]

log = logging.getLogger(__name__)


def read_text(path: Path | str, *, encoding: str = "utf-8") -> str | None:
    """Return the text of *path*, or ``None`` when it does not exist."""
    path = Path(path)
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding = encoding)
    except OSError as exc:
        raise FileCreationError(f"Failed to read file {path!s}: {exc}") from exc


def write_file(
        target: Path | str, content: str, *, mode: str = "w", encoding: str = "utf-8", ) -> Path:
    """Write *content* to *target* atomically.

    The function creates any missing parent directories, writes the
    content to a temporary file first, and then atomically moves the
    temporary file to ``target``.  This prevents partial writes if the
    process is interrupted.

    Parameters
    ----------
    target:
        Destination file path.
    content:
        Text to write.
    mode:
        File mode – defaults to ``"w"``.
    encoding:
        Text encoding – defaults to ``"utf-8"``.
    Returns
    -------
    Path
        The absolute path of the written file.
    """

    target = Path(target).expanduser().resolve()
    if target.is_dir():
        raise FileCreationError(f"Cannot write to a directory: {target!s}")
    tmp = target.with_name(target.name + ".tmp")
    try:
        target.parent.mkdir(parents = True, exist_ok = True)
        with tmp.open(mode, encoding = encoding, newline = "") as fp:
            fp.write(content)
        tmp.replace(target)
        log.debug("Wrote %s (%d chars)", target, len(content))
        return target
    except OSError as exc:
        try:
            tmp.unlink(missing_ok = True)
        except OSError:
            log.warning("Could not remove temporary file %s", tmp)
        raise FileCreationError(f"Failed to write file {target!s}: {exc}") from exc


def write_lines(target: Path | str, lines: Iterable[str]) -> Path:
    """Write *lines* joined by newlines, without a trailing newline."""
    return write_file(target, "\n".join(lines))


def write_json(target: Path | str, data: dict[str, Any], *, indent: int = 2) -> Path:
    """Serialise *data* as indented JSON and write it to *target*."""
    try:
        text = json.dumps(data, indent = indent)
    except (TypeError, ValueError) as exc:
        raise FileCreationError(f"Cannot serialise JSON for {target!s}: {exc}") from exc
    return write_file(target, text)
