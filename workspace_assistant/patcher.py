"""Idempotent patching of existing text files.

Two flavours of "apply this block once" live here:

* :func:`append_block` – the plain contract.  A *marker* substring decides
  whether the block was already applied.  A marker that shows up in an
  unrelated context (a comment, a docstring) counts as applied.
* :func:`ensure_declarations` – the structural variant used for Django
  settings modules.  The target and the block are parsed with :mod:`ast`
  and only the statements whose names are not yet declared at module level
  are appended.

Both leave the file untouched when nothing is missing, so applying either
one twice yields the same bytes as applying it once.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from pathlib import Path

from .exceptions import PatchError
from .file_generator import write_file
from .utils import generate_diff

__all__ = ["PatchResult", "append_block", "ensure_declarations", "declared_names", "read_existing", "commit_edit", ]

log = logging.getLogger(__name__)


@dataclass(frozen = True)
class PatchResult:
    """Outcome of a single patch operation."""

    path: Path
    changed: bool
    message: str


def read_existing(path: Path | str) -> tuple[Path, str]:
    """Return ``(path, text)`` for a file that must already exist."""
    path = Path(path).expanduser().resolve()
    if not path.is_file():
        raise PatchError(f"File {path!s} does not exist – cannot patch")
    try:
        return path, path.read_text(encoding = "utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PatchError(f"Failed to read {path!s}: {exc}") from exc


def commit_edit(path: Path, old: str, new: str, message: str) -> PatchResult:
    """Write *new* over *path* and log the diff against *old*."""
    try:
        write_file(path, new)
    except Exception as exc:
        raise PatchError(f"Failed to write {path!s}: {exc}") from exc
    log.debug("Patched %s:\n%s", path, generate_diff(old, new, str(path), f"(patched) {path}"))
    return PatchResult(path, True, message)


def _join(text: str, block: str) -> str:
    if text and not text.endswith("\n"):
        text += "\n"
    return text + block


def append_block(path: Path | str, block: str, marker: str) -> PatchResult:
    """Append *block* to *path* unless *marker* already occurs in it.

    Parameters
    ----------
    path:
        An existing text file.  A missing file is an error, not a
        create‑on‑missing.
    block:
        Text appended verbatim to the end of the file.
    marker:
        Substring whose presence means the block was already applied.
    Returns
    -------
    PatchResult
        ``changed`` is ``False`` when the marker was found and no write
        happened.
    """

    if not marker:
        raise PatchError("An empty marker would match every file")
    path, text = read_existing(path)
    if marker in text:
        log.info("Marker %r found in %s, skipping", marker, path)
        return PatchResult(path, False, f"{path.name} is already configured")
    return commit_edit(path, text, text + block, f"Appended block to {path.name}")


def _assigned_names(node: ast.stmt) -> set[str]:
    if isinstance(node, ast.Assign):
        targets = node.targets
    elif isinstance(node, (ast.AnnAssign, ast.AugAssign)):
        targets = [node.target]
    else:
        return set()
    names = set()
    for target in targets:
        for sub in ast.walk(target):
            if isinstance(sub, ast.Name):
                names.add(sub.id)
    return names


def _parse(source: str, label: str) -> ast.Module:
    try:
        return ast.parse(source, filename = label)
    except SyntaxError as exc:
        raise PatchError(f"Cannot parse {label}: {exc}") from exc


def declared_names(source: str, label: str = "<source>") -> set[str]:
    """Return the names assigned at module level in *source*."""
    names: set[str] = set()
    for node in _parse(source, label).body:
        names |= _assigned_names(node)
    return names


def ensure_declarations(path: Path | str, block: str, *, header: str = "") -> PatchResult:
    """Append the statements of *block* that *path* does not declare yet.

    A statement of *block* counts as present when every name it assigns is
    already assigned at the top level of *path*.  A statement that assigns
    nothing (an import, a call) counts as present when the same statement
    already appears at the top level.  *header* (typically a comment line)
    is written once, right before the appended statements.
    """

    path, text = read_existing(path)
    tree = _parse(text, str(path))
    declared = set()
    for node in tree.body:
        declared |= _assigned_names(node)
    statements = {ast.dump(node) for node in tree.body}
    missing = []
    for node in _parse(block, "<block>").body:
        names = _assigned_names(node)
        if names and names <= declared:
            continue
        if not names and ast.dump(node) in statements:
            continue
        missing.append(ast.get_source_segment(block, node))
    if not missing:
        log.info("All declarations of the block already present in %s", path)
        return PatchResult(path, False, f"{path.name} is already configured")

    addition = "\n" + header + "\n".join(missing) + "\n"
    return commit_edit(path, text, _join(text, addition), f"Added {len(missing)} declaration(s) to {path.name}")
