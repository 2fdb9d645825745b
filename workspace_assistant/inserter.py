"""Template materialisation and line‑oriented splicing into Django modules.

The splices work on a :class:`LineDocument`, a list of lines with an explicit
insertion point, instead of replacing substrings.  Whether a splice is needed
is decided from the parsed module (:mod:`ast`), so an ``include()`` that only
appears inside the generated docstring of ``urls.py`` does not count.
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from .exceptions import FileCreationError, PatchError
from .file_generator import write_file
from .patcher import PatchResult, commit_edit, read_existing
from .templates import URLS_ANCHOR, app_template_files, url_route

__all__ = ["LineDocument", "write_app_templates", "register_app_urls", "add_list_entry", ]

log = logging.getLogger(__name__)


class LineDocument:
    """A text file as a list of lines, preserving line endings."""

    def __init__(self, text: str):
        self.lines: list[str] = text.splitlines(keepends = True)
        self.newline = "\r\n" if "\r\n" in text else "\n"

    def index_of(self, anchor: str | Callable[[str], bool], start: int = 0) -> int | None:
        """Return the index of the first line matching *anchor*, or ``None``.

        A string anchor matches a line whose stripped text starts with it.
        """
        if isinstance(anchor, str):
            needle = anchor.strip()
            match = lambda line: line.strip().startswith(needle)  # noqa: E731
        else:
            match = anchor
        for index in range(start, len(self.lines)):
            if match(self.lines[index]):
                return index
        return None

    def _terminate(self, index: int) -> None:
        if 0 <= index < len(self.lines) and not self.lines[index].endswith(("\n", "\r")):
            self.lines[index] += self.newline

    def insert_after(self, index: int, new_lines: Iterable[str]) -> None:
        """Insert *new_lines* right after line *index* (``-1`` means the top)."""
        self._terminate(index)
        self.lines[index + 1:index + 1] = [line + self.newline for line in new_lines]

    def replace(self, index: int, line: str) -> None:
        ending = self.lines[index][len(self.lines[index].rstrip("\r\n")):]
        self.lines[index] = line + ending

    def render(self) -> str:
        return "".join(self.lines)


def write_app_templates(project_dir: Path | str, project_name: str, app_name: str) -> list[Path]:
    """Write the fixed template files of *app_name* below *project_dir*.

    Intermediate directories are created as needed.  Every file is written
    unconditionally, so a second call simply rewrites the same content.
    """

    project_dir = Path(project_dir)
    written = []
    for relative, body in app_template_files(project_name, app_name).items():
        try:
            written.append(write_file(project_dir / relative, body))
        except FileCreationError as exc:
            raise FileCreationError(f"Failed to write {relative}: {exc}") from exc
    log.info("Wrote %d template files for app %s", len(written), app_name)
    return written


def _parse(text: str, path: Path) -> ast.Module:
    try:
        return ast.parse(text, filename = str(path))
    except SyntaxError as exc:
        raise PatchError(f"Cannot parse {path!s}: {exc}") from exc


def _string_arg(call: ast.Call) -> str | None:
    if call.args and isinstance(call.args[0], ast.Constant) and isinstance(call.args[0].value, str):
        return call.args[0].value
    return None


def _callee(call: ast.Call) -> str | None:
    if isinstance(call.func, ast.Name):
        return call.func.id
    if isinstance(call.func, ast.Attribute):
        return call.func.attr
    return None


def _routes(tree: ast.Module) -> tuple[set[str], set[str]]:
    """Return ``(included modules, prefixes routed to an include)``."""
    included, prefixes = set(), set()
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call):
            continue
        name = _callee(node)
        if name == "include" and _string_arg(node) is not None:
            included.add(_string_arg(node))
        elif name in ("path", "re_path") and len(node.args) > 1:
            target = node.args[1]
            if isinstance(target, ast.Call) and _callee(target) == "include" and _string_arg(node) is not None:
                prefixes.add(_string_arg(node))
    return included, prefixes


def _ensure_include_import(doc: LineDocument, tree: ast.Module) -> None:
    imports = [node for node in tree.body if isinstance(node, ast.ImportFrom) and node.module == "django.urls"]
    for node in imports:
        if any(alias.name == "include" and alias.asname is None for alias in node.names):
            return
    if imports and imports[0].lineno == imports[0].end_lineno:
        node = imports[0]
        names = sorted({alias.name if alias.asname is None else f"{alias.name} as {alias.asname}"
                        for alias in node.names} | {"include"})
        indent = doc.lines[node.lineno - 1][:node.col_offset]
        doc.replace(node.lineno - 1, f"{indent}from django.urls import {', '.join(names)}")
        return
    last_import = max((node.end_lineno for node in tree.body if isinstance(node, (ast.Import, ast.ImportFrom))),
                      default = 0)
    doc.insert_after(last_import - 1, ["from django.urls import include"])


def _urlpatterns_list(tree: ast.Module) -> ast.List | None:
    """Return the list literal assigned to ``urlpatterns`` at module level.

    ``urlpatterns = [...] + static(...)`` yields the leading list.
    """
    for node in tree.body:
        if not (isinstance(node, ast.Assign)
                and any(isinstance(t, ast.Name) and t.id == "urlpatterns" for t in node.targets)):
            continue
        value = node.value
        while isinstance(value, ast.BinOp):
            value = value.left
        if isinstance(value, ast.List):
            return value
    return None


def _splice_route(doc: LineDocument, patterns: ast.List, route: str, path: Path) -> None:
    opening = patterns.lineno - 1
    line = doc.lines[opening].rstrip("\r\n")
    start = patterns.col_offset + 1
    if patterns.lineno == patterns.end_lineno:
        entry = route.strip()
        if patterns.elts:
            entry += " "
        else:
            entry = entry.rstrip(",")
        doc.replace(opening, f"{line[:start]}{entry}{line[start:]}")
        return
    rest = line[start:].strip()
    if rest and not rest.startswith("#"):
        raise PatchError(f"Cannot place a route after {URLS_ANCHOR!r} in {path!s}: the line continues with {rest!r}")
    doc.insert_after(opening, [route])


def register_app_urls(urls_path: Path | str, app_name: str) -> PatchResult:
    """Route the project's ``urls.py`` to ``<app_name>.urls`` exactly once.

    The new ``path()`` entry becomes the first element of the module level
    ``urlpatterns`` list: on its own line after ``urlpatterns = [`` for a
    multi‑line list, inline after the bracket for a one‑line list.  It uses
    the empty prefix unless another include already owns it, in which case
    ``'<app_name>/'`` is used.  ``include`` is added to the ``django.urls``
    import when missing.

    Raises
    ------
    PatchError
        When the file is missing or unparsable, or has no ``urlpatterns``
        list.  The file is left untouched in that case.
    """

    path, text = read_existing(urls_path)
    tree = _parse(text, path)
    module = f"{app_name}.urls"
    included, prefixes = _routes(tree)
    if module in included:
        log.info("%s already includes %s", path, module)
        return PatchResult(path, False, f"{module} is already registered")

    patterns = _urlpatterns_list(tree)
    if patterns is None:
        raise PatchError(f"Anchor line {URLS_ANCHOR!r} not found in {path!s}")

    doc = LineDocument(text)
    prefix = f"{app_name}/" if "" in prefixes else ""
    # route first: it sits below the imports, so import line numbers stay valid
    _splice_route(doc, patterns, url_route(prefix, app_name), path)
    _ensure_include_import(doc, tree)
    return commit_edit(path, text, doc.render(), f"Registered {module} in {path.name}")


def add_list_entry(path: Path | str, list_name: str, entry: str) -> PatchResult:
    """Add the string *entry* to the module‑level list *list_name*.

    Used to register a new app in ``INSTALLED_APPS``.  The entry is placed
    on its own line before the closing bracket of a multi‑line list.
    """

    path, text = read_existing(path)
    tree = _parse(text, path)
    target = None
    for node in tree.body:
        if (isinstance(node, ast.Assign) and isinstance(node.value, ast.List)
                and any(isinstance(t, ast.Name) and t.id == list_name for t in node.targets)):
            target = node.value
    if target is None:
        raise PatchError(f"No list assignment to {list_name} found in {path!s}")
    if any(isinstance(elt, ast.Constant) and elt.value == entry for elt in target.elts):
        log.info("%s already lists %r", list_name, entry)
        return PatchResult(path, False, f"{entry} is already in {list_name}")

    doc = LineDocument(text)
    closing = target.end_lineno - 1
    if target.lineno == target.end_lineno:
        line = doc.lines[closing].rstrip("\r\n")
        bracket = target.end_col_offset - 1
        separator = ", " if target.elts else ""
        doc.replace(closing, f"{line[:bracket]}{separator}{entry!r}{line[bracket:]}")
    else:
        if target.elts:
            last = target.elts[-1]
            tail = doc.lines[last.end_lineno - 1].rstrip("\r\n")
            after = tail[last.end_col_offset:]
            if not after.lstrip().startswith(","):
                doc.replace(last.end_lineno - 1, tail[:last.end_col_offset] + "," + after)
            indent = doc.lines[last.lineno - 1][:last.col_offset]
        else:
            indent = "    "
        doc.insert_after(closing - 1, [f"{indent}{entry!r},"])
    return commit_edit(path, text, doc.render(), f"Added {entry!r} to {list_name}")
