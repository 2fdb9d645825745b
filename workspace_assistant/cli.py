"""Command‑line interface for the **workspace_assistant** package.

The CLI is intentionally small – it exposes the two operations a developer
needs when starting a Django workspace:

* ``setup`` – ask for a project and an optional app name, then create the
  project, the app, the virtual environment, the editor settings and,
  if accepted, the static/template/URL wiring.
* ``configure`` – re‑apply the same steps to an existing project.  Every
  step is idempotent, so running it twice changes nothing the second time.

Implementation details
----------------------
* Uses **Typer** for argument parsing and prompting.
* All filesystem and process work is delegated to
  :func:`workspace_assistant.workspace.setup_workspace`.
* Errors derive from :class:`workspace_assistant.exceptions.WorkspaceError`;
  they are turned into one red message and a non‑zero exit code here.
"""

from pathlib import Path

import typer

from workspace_assistant.config import load_config, setup_logging
from workspace_assistant.exceptions import WorkspaceError
from workspace_assistant.prompts import collect_names, collect_options
from workspace_assistant.workspace import Transcript, setup_workspace

app = typer.Typer(name = "workspace-assistant", help = "Django workspace configuration assistant")

_STATUS_STYLE = {"done": ("✓", typer.colors.GREEN), "skipped": ("-", typer.colors.YELLOW),
        "failed": ("✗", typer.colors.RED), }


@app.callback()
def main_options(
        ctx: typer.Context, debug: bool = typer.Option(
                False, "--debug", help = "Enable DEBUG logs."
                ), config: Path = typer.Option(
                None, "--config", help = "JSON file overriding the default commands and documents.", ), ) -> None:
    """Load configuration and logging before any command runs."""
    setup_logging(debug)
    try:
        ctx.obj = load_config(config)
    except WorkspaceError as exc:
        _fail(str(exc))
        raise typer.Exit(code = 1)


def _fail(message: str) -> None:
    typer.secho(f"❌ {message}", fg = typer.colors.RED, err = True)


def _echo_transcript(transcript: Transcript) -> None:
    for step in transcript.steps:
        symbol, colour = _STATUS_STYLE[step.status]
        typer.secho(f" {symbol} {step.name}: {step.detail}", fg = colour)


def _resolve_base(base_dir: Path) -> Path:
    base = base_dir.expanduser().resolve()
    if not base.is_dir():
        _fail("Please open a folder before running this command.")
        raise typer.Exit(code = 1)
    return base


def _run(ctx: typer.Context, base: Path, *, existing: bool) -> None:
    try:
        project, app_name = collect_names(base, existing = existing)
    except typer.Abort:
        _fail("No project name entered!")
        raise typer.Exit(code = 1)
    try:
        configure_static, add_app_files = collect_options(app_name)
    except typer.Abort:
        _fail("Cancelled.")
        raise typer.Exit(code = 1)

    try:
        transcript = setup_workspace(
                base, project, app_name, configure_static = configure_static, add_app_files = add_app_files,
                resume = existing, config = ctx.obj, )
    except WorkspaceError as exc:
        if exc.transcript is not None:
            _echo_transcript(exc.transcript)
        _fail(str(exc))
        raise typer.Exit(code = 1)

    _echo_transcript(transcript)
    typer.secho(f"✅ Django workspace for project '{project}' is set up!", fg = typer.colors.GREEN)


@app.command(help = "Create a new Django project (and optional app) interactively.")
def setup(
        ctx: typer.Context, base_dir: Path = typer.Option(
                Path("."), "--base-dir", "-C", help = "Folder the project directory is created in.", ), ) -> None:
    """Collect the names, then run every setup step for a new project.

    An existing entry with the project's name is rejected at the prompt.
    """
    _run(ctx, _resolve_base(base_dir), existing = False)


@app.command(help = "Re-apply the setup steps to an existing Django project.")
def configure(
        ctx: typer.Context, base_dir: Path = typer.Option(
                Path("."), "--base-dir", "-C", help = "Folder containing the project directory.", ), ) -> None:
    """Skip every step whose result is already on disk, run the rest."""
    _run(ctx, _resolve_base(base_dir), existing = True)


def main() -> None:  # pragma: no cover – thin wrapper
    """Entry point used by ``python -m workspace_assistant`` and the console script."""
    app()


if __name__ == "__main__":
    main()
