"""
Main entry point for the workspace_assistant package.

When run as `python -m workspace_assistant`, it starts the Typer CLI.
"""

from workspace_assistant.cli import main

if __name__ == "__main__":
    main()
