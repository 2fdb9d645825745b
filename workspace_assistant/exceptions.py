"""Custom exception hierarchy for the workspace_assistant package.

All public functions raise :class:`WorkspaceError` (or a subclass) so
that callers can catch a single exception type.  This also allows the
CLI to catch all exceptions and print a user-friendly message.
"""


class WorkspaceError(RuntimeError):
    """Base exception for all workspace‑assistant related errors."""

    def __init__(self, message: str, transcript=None):
        super().__init__(message)
        self.transcript = transcript


class NameValidationError(WorkspaceError):
    """Raised when a project or app name is rejected."""


class FileCreationError(WorkspaceError):
    """Raised when a file cannot be created or written to."""


class PatchError(WorkspaceError):
    """Raised when an existing file cannot be patched."""


class ExternalCommandError(WorkspaceError):
    """Raised when an external command is missing or exits non‑zero."""

    def __init__(self, message: str, command=None, returncode=None, stderr: str = ""):
        super().__init__(message)
        self.command = list(command or [])
        self.returncode = returncode
        self.stderr = stderr
