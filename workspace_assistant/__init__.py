"""Top‑level package for *workspace_assistant*."""

from __future__ import annotations

from .config import AssistantConfig, load_config
from .exceptions import (ExternalCommandError, FileCreationError, NameValidationError, PatchError,
                         WorkspaceError, )
from .inserter import LineDocument, add_list_entry, register_app_urls, write_app_templates
from .patcher import PatchResult, append_block, ensure_declarations
from .workspace import SetupRequest, Transcript, WorkspaceSetup, setup_workspace

# Explicitly expose the public API members
__all__ = ["AssistantConfig", "load_config", "append_block", "ensure_declarations", "PatchResult", "LineDocument",
        "add_list_entry", "register_app_urls", "write_app_templates", "SetupRequest", "Transcript",
        "WorkspaceSetup", "setup_workspace", "WorkspaceError", "NameValidationError", "FileCreationError",
        "PatchError", "ExternalCommandError", ]
