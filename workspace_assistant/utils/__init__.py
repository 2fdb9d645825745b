"""Utility functions for the workspace_assistant package."""

from .diff_utils import generate_diff

__all__ = ["generate_diff", ]
