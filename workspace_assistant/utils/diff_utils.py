"""Utility functions for generating diffs between file contents."""

from __future__ import annotations

import difflib


def generate_diff(
        old_content: str, new_content: str, from_file: str = "original", to_file: str = "modified", ) -> str:
    """Generate a unified diff between two strings.

    Args:
        old_content: The original content
        new_content: The new content
        from_file: Label for the original content
        to_file: Label for the modified content

    Returns:
        A string containing the unified diff
    """
    diff = difflib.unified_diff(
            old_content.splitlines(keepends = True), new_content.splitlines(keepends = True), fromfile = from_file,
            tofile = to_file, )
    return "".join(diff)
