"""Shared constants for change-request prompting."""

from __future__ import annotations

DEFAULT_TEMPLATE = "change_request.j2"

SYSTEM_PROMPT = (
    "You are a senior software engineer working inside an existing repository. "
    "Respect the repository layout and coding rules, and return complete files only."
)

EXAMPLE_PATH = "path/to/your/file.ext"


__all__ = ["DEFAULT_TEMPLATE", "EXAMPLE_PATH", "SYSTEM_PROMPT"]
