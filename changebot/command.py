"""Slash-command text parsing."""

from __future__ import annotations

import re
from typing import Optional

from .errors import CommandError
from .models import Command

_REPO_OPTION = re.compile(r"--repo=(\S+)")

USAGE_HINT = "Specify the target repository as --repo=owner/name"


def parse_command(raw_text: str, callback_url: Optional[str] = None) -> Command:
    """Split raw slash-command text into an instruction and a repository reference."""
    text = raw_text or ""
    match = _REPO_OPTION.search(text)
    if match is None:
        raise CommandError(f"No repository given. {USAGE_HINT}")

    repo_ref = match.group(1)
    owner, sep, name = repo_ref.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise CommandError(f"Invalid repository '{repo_ref}'. {USAGE_HINT}")

    instruction = (text[: match.start()] + text[match.end() :]).strip()
    if not instruction:
        raise CommandError("No instruction given for the change request.")

    return Command(
        instruction=instruction,
        repo_ref=repo_ref,
        callback_url=callback_url or None,
    )


__all__ = ["USAGE_HINT", "parse_command"]
