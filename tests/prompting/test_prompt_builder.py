"""Tests for the change-request prompt builder."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from changebot.models import Command, RepoContextEntry
from changebot.prompting import PromptBuilder


def _context(rules: str = "") -> RepoContextEntry:
    return RepoContextEntry(
        repo_key="acme__widgets",
        file_list=["package.json", "src/app.js"],
        coding_rules=rules,
        updated_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


COMMAND = Command(instruction="add a health route", repo_ref="acme/widgets")


def test_prompt_includes_instruction_files_and_grammar() -> None:
    request = PromptBuilder().build(COMMAND, _context())

    assert 'Instruction: "add a health route"' in request.prompt
    assert "package.json\nsrc/app.js" in request.prompt
    assert "<<<<<<< FILE: path/to/your/file.ext >>>>>>>" in request.prompt
    assert "coding rules" not in request.prompt
    assert request.system == PromptBuilder.SYSTEM_PROMPT


def test_prompt_includes_rules_when_present() -> None:
    request = PromptBuilder().build(COMMAND, _context(rules="Use ES modules.\n"))

    assert "Follow these coding rules:\nUse ES modules.\n" in request.prompt


def test_custom_template_directory_overrides_default(tmp_path: Path) -> None:
    (tmp_path / "change_request.j2").write_text(
        "{{ repo }}: {{ instruction }}\n{{ file_list }}\n", encoding="utf-8"
    )

    request = PromptBuilder(tmp_path, system_prompt=None).build(COMMAND, _context())

    assert request.prompt == "acme/widgets: add a health route\npackage.json\nsrc/app.js\n"
    assert request.system is None
