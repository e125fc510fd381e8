"""Builds the generation prompt from repository context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import Command, RepoContextEntry
from ..parsing import format_marker
from .constants import DEFAULT_TEMPLATE, EXAMPLE_PATH, SYSTEM_PROMPT


@dataclass(frozen=True)
class PromptRequest:
    """Prompt text plus the system message sent alongside it."""

    prompt: str
    system: str | None


class PromptBuilder:
    """Renders the change-request template for one command."""

    SYSTEM_PROMPT = SYSTEM_PROMPT

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        template_name: str = DEFAULT_TEMPLATE,
        system_prompt: str | None = SYSTEM_PROMPT,
    ) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.template_name = template_name
        self.system_prompt = system_prompt
        self._env = self._create_env(self.templates_dir)

    def build(self, command: Command, context: RepoContextEntry) -> PromptRequest:
        template = self._env.get_template(self.template_name)
        prompt = template.render(
            instruction=command.instruction,
            repo=command.repo_ref,
            coding_rules=context.coding_rules.strip(),
            file_list=context.render_file_list(),
            marker_example=format_marker(EXAMPLE_PATH),
        )
        return PromptRequest(prompt=prompt.strip() + "\n", system=self.system_prompt)

    def _create_env(self, templates_dir: Path) -> Environment:
        directories = [str(templates_dir)]
        default_dir = Path(__file__).with_name("templates")
        if default_dir != templates_dir:
            directories.append(str(default_dir))
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )


__all__ = ["PromptBuilder", "PromptRequest"]
