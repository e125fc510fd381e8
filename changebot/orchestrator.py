"""Sequencing of a change request from chat command to pull request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .command import parse_command
from .context.provider import RepoContextProvider
from .errors import CallbackDeliveryError, ChangeBotError, CommandError, ModelInvocationError
from .git.publisher import ChangeSetPublisher, build_pull_request_body
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import Command, PublishResult
from .notify import CallbackNotifier
from .parsing import ResponseParser
from .prompting.builder import PromptBuilder

COMMIT_MESSAGE_PREFIX = 'feat: apply AI changes prompted by "{instruction}"'
PR_TITLE = "AI: {instruction}"


@dataclass
class Acknowledgement:
    """Immediate reply for the chat transport; ``command`` is None when rejected."""

    command: Optional[Command]
    message: str

    @property
    def accepted(self) -> bool:
        return self.command is not None


@dataclass
class HandleOutcome:
    """Final result of a detached command run."""

    status: str
    message: str
    result: Optional[PublishResult] = None

    @property
    def pull_request_url(self) -> Optional[str]:
        return self.result.pull_request_url if self.result else None


class CommandOrchestrator:
    """Coordinates context, prompting, generation, parsing and publishing."""

    def __init__(
        self,
        *,
        context_provider: RepoContextProvider,
        llm_runner: LLMRunner,
        publisher: ChangeSetPublisher,
        notifier: CallbackNotifier | None = None,
        prompt_builder: PromptBuilder | None = None,
        parser: ResponseParser | None = None,
        base_branch: str = "main",
        labels: Sequence[str] = (),
    ) -> None:
        self.context_provider = context_provider
        self.llm_runner = llm_runner
        self.publisher = publisher
        self.notifier = notifier
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.parser = parser or ResponseParser()
        self.base_branch = base_branch
        self.labels = list(labels)
        self.logger = get_logger("orchestrator")

    def acknowledge(self, raw_text: str, callback_url: str | None = None) -> Acknowledgement:
        """Validate the command and return the reply sent before any work starts."""
        try:
            command = parse_command(raw_text, callback_url)
        except CommandError as exc:
            return Acknowledgement(command=None, message=str(exc))
        return Acknowledgement(
            command=command,
            message=(
                f'Got it: "{command.instruction}". '
                f"Opening a pull request on {command.repo_ref}; processing has started."
            ),
        )

    def handle(self, command: Command) -> HandleOutcome:
        """Run the command to completion and report exactly once; never raises."""
        self.logger.info("Handling change request for %s", command.repo_ref)
        try:
            result = self.run(command)
        except Exception as exc:
            if isinstance(exc, ChangeBotError):
                self.logger.error("Change request for %s failed: %s", command.repo_ref, exc)
            else:
                self.logger.exception("Unexpected failure for %s", command.repo_ref)
            message = f"Processing failed.\n```{exc}```"
            self._notify(command, message, ephemeral=True)
            return HandleOutcome(status="error", message=message)

        message = f"Pull request created: <{result.pull_request_url}|Review the pull request>"
        self._notify(command, message)
        return HandleOutcome(status="ok", message=message, result=result)

    def run(self, command: Command) -> PublishResult:
        """Execute the pipeline; errors propagate to the caller."""
        context = self.context_provider.get_context(command.owner, command.name, self.base_branch)
        request = self.prompt_builder.build(command, context)

        try:
            response_text = self.llm_runner.run(request.prompt, system=request.system)
        except ModelInvocationError:
            raise
        except Exception as exc:
            raise ModelInvocationError(f"Model invocation failed: {exc}") from exc
        self.logger.debug("Model response:\n%s", response_text)

        files = self.parser.parse(response_text or "")
        if not files:
            raise ModelInvocationError("The model did not generate any valid file content.")
        self.logger.info("Model produced %d file(s): %s", len(files), ", ".join(f.path for f in files))

        return self.publisher.publish(
            command.owner,
            command.name,
            self.base_branch,
            files,
            commit_message_prefix=COMMIT_MESSAGE_PREFIX.format(instruction=command.instruction),
            pr_title=PR_TITLE.format(instruction=command.instruction),
            pr_body=build_pull_request_body(command.instruction, files),
            labels=self.labels,
        )

    def _notify(self, command: Command, message: str, *, ephemeral: bool = False) -> None:
        if not command.callback_url or self.notifier is None:
            self.logger.info("No callback target for %s; result: %s", command.repo_ref, message)
            return
        try:
            self.notifier.send(command.callback_url, message, ephemeral=ephemeral)
        except CallbackDeliveryError as exc:
            self.logger.error("Failed to deliver status for %s: %s", command.repo_ref, exc)


__all__ = ["Acknowledgement", "CommandOrchestrator", "HandleOutcome"]
