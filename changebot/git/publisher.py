"""Publishing of generated files as a branch and pull request."""

from __future__ import annotations

import secrets
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..errors import (
    BranchCreationError,
    FileWriteError,
    PullRequestError,
    RefResolutionError,
)
from ..logging import get_logger
from ..models import ChangeSet, FileRecord, PublishResult
from ..stores.context_cache import utc_now
from .github import GitHubAPIError, GitHubClient, GitHubNotFoundError, encode_content

DEFAULT_BRANCH_PREFIX = "ai-generated"


class ChangeSetPublisher:
    """Creates a fresh branch, writes each file onto it, and opens a PR."""

    def __init__(
        self,
        client: GitHubClient,
        *,
        branch_prefix: str = DEFAULT_BRANCH_PREFIX,
        clock: Callable[[], datetime] = utc_now,
        token_factory: Callable[[int], str] = secrets.token_hex,
    ) -> None:
        self.client = client
        self.branch_prefix = branch_prefix.rstrip("-/") or DEFAULT_BRANCH_PREFIX
        self._clock = clock
        self._token_factory = token_factory
        self.logger = get_logger("publisher")

    def generate_branch_name(self) -> str:
        """Return ``<prefix>-YYYYMMDD-HHMMSS-<hex4>``."""
        timestamp = self._clock().strftime("%Y%m%d-%H%M%S")
        return f"{self.branch_prefix}-{timestamp}-{self._token_factory(2)}"

    def publish(
        self,
        owner: str,
        repo: str,
        base_branch: str,
        files: Sequence[FileRecord],
        *,
        commit_message_prefix: str,
        pr_title: str,
        pr_body: str,
        labels: Sequence[str] = (),
    ) -> PublishResult:
        base_sha = self.resolve_base_sha(owner, repo, base_branch)
        change_set = ChangeSet(
            branch_name=self.generate_branch_name(),
            base_sha=base_sha,
            files=list(files),
        )
        self.create_branch(owner, repo, change_set)

        for record in change_set.files:
            self.write_file(
                owner,
                repo,
                change_set.branch_name,
                record,
                message=f"{commit_message_prefix} for {record.path}",
            )

        url = self.open_pull_request(
            owner,
            repo,
            head=change_set.branch_name,
            base=base_branch,
            title=pr_title,
            body=pr_body,
            labels=labels,
        )
        return PublishResult(
            pull_request_url=url,
            branch_name=change_set.branch_name,
            files=change_set.files,
        )

    # ------------------------------------------------------------------
    # Stages

    def resolve_base_sha(self, owner: str, repo: str, base_branch: str) -> str:
        try:
            payload = self.client.get_ref(owner, repo, f"heads/{base_branch}")
        except GitHubAPIError as exc:
            raise RefResolutionError(
                f"Could not resolve branch '{base_branch}' in {owner}/{repo}: {exc}"
            ) from exc
        sha = _nested_str(payload, "object", "sha")
        if not sha:
            raise RefResolutionError(
                f"Branch '{base_branch}' in {owner}/{repo} has no head commit"
            )
        return sha

    def create_branch(self, owner: str, repo: str, change_set: ChangeSet) -> None:
        try:
            self.client.create_ref(
                owner,
                repo,
                f"refs/heads/{change_set.branch_name}",
                change_set.base_sha,
            )
        except GitHubAPIError as exc:
            raise BranchCreationError(
                f"Could not create branch '{change_set.branch_name}': {exc}"
            ) from exc
        self.logger.info("Created branch %s at %s", change_set.branch_name, change_set.base_sha)

    def write_file(
        self,
        owner: str,
        repo: str,
        branch: str,
        record: FileRecord,
        *,
        message: str,
    ) -> None:
        existing_sha: Optional[str] = None
        try:
            existing = self.client.get_content(owner, repo, record.path, ref=branch)
        except GitHubNotFoundError:
            self.logger.info("Creating %s on %s", record.path, branch)
        except GitHubAPIError as exc:
            raise FileWriteError(
                f"Could not inspect '{record.path}' on {branch}: {exc}", path=record.path
            ) from exc
        else:
            existing_sha = _nested_str(existing, "sha") or None
            self.logger.info("Updating %s on %s (sha %s)", record.path, branch, existing_sha)

        try:
            self.client.put_file_contents(
                owner,
                repo,
                record.path,
                message=message,
                encoded_content=encode_content(record.content),
                branch=branch,
                sha=existing_sha,
            )
        except GitHubAPIError as exc:
            raise FileWriteError(
                f"Could not write '{record.path}' on {branch}: {exc}", path=record.path
            ) from exc

    def open_pull_request(
        self,
        owner: str,
        repo: str,
        *,
        head: str,
        base: str,
        title: str,
        body: str,
        labels: Sequence[str] = (),
    ) -> str:
        try:
            payload = self.client.create_pull_request(
                owner, repo, title=title, head=head, base=base, body=body
            )
        except GitHubAPIError as exc:
            raise PullRequestError(f"Could not open pull request from {head}: {exc}") from exc

        url = _nested_str(payload, "html_url")
        wanted = [label for label in labels if label]
        if wanted:
            number = payload.get("number") if isinstance(payload, dict) else None
            if not isinstance(number, int):
                raise PullRequestError("Pull request response did not include a number")
            try:
                self.client.add_labels(owner, repo, number, wanted)
            except GitHubAPIError as exc:
                raise PullRequestError(f"Could not label pull request #{number}: {exc}") from exc

        self.logger.info("Opened pull request %s", url)
        return url


def build_pull_request_body(instruction: str, files: Sequence[FileRecord]) -> str:
    """Summarise the originating instruction and the touched paths."""
    changed = "\n".join(f"- `{record.path}`" for record in files) or "- (none)"
    return (
        "This pull request was generated from a chat command.\n\n"
        f"Instruction:\n> {instruction}\n\n"
        f"Changed files:\n{changed}\n"
    )


def _nested_str(payload: object, *keys: str) -> str:
    current = payload
    for key in keys:
        if not isinstance(current, dict):
            return ""
        current = current.get(key)
    return current if isinstance(current, str) else ""


__all__ = ["ChangeSetPublisher", "DEFAULT_BRANCH_PREFIX", "build_pull_request_body"]
