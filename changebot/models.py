"""Core data models shared across changebot components."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class Command:
    """A parsed change request addressed to a single repository."""

    instruction: str
    repo_ref: str
    callback_url: Optional[str] = None

    @property
    def owner(self) -> str:
        return self.repo_ref.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.repo_ref.split("/", 1)[1]

    @property
    def repo_key(self) -> str:
        return repo_key(self.owner, self.name)


@dataclass
class RepoContextEntry:
    """Cached repository context shown to the model."""

    repo_key: str
    file_list: List[str]
    coding_rules: str
    updated_at: datetime

    def render_file_list(self) -> str:
        return "\n".join(self.file_list)


@dataclass(frozen=True)
class FileRecord:
    """Complete content for one file produced by the model."""

    path: str
    content: str


@dataclass
class ChangeSet:
    """Files destined for one freshly created branch."""

    branch_name: str
    base_sha: str
    files: List[FileRecord] = field(default_factory=list)


@dataclass
class PublishResult:
    """Outcome of a successful publish run."""

    pull_request_url: str
    branch_name: str
    files: List[FileRecord] = field(default_factory=list)


def repo_key(owner: str, name: str) -> str:
    """Return the cache key used for a repository."""
    return f"{owner}__{name}"
