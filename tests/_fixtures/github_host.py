"""In-memory GitHub double that records every call made by changebot."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

from changebot.git.github import GitHubAPIError, GitHubNotFoundError, decode_content


@dataclass
class FakeGitHub:
    """Mimics the subset of GitHubClient used by the provider and publisher."""

    files: Dict[str, Dict[str, str]] = field(default_factory=dict)
    branches: Dict[str, str] = field(default_factory=lambda: {"main": "base-sha"})
    fail_on: Dict[str, Exception] = field(default_factory=dict)
    calls: List[tuple[str, Dict[str, Any]]] = field(default_factory=list)
    pulls: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def with_files(cls, files: Mapping[str, str], branch: str = "main") -> "FakeGitHub":
        host = cls()
        host.files[branch] = dict(files)
        return host

    def calls_named(self, name: str) -> List[Dict[str, Any]]:
        return [kwargs for call, kwargs in self.calls if call == name]

    def _record(self, name: str, **kwargs: Any) -> None:
        self.calls.append((name, kwargs))
        failure = self.fail_on.get(name)
        if failure is not None:
            raise failure

    # Reads ------------------------------------------------------------

    def list_blob_paths(self, owner: str, repo: str, ref: str) -> List[str]:
        self._record("list_blob_paths", owner=owner, repo=repo, ref=ref)
        if ref not in self.branches:
            raise GitHubNotFoundError(f"no tree {ref}", status_code=404)
        return list(self.files.get(ref, {}))

    def get_content(self, owner: str, repo: str, path: str, *, ref: str | None = None) -> Dict[str, Any]:
        self._record("get_content", owner=owner, repo=repo, path=path, ref=ref)
        branch_files = self.files.get(ref or "main", {})
        if path not in branch_files:
            raise GitHubNotFoundError(f"{path} not found", status_code=404)
        content = branch_files[path]
        return {
            "path": path,
            "sha": f"sha-{path}",
            "encoding": "base64",
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }

    def read_text(self, owner: str, repo: str, path: str, *, ref: str | None = None) -> str:
        return decode_content(self.get_content(owner, repo, path, ref=ref))

    def get_ref(self, owner: str, repo: str, ref: str) -> Dict[str, Any]:
        self._record("get_ref", owner=owner, repo=repo, ref=ref)
        branch = ref.removeprefix("heads/")
        if branch not in self.branches:
            raise GitHubNotFoundError(f"ref {ref} not found", status_code=404)
        return {"ref": f"refs/{ref}", "object": {"sha": self.branches[branch]}}

    # Writes -----------------------------------------------------------

    def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> Dict[str, Any]:
        self._record("create_ref", owner=owner, repo=repo, ref=ref, sha=sha)
        branch = ref.removeprefix("refs/heads/")
        if branch in self.branches:
            raise GitHubAPIError("Reference already exists", status_code=422)
        self.branches[branch] = sha
        base = next((name for name, value in self.branches.items() if value == sha and name != branch), "main")
        self.files[branch] = dict(self.files.get(base, {}))
        return {"ref": ref, "object": {"sha": sha}}

    def put_file_contents(
        self,
        owner: str,
        repo: str,
        path: str,
        *,
        message: str,
        encoded_content: str,
        branch: str,
        sha: str | None = None,
    ) -> Dict[str, Any]:
        self._record(
            "put_file_contents",
            owner=owner,
            repo=repo,
            path=path,
            message=message,
            encoded_content=encoded_content,
            branch=branch,
            sha=sha,
        )
        branch_files = self.files.setdefault(branch, {})
        if path in branch_files and sha != f"sha-{path}":
            raise GitHubAPIError(f"{path} does not match sha", status_code=409)
        branch_files[path] = base64.b64decode(encoded_content).decode("utf-8")
        return {"content": {"path": path, "sha": f"sha-{path}"}}

    def create_pull_request(
        self, owner: str, repo: str, *, title: str, head: str, base: str, body: str
    ) -> Dict[str, Any]:
        self._record("create_pull_request", owner=owner, repo=repo, title=title, head=head, base=base, body=body)
        number = len(self.pulls) + 1
        pull = {
            "number": number,
            "title": title,
            "head": head,
            "base": base,
            "body": body,
            "html_url": f"https://github.com/{owner}/{repo}/pull/{number}",
            "labels": [],
        }
        self.pulls.append(pull)
        return dict(pull)

    def add_labels(self, owner: str, repo: str, number: int, labels: Sequence[str]) -> List[Dict[str, str]]:
        self._record("add_labels", owner=owner, repo=repo, number=number, labels=list(labels))
        self.pulls[number - 1]["labels"].extend(labels)
        return [{"name": label} for label in labels]


__all__ = ["FakeGitHub"]
