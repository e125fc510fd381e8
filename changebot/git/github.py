"""GitHub REST API client used for context gathering and publishing."""

from __future__ import annotations

import base64
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import requests

from ..errors import ChangeBotError
from ..logging import get_logger

DEFAULT_BASE_URL = "https://api.github.com"
API_VERSION = "2022-11-28"

logger = get_logger("github")


class GitHubAPIError(ChangeBotError):
    """Raised for any non-success GitHub response or transport failure."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubNotFoundError(GitHubAPIError):
    """Raised when GitHub answers 404 for the requested resource."""


class GitHubClient:
    """Thin wrapper over the handful of REST endpoints changebot needs."""

    def __init__(
        self,
        token: str | None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: requests.Session | None = None,
        request_timeout: float = 15.0,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.request_timeout = request_timeout

    # ------------------------------------------------------------------
    # Read operations

    def get_tree(self, owner: str, repo: str, tree_sha: str, *, recursive: bool = True) -> List[Dict[str, Any]]:
        """Return tree entries for a branch, tag or commit."""
        params = {"recursive": "1"} if recursive else None
        payload = self._request(
            "GET",
            f"/repos/{owner}/{repo}/git/trees/{quote(tree_sha, safe='')}",
            params=params,
        )
        if isinstance(payload, dict) and payload.get("truncated"):
            logger.warning(
                "Tree listing for %s/%s@%s was truncated by GitHub; context will be partial",
                owner,
                repo,
                tree_sha,
            )
        tree = payload.get("tree") if isinstance(payload, dict) else None
        if not isinstance(tree, list):
            return []
        return [item for item in tree if isinstance(item, dict)]

    def list_blob_paths(self, owner: str, repo: str, ref: str) -> List[str]:
        """Return the paths of every file in the repository at ``ref`` in host order."""
        return [
            str(item["path"])
            for item in self.get_tree(owner, repo, ref, recursive=True)
            if item.get("type") == "blob" and item.get("path")
        ]

    def get_content(self, owner: str, repo: str, path: str, *, ref: str | None = None) -> Dict[str, Any]:
        params = {"ref": ref} if ref else None
        payload = self._request(
            "GET",
            f"/repos/{owner}/{repo}/contents/{quote(path)}",
            params=params,
        )
        if not isinstance(payload, dict):
            raise GitHubAPIError(f"'{path}' is not a file")
        return payload

    def read_text(self, owner: str, repo: str, path: str, *, ref: str | None = None) -> str:
        payload = self.get_content(owner, repo, path, ref=ref)
        return decode_content(payload)

    def get_ref(self, owner: str, repo: str, ref: str) -> Dict[str, Any]:
        return self._request("GET", f"/repos/{owner}/{repo}/git/ref/{ref}")

    # ------------------------------------------------------------------
    # Write operations

    def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/repos/{owner}/{repo}/git/refs",
            json={"ref": ref, "sha": sha},
        )

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
        """Create or update a file; ``sha`` is required when the file already exists."""
        body: Dict[str, Any] = {
            "message": message,
            "content": encoded_content,
            "branch": branch,
        }
        if sha:
            body["sha"] = sha
        return self._request("PUT", f"/repos/{owner}/{repo}/contents/{quote(path)}", json=body)

    def create_pull_request(
        self,
        owner: str,
        repo: str,
        *,
        title: str,
        head: str,
        base: str,
        body: str,
    ) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            json={"title": title, "head": head, "base": base, "body": body},
        )

    def add_labels(self, owner: str, repo: str, number: int, labels: Sequence[str]) -> Any:
        return self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{number}/labels",
            json={"labels": list(labels)},
        )

    # ------------------------------------------------------------------
    # Helpers

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self.session.request(
                method=method,
                url=f"{self.base_url}{path}",
                headers=headers,
                json=json,
                params=params,
                timeout=self.request_timeout,
            )
        except requests.RequestException as exc:
            raise GitHubAPIError(f"GitHub request {method} {path} failed: {exc}") from exc

        if response.status_code == 404:
            raise GitHubNotFoundError(
                f"GitHub resource not found: {method} {path}", status_code=404
            )
        if response.status_code >= 400:
            raise GitHubAPIError(
                f"GitHub {method} {path} returned {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubAPIError(
                f"GitHub {method} {path} returned a non-JSON body",
                status_code=response.status_code,
            ) from exc


def encode_content(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_content(payload: Dict[str, Any]) -> str:
    content = payload.get("content")
    if not isinstance(content, str):
        return ""
    if payload.get("encoding", "base64") != "base64":
        return content
    return base64.b64decode(content).decode("utf-8")


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.reason or ""
    if isinstance(payload, dict):
        return str(payload.get("message", "")) or response.reason or ""
    return response.reason or ""


__all__ = [
    "DEFAULT_BASE_URL",
    "GitHubAPIError",
    "GitHubClient",
    "GitHubNotFoundError",
    "decode_content",
    "encode_content",
]
