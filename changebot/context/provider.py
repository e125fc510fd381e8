"""Cache-or-refresh cycle for repository prompting context."""

from __future__ import annotations

from ..errors import ContextFetchError
from ..git.github import GitHubAPIError, GitHubClient
from ..logging import get_logger
from ..models import RepoContextEntry, repo_key
from ..stores.context_cache import ContextCache
from .selector import TokenBudgetSelector

DEFAULT_RULES_FILE = ".clinerules"


class RepoContextProvider:
    """Supplies the file manifest and coding rules for a repository."""

    def __init__(
        self,
        client: GitHubClient,
        *,
        cache: ContextCache | None = None,
        selector: TokenBudgetSelector | None = None,
        rules_file: str = DEFAULT_RULES_FILE,
    ) -> None:
        self.client = client
        self.cache = cache or ContextCache()
        self.selector = selector or TokenBudgetSelector()
        self.rules_file = rules_file
        self.logger = get_logger("context")

    def get_context(self, owner: str, repo: str, ref: str) -> RepoContextEntry:
        key = repo_key(owner, repo)
        cached = self.cache.get(key)
        if cached is not None:
            self.logger.info("Using cached context for %s/%s", owner, repo)
            return cached

        entry = self.refresh(owner, repo, ref)
        self.cache.put(key, entry)
        self.logger.info(
            "Fetched context for %s/%s (%d files selected) and cached it",
            owner,
            repo,
            len(entry.file_list),
        )
        return entry

    def refresh(self, owner: str, repo: str, ref: str) -> RepoContextEntry:
        """Walk the repository tree and rebuild the context entry."""
        try:
            paths = self.client.list_blob_paths(owner, repo, ref)
        except GitHubAPIError as exc:
            raise ContextFetchError(
                f"Could not list files of {owner}/{repo}@{ref}: {exc}"
            ) from exc

        selected = self.selector.select(paths)
        self.logger.debug("Selected %d of %d paths under budget", len(selected), len(paths))

        coding_rules = ""
        if self.rules_file and self.rules_file in paths:
            coding_rules = self._read_rules(owner, repo, ref)

        return RepoContextEntry(
            repo_key=repo_key(owner, repo),
            file_list=selected,
            coding_rules=coding_rules,
            updated_at=self.cache.now(),
        )

    def _read_rules(self, owner: str, repo: str, ref: str) -> str:
        try:
            return self.client.read_text(owner, repo, self.rules_file, ref=ref)
        except (GitHubAPIError, ValueError) as exc:
            # Generation proceeds without rules rather than failing the command.
            self.logger.warning("Could not read %s from %s/%s: %s", self.rules_file, owner, repo, exc)
            return ""


__all__ = ["DEFAULT_RULES_FILE", "RepoContextProvider"]
