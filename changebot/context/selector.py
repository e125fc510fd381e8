"""Token-budgeted selection of repository paths for prompting."""

from __future__ import annotations

import math
from fnmatch import fnmatchcase
from typing import Iterable, List, Sequence

DEFAULT_MAX_TOKENS = 8000

# Source directories, documentation, environment files, the rules file and
# root-level index files.
DEFAULT_PRIORITY_PATTERNS: tuple[str, ...] = (
    "src/*",
    "app/*",
    "doc/*",
    "docs/*",
    "README*",
    ".env*",
    ".clinerules",
    "index.js",
    "index.ts",
)


class TokenBudgetSelector:
    """Orders a file manifest by priority and keeps the prefix that fits the budget."""

    def __init__(
        self,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        *,
        priority_patterns: Sequence[str] = DEFAULT_PRIORITY_PATTERNS,
    ) -> None:
        if max_tokens < 0:
            raise ValueError("max_tokens must not be negative")
        self.max_tokens = max_tokens
        self.priority_patterns = tuple(priority_patterns)

    @staticmethod
    def estimate_tokens(path: str) -> int:
        """Cheap token estimate based on the path length, not the file content."""
        return math.ceil(len(path) / 4)

    def is_priority(self, path: str) -> bool:
        return any(fnmatchcase(path, pattern) for pattern in self.priority_patterns)

    def rank(self, paths: Iterable[str]) -> List[str]:
        """Return root files, then priority files, then the rest; stable within each class."""
        root: List[str] = []
        priority: List[str] = []
        rest: List[str] = []
        for path in paths:
            if "/" not in path:
                root.append(path)
            elif self.is_priority(path):
                priority.append(path)
            else:
                rest.append(path)
        return root + priority + rest

    def select(self, paths: Iterable[str]) -> List[str]:
        selected: List[str] = []
        used = 0
        for path in self.rank(paths):
            cost = self.estimate_tokens(path)
            if used + cost > self.max_tokens:
                break
            used += cost
            selected.append(path)
        return selected

    def render(self, paths: Iterable[str]) -> str:
        return "\n".join(self.select(paths))


__all__ = ["DEFAULT_MAX_TOKENS", "DEFAULT_PRIORITY_PATTERNS", "TokenBudgetSelector"]
