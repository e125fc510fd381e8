"""Repository context selection for prompting."""

from .provider import RepoContextProvider
from .selector import TokenBudgetSelector

__all__ = ["RepoContextProvider", "TokenBudgetSelector"]
