"""Persistence helpers for changebot."""

from .context_cache import (
    ContextCache,
    ContextStore,
    InMemoryContextStore,
    JsonFileContextStore,
)

__all__ = ["ContextCache", "ContextStore", "InMemoryContextStore", "JsonFileContextStore"]
