"""TTL cache for per-repository prompting context."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import json
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol

from ..logging import get_logger
from ..models import RepoContextEntry

_CACHE_VERSION = 1

DEFAULT_TTL = timedelta(minutes=5)


def utc_now() -> datetime:
    return datetime.now(UTC)


class ContextStore(Protocol):
    """Key-value persistence behind ContextCache."""

    def load(self, key: str) -> Optional[RepoContextEntry]: ...

    def save(self, key: str, entry: RepoContextEntry) -> None: ...


class InMemoryContextStore:
    """Process-local store; contents vanish with the process."""

    def __init__(self) -> None:
        self._entries: Dict[str, RepoContextEntry] = {}

    def load(self, key: str) -> Optional[RepoContextEntry]:
        return self._entries.get(key)

    def save(self, key: str, entry: RepoContextEntry) -> None:
        self._entries[key] = entry


class JsonFileContextStore:
    """Stores context entries in a versioned JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._entries: Dict[str, Dict[str, object]] = {}
        self._load(path)

    def load(self, key: str) -> Optional[RepoContextEntry]:
        raw = self._entries.get(key)
        if raw is None:
            return None
        return _entry_from_dict(key, raw)

    def save(self, key: str, entry: RepoContextEntry) -> None:
        self._entries[key] = _entry_to_dict(entry)
        self.persist()

    def persist(self) -> None:
        payload = {
            "version": _CACHE_VERSION,
            "entries": self._entries,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            get_logger("stores").warning("Ignoring unreadable context cache at %s", path)
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        self._entries = {
            key: raw
            for key, raw in entries.items()
            if isinstance(key, str) and isinstance(raw, dict)
        }


class ContextCache:
    """Returns cached context only while it is younger than the TTL."""

    def __init__(
        self,
        store: ContextStore | None = None,
        *,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store if store is not None else InMemoryContextStore()
        self.ttl = ttl
        self._clock = clock

    def get(self, repo_key: str) -> Optional[RepoContextEntry]:
        entry = self.store.load(repo_key)
        if entry is None or not self.is_fresh(entry):
            return None
        return entry

    def put(self, repo_key: str, entry: RepoContextEntry) -> None:
        self.store.save(repo_key, entry)

    def is_fresh(self, entry: RepoContextEntry, now: datetime | None = None) -> bool:
        current = now or self._clock()
        return current - entry.updated_at < self.ttl

    def now(self) -> datetime:
        return self._clock()


def _entry_to_dict(entry: RepoContextEntry) -> Dict[str, object]:
    return {
        "file_list": list(entry.file_list),
        "coding_rules": entry.coding_rules,
        "updated_at": entry.updated_at.isoformat(),
    }


def _entry_from_dict(key: str, raw: Dict[str, object]) -> Optional[RepoContextEntry]:
    file_list = raw.get("file_list")
    coding_rules = raw.get("coding_rules", "")
    updated_at = raw.get("updated_at")
    if not isinstance(file_list, list) or not isinstance(updated_at, str):
        return None
    try:
        timestamp = datetime.fromisoformat(updated_at)
    except ValueError:
        return None
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return RepoContextEntry(
        repo_key=key,
        file_list=[str(path) for path in file_list],
        coding_rules=coding_rules if isinstance(coding_rules, str) else "",
        updated_at=timestamp,
    )


__all__ = [
    "ContextCache",
    "ContextStore",
    "DEFAULT_TTL",
    "InMemoryContextStore",
    "JsonFileContextStore",
    "utc_now",
]
