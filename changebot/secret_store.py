"""Start-up secret retrieval."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Protocol

from .errors import ConfigurationError


class SecretStore(Protocol):
    def get_secret(self, name: str) -> bytes: ...


class EnvSecretStore:
    """Reads secrets from environment variables."""

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = env if env is not None else os.environ

    def get_secret(self, name: str) -> bytes:
        value = self._env.get(name)
        if not value:
            raise ConfigurationError(f"Secret {name} is not set in the environment")
        return value.encode("utf-8")


class FileSecretStore:
    """Reads secrets mounted as files, one file per secret name."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def get_secret(self, name: str) -> bytes:
        path = self.directory / name
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ConfigurationError(f"Secret {name} could not be read from {path}: {exc}") from exc
        if not data.strip():
            raise ConfigurationError(f"Secret {name} at {path} is empty")
        return data


def read_text_secret(store: SecretStore, name: str) -> str:
    """Return a secret decoded as UTF-8 with surrounding whitespace removed."""
    try:
        value = store.get_secret(name).decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"Secret {name} is not valid UTF-8") from exc
    if not value:
        raise ConfigurationError(f"Secret {name} is empty")
    return value


__all__ = ["EnvSecretStore", "FileSecretStore", "SecretStore", "read_text_secret"]
