"""Tests for start-up secret stores."""

from __future__ import annotations

from pathlib import Path

import pytest

from changebot.errors import ConfigurationError
from changebot.secret_store import EnvSecretStore, FileSecretStore, read_text_secret


def test_env_store_reads_variable() -> None:
    store = EnvSecretStore({"GITHUB_TOKEN": "ghp_example"})

    assert store.get_secret("GITHUB_TOKEN") == b"ghp_example"


def test_env_store_missing_secret_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="GITHUB_TOKEN"):
        EnvSecretStore({}).get_secret("GITHUB_TOKEN")


def test_file_store_reads_mounted_secret(tmp_path: Path) -> None:
    (tmp_path / "GITHUB_TOKEN").write_bytes(b"ghp_file\n")

    assert read_text_secret(FileSecretStore(tmp_path), "GITHUB_TOKEN") == "ghp_file"


def test_file_store_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        FileSecretStore(tmp_path).get_secret("GITHUB_TOKEN")


def test_read_text_secret_rejects_blank_and_binary() -> None:
    class _Store:
        def __init__(self, value: bytes) -> None:
            self.value = value

        def get_secret(self, name: str) -> bytes:
            return self.value

    with pytest.raises(ConfigurationError, match="empty"):
        read_text_secret(_Store(b"  \n"), "TOKEN")
    with pytest.raises(ConfigurationError, match="UTF-8"):
        read_text_secret(_Store(b"\xff\xfe"), "TOKEN")
