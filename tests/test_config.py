"""Tests for changebot.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from changebot.config import ChangeBotConfig, ConfigError, load_config
from changebot.errors import ConfigurationError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, env={})

    assert isinstance(config, ChangeBotConfig)
    assert config.root == tmp_path.resolve()
    assert config.github.base_branch == "main"
    assert config.github.token_secret == "GITHUB_TOKEN"
    assert config.context.max_tokens == 8000
    assert config.context.ttl_seconds == 300
    assert config.context.rules_file == ".clinerules"
    assert config.context.cache_path is None
    assert config.publish.branch_prefix == "ai-generated"
    assert config.publish.labels == []
    assert config.secrets.backend == "env"
    assert config.llm.model is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".changebot.yml"
    config_file.write_text(
        """
github:
  base_url: "https://github.example.com/api/v3"
  base_branch: develop
  token_secret: BOT_TOKEN
  request_timeout: 30
llm:
  model: "gemini-2.5-pro"
  base_url: "https://models.example.com/v1"
  temperature: 0.1
  max_tokens: 4096
  request_timeout: 120
context:
  max_tokens: 2000
  ttl_seconds: 60
  rules_file: CONTRIBUTING.md
  cache_path: .changebot/context.json
publish:
  branch_prefix: bot
  labels: [ai, needs-review]
secrets:
  backend: file
  directory: /var/secrets
""",
        encoding="utf-8",
    )

    config = load_config(config_file, env={})

    assert config.github.base_url == "https://github.example.com/api/v3"
    assert config.github.base_branch == "develop"
    assert config.github.token_secret == "BOT_TOKEN"
    assert config.github.request_timeout == 30.0
    assert config.llm.model == "gemini-2.5-pro"
    assert config.llm.temperature == 0.1
    assert config.llm.max_tokens == 4096
    assert config.context.max_tokens == 2000
    assert config.context.ttl_seconds == 60
    assert config.context.rules_file == "CONTRIBUTING.md"
    assert config.context.cache_path == tmp_path.resolve() / ".changebot/context.json"
    assert config.publish.branch_prefix == "bot"
    assert config.publish.labels == ["ai", "needs-review"]
    assert config.secrets.backend == "file"
    assert config.secrets.directory == Path("/var/secrets")


def test_env_overrides_file_values(tmp_path: Path) -> None:
    (tmp_path / ".changebot.yml").write_text("context:\n  max_tokens: 2000\n", encoding="utf-8")

    config = load_config(
        tmp_path,
        env={
            "CHANGEBOT_CONTEXT_MAX_TOKENS": "500",
            "CHANGEBOT_CONTEXT_TTL_SECONDS": "0",
            "CHANGEBOT_BASE_BRANCH": "trunk",
            "CHANGEBOT_PR_LABELS": "ai, bot ,",
            "CHANGEBOT_CACHE_PATH": str(tmp_path / "cache.json"),
        },
    )

    assert config.context.max_tokens == 500
    assert config.context.ttl_seconds == 0
    assert config.github.base_branch == "trunk"
    assert config.publish.labels == ["ai", "bot"]
    assert config.context.cache_path == tmp_path / "cache.json"


def test_config_path_can_come_from_env(tmp_path: Path) -> None:
    config_file = tmp_path / "custom.yml"
    config_file.write_text("github:\n  base_branch: release\n", encoding="utf-8")

    config = load_config(env={"CHANGEBOT_CONFIG": str(config_file)})

    assert config.github.base_branch == "release"


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".changebot.yml").write_text("github: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, env={})


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".changebot.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(tmp_path, env={})


def test_file_backend_requires_directory(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="secrets.directory"):
        load_config(tmp_path, env={"CHANGEBOT_SECRETS_BACKEND": "file"})
