"""Configuration loading for changebot (.changebot.yml plus environment overrides)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigurationError

CONFIG_FILENAME = ".changebot.yml"


class ConfigError(ConfigurationError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class GitHubConfig:
    """Host API settings."""

    base_url: str = "https://api.github.com"
    base_branch: str = "main"
    token_secret: str = "GITHUB_TOKEN"
    request_timeout: float = 15.0


@dataclass
class LLMConfig:
    """Generative model settings; unset values fall back to CHANGEBOT_LLM_* env vars."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None


@dataclass
class ContextConfig:
    """Context selection and caching policy."""

    max_tokens: int = 8000
    ttl_seconds: int = 300
    rules_file: str = ".clinerules"
    cache_path: Optional[Path] = None


@dataclass
class PublishConfig:
    """Branch naming and pull request decoration."""

    branch_prefix: str = "ai-generated"
    labels: List[str] = field(default_factory=list)


@dataclass
class SecretsConfig:
    """Where start-up secrets are read from."""

    backend: str = "env"
    directory: Optional[Path] = None


@dataclass
class ChangeBotConfig:
    """Represents the settings defined in .changebot.yml and the environment."""

    root: Path
    github: GitHubConfig = field(default_factory=GitHubConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)
    secrets: SecretsConfig = field(default_factory=SecretsConfig)


def load_config(
    config_path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ChangeBotConfig:
    """Load configuration from disk and apply ``CHANGEBOT_*`` environment overrides."""
    env_map = env if env is not None else os.environ
    if config_path is None:
        configured = env_map.get("CHANGEBOT_CONFIG")
        config_path = Path(configured) if configured else Path.cwd()

    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    data = _read_config(config_file) if config_file.exists() else {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = ChangeBotConfig(root=root)

    github_data = _as_dict(data.get("github"))
    config.github = GitHubConfig(
        base_url=_as_str(github_data.get("base_url")) or config.github.base_url,
        base_branch=_as_str(github_data.get("base_branch")) or config.github.base_branch,
        token_secret=_as_str(github_data.get("token_secret")) or config.github.token_secret,
        request_timeout=_or_default(
            _as_float(github_data.get("request_timeout")), config.github.request_timeout
        ),
    )

    llm_data = _as_dict(data.get("llm"))
    config.llm = LLMConfig(
        model=_as_str(llm_data.get("model")),
        base_url=_as_str(llm_data.get("base_url")),
        api_key=_as_str(llm_data.get("api_key")),
        temperature=_as_float(llm_data.get("temperature")),
        max_tokens=_as_int(llm_data.get("max_tokens")),
        request_timeout=_as_float(llm_data.get("request_timeout")),
    )

    context_data = _as_dict(data.get("context"))
    cache_path = _as_str(context_data.get("cache_path"))
    config.context = ContextConfig(
        max_tokens=_or_default(_as_int(context_data.get("max_tokens")), config.context.max_tokens),
        ttl_seconds=_or_default(_as_int(context_data.get("ttl_seconds")), config.context.ttl_seconds),
        rules_file=_as_str(context_data.get("rules_file")) or config.context.rules_file,
        cache_path=root / cache_path if cache_path else None,
    )

    publish_data = _as_dict(data.get("publish"))
    config.publish = PublishConfig(
        branch_prefix=_as_str(publish_data.get("branch_prefix")) or config.publish.branch_prefix,
        labels=_as_str_list(publish_data.get("labels")),
    )

    secrets_data = _as_dict(data.get("secrets"))
    secrets_dir = _as_str(secrets_data.get("directory"))
    config.secrets = SecretsConfig(
        backend=_as_str(secrets_data.get("backend")) or config.secrets.backend,
        directory=root / secrets_dir if secrets_dir else None,
    )

    _apply_env_overrides(config, env_map)
    _validate(config)
    return config


def _apply_env_overrides(config: ChangeBotConfig, env: Mapping[str, str]) -> None:
    if env.get("CHANGEBOT_GITHUB_BASE_URL"):
        config.github.base_url = env["CHANGEBOT_GITHUB_BASE_URL"]
    if env.get("CHANGEBOT_BASE_BRANCH"):
        config.github.base_branch = env["CHANGEBOT_BASE_BRANCH"]
    if env.get("CHANGEBOT_GITHUB_TOKEN_SECRET"):
        config.github.token_secret = env["CHANGEBOT_GITHUB_TOKEN_SECRET"]

    max_tokens = _as_int(env.get("CHANGEBOT_CONTEXT_MAX_TOKENS"))
    if max_tokens is not None:
        config.context.max_tokens = max_tokens
    ttl_seconds = _as_int(env.get("CHANGEBOT_CONTEXT_TTL_SECONDS"))
    if ttl_seconds is not None:
        config.context.ttl_seconds = ttl_seconds
    if env.get("CHANGEBOT_CACHE_PATH"):
        config.context.cache_path = Path(env["CHANGEBOT_CACHE_PATH"]).expanduser()

    if env.get("CHANGEBOT_BRANCH_PREFIX"):
        config.publish.branch_prefix = env["CHANGEBOT_BRANCH_PREFIX"]
    if env.get("CHANGEBOT_PR_LABELS"):
        config.publish.labels = [
            label.strip() for label in env["CHANGEBOT_PR_LABELS"].split(",") if label.strip()
        ]

    if env.get("CHANGEBOT_SECRETS_BACKEND"):
        config.secrets.backend = env["CHANGEBOT_SECRETS_BACKEND"]
    if env.get("CHANGEBOT_SECRETS_DIR"):
        config.secrets.directory = Path(env["CHANGEBOT_SECRETS_DIR"]).expanduser()


def _validate(config: ChangeBotConfig) -> None:
    if config.context.max_tokens < 0:
        raise ConfigError("context.max_tokens must not be negative")
    if config.context.ttl_seconds < 0:
        raise ConfigError("context.ttl_seconds must not be negative")
    if config.secrets.backend not in {"env", "file"}:
        raise ConfigError(f"Unknown secrets backend '{config.secrets.backend}'")
    if config.secrets.backend == "file" and config.secrets.directory is None:
        raise ConfigError("secrets.directory is required for the file backend")


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ChangeBotConfig",
    "ConfigError",
    "ContextConfig",
    "GitHubConfig",
    "LLMConfig",
    "PublishConfig",
    "SecretsConfig",
    "load_config",
]
