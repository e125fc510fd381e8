"""Process start-up wiring: secrets, clients and the orchestrator."""

from __future__ import annotations

from datetime import timedelta

import requests

from .config import ChangeBotConfig, load_config
from .context.provider import RepoContextProvider
from .context.selector import TokenBudgetSelector
from .errors import ConfigurationError
from .git.github import GitHubClient
from .git.publisher import ChangeSetPublisher
from .llm.runner import LLMRunner
from .logging import get_logger
from .notify import CallbackNotifier
from .orchestrator import CommandOrchestrator
from .secret_store import EnvSecretStore, FileSecretStore, SecretStore, read_text_secret
from .stores.context_cache import ContextCache, InMemoryContextStore, JsonFileContextStore

logger = get_logger("bootstrap")


def build_secret_store(config: ChangeBotConfig) -> SecretStore:
    if config.secrets.backend == "file":
        if config.secrets.directory is None:
            raise ConfigurationError("secrets.directory is required for the file backend")
        return FileSecretStore(config.secrets.directory)
    return EnvSecretStore()


def build_llm_runner(config: ChangeBotConfig) -> LLMRunner:
    llm = config.llm
    kwargs: dict[str, object] = {}
    if llm.base_url:
        kwargs["base_url"] = llm.base_url
    if llm.api_key:
        kwargs["api_key"] = llm.api_key
    if llm.temperature is not None:
        kwargs["temperature"] = llm.temperature
    if llm.request_timeout is not None:
        kwargs["request_timeout"] = llm.request_timeout
    return LLMRunner(llm.model, max_tokens=llm.max_tokens, **kwargs)  # type: ignore[arg-type]


def build_orchestrator(
    config: ChangeBotConfig | None = None,
    *,
    secret_store: SecretStore | None = None,
    session: requests.Session | None = None,
) -> CommandOrchestrator:
    """Read the host credential once and assemble every collaborator."""
    config = config or load_config()
    store = secret_store or build_secret_store(config)
    token = read_text_secret(store, config.github.token_secret)
    logger.info("Loaded GitHub token from %s secret store", config.secrets.backend)

    http = session or requests.Session()
    client = GitHubClient(
        token,
        base_url=config.github.base_url,
        session=http,
        request_timeout=config.github.request_timeout,
    )

    if config.context.cache_path is not None:
        context_store = JsonFileContextStore(config.context.cache_path)
    else:
        context_store = InMemoryContextStore()
    provider = RepoContextProvider(
        client,
        cache=ContextCache(context_store, ttl=timedelta(seconds=config.context.ttl_seconds)),
        selector=TokenBudgetSelector(config.context.max_tokens),
        rules_file=config.context.rules_file,
    )

    return CommandOrchestrator(
        context_provider=provider,
        llm_runner=build_llm_runner(config),
        publisher=ChangeSetPublisher(client, branch_prefix=config.publish.branch_prefix),
        notifier=CallbackNotifier(http),
        base_branch=config.github.base_branch,
        labels=config.publish.labels,
    )


__all__ = ["build_llm_runner", "build_orchestrator", "build_secret_store"]
