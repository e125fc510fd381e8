"""Exception taxonomy shared across changebot components."""

from __future__ import annotations


class ChangeBotError(RuntimeError):
    """Base class for every failure raised by changebot."""


class ConfigurationError(ChangeBotError):
    """Raised when required start-up configuration or secrets are missing."""


class CommandError(ChangeBotError):
    """Raised when a slash command cannot be parsed into a Command."""


class ContextFetchError(ChangeBotError):
    """Raised when repository context cannot be listed or read from the host."""


class ModelInvocationError(ChangeBotError):
    """Raised when the generative model fails or produces no usable files."""


class PublishError(ChangeBotError):
    """Base class for failures while materialising a change set on the host."""


class RefResolutionError(PublishError):
    """Raised when the base branch head cannot be resolved."""


class BranchCreationError(PublishError):
    """Raised when the work branch cannot be created."""


class FileWriteError(PublishError):
    """Raised when a file cannot be read back or written on the work branch."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message)
        self.path = path


class PullRequestError(PublishError):
    """Raised when the pull request cannot be opened or labelled."""


class CallbackDeliveryError(ChangeBotError):
    """Raised when the final status message cannot be delivered."""


__all__ = [
    "BranchCreationError",
    "CallbackDeliveryError",
    "ChangeBotError",
    "CommandError",
    "ConfigurationError",
    "ContextFetchError",
    "FileWriteError",
    "ModelInvocationError",
    "PublishError",
    "PullRequestError",
    "RefResolutionError",
]
