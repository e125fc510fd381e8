"""GitHub access and change-set publishing."""

from .github import GitHubAPIError, GitHubClient, GitHubNotFoundError
from .publisher import ChangeSetPublisher, build_pull_request_body

__all__ = [
    "ChangeSetPublisher",
    "GitHubAPIError",
    "GitHubClient",
    "GitHubNotFoundError",
    "build_pull_request_body",
]
