"""GitHub collaborators: repository visibility and pull request creation."""

from flowzonify.github.client import GitHubClient, PullRequestCreated
from flowzonify.github.visibility import VisibilityOracle

__all__ = ["GitHubClient", "PullRequestCreated", "VisibilityOracle"]
