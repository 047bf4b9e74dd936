"""GitHub API client wrapper.

This intentionally wraps PyGithub to keep GitHub calls out of pipeline code and make
tests easy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from github import Auth, Github

logger = logging.getLogger(__name__)

DEFAULT_BASE_BRANCH = "master"


@dataclass(frozen=True, slots=True)
class PullRequestCreated:
    number: int
    url: str | None


class GitHubClient:
    """Small wrapper around PyGithub for opening pull requests."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        if github_api is not None:
            self._github = github_api
            logger.debug("Using injected Github instance")
            return

        auth = Auth.Token(token)
        self._github = Github(auth=auth, base_url=base_url.rstrip("/"))

    def create_pull_request(
        self,
        *,
        owner: str,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str = DEFAULT_BASE_BRANCH,
    ) -> PullRequestCreated:
        """Open a pull request from `head` into `base`.

        The base branch is not checked against the repository's default branch;
        GitHub rejects the request if it does not exist.

        Raises:
            github.GithubException: if GitHub rejects the request.
        """

        full_name = f"{owner}/{repo}"
        logger.info(
            "Creating pull request",
            extra={"repo": full_name, "title": title, "head": head, "base": base},
        )
        repository = self._github.get_repo(full_name)
        pr = repository.create_pull(title=title, body=body, head=head, base=base)

        html_url = pr.html_url if isinstance(pr.html_url, str) and pr.html_url.strip() else None
        logger.info(
            "Pull request created",
            extra={"repo": full_name, "number": pr.number, "url": html_url},
        )
        return PullRequestCreated(number=pr.number, url=html_url)

    def close(self) -> None:
        self._github.close()
