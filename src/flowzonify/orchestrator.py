"""Batch driver: onboard every configured repository, one at a time."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from flowzonify.config import FlowzonifySettings
from flowzonify.dependencies import DependencyInstaller
from flowzonify.document import Node
from flowzonify.github.client import GitHubClient
from flowzonify.github.visibility import VisibilityOracle
from flowzonify.pipeline.runner import PipelineOutcome, RepositoryPipeline, WorkspaceOpener
from flowzonify.repository import RepositoryDescriptor, parse_repository_list
from flowzonify.workspace import Workspace, remote_url

logger = logging.getLogger(__name__)


def github_workspace_opener(*, root: Path, host: str, token: str) -> WorkspaceOpener:
    """Clone `https://<host>/<owner>/<name>.git` into `root/<name>`."""

    def open_workspace(repository: RepositoryDescriptor) -> Workspace:
        url = remote_url(repository, host=host, token=token)
        return Workspace.clone(url, root / repository.name, secret=token)

    return open_workspace


class Orchestrator:
    """Runs the repository pipeline sequentially.

    There is no isolation between repositories: the first exception stops the batch.
    """

    def __init__(
        self,
        pipeline: RepositoryPipeline,
        *,
        closeables: Iterable[GitHubClient | VisibilityOracle] = (),
    ) -> None:
        self._pipeline = pipeline
        self._closeables = list(closeables)

    @classmethod
    def from_settings(cls, settings: FlowzonifySettings, template: Node) -> Orchestrator:
        github = GitHubClient(
            token=settings.personal_access_token,
            base_url=settings.github_base_url,
        )
        oracle = VisibilityOracle(host=settings.github_host)
        pipeline = RepositoryPipeline(
            template=template,
            open_workspace=github_workspace_opener(
                root=settings.workspace,
                host=settings.github_host,
                token=settings.personal_access_token,
            ),
            visibility=oracle,
            publisher=github,
            installer=DependencyInstaller(),
            keep_unchanged_workspace=settings.keep_unchanged_workspace,
            branch_attempts=settings.branch_attempts,
        )
        return cls(pipeline, closeables=(github, oracle))

    def run(self, repositories: Iterable[str | RepositoryDescriptor]) -> list[PipelineOutcome]:
        descriptors = [
            r if isinstance(r, RepositoryDescriptor) else parse_repository_list([r])[0]
            for r in repositories
        ]

        outcomes: list[PipelineOutcome] = []
        for index, repository in enumerate(descriptors, start=1):
            logger.info(
                f"Flowzonifying {repository.full_name}...",
                extra={"repo": repository.full_name, "index": index, "total": len(descriptors)},
            )
            outcome = self._pipeline.run(repository)
            outcomes.append(outcome)
            logger.info(
                "Repository finished",
                extra={"repo": repository.full_name, **outcome.snapshot.to_json()},
            )
        return outcomes

    def close(self) -> None:
        for closeable in self._closeables:
            closeable.close()
