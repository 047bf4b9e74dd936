"""Run the onboarding pipeline for a single repository.

Steps, in order: clone, branch, drop the legacy config, reconcile the workflow,
check the working tree, then either skip or commit, push and open a pull request.
The workspace is removed at the end.

Failures are not caught here. Any exception aborts the repository, and the
orchestrator lets it abort the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import ClassVar, Protocol

from flowzonify.document import Node
from flowzonify.github.client import DEFAULT_BASE_BRANCH, PullRequestCreated
from flowzonify.reconcile import Action, reconcile_file
from flowzonify.repository import RepositoryDescriptor
from flowzonify.workspace import Workspace, WorkspaceError, generate_branch_name

from .state_machine import PipelineSnapshot, PipelineState, transition

logger = logging.getLogger(__name__)


class VisibilityCheck(Protocol):
    def is_public(self, repository: RepositoryDescriptor) -> bool: ...


class PullRequestPublisher(Protocol):
    def create_pull_request(
        self,
        *,
        owner: str,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str = DEFAULT_BASE_BRANCH,
    ) -> PullRequestCreated: ...


class Installer(Protocol):
    def install_if_needed(self) -> bool: ...


WorkspaceOpener = Callable[[RepositoryDescriptor], Workspace]


class BranchCollisionError(WorkspaceError):
    pass


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    action: Action
    branch: str

    FOOTER: ClassVar[str] = "Change-type: patch"

    @property
    def title(self) -> str:
        return f"CI: {self.action} flowzone config"

    @property
    def footer(self) -> str:
        return self.FOOTER

    @property
    def message(self) -> str:
        return f"{self.title}\n\n{self.footer}"


@dataclass(frozen=True, slots=True)
class PipelineOutcome:
    snapshot: PipelineSnapshot
    action: Action | None = None
    branch: str | None = None
    changed_files: tuple[str, ...] = ()
    pull_request: PullRequestCreated | None = None

    @property
    def repository(self) -> str:
        return self.snapshot.repository

    @property
    def state(self) -> PipelineState:
        return self.snapshot.state

    @property
    def skipped(self) -> bool:
        return PipelineState.SKIPPED in self.snapshot.history


@dataclass
class RepositoryPipeline:
    """Drives one repository through the onboarding state machine."""

    template: Node
    open_workspace: WorkspaceOpener
    visibility: VisibilityCheck
    publisher: PullRequestPublisher
    installer: Installer
    keep_unchanged_workspace: bool = False
    branch_attempts: int = 5
    branch_name_factory: Callable[[], str] = field(default=generate_branch_name)

    def choose_branch(self, workspace: Workspace) -> str:
        """Pick a random branch name that exists neither locally nor on the remote.

        Raises:
            BranchCollisionError: if every attempt collided.
        """

        for _ in range(self.branch_attempts):
            branch = self.branch_name_factory()
            if workspace.local_branch_exists(branch) or workspace.remote_branch_exists(branch):
                logger.warning("Branch name collision", extra={"branch": branch})
                continue
            return branch
        raise BranchCollisionError(
            f"No free branch name after {self.branch_attempts} attempts"
        )

    def run(self, repository: RepositoryDescriptor) -> PipelineOutcome:
        repo_name = repository.full_name
        snap = PipelineSnapshot(repository=repo_name)

        workspace = self.open_workspace(repository)
        snap = transition(current=snap, to=PipelineState.CLONED)

        branch = self.choose_branch(workspace)
        workspace.create_branch(branch)
        snap = transition(current=snap, to=PipelineState.BRANCHED)

        workspace.remove_legacy_config()
        is_public = self.visibility.is_public(repository)
        result = reconcile_file(workspace.config_path, self.template, is_public=is_public)
        snap = transition(current=snap, to=PipelineState.CONFIG_RECONCILED)

        changed = tuple(workspace.changed_files())
        if not changed:
            logger.info("No changes detected, skipping", extra={"repo": repo_name})
            snap = transition(current=snap, to=PipelineState.SKIPPED)
            if not self.keep_unchanged_workspace:
                workspace.remove()
                snap = transition(current=snap, to=PipelineState.CLEANED_UP)
            return PipelineOutcome(snapshot=snap, action=result.action, branch=branch)

        self.installer.install_if_needed()

        record = ChangeRecord(action=result.action, branch=branch)
        workspace.commit_all(record.message)
        snap = transition(current=snap, to=PipelineState.COMMITTED)

        workspace.push(branch)
        snap = transition(current=snap, to=PipelineState.PUSHED)

        pull_request = self.publisher.create_pull_request(
            owner=repository.owner,
            repo=repository.name,
            title=record.title,
            body=record.footer,
            head=branch,
            base=DEFAULT_BASE_BRANCH,
        )
        snap = transition(current=snap, to=PipelineState.PUBLISHED)
        logger.info(
            "Created pull request",
            extra={"repo": repo_name, "url": pull_request.url, "number": pull_request.number},
        )

        workspace.remove()
        snap = transition(current=snap, to=PipelineState.CLEANED_UP)

        return PipelineOutcome(
            snapshot=snap,
            action=result.action,
            branch=branch,
            changed_files=changed,
            pull_request=pull_request,
        )
