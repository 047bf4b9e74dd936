"""Local working copy of one repository.

Wraps GitPython. A workspace is created by cloning, used for a single change
(branch, edit, commit, push) and then removed from disk.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from git import Repo
from git.exc import GitCommandError

from flowzonify.repository import RepositoryDescriptor

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(".github/workflows/flowzone.yml")
LEGACY_CONFIG_PATH = Path(".resinci.yml")
BRANCH_PREFIX = "flowzonify-"


class WorkspaceError(RuntimeError):
    pass


def remote_url(repository: RepositoryDescriptor, *, host: str, token: str | None = None) -> str:
    """HTTPS remote for a repository, with token auth embedded when given."""

    auth = f"x-access-token:{token}@" if token else ""
    return f"https://{auth}{host}/{repository.owner}/{repository.name}.git"


def generate_branch_name(prefix: str = BRANCH_PREFIX) -> str:
    return f"{prefix}{uuid.uuid4().hex[:8]}"


def _redact(text: str, secret: str | None) -> str:
    if not secret:
        return text
    return text.replace(secret, "***")


class Workspace:
    def __init__(self, repo: Repo, *, secret: str | None = None) -> None:
        self._repo = repo
        self._secret = secret

    @classmethod
    def clone(cls, url: str, dest: Path, *, secret: str | None = None) -> Workspace:
        """Clone `url` into `dest`, which must not exist yet.

        Raises:
            WorkspaceError: if `dest` exists or git fails (missing remote, rejected auth).
        """

        if dest.exists():
            raise WorkspaceError(f"Workspace directory already exists: {dest}")
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            repo = Repo.clone_from(url, dest)
        except GitCommandError as e:
            # `from None`: the original exception carries the authenticated URL.
            raise WorkspaceError(
                f"git clone failed for {_redact(url, secret)}: {_redact(str(e), secret)}"
            ) from None
        logger.info("Cloned repository", extra={"path": str(dest)})
        return cls(repo, secret=secret)

    @contextmanager
    def _git(self, operation: str) -> Iterator[None]:
        try:
            yield
        except GitCommandError as e:
            raise WorkspaceError(
                f"git {operation} failed in {self.path}: {_redact(str(e), self._secret)}"
            ) from None

    @property
    def path(self) -> Path:
        assert self._repo.working_tree_dir is not None
        return Path(self._repo.working_tree_dir)

    @property
    def config_path(self) -> Path:
        return self.path / CONFIG_PATH

    @property
    def active_branch(self) -> str:
        return self._repo.active_branch.name

    def local_branch_exists(self, branch: str) -> bool:
        return any(head.name == branch for head in self._repo.heads)

    def remote_branch_exists(self, branch: str) -> bool:
        with self._git("ls-remote"):
            out = self._repo.git.ls_remote("--heads", "origin", f"refs/heads/{branch}")
        return bool(out.strip())

    def create_branch(self, branch: str) -> None:
        """Create and check out `branch` from the current tip. Never reuses a branch."""

        if self.local_branch_exists(branch):
            raise WorkspaceError(f"Branch already exists: {branch}")
        with self._git("checkout"):
            self._repo.git.checkout("-b", branch)
        logger.debug("Checked out branch", extra={"branch": branch})

    def remove_legacy_config(self) -> bool:
        legacy = self.path / LEGACY_CONFIG_PATH
        if not legacy.exists():
            return False
        legacy.unlink()
        logger.info("Removed legacy config", extra={"path": str(LEGACY_CONFIG_PATH)})
        return True

    def changed_files(self) -> list[str]:
        """Paths with working tree changes, untracked files included."""

        with self._git("status"):
            out = self._repo.git.status("--porcelain", "--untracked-files=all")
        return [line.split(maxsplit=1)[1] for line in out.splitlines() if line.strip()]

    def commit_all(self, message: str) -> str:
        """Stage everything and commit. Returns the new commit sha."""

        with self._git("commit"):
            self._repo.git.add(A=True)
            self._repo.git.commit("-m", message)
        sha = self._repo.head.commit.hexsha
        logger.info("Committed changes", extra={"sha": sha})
        return sha

    def push(self, branch: str) -> None:
        with self._git("push"):
            self._repo.git.push("origin", branch)
        logger.info("Pushed branch", extra={"branch": branch})

    def remove(self) -> None:
        path = self.path
        self._repo.close()
        shutil.rmtree(path)
        logger.info("Removed workspace", extra={"path": str(path)})
