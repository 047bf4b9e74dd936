"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from git import Repo

from flowzonify.document import MappingNode
from flowzonify.template import load_template

RemoteFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def git_identity(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give git a committer identity without touching global config."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Flowzonify Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "flowzonify@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Flowzonify Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "flowzonify@example.com")


@pytest.fixture
def template() -> MappingNode:
    """Provide the packaged flowzone template."""
    return load_template()


@pytest.fixture
def make_remote(tmp_path: Path) -> RemoteFactory:
    """Create a bare repository on `master` seeded with the given files."""

    def factory(files: dict[str, str] | None = None, *, name: str = "remote") -> Path:
        seed = tmp_path / f"{name}-seed"
        repo = Repo.init(seed)
        repo.git.symbolic_ref("HEAD", "refs/heads/master")
        for rel, content in (files or {"README.md": "# test\n"}).items():
            path = seed / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        repo.git.add(A=True)
        repo.git.commit("-m", "Initial commit")

        bare = tmp_path / f"{name}.git"
        repo.clone(str(bare), bare=True)
        repo.close()
        return bare

    return factory


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Provide an empty workspace root directory."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root
