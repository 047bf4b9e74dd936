"""Unit tests for the CLI entrypoint and logging setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import Mock

import pytest

from flowzonify import main as cli
from flowzonify.github.client import PullRequestCreated
from flowzonify.logging import JsonFormatter, configure_logging
from flowzonify.pipeline.runner import PipelineOutcome
from flowzonify.pipeline.state_machine import PipelineSnapshot


@pytest.fixture
def env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("REPOS", "PERSONAL_ACCESS_TOKEN", "WORKSPACE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_missing_configuration_exits_2(env: None, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([]) == 2
    assert "Configuration error" in capsys.readouterr().err


def test_successful_run_exits_0(
    env: None, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("REPOS", "octo/one,octo/two")
    monkeypatch.setenv("PERSONAL_ACCESS_TOKEN", "test-token")
    orchestrator = Mock()
    orchestrator.run.return_value = [
        PipelineOutcome(
            snapshot=PipelineSnapshot(repository="octo/one"),
            pull_request=PullRequestCreated(number=1, url="https://github.com/octo/one/pull/1"),
        ),
        PipelineOutcome(snapshot=PipelineSnapshot(repository="octo/two")),
    ]
    from_settings = Mock(return_value=orchestrator)
    monkeypatch.setattr(cli.Orchestrator, "from_settings", from_settings)

    assert cli.main([]) == 0

    orchestrator.run.assert_called_once_with(["octo/one", "octo/two"])
    orchestrator.close.assert_called_once_with()
    out = capsys.readouterr().out
    assert "Created pull request for 'octo/one': https://github.com/octo/one/pull/1" in out
    assert "No changes detected for 'octo/two'" in out


def test_fatal_error_exits_1_and_closes(env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REPOS", "octo/one")
    monkeypatch.setenv("PERSONAL_ACCESS_TOKEN", "test-token")
    orchestrator = Mock()
    orchestrator.run.side_effect = RuntimeError("clone failed")
    monkeypatch.setattr(cli.Orchestrator, "from_settings", Mock(return_value=orchestrator))

    assert cli.main([]) == 1
    orchestrator.close.assert_called_once_with()


def test_template_override(env: None, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REPOS", "octo/one")
    monkeypatch.setenv("PERSONAL_ACCESS_TOKEN", "test-token")
    custom = tmp_path / "custom.yml"
    custom.write_text("on:\n  push: {}\njobs:\n  flowzone:\n    uses: a\n", encoding="utf-8")
    from_settings = Mock()
    from_settings.return_value.run.return_value = []
    monkeypatch.setattr(cli.Orchestrator, "from_settings", from_settings)

    assert cli.main(["--template", str(custom)]) == 0

    template = from_settings.call_args.args[1]
    assert template.keys() == ["on", "jobs"]


def test_json_formatter_includes_extra() -> None:
    record = logging.LogRecord("flowzonify.test", logging.INFO, __file__, 1, "hello", None, None)
    record.repo = "octo/one"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["extra"] == {"repo": "octo/one"}


def test_configure_logging_replaces_handlers() -> None:
    configure_logging("debug")
    configure_logging("info")

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
    assert root.level == logging.INFO
    assert logging.getLogger("git").level == logging.INFO


def test_configure_logging_hides_git_command_lines_at_debug() -> None:
    configure_logging("debug")

    assert not logging.getLogger("git.cmd").isEnabledFor(logging.DEBUG)
