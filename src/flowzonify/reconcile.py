"""Reconcile the canonical Flowzone template with a repository's workflow file.

Two paths exist:

- create: the repository has no workflow yet, the (visibility-adjusted) template is
  written as-is.
- update: `on` and `jobs.flowzone` are taken from the template wholesale, except
  `jobs.flowzone.with`, which stays as the repository has it. The template's
  `protect_branch` input is never reapplied on update.

Everything here is a pure function over `document` nodes; only `reconcile_file`
touches the filesystem.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from flowzonify import document
from flowzonify.document import MappingNode, Node, Segment

logger = logging.getLogger(__name__)

Action = Literal["Add", "Update"]

ON: tuple[Segment, ...] = ("on",)
PULL_REQUEST_TARGET: tuple[Segment, ...] = ("on", "pull_request_target")
FLOWZONE_JOB: tuple[Segment, ...] = ("jobs", "flowzone")
FLOWZONE_WITH: tuple[Segment, ...] = ("jobs", "flowzone", "with")
PROTECT_BRANCH: tuple[Segment, ...] = ("jobs", "flowzone", "with", "protect_branch")


class MissingKeyError(KeyError):
    """A workflow document lacks a key the update path cannot do without."""

    def __init__(self, path: tuple[Segment, ...], source: str) -> None:
        self.path = path
        self.source = source
        super().__init__(path)

    def __str__(self) -> str:
        dotted = ".".join(str(p) for p in self.path)
        return f'Missing "{dotted}" key in {self.source} flowzone.yml'


@dataclass(frozen=True, slots=True)
class Reconciliation:
    document: Node
    action: Action
    changed: bool

    @property
    def text(self) -> str:
        return document.serialize(self.document)


def prepare_template(template: Node, *, is_public: bool) -> Node:
    """Drop the `pull_request_target` trigger for repositories that are not public."""

    if is_public:
        return template
    return document.delete(template, PULL_REQUEST_TARGET)


def strip_protect_branch(template: Node) -> Node:
    """Remove `jobs.flowzone.with.protect_branch`, and `with` itself if left empty."""

    if not document.has(template, PROTECT_BRANCH):
        return template
    stripped = document.delete(template, PROTECT_BRANCH)
    if document.is_empty(document.get(stripped, FLOWZONE_WITH)):
        stripped = document.delete(stripped, FLOWZONE_WITH)
    return stripped


def _require(doc: Node, path: tuple[Segment, ...], source: str) -> None:
    if not isinstance(doc, MappingNode):
        raise MissingKeyError(path, source)
    try:
        node = document.get(doc, path)
    except document.PathError:
        node = None
    if node is None or (isinstance(node, document.ScalarNode) and node.value is None):
        raise MissingKeyError(path, source)
    # A job is a mapping; anything else cannot hold `with`.
    if path == FLOWZONE_JOB and not isinstance(node, MappingNode):
        raise MissingKeyError(path, source)


def create_config(template: Node) -> Reconciliation:
    return Reconciliation(document=template, action="Add", changed=True)


def update_config(
    template: Node, local: Node, *, previous_text: str | None = None
) -> Reconciliation:
    """Merge the template into an existing workflow document.

    Raises:
        MissingKeyError: if either side lacks `on` or `jobs.flowzone`.
    """

    template = strip_protect_branch(template)

    for path in (ON, FLOWZONE_JOB):
        _require(local, path, "local")
        _require(template, path, "example")

    # Captured before the overwrite; the repository owns its inputs.
    local_with = document.get(local, FLOWZONE_WITH)
    template_on = document.get(template, ON)
    template_job = document.get(template, FLOWZONE_JOB)
    assert template_on is not None and template_job is not None

    merged = document.put(local, ON, template_on)
    merged = document.put(merged, FLOWZONE_JOB, template_job)
    if not document.is_empty(local_with):
        assert local_with is not None
        merged = document.put(merged, FLOWZONE_WITH, local_with)

    changed = True
    if previous_text is not None:
        changed = document.serialize(merged) != previous_text
    return Reconciliation(document=merged, action="Update", changed=changed)


def reconcile(template: Node, existing_text: str | None, *, is_public: bool) -> Reconciliation:
    """Pick the create or update path depending on whether a workflow already exists."""

    prepared = prepare_template(template, is_public=is_public)
    if existing_text is None:
        return create_config(prepared)
    local = document.parse(existing_text)
    return update_config(prepared, local, previous_text=existing_text)


def reconcile_file(target: Path, template: Node, *, is_public: bool) -> Reconciliation:
    """Create or update the workflow file at `target`.

    Nothing is written if reconciliation fails.
    """

    existing = target.read_text(encoding="utf-8") if target.exists() else None
    result = reconcile(template, existing, is_public=is_public)

    if result.changed:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(result.text, encoding="utf-8")
    logger.info(
        "Reconciled flowzone config",
        extra={"path": str(target), "action": result.action, "changed": result.changed},
    )
    return result
