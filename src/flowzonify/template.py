"""Canonical Flowzone workflow template."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path

from flowzonify import document
from flowzonify.document import MappingNode

logger = logging.getLogger(__name__)

TEMPLATE_RESOURCE = "flowzone.yml"


def read_template_text(path: Path | None = None) -> str:
    if path is not None:
        return path.read_text(encoding="utf-8")
    return (
        resources.files("flowzonify")
        .joinpath("templates", TEMPLATE_RESOURCE)
        .read_text(encoding="utf-8")
    )


def load_template(path: Path | None = None) -> MappingNode:
    """Load the canonical template, either packaged or from an explicit path.

    Raises:
        ValueError: if the template is not a YAML mapping.
    """

    doc = document.parse(read_template_text(path))
    if not isinstance(doc, MappingNode):
        raise ValueError("Flowzone template must be a YAML mapping")
    logger.info(
        "Loaded flowzone template",
        extra={"path": str(path) if path is not None else f"<package>/{TEMPLATE_RESOURCE}"},
    )
    return doc
