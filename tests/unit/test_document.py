"""Unit tests for the typed YAML document model."""

from __future__ import annotations

import pytest

from flowzonify import document
from flowzonify.document import MappingNode, PathError, ScalarNode, SequenceNode

WORKFLOW = """\
name: Flowzone
on:
  pull_request:
    types: [opened, synchronize]
  push: {}
jobs:
  flowzone:
    uses: product-os/flowzone/.github/workflows/flowzone.yml@master
    if: |
      github.event_name == 'pull_request' ||
      github.event_name == 'pull_request_target'
    with:
      additional_tests: true
      retries: 3
"""


def test_parse_keeps_key_order_and_on_as_string() -> None:
    doc = document.parse(WORKFLOW)
    assert isinstance(doc, MappingNode)
    assert doc.keys() == ["name", "on", "jobs"]

    on = document.get(doc, ("on",))
    assert isinstance(on, MappingNode)
    assert on.keys() == ["pull_request", "push"]


def test_parse_scalars_and_sequences() -> None:
    doc = document.parse(WORKFLOW)
    assert document.get(doc, ("jobs", "flowzone", "with", "additional_tests")) == ScalarNode(True)
    assert document.get(doc, ("jobs", "flowzone", "with", "retries")) == ScalarNode(3)
    types = document.get(doc, ("on", "pull_request", "types"))
    assert types == SequenceNode((ScalarNode("opened"), ScalarNode("synchronize")))
    assert document.get(doc, ("on", "pull_request", "types", 1)) == ScalarNode("synchronize")


def test_empty_text_parses_to_empty_mapping() -> None:
    assert document.parse("") == MappingNode()


def test_serialize_round_trip_is_structurally_equal() -> None:
    doc = document.parse(WORKFLOW)
    text = document.serialize(doc)
    assert document.parse(text) == doc
    # Stable once normalised.
    assert document.serialize(document.parse(text)) == text


def test_serialize_uses_literal_blocks_for_multiline_strings() -> None:
    text = document.serialize(document.parse(WORKFLOW))
    assert "if: |" in text
    assert "github.event_name == 'pull_request' ||\n" in text


def test_serialize_writes_on_key_unquoted() -> None:
    text = document.serialize(document.parse(WORKFLOW))
    assert text.splitlines()[1] == "on:"


def test_has_and_get_missing_paths() -> None:
    doc = document.parse(WORKFLOW)
    assert document.has(doc, ("jobs", "flowzone"))
    assert not document.has(doc, ("jobs", "other"))
    assert document.get(doc, ("jobs", "flowzone", "missing", "deeper")) is None
    assert document.get(doc, ("on", "pull_request", "types", 5)) is None


def test_get_rejects_mistyped_segments() -> None:
    doc = document.parse(WORKFLOW)
    with pytest.raises(PathError):
        document.get(doc, (0,))
    with pytest.raises(PathError):
        document.get(doc, ("on", "pull_request", "types", "first"))


def test_delete_returns_new_document() -> None:
    doc = document.parse(WORKFLOW)
    updated = document.delete(doc, ("jobs", "flowzone", "with", "retries"))

    assert document.has(doc, ("jobs", "flowzone", "with", "retries"))
    assert not document.has(updated, ("jobs", "flowzone", "with", "retries"))
    assert document.has(updated, ("jobs", "flowzone", "with", "additional_tests"))


def test_delete_absent_path_is_noop() -> None:
    doc = document.parse(WORKFLOW)
    assert document.delete(doc, ("on", "pull_request_target")) == doc
    assert document.delete(doc, ("nope", "deeper")) == doc


def test_delete_sequence_item() -> None:
    doc = document.parse(WORKFLOW)
    updated = document.delete(doc, ("on", "pull_request", "types", 0))
    assert document.get(updated, ("on", "pull_request", "types")) == SequenceNode(
        (ScalarNode("synchronize"),)
    )


def test_put_replaces_in_place_and_creates_intermediates() -> None:
    doc = document.parse(WORKFLOW)
    replaced = document.put(doc, ("on",), MappingNode((("push", MappingNode()),)))
    assert isinstance(replaced, MappingNode)
    assert replaced.keys() == ["name", "on", "jobs"]
    assert document.get(replaced, ("on",)) == MappingNode((("push", MappingNode()),))

    created = document.put(doc, ("jobs", "lint", "runs-on"), ScalarNode("ubuntu-latest"))
    assert document.get(created, ("jobs", "lint", "runs-on")) == ScalarNode("ubuntu-latest")


def test_put_into_scalar_fails() -> None:
    doc = document.parse(WORKFLOW)
    with pytest.raises(PathError):
        document.put(doc, ("name", "child"), ScalarNode(1))


def test_is_empty() -> None:
    assert document.is_empty(None)
    assert document.is_empty(MappingNode())
    assert document.is_empty(ScalarNode(None))
    assert not document.is_empty(MappingNode((("a", ScalarNode(1)),)))
    assert not document.is_empty(ScalarNode(False))


def test_python_bridge() -> None:
    doc = document.from_python({"on": {"push": {}}, "jobs": {"flowzone": {"with": {"a": [1, 2]}}}})
    assert document.to_python(doc) == {"on": {"push": {}}, "jobs": {"flowzone": {"with": {"a": [1, 2]}}}}


def test_duplicate_keys_rejected() -> None:
    with pytest.raises(ValueError):
        MappingNode((("a", ScalarNode(1)), ("a", ScalarNode(2))))


def test_non_string_keys_are_written_back_unquoted() -> None:
    text = "on:\n  push: {}\ntrue: 1\n3: three\n~: 2\n"
    doc = document.parse(text)

    assert isinstance(doc, MappingNode)
    assert doc.keys() == ["on", "true", "3", "null"]
    assert document.get(doc, ("true",)) == ScalarNode(1)
    assert document.serialize(doc) == "on:\n  push: {}\ntrue: 1\n3: three\nnull: 2\n"


def test_string_key_that_looks_boolean_stays_quoted() -> None:
    text = document.serialize(document.parse("'true': 1\n"))
    assert text == "'true': 1\n"
