"""Typed YAML document model.

A config file is represented as an immutable tree of three node kinds:

- `ScalarNode`: a leaf value (string, number, boolean, date or null)
- `MappingNode`: ordered `(key, node)` pairs with string keys
- `SequenceNode`: ordered child nodes

Parsing and serialization go through `ruamel.yaml` in round-trip mode so that
YAML 1.2 rules apply (`on` stays a string key) and key order is preserved.
Path helpers never mutate their input; they return a new tree.
"""

from __future__ import annotations

import datetime as dt
import io
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.scalarstring import LiteralScalarString

ScalarValue = Union[str, int, float, bool, dt.date, None]
Segment = Union[str, int]


class PathError(TypeError):
    """A path segment does not fit the node it addresses."""


@dataclass(frozen=True, slots=True)
class ScalarNode:
    value: ScalarValue = None


@dataclass(frozen=True, slots=True)
class MappingNode:
    entries: tuple[tuple[str, Node], ...] = ()

    def __post_init__(self) -> None:
        keys = [k for k, _ in self.entries]
        if len(keys) != len(set(keys)):
            raise ValueError("Duplicate mapping keys")

    def keys(self) -> list[str]:
        return [k for k, _ in self.entries]

    def get(self, key: str) -> Node | None:
        for k, v in self.entries:
            if k == key:
                return v
        return None

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.entries)

    def with_entry(self, key: str, node: Node) -> MappingNode:
        """Replace `key` in place, or append it when absent."""

        if key in self:
            return MappingNode(tuple((k, node if k == key else v) for k, v in self.entries))
        return MappingNode(self.entries + ((key, node),))

    def without(self, key: str) -> MappingNode:
        return MappingNode(tuple((k, v) for k, v in self.entries if k != key))


@dataclass(frozen=True, slots=True)
class SequenceNode:
    items: tuple[Node, ...] = ()

    def __len__(self) -> int:
        return len(self.items)


Node = Union[ScalarNode, MappingNode, SequenceNode]


class PlainKey(str):
    """A mapping key that YAML resolves to a non-string scalar (`true`, `3`, `null`).

    Paths address it by its YAML spelling; it is written back unquoted.
    """

    tag: str

    def __new__(cls, value: object) -> PlainKey:
        if value is None:
            text, tag = "null", "null"
        elif isinstance(value, bool):
            text, tag = ("true" if value else "false"), "bool"
        elif isinstance(value, int):
            text, tag = str(int(value)), "int"
        elif isinstance(value, float):
            text, tag = str(float(value)), "float"
        elif isinstance(value, dt.date):
            text, tag = value.isoformat(), "timestamp"
        else:
            raise TypeError(f"Unsupported YAML mapping key: {type(value).__name__}")
        key = super().__new__(cls, text)
        key.tag = tag
        return key


def _represent_plain_key(representer: Any, key: PlainKey) -> Any:
    return representer.represent_scalar(f"tag:yaml.org,2002:{key.tag}", str(key))


def _yaml() -> YAML:
    yaml = YAML(typ="rt")
    yaml.allow_duplicate_keys = False
    yaml.default_flow_style = False
    yaml.width = 4096
    yaml.indent(mapping=2, sequence=4, offset=2)
    yaml.representer.add_representer(PlainKey, _represent_plain_key)
    return yaml


def _scalar(value: object) -> ScalarNode:
    # ruamel hands back subclasses (ScalarInt, ScalarFloat, ScalarString...); normalise them.
    if value is None:
        return ScalarNode(None)
    if isinstance(value, bool):
        return ScalarNode(bool(value))
    if isinstance(value, int):
        return ScalarNode(int(value))
    if isinstance(value, float):
        return ScalarNode(float(value))
    if isinstance(value, str):
        return ScalarNode(str(value))
    if isinstance(value, dt.date):
        return ScalarNode(value)
    raise TypeError(f"Unsupported YAML scalar: {type(value).__name__}")


def _key(key: object) -> str:
    if isinstance(key, str):
        return str(key)
    return PlainKey(key)


def from_python(obj: object) -> Node:
    """Build a node tree from plain (or ruamel-loaded) Python structures."""

    if isinstance(obj, Mapping):
        return MappingNode(tuple((_key(k), from_python(v)) for k, v in obj.items()))
    if isinstance(obj, Sequence) and not isinstance(obj, str | bytes):
        return SequenceNode(tuple(from_python(v) for v in obj))
    return _scalar(obj)


def to_python(node: Node) -> object:
    """Convert a node tree into plain dicts, lists and scalars."""

    if isinstance(node, MappingNode):
        return {k: to_python(v) for k, v in node.entries}
    if isinstance(node, SequenceNode):
        return [to_python(v) for v in node.items]
    return node.value


def _to_ruamel(node: Node) -> object:
    if isinstance(node, MappingNode):
        out = CommentedMap()
        for k, v in node.entries:
            out[k] = _to_ruamel(v)
        return out
    if isinstance(node, SequenceNode):
        return CommentedSeq(_to_ruamel(v) for v in node.items)
    if isinstance(node.value, str) and "\n" in node.value:
        return LiteralScalarString(node.value)
    return node.value


def parse(text: str) -> Node:
    """Parse YAML text. An empty document is an empty mapping."""

    loaded = _yaml().load(text)
    if loaded is None:
        return MappingNode()
    return from_python(loaded)


def serialize(node: Node) -> str:
    """Emit block-style YAML, writing multi-line strings as literal blocks."""

    stream = io.StringIO()
    _yaml().dump(_to_ruamel(node), stream)
    return stream.getvalue()


def _child(node: Node, segment: Segment) -> Node | None:
    if isinstance(node, MappingNode):
        if not isinstance(segment, str):
            raise PathError(f"Mapping segment must be a string, got {segment!r}")
        return node.get(segment)
    if isinstance(node, SequenceNode):
        if isinstance(segment, bool) or not isinstance(segment, int):
            raise PathError(f"Sequence segment must be an integer, got {segment!r}")
        if -len(node.items) <= segment < len(node.items):
            return node.items[segment]
        return None
    return None


def get(node: Node, path: Sequence[Segment]) -> Node | None:
    """Return the node at `path`, or None when any segment is absent."""

    current: Node | None = node
    for segment in path:
        if current is None:
            return None
        current = _child(current, segment)
    return current


def has(node: Node, path: Sequence[Segment]) -> bool:
    return get(node, path) is not None


def delete(node: Node, path: Sequence[Segment]) -> Node:
    """Return a copy of `node` without the entry at `path` (no-op if absent)."""

    if not path:
        raise PathError("Cannot delete the document root")
    head, rest = path[0], tuple(path[1:])
    child = _child(node, head)
    if child is None:
        return node
    if isinstance(node, MappingNode):
        assert isinstance(head, str)
        return node.without(head) if not rest else node.with_entry(head, delete(child, rest))
    assert isinstance(node, SequenceNode) and isinstance(head, int)
    index = head % len(node.items)
    items = list(node.items)
    if rest:
        items[index] = delete(child, rest)
    else:
        del items[index]
    return SequenceNode(tuple(items))


def put(node: Node, path: Sequence[Segment], value: Node) -> Node:
    """Return a copy of `node` with `value` placed at `path`.

    Missing intermediate mappings are created. Sequence indexes must already exist.
    """

    if not path:
        return value
    head, rest = path[0], tuple(path[1:])
    if isinstance(node, MappingNode):
        if not isinstance(head, str):
            raise PathError(f"Mapping segment must be a string, got {head!r}")
        child = node.get(head)
        if child is None:
            child = MappingNode()
        return node.with_entry(head, put(child, rest, value))
    if isinstance(node, SequenceNode):
        child = _child(node, head)
        if child is None:
            raise PathError(f"Sequence index out of range: {head!r}")
        assert isinstance(head, int)
        items = list(node.items)
        items[head % len(items)] = put(child, rest, value)
        return SequenceNode(tuple(items))
    if node.value is None:
        return put(MappingNode(), path, value)
    raise PathError(f"Cannot descend into scalar with segment {head!r}")


def is_empty(node: Node | None) -> bool:
    """True for absent nodes, nulls and empty collections."""

    if node is None:
        return True
    if isinstance(node, MappingNode | SequenceNode):
        return len(node) == 0
    return node.value is None
