# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Read-only query views over parsed OCL documents.

A view wraps a :class:`Document` (or one node of it) and resolves names,
labels and indices lazily::

    root = view(parse(source))
    root.step["deploy"].action[0].properties["Octopus.Action.RunOnServer"]

Resolution rules:

* Looking up a name collects the direct children with that name. Attributes
  resolve to their decoded value, or to a list of values when the name is
  repeated. Blocks resolve to a :class:`BlockCollection`.
* A :class:`BlockCollection` is indexed by position, or by label, matching
  the last label of each block. One match yields a :class:`NodeView`,
  several a list of them.
* ``__name`` and ``__labels`` are synthetic keys for a node's own name and
  a block's decoded labels.
* Anything that cannot be found resolves to ``None``. Views never raise on
  lookups and silently ignore assignments.

Attribute-style access is a convenience for names that are valid Python
identifiers; item access works for every name. Inside a class body, write
``view["__name"]`` rather than ``view.__name`` to avoid name mangling.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from ocl.model.nodes import (
    ArrayNode,
    AttributeNode,
    BlockNode,
    DictionaryNode,
    Document,
    LiteralNode,
    Node,
)
from ocl.model.values import decode_labels, decode_literal, owner_name

# ###############
# Public Interface
# ###############

NAME_KEY = "__name"
LABELS_KEY = "__labels"


class _ReadOnly:
    """Base for views: writes and deletes are silently ignored."""

    __slots__ = ()

    def __setattr__(self, name: str, value: object) -> None:
        return None

    def __delattr__(self, name: str) -> None:
        return None

    def __setitem__(self, key: object, value: object) -> None:
        return None

    def __delitem__(self, key: object) -> None:
        return None

    def __copy__(self) -> _ReadOnly:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> _ReadOnly:
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _ReadOnly):
            return NotImplemented
        from ocl.views.interchange import to_interchange

        return to_interchange(self) == to_interchange(other)

    __hash__ = None  # type: ignore[assignment]


class NodeView(_ReadOnly):
    """A view over a single node of a document."""

    __slots__ = ("_document", "_index")

    def __init__(self, document: Document, index: int) -> None:
        object.__setattr__(self, "_document", document)
        object.__setattr__(self, "_index", index)

    @property
    def _node(self) -> Node:
        return self._document.node(self._index)

    def __getattr__(self, name: str) -> Any:
        if _is_reserved(name):
            raise AttributeError(name)
        return lookup(self, name)

    def __getitem__(self, key: str | int) -> Any:
        return lookup(self, key)

    def __iter__(self) -> Iterator[str | int]:
        return iter(keys(self))

    def __contains__(self, key: object) -> bool:
        return key in keys(self)

    def __repr__(self) -> str:
        node = self._node
        if isinstance(node, BlockNode):
            return f"NodeView(block {node.name!r} {decode_labels(node)!r})"
        return f"NodeView({node.kind} {owner_name(self._document, self._index)!r})"


class BlockCollection(_ReadOnly):
    """Same-named sibling blocks, in source order.

    Integer indices select by position; strings select by last label.
    """

    __slots__ = ("_document", "_indices")

    def __init__(self, document: Document, indices: tuple[int, ...]) -> None:
        object.__setattr__(self, "_document", document)
        object.__setattr__(self, "_indices", indices)

    def __len__(self) -> int:
        return len(self._indices)

    def __iter__(self) -> Iterator[NodeView]:
        return (NodeView(self._document, i) for i in self._indices)

    def __getattr__(self, name: str) -> Any:
        if _is_reserved(name):
            raise AttributeError(name)
        return self.by_label(name)

    def __getitem__(self, key: int | slice | str) -> Any:
        if isinstance(key, str):
            return self.by_label(key)
        if isinstance(key, slice):
            return [NodeView(self._document, i) for i in self._indices[key]]
        return _at(self._document, self._indices, key)

    def by_label(self, label: str) -> NodeView | list[NodeView] | None:
        """Return the block(s) whose last label is *label*."""
        matches = [
            NodeView(self._document, i)
            for i in self._indices
            if _last_label(self._document.node(i)) == label
        ]
        if not matches:
            return None
        if len(matches) == 1:
            return matches[0]
        return matches

    def __repr__(self) -> str:
        return f"BlockCollection({len(self._indices)} block(s))"


class DocumentView(_ReadOnly):
    """The root of a document: its top-level nodes by position, and by name."""

    __slots__ = ("_document",)

    def __init__(self, document: Document) -> None:
        object.__setattr__(self, "_document", document)

    def __len__(self) -> int:
        return len(self._document.top_level)

    def __iter__(self) -> Iterator[NodeView]:
        return (NodeView(self._document, i) for i in self._document.top_level)

    def __contains__(self, key: object) -> bool:
        return key in keys(self)

    def __getattr__(self, name: str) -> Any:
        if _is_reserved(name):
            raise AttributeError(name)
        return lookup(self, name)

    def __getitem__(self, key: int | slice | str) -> Any:
        if isinstance(key, slice):
            return [NodeView(self._document, i) for i in self._document.top_level[key]]
        return lookup(self, key)

    def __repr__(self) -> str:
        return f"DocumentView({len(self)} top-level node(s))"


View = DocumentView | NodeView | BlockCollection


def view(document: Document, index: int | None = None) -> DocumentView | NodeView:
    """Wrap a document, or the node at arena *index*, in a read-only view."""
    if index is None:
        return DocumentView(document)
    return NodeView(document, index)


def lookup(target: View, key: str | int) -> Any:
    """Resolve *key* against *target*; return None when nothing matches."""
    if isinstance(target, DocumentView):
        document = target._document
        if isinstance(key, str):
            return _lookup_children(document, document.top_level, key)
        return _at(document, document.top_level, key)
    if isinstance(target, BlockCollection):
        return target[key]
    return _lookup_node(target._document, target._index, key)


def keys(target: DocumentView | NodeView) -> list[str | int]:
    """Return the keys *target* exposes for enumeration and serialization.

    The document root exposes the distinct names of its top-level blocks and
    attributes in first occurrence order. Blocks and dictionaries expose
    their distinct child names the same way, then ``__name`` (and
    ``__labels`` for blocks). A top-level attribute exposes only its own
    name. Arrays expose the positions of their resolved elements. Other
    nodes expose nothing.
    """
    document = target._document
    if isinstance(target, DocumentView):
        return _child_names(document, document.top_level)
    node = document.node(target._index)
    if isinstance(node, (BlockNode, DictionaryNode)):
        names = _child_names(document, node.children)
        names.append(NAME_KEY)
        if isinstance(node, BlockNode):
            names.append(LABELS_KEY)
        return names
    if isinstance(node, AttributeNode):
        return [node.name]
    if isinstance(node, ArrayNode):
        return list(range(len(_array_values(document, node))))
    return []


def name_of(target: NodeView) -> str | None:
    """Return the ``__name`` of *target*."""
    return lookup(target, NAME_KEY)


def labels_of(target: NodeView) -> list[str] | None:
    """Return the ``__labels`` of *target*, or None if it is not a block."""
    return lookup(target, LABELS_KEY)


def is_array(target: NodeView) -> bool:
    """Return True if *target* wraps an array node."""
    return isinstance(target._document.node(target._index), ArrayNode)


# ################
# Implementation
# ################


_SLOT_NAMES = frozenset({"_document", "_index", "_indices"})


def _child_names(document: Document, children: tuple[int, ...]) -> list[str | int]:
    """Return the distinct block and attribute names among *children*, in order."""
    names: list[str | int] = []
    for child in children:
        node = document.node(child)
        if isinstance(node, (BlockNode, AttributeNode)) and node.name not in names:
            names.append(node.name)
    return names


def _is_reserved(name: str) -> bool:
    """Return True for names that must not be resolved as document keys.

    Python protocol lookups (``__deepcopy__``, ``__array__``, ...) and the
    view's own slots raise AttributeError instead.
    """
    if name in _SLOT_NAMES:
        return True
    return name.startswith("__") and name.endswith("__") and name not in (NAME_KEY, LABELS_KEY)


def _at(document: Document, indices: tuple[int, ...], position: int) -> NodeView | None:
    """Return the view at *position* of *indices*, or None when out of range."""
    if not isinstance(position, int) or not -len(indices) <= position < len(indices):
        return None
    return NodeView(document, indices[position])


def _last_label(node: Node) -> str | None:
    if not isinstance(node, BlockNode) or not node.labels:
        return None
    return decode_labels(node)[-1]


def _lookup_node(document: Document, index: int, key: str | int) -> Any:
    node = document.node(index)
    if isinstance(node, ArrayNode):
        values = _array_values(document, node)
        if isinstance(key, int) and -len(values) <= key < len(values):
            return values[key]
        return None
    if not isinstance(key, str):
        return None
    if isinstance(node, BlockNode):
        if key == NAME_KEY:
            return node.name
        if key == LABELS_KEY:
            return decode_labels(node)
        return _lookup_children(document, node.children, key)
    if isinstance(node, DictionaryNode):
        if key == NAME_KEY:
            return owner_name(document, index)
        return _lookup_children(document, node.children, key)
    if isinstance(node, AttributeNode):
        if key == NAME_KEY:
            return node.name
        if key == node.name:
            return _attribute_value(document, node)
    return None


def _lookup_children(document: Document, children: tuple[int, ...], name: str) -> Any:
    """Resolve *name* among *children*; attributes take precedence over blocks."""
    attributes: list[AttributeNode] = []
    blocks: list[int] = []
    for child in children:
        node = document.node(child)
        if isinstance(node, AttributeNode) and node.name == name:
            attributes.append(node)
        elif isinstance(node, BlockNode) and node.name == name:
            blocks.append(child)

    if attributes:
        values = [_attribute_value(document, attribute) for attribute in attributes]
        return values[0] if len(values) == 1 else values
    if blocks:
        return BlockCollection(document, tuple(blocks))
    return None


def _attribute_value(document: Document, attribute: AttributeNode) -> Any:
    value = document.node(attribute.value)
    if isinstance(value, LiteralNode):
        return decode_literal(value)
    if isinstance(value, DictionaryNode):
        return NodeView(document, attribute.value)
    if isinstance(value, ArrayNode):
        return _array_values(document, value)
    return None


def _array_values(document: Document, array: ArrayNode) -> list[Any]:
    """Resolve array elements; elements other than literals and dictionaries are dropped."""
    values: list[Any] = []
    for element in array.elements:
        node = document.node(element)
        if isinstance(node, LiteralNode):
            values.append(decode_literal(node))
        elif isinstance(node, DictionaryNode):
            values.append(NodeView(document, element))
    return values
