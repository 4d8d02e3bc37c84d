# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Abstract syntax tree for parsed OCL documents.

All nodes of a document live in a single arena (:attr:`Document.nodes`).
Nodes refer to their children and to their parent by arena index, so the
tree has no reference cycles and the whole document is an immutable value.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class LiteralType(Enum):
    """Sub-kinds of scalar literal values."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    HEREDOC = "heredoc"
    INDENTED_HEREDOC = "indented_heredoc"


class _Node(BaseModel):
    """Fields shared by every node variant."""

    model_config = ConfigDict(frozen=True)

    parent: int | None = None
    line: int = 1
    column: int = 1


class BlockNode(_Node):
    """``name "label" ... { children }``.

    Labels are kept as their raw quoted source text; see
    :func:`ocl.model.values.decode_labels`.
    """

    kind: Literal["block"] = "block"
    name: str
    labels: tuple[str, ...] = ()
    children: tuple[int, ...] = ()


class AttributeNode(_Node):
    """``name = value``."""

    kind: Literal["attribute"] = "attribute"
    name: str
    value: int


class DictionaryNode(_Node):
    """A ``{ children }`` value. Its name is that of the owning attribute."""

    kind: Literal["dictionary"] = "dictionary"
    children: tuple[int, ...] = ()


class ArrayNode(_Node):
    """A ``[ elements ]`` value."""

    kind: Literal["array"] = "array"
    elements: tuple[int, ...] = ()


class LiteralNode(_Node):
    """A scalar value.

    ``value`` is the raw token text: quoted and escaped for strings, the
    captured body for heredocs.
    """

    kind: Literal["literal"] = "literal"
    literal_type: LiteralType
    value: str


class RecoveryNode(_Node):
    """Placeholder for a span of input that could not be parsed."""

    kind: Literal["recovery"] = "recovery"
    text: str = ""


# Any node variant. The `kind` discriminator keeps dispatch explicit.
Node = Annotated[
    BlockNode | AttributeNode | DictionaryNode | ArrayNode | LiteralNode | RecoveryNode,
    _Field(discriminator="kind"),
]


class Document(BaseModel):
    """A parsed OCL document.

    Attributes:
        nodes: The arena holding every node of the document.
        top_level: Arena indices of the top-level nodes, in source order.
    """

    model_config = ConfigDict(frozen=True)

    nodes: tuple[Node, ...] = ()
    top_level: tuple[int, ...] = ()

    def node(self, index: int) -> Node:
        """Return the node stored at arena *index*."""
        return self.nodes[index]

    def parent(self, index: int) -> Node | None:
        """Return the parent of the node at *index*, or None for top-level nodes."""
        parent = self.nodes[index].parent
        return None if parent is None else self.nodes[parent]

    def children(self, index: int) -> tuple[int, ...]:
        """Return the arena indices of the direct children of the node at *index*.

        Blocks and dictionaries yield their body nodes, arrays their elements,
        attributes their single value; literals and recovery nodes have none.
        """
        node = self.nodes[index]
        if isinstance(node, (BlockNode, DictionaryNode)):
            return node.children
        if isinstance(node, ArrayNode):
            return node.elements
        if isinstance(node, AttributeNode):
            return (node.value,)
        return ()

    def recoveries(self) -> list[int]:
        """Return the arena indices of all recovery nodes, in source order."""
        found = [i for i, node in enumerate(self.nodes) if isinstance(node, RecoveryNode)]
        return sorted(found, key=lambda i: (self.nodes[i].line, self.nodes[i].column))

    @property
    def is_empty(self) -> bool:
        """Return True if the document has no top-level nodes."""
        return not self.top_level
