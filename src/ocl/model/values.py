# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Value decoding for AST nodes.

Scalars are stored as raw token text and decoded only when they are read.
"""

from __future__ import annotations

import json

from ocl.model.nodes import (
    ArrayNode,
    AttributeNode,
    BlockNode,
    DictionaryNode,
    Document,
    LiteralNode,
    LiteralType,
    Node,
)

# ###############
# Public Interface
# ###############

Scalar = str | int | float | bool


def decode_labels(block: BlockNode) -> list[str]:
    """Return the labels of *block* as plain strings, in source order."""
    return [_decode_string(label) for label in block.labels]


def decode_literal(node: LiteralNode) -> Scalar:
    """Return the native Python value of a literal.

    Strings have their escape sequences decoded, numbers become ``int`` or
    ``float`` and booleans ``bool``. Heredoc bodies are returned unchanged.
    """
    if node.literal_type == LiteralType.STRING:
        return _decode_string(node.value)
    if node.literal_type == LiteralType.NUMBER:
        return _decode_number(node.value)
    if node.literal_type == LiteralType.BOOLEAN:
        return node.value == "true"
    return node.value


def node_kind(node: Node) -> str:
    """Return the variant tag of *node* (``"block"``, ``"attribute"``, ...)."""
    return node.kind


def node_name(node: Node) -> str | None:
    """Return the own name of a block or attribute, or None for other variants."""
    if isinstance(node, (BlockNode, AttributeNode)):
        return node.name
    return None


def owner_name(document: Document, index: int) -> str | None:
    """Return the name a node is known by.

    Blocks and attributes carry their own name. Dictionaries and arrays
    inherit the name of the nearest enclosing attribute.
    """
    current: int | None = index
    while current is not None:
        node = document.node(current)
        if isinstance(node, (BlockNode, AttributeNode)):
            return node.name
        if not isinstance(node, (DictionaryNode, ArrayNode)):
            return None
        current = node.parent
    return None


# ################
# Implementation
# ################


def _decode_string(raw: str) -> str:
    return json.loads(raw, strict=False)


def _decode_number(raw: str) -> int | float:
    if any(ch in raw for ch in ".eE"):
        return float(raw)
    return int(raw)
