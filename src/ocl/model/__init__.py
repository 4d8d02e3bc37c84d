# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Abstract syntax tree for OCL documents."""

from ocl.model.nodes import (
    ArrayNode,
    AttributeNode,
    BlockNode,
    DictionaryNode,
    Document,
    LiteralNode,
    LiteralType,
    Node,
    RecoveryNode,
)
from ocl.model.values import Scalar, decode_labels, decode_literal, node_kind, node_name, owner_name

__all__ = [
    # Nodes
    "ArrayNode",
    "AttributeNode",
    "BlockNode",
    "DictionaryNode",
    "Document",
    "LiteralNode",
    "LiteralType",
    "Node",
    "RecoveryNode",
    # Values
    "Scalar",
    "decode_labels",
    "decode_literal",
    "node_kind",
    "node_name",
    "owner_name",
]
