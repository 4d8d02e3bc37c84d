# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conversion of views to plain interchange trees.

The interchange tree is built from ``dict``, ``list`` and scalar values only,
so it can be compared, deep-copied, diffed, or written as JSON or YAML. It
contains exactly the keys a view exposes through :func:`ocl.views.accessor.keys`.
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from ocl.views.accessor import BlockCollection, DocumentView, NodeView, is_array, keys, lookup

# ###############
# Public Interface
# ###############


def to_interchange(value: Any) -> Any:
    """Convert a view, or a value resolved from one, into an interchange tree.

    Documents, block collections, arrays and duplicate-attribute lists become
    lists; node views become dicts in key order; scalars are returned as is.
    """
    if isinstance(value, (DocumentView, BlockCollection)):
        return [to_interchange(item) for item in value]
    if isinstance(value, NodeView):
        if is_array(value):
            return [to_interchange(lookup(value, position)) for position in keys(value)]
        return {key: to_interchange(lookup(value, key)) for key in keys(value)}
    if isinstance(value, list):
        return [to_interchange(item) for item in value]
    return value


def to_json(value: Any, indent: int | None = None) -> str:
    """Serialize the interchange tree of *value* as JSON."""
    return json.dumps(to_interchange(value), indent=indent, ensure_ascii=False)


def to_yaml(value: Any, indent: int = 2) -> str:
    """Serialize the interchange tree of *value* as YAML, preserving key order."""
    return yaml.safe_dump(
        to_interchange(value),
        indent=indent,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
