# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Read-only query views over parsed documents and their interchange form."""

from ocl.views.accessor import (
    LABELS_KEY,
    NAME_KEY,
    BlockCollection,
    DocumentView,
    NodeView,
    View,
    is_array,
    keys,
    labels_of,
    lookup,
    name_of,
    view,
)
from ocl.views.interchange import to_interchange, to_json, to_yaml

__all__ = [
    "LABELS_KEY",
    "NAME_KEY",
    "BlockCollection",
    "DocumentView",
    "NodeView",
    "View",
    "is_array",
    "keys",
    "labels_of",
    "lookup",
    "name_of",
    "to_interchange",
    "to_json",
    "to_yaml",
    "view",
]
