# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parser and read-only query views for OCL configuration documents."""

from ocl.model.nodes import Document
from ocl.parser.lexer import LexerError, tokenize
from ocl.parser.parser import ParseError, parse
from ocl.views.accessor import view
from ocl.views.interchange import to_interchange, to_json, to_yaml

__all__ = [
    "Document",
    "LexerError",
    "ParseError",
    "parse",
    "to_interchange",
    "to_json",
    "to_yaml",
    "tokenize",
    "view",
]
