# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parser for OCL source text."""

from ocl.parser.lexer import LexerError, Token, TokenType, tokenize
from ocl.parser.parser import DEFAULT_MAX_DEPTH, MAX_SAFE_DEPTH, ParseError, parse

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "LexerError",
    "MAX_SAFE_DEPTH",
    "ParseError",
    "Token",
    "TokenType",
    "parse",
    "tokenize",
]
