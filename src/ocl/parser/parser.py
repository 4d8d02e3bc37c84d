# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for OCL documents.

Converts a token stream produced by the lexer into a :class:`Document`.
Constructs that do not match the grammar are absorbed into recovery nodes
and parsing continues after them::

    Document    := (Block | Attribute)*
    Block       := IDENT STRING* '{' (Block | Attribute)* '}'
    Attribute   := IDENT '=' Value
    Value       := Literal | Array | Dictionary
    Dictionary  := '{' (Block | Attribute)* '}'
    Array       := '[' (Value (','? Value)*)? ']'
    Literal     := STRING | NUMBER | BOOLEAN | HEREDOC
"""

import logging

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
from ocl.parser.lexer import Token, TokenType, tokenize

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

# Containers nested deeper than this are absorbed into a recovery node.
DEFAULT_MAX_DEPTH = 128

# Largest accepted max_depth. One level of nested dictionaries costs five
# parser frames, so this keeps parsing under CPython's default recursion
# limit of 1000.
MAX_SAFE_DEPTH = 150


class ParseError(Exception):
    """Raised when the parser is invoked with invalid arguments.

    Malformed input never raises this error; it produces recovery nodes.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int = 1, column: int = 1) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def parse(source: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Document:
    """Parse OCL source text into a Document.

    Args:
        source: The full OCL text.
        max_depth: Maximum nesting of blocks, dictionaries and arrays.

    Returns:
        The parsed Document. Empty input yields an empty document.

    Raises:
        LexerError: If the source contains an unterminated string or heredoc,
            or an invalid escape sequence.
        ParseError: If *max_depth* is not between 1 and MAX_SAFE_DEPTH.
    """
    if max_depth < 1:
        raise ParseError(f"max_depth must be positive, got {max_depth}")
    if max_depth > MAX_SAFE_DEPTH:
        raise ParseError(f"max_depth must be at most {MAX_SAFE_DEPTH}, got {max_depth}")
    tokens = tokenize(source)
    document = _Parser(tokens, max_depth).parse()
    logger.debug(
        f"Parsed {len(document.top_level)} top-level node(s), "
        f"{len(document.nodes)} node(s) total, {len(document.recoveries())} recovery node(s)"
    )
    return document


# ################
# Implementation
# ################

_LITERAL_TYPES: dict[TokenType, LiteralType] = {
    TokenType.STRING: LiteralType.STRING,
    TokenType.NUMBER: LiteralType.NUMBER,
    TokenType.BOOLEAN: LiteralType.BOOLEAN,
}

_VALUE_START_TYPES: frozenset[TokenType] = frozenset(
    {
        TokenType.STRING,
        TokenType.NUMBER,
        TokenType.BOOLEAN,
        TokenType.HEREDOC_START,
        TokenType.LBRACKET,
        TokenType.LBRACE,
    }
)

_CLOSERS: dict[TokenType, TokenType] = {
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.LBRACKET: TokenType.RBRACKET,
}

_CLOSING_TYPES = frozenset(_CLOSERS.values())


class _Mismatch(Exception):
    """Signals that the item being parsed does not match the grammar."""


class _Parser:
    """Recursive-descent parser for OCL token streams.

    Nodes are appended to an arena as they are parsed. An index is reserved
    for a container before its children are parsed so that the children can
    refer to it as their parent.
    """

    def __init__(self, tokens: list[Token], max_depth: int) -> None:
        self._tokens = tokens
        self._pos = 0
        self._max_depth = max_depth
        self._depth = 0
        self._nodes: list[Node | None] = []

    def parse(self) -> Document:
        """Parse the full token stream and return a Document."""
        top_level = self._parse_body(parent=None, closer=None)
        return Document(nodes=tuple(self._nodes), top_level=tuple(top_level))

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._tokens[self._pos]

    def _peek_type(self, distance: int = 0) -> TokenType:
        """Return the type of the token *distance* positions ahead, clamped at EOF."""
        index = min(self._pos + distance, len(self._tokens) - 1)
        return self._tokens[index].type

    def _at_end(self) -> bool:
        """Return True if the current token is the EOF token."""
        return self._peek_type() == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _expect(self, *types: TokenType) -> Token:
        """Consume the current token if it matches any of the given types."""
        if not self._check(*types):
            raise _Mismatch
        return self._advance()

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types."""
        return self._peek_type() in types

    # ------------------------------------------------------------------
    # Arena helpers
    # ------------------------------------------------------------------

    def _reserve(self) -> int:
        """Reserve an arena slot for a node whose children are parsed first."""
        self._nodes.append(None)
        return len(self._nodes) - 1

    def _store(self, index: int, node: Node) -> int:
        self._nodes[index] = node
        return index

    def _add(self, node: Node) -> int:
        self._nodes.append(node)
        return len(self._nodes) - 1

    # ------------------------------------------------------------------
    # Bodies (document, block, dictionary)
    # ------------------------------------------------------------------

    def _parse_body(self, parent: int | None, closer: TokenType | None) -> list[int]:
        """Parse ``(Block | Attribute)*`` up to *closer* (not consumed) or EOF."""
        items: list[int] = []
        while not self._at_end():
            if closer is not None and self._check(closer):
                break
            if self._at_item_start():
                items.append(self._parse_item_or_recover(parent))
            else:
                items.append(self._recover(parent))
        return items

    def _parse_item_or_recover(self, parent: int | None) -> int:
        """Parse one block or attribute, rewinding into a recovery node on mismatch.

        Containers left open at end of input fail once per enclosing level, and
        each level skips the remaining tokens again. The cost is bounded by
        tokens times nesting depth, which MAX_SAFE_DEPTH caps.
        """
        mark_pos = self._pos
        mark_nodes = len(self._nodes)
        mark_depth = self._depth
        try:
            if self._peek_type(1) == TokenType.EQUALS:
                return self._parse_attribute(parent)
            return self._parse_block(parent)
        except _Mismatch:
            self._pos = mark_pos
            del self._nodes[mark_nodes:]
            self._depth = mark_depth
            return self._recover(parent)

    def _at_item_start(self) -> bool:
        """Return True if the tokens at the current position begin a block or attribute."""
        if not self._check(TokenType.IDENTIFIER):
            return False
        distance = 1
        if self._peek_type(distance) == TokenType.EQUALS:
            return True
        while self._peek_type(distance) == TokenType.STRING:
            distance += 1
        return self._peek_type(distance) == TokenType.LBRACE

    # ------------------------------------------------------------------
    # Blocks and attributes
    # ------------------------------------------------------------------

    def _parse_block(self, parent: int | None) -> int:
        """Parse: IDENT STRING* { body }"""
        name_tok = self._expect(TokenType.IDENTIFIER)
        labels: list[str] = []
        while self._check(TokenType.STRING):
            labels.append(self._advance().value)
        self._expect(TokenType.LBRACE)
        index = self._reserve()
        with _Nesting(self):
            children = self._parse_body(parent=index, closer=TokenType.RBRACE)
            self._expect(TokenType.RBRACE)
        return self._store(
            index,
            BlockNode(
                name=name_tok.value,
                labels=tuple(labels),
                children=tuple(children),
                parent=parent,
                line=name_tok.line,
                column=name_tok.column,
            ),
        )

    def _parse_attribute(self, parent: int | None) -> int:
        """Parse: IDENT = Value"""
        name_tok = self._expect(TokenType.IDENTIFIER)
        self._expect(TokenType.EQUALS)
        index = self._reserve()
        value = self._parse_value(index)
        return self._store(
            index,
            AttributeNode(
                name=name_tok.value,
                value=value,
                parent=parent,
                line=name_tok.line,
                column=name_tok.column,
            ),
        )

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def _parse_value(self, parent: int) -> int:
        """Parse a literal, heredoc, array or dictionary value."""
        tok = self._current()
        if tok.type in _LITERAL_TYPES:
            self._advance()
            return self._add(
                LiteralNode(
                    literal_type=_LITERAL_TYPES[tok.type],
                    value=tok.value,
                    parent=parent,
                    line=tok.line,
                    column=tok.column,
                )
            )
        if tok.type == TokenType.HEREDOC_START:
            return self._parse_heredoc(parent)
        if tok.type == TokenType.LBRACKET:
            return self._parse_array(parent)
        if tok.type == TokenType.LBRACE:
            return self._parse_dictionary(parent)
        raise _Mismatch

    def _parse_heredoc(self, parent: int) -> int:
        """Parse: HEREDOC_START HEREDOC_BODY HEREDOC_END"""
        start_tok = self._expect(TokenType.HEREDOC_START)
        body_tok = self._expect(TokenType.HEREDOC_BODY)
        self._expect(TokenType.HEREDOC_END)
        literal_type = LiteralType.INDENTED_HEREDOC if start_tok.value.startswith("<<-") else LiteralType.HEREDOC
        return self._add(
            LiteralNode(
                literal_type=literal_type,
                value=body_tok.value,
                parent=parent,
                line=start_tok.line,
                column=start_tok.column,
            )
        )

    def _parse_dictionary(self, parent: int) -> int:
        """Parse: { body }"""
        open_tok = self._expect(TokenType.LBRACE)
        index = self._reserve()
        with _Nesting(self):
            children = self._parse_body(parent=index, closer=TokenType.RBRACE)
            self._expect(TokenType.RBRACE)
        return self._store(
            index,
            DictionaryNode(
                children=tuple(children),
                parent=parent,
                line=open_tok.line,
                column=open_tok.column,
            ),
        )

    def _parse_array(self, parent: int) -> int:
        """Parse: [ Value (,? Value)* ]

        Commas are optional separators. Elements that are not values become
        recovery nodes.
        """
        open_tok = self._expect(TokenType.LBRACKET)
        index = self._reserve()
        elements: list[int] = []
        with _Nesting(self):
            while True:
                while self._check(TokenType.COMMA):
                    self._advance()
                if self._check(TokenType.RBRACKET, TokenType.RBRACE, TokenType.EOF):
                    break
                if self._check(*_VALUE_START_TYPES):
                    elements.append(self._parse_value(index))
                else:
                    elements.append(self._recover_element(index))
            self._expect(TokenType.RBRACKET)
        return self._store(
            index,
            ArrayNode(
                elements=tuple(elements),
                parent=parent,
                line=open_tok.line,
                column=open_tok.column,
            ),
        )

    # ------------------------------------------------------------------
    # Recovery
    # ------------------------------------------------------------------

    def _recover(self, parent: int | None) -> int:
        """Absorb tokens into a recovery node until an item start, an unmatched '}' or EOF.

        At least one token (or balanced group) is always consumed.
        """
        start = self._pos
        self._skip_group()
        while not self._at_end() and not self._check(TokenType.RBRACE) and not self._at_item_start():
            self._skip_group()
        return self._add_recovery(parent, start)

    def _recover_element(self, parent: int) -> int:
        """Absorb a single invalid array element (one token or balanced group)."""
        start = self._pos
        self._skip_group()
        return self._add_recovery(parent, start)

    def _skip_group(self) -> None:
        """Consume one token, or a whole balanced bracket group if it opens one.

        A closing bracket of the wrong kind ends the group unconsumed, so an
        unclosed '[' never swallows the '}' of the enclosing body. Iterative,
        so arbitrarily deep input cannot exhaust the call stack.
        """
        tok = self._advance()
        if tok.type not in _CLOSERS:
            return
        stack = [_CLOSERS[tok.type]]
        while stack and not self._at_end():
            kind = self._peek_type()
            if kind in _CLOSING_TYPES and kind != stack[-1]:
                return
            self._advance()
            if kind in _CLOSERS:
                stack.append(_CLOSERS[kind])
            elif kind == stack[-1]:
                stack.pop()

    def _add_recovery(self, parent: int | None, start: int) -> int:
        """Store a recovery node covering the tokens consumed since *start*."""
        start_tok = self._tokens[start]
        text = " ".join(tok.value for tok in self._tokens[start : self._pos] if tok.type != TokenType.EOF)
        logger.debug(f"Recovered from unparseable input at line {start_tok.line}, column {start_tok.column}: {text!r}")
        return self._add(RecoveryNode(text=text, parent=parent, line=start_tok.line, column=start_tok.column))


class _Nesting:
    """Tracks container depth and rejects containers beyond the parser's limit."""

    def __init__(self, parser: _Parser) -> None:
        self._parser = parser

    def __enter__(self) -> None:
        if self._parser._depth >= self._parser._max_depth:
            raise _Mismatch
        self._parser._depth += 1

    def __exit__(self, *exc_info: object) -> None:
        self._parser._depth -= 1
