# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for OCL source text.

Converts raw source text into a sequence of tokens for subsequent parsing.
Heredoc bodies are captured verbatim (or indentation-normalized for the
``<<-`` form) as a single token so that the parser never sees their contents.
"""

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the OCL lexer."""

    # Symbols
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    EQUALS = "="
    COMMA = ","

    # Literals
    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"

    # Heredocs
    HEREDOC_START = "HEREDOC_START"
    HEREDOC_BODY = "HEREDOC_BODY"
    HEREDOC_END = "HEREDOC_END"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # Only emitted when comments are requested
    COMMENT = "COMMENT"

    # A character that cannot start any token
    INVALID = "INVALID"

    # End of file
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: The raw source text of the token. For STRING tokens this
            includes the surrounding quotes; for HEREDOC_BODY tokens it is the
            captured body (indentation-normalized for the ``<<-`` form).
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
        offset: 0-based character offset where the token starts.
    """

    type: TokenType
    value: str
    line: int
    column: int
    offset: int


class LexerError(Exception):
    """Raised when the scanner encounters an unterminated literal or invalid escape.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
        offset: 0-based character offset of the error.
    """

    def __init__(self, message: str, line: int, column: int, offset: int = 0) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column
        self.offset = offset


def tokenize(source: str, *, include_comments: bool = False) -> list[Token]:
    """Tokenize OCL source text into a sequence of tokens.

    Returns a list of tokens. The final token is always an EOF token.
    Whitespace is consumed and not included in the output; comments are
    dropped unless *include_comments* is set.

    Args:
        source: The full OCL text.
        include_comments: Emit COMMENT tokens instead of discarding comments.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        LexerError: On unterminated string literals, invalid escape sequences,
            unterminated heredocs, or unterminated block comments.
    """
    return _Lexer(source, include_comments).tokenize()


# ################
# Implementation
# ################

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "=": TokenType.EQUALS,
    ",": TokenType.COMMA,
}

_BOOLEANS = frozenset({"true", "false"})

_SIMPLE_ESCAPES = frozenset('"\\/bfnrt')

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str, include_comments: bool) -> None:
        self._source = source
        self._include_comments = include_comments
        self._pos = 0
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        while self._pos < len(self._source):
            self._skip_whitespace_and_comments()
            if self._pos >= len(self._source):
                break
            self._scan_token()
        self._tokens.append(Token(TokenType.EOF, "", self._line, self._column, self._pos))
        return self._tokens

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self, distance: int = 1) -> str:
        """Return the character *distance* positions ahead, or '' past the end of input."""
        if self._pos + distance < len(self._source):
            return self._source[self._pos + distance]
        return ""

    def _advance(self) -> str:
        """Consume the current character, update position tracking, and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _emit(self, token_type: TokenType, start: int, line: int, col: int) -> None:
        """Append a token whose value is the source slice from *start* to the current position."""
        self._tokens.append(Token(token_type, self._source[start : self._pos], line, col, start))

    # ------------------------------------------------------------------
    # Whitespace and comment skipping
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and comment runs at the current position."""
        while self._pos < len(self._source):
            ch = self._current()
            if ch in " \t\r\n":
                self._advance()
            elif ch == "#" or (ch == "/" and self._peek() == "/"):
                self._skip_line_comment()
            elif ch == "/" and self._peek() == "*":
                self._skip_block_comment()
            else:
                break

    def _skip_line_comment(self) -> None:
        """Consume from '#' or '//' through end-of-line (exclusive of the newline itself)."""
        start, line, col = self._pos, self._line, self._column
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()
        if self._include_comments:
            self._emit(TokenType.COMMENT, start, line, col)

    def _skip_block_comment(self) -> None:
        """Consume from '/*' through the matching '*/'."""
        start, line, col = self._pos, self._line, self._column
        self._advance()  # /
        self._advance()  # *
        while self._pos < len(self._source):
            if self._current() == "*" and self._peek() == "/":
                self._advance()  # *
                self._advance()  # /
                if self._include_comments:
                    self._emit(TokenType.COMMENT, start, line, col)
                return
            self._advance()
        raise LexerError("Unterminated block comment", line, col, start)

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        start = self._pos
        line = self._line
        col = self._column

        if ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            self._emit(_SINGLE_CHAR_TOKENS[ch], start, line, col)
        elif ch == '"':
            self._scan_string(start, line, col)
        elif ch.isdigit() or (ch == "-" and self._peek().isdigit()):
            self._scan_number(start, line, col)
        elif ch.isalpha() or ch == "_":
            self._scan_identifier(start, line, col)
        elif ch == "<" and self._peek() == "<":
            self._scan_heredoc(start, line, col)
        else:
            self._advance()
            self._emit(TokenType.INVALID, start, line, col)

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_string(self, start: int, line: int, col: int) -> None:
        """Scan a double-quoted string literal, validating its escape sequences.

        The token keeps the quotes and the escapes undecoded; decoding happens
        when the value is read.
        """
        self._advance()  # opening "
        while self._pos < len(self._source):
            ch = self._current()
            if ch == '"':
                self._advance()  # closing "
                self._emit(TokenType.STRING, start, line, col)
                return
            if ch == "\n":
                raise LexerError("Unterminated string literal", line, col, start)
            if ch == "\\":
                self._scan_escape(start, line, col)
            else:
                self._advance()
        raise LexerError("Unterminated string literal", line, col, start)

    def _scan_escape(self, start: int, line: int, col: int) -> None:
        """Consume and validate one escape sequence starting at a backslash."""
        self._advance()  # backslash
        if self._pos >= len(self._source):
            raise LexerError("Unterminated string literal", line, col, start)
        esc = self._current()
        if esc in _SIMPLE_ESCAPES:
            self._advance()
            return
        if esc == "u":
            digits = self._source[self._pos + 1 : self._pos + 5]
            if len(digits) == 4 and all(d in _HEX_DIGITS for d in digits):
                for _ in range(5):
                    self._advance()
                return
        raise LexerError(
            f"Invalid escape sequence: '\\{esc}'",
            self._line,
            self._column,
            self._pos,
        )

    def _scan_number(self, start: int, line: int, col: int) -> None:
        """Scan an integer or decimal literal with an optional exponent.

        A fraction requires at least one digit on both sides of the decimal point.
        """
        if self._current() == "-":
            self._advance()
        self._consume_digits()

        if self._current() == "." and self._peek().isdigit():
            self._advance()  # consume the '.'
            self._consume_digits()

        if self._current() in ("e", "E"):
            sign = 1 if self._peek() in ("+", "-") else 0
            if self._peek(1 + sign).isdigit():
                for _ in range(1 + sign):
                    self._advance()
                self._consume_digits()

        self._emit(TokenType.NUMBER, start, line, col)

    def _consume_digits(self) -> None:
        while self._pos < len(self._source) and self._current().isdigit():
            self._advance()

    def _scan_identifier(self, start: int, line: int, col: int) -> None:
        """Scan an identifier, mapping ``true``/``false`` to BOOLEAN tokens.

        Identifiers may contain dots and dashes, e.g. ``Octopus.Action.TargetRoles``.
        """
        self._consume_identifier()
        value = self._source[start : self._pos]
        token_type = TokenType.BOOLEAN if value in _BOOLEANS else TokenType.IDENTIFIER
        self._emit(token_type, start, line, col)

    def _consume_identifier(self) -> None:
        while self._pos < len(self._source) and (self._current().isalnum() or self._current() in "_-."):
            self._advance()

    # ------------------------------------------------------------------
    # Heredocs
    # ------------------------------------------------------------------

    def _scan_heredoc(self, start: int, line: int, col: int) -> None:
        """Scan ``<<ID`` or ``<<-ID`` followed by its body lines and terminator line.

        Emits HEREDOC_START, HEREDOC_BODY and HEREDOC_END tokens. A ``<<``
        that is not followed by a terminator identifier is an INVALID token.
        """
        self._advance()  # <
        self._advance()  # <
        indented = self._current() == "-"
        if indented:
            self._advance()

        if not (self._current().isalpha() or self._current() == "_"):
            self._emit(TokenType.INVALID, start, line, col)
            return
        ident_start = self._pos
        self._consume_identifier()
        terminator = self._source[ident_start : self._pos]
        self._emit(TokenType.HEREDOC_START, start, line, col)

        while self._current() in (" ", "\t", "\r"):
            self._advance()
        if self._current() != "\n":
            raise LexerError(f"Expected a line break after heredoc marker '{terminator}'", line, col, start)
        self._advance()

        body_start, body_line, body_col = self._pos, self._line, self._column
        lines: list[str] = []
        while self._pos < len(self._source):
            line_start = self._pos
            end = self._source.find("\n", line_start)
            if end == -1:
                end = len(self._source)
            text = self._source[line_start:end]
            candidate = text.strip() if indented else text.rstrip()
            if candidate == terminator:
                indent = len(text) - len(text.lstrip(" \t"))
                body = _strip_indent(lines, indent) if indented else "".join(lines)
                self._tokens.append(Token(TokenType.HEREDOC_BODY, body, body_line, body_col, body_start))
                while self._pos < line_start + indent:
                    self._advance()
                end_start, end_line, end_col = self._pos, self._line, self._column
                for _ in terminator:
                    self._advance()
                self._tokens.append(Token(TokenType.HEREDOC_END, terminator, end_line, end_col, end_start))
                return
            while self._pos < end:
                self._advance()
            if self._pos < len(self._source):
                self._advance()  # newline
                lines.append(text + "\n")
            else:
                lines.append(text)
        raise LexerError(f"Unterminated heredoc, expected '{terminator}'", line, col, start)


def _strip_indent(lines: list[str], indent: int) -> str:
    """Remove up to *indent* leading whitespace characters from every line."""
    stripped: list[str] = []
    for text in lines:
        count = 0
        while count < indent and count < len(text) and text[count] in " \t":
            count += 1
        stripped.append(text[count:])
    return "".join(stripped)
