"""Lexer/tokenizer for the photofolio filter language.

Converts filter strings into a stream of tokens for the parser.

Token types:
- Literals: NUMBER, STRING, BOOLEAN, NULL
- Paths: IDENTIFIER (a property or function name; dotted paths such as
  ``exif.raw.Rating`` are a single token, split by the parser)
- Operators: comparison, logical, pipe
- Keywords: all, sort, limit, asc, desc
- Punctuation: LPAREN, RPAREN, COMMA
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from photofolio.query.errors import LexError


class TokenType(Enum):
    """Types of tokens in the filter language."""

    # Literals
    NUMBER = auto()
    STRING = auto()
    BOOLEAN = auto()
    NULL = auto()

    # Identifiers and dotted paths
    IDENTIFIER = auto()

    # Comparison operators
    EQ = auto()          # ==
    NEQ = auto()         # !=
    LT = auto()          # <
    LTE = auto()         # <=
    GT = auto()          # >
    GTE = auto()         # >=

    # Logical operators
    AND = auto()         # and
    OR = auto()          # or
    NOT = auto()         # not

    # Query keywords
    ALL = auto()         # all
    SORT = auto()        # sort
    LIMIT = auto()       # limit
    ASC = auto()         # asc
    DESC = auto()        # desc
    PIPE = auto()        # |

    # Punctuation
    LPAREN = auto()      # (
    RPAREN = auto()      # )
    COMMA = auto()       # ,

    # End of input
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    Attributes:
        type: The token type
        value: The token's value (number, string content, identifier, etc.)
        position: 0-based offset of the token in the source string
        text: The exact source text of the token
    """

    type: TokenType
    value: str | int | float | bool | None
    position: int
    text: str = ""

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"

    def __str__(self) -> str:
        if self.type == TokenType.EOF:
            return "end of expression"
        return self.text or str(self.value)

    @property
    def length(self) -> int:
        return max(len(self.text), 1)


# Token patterns (order matters - longer matches first)
TOKEN_PATTERNS = [
    # Whitespace (skip)
    (r"\s+", None),

    # Multi-character operators (before single character)
    (r"==", TokenType.EQ),
    (r"!=", TokenType.NEQ),
    (r"<=", TokenType.LTE),
    (r">=", TokenType.GTE),

    # Single character operators
    (r"<", TokenType.LT),
    (r">", TokenType.GT),
    (r"\|", TokenType.PIPE),

    # Punctuation
    (r"\(", TokenType.LPAREN),
    (r"\)", TokenType.RPAREN),
    (r",", TokenType.COMMA),

    # Numbers (integer and decimal, optionally negative; no exponent)
    (r"-?\d+\.\d+(?![\w.])", TokenType.NUMBER),
    (r"-?\d+(?![\w.])", TokenType.NUMBER),

    # Strings (double or single quoted, no escapes)
    (r'"[^"]*"', TokenType.STRING),
    (r"'[^']*'", TokenType.STRING),

    # Keywords, identifiers and dotted paths
    (r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z0-9_]+)*", TokenType.IDENTIFIER),
]

# Keywords that map to specific token types (matched case-insensitively)
KEYWORDS = {
    "true": (TokenType.BOOLEAN, True),
    "false": (TokenType.BOOLEAN, False),
    "null": (TokenType.NULL, None),
    "and": (TokenType.AND, "and"),
    "or": (TokenType.OR, "or"),
    "not": (TokenType.NOT, "not"),
    "all": (TokenType.ALL, "all"),
    "sort": (TokenType.SORT, "sort"),
    "limit": (TokenType.LIMIT, "limit"),
    "asc": (TokenType.ASC, "asc"),
    "desc": (TokenType.DESC, "desc"),
}

_COMPILED_PATTERNS = [
    (re.compile(pattern), token_type) for pattern, token_type in TOKEN_PATTERNS
]


class Lexer:
    """Tokenizer for the filter language.

    Usage:
        lexer = Lexer("exif.make == 'Canon' and exif.iso >= 800")
        for token in lexer:
            print(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0

    def __iter__(self) -> Iterator[Token]:
        """Iterate over all tokens in the source."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break

    def next_token(self) -> Token:
        """Get the next token from the source."""
        while True:
            if self.position >= len(self.source):
                return Token(TokenType.EOF, None, len(self.source))

            for pattern, token_type in _COMPILED_PATTERNS:
                match = pattern.match(self.source, self.position)
                if match:
                    break
            else:
                raise self._error_at(self.position)

            text = match.group()
            start = self.position
            self.position = match.end()

            if token_type is None:
                continue

            return self._make_token(token_type, text, start)

    def _make_token(self, token_type: TokenType, text: str, start: int) -> Token:
        if token_type == TokenType.NUMBER:
            value: str | int | float | bool | None = (
                float(text) if "." in text else int(text)
            )
            return Token(token_type, value, start, text)

        if token_type == TokenType.STRING:
            return Token(token_type, text[1:-1], start, text)

        if token_type == TokenType.IDENTIFIER:
            keyword = KEYWORDS.get(text.lower())
            if keyword is not None:
                keyword_type, keyword_value = keyword
                return Token(keyword_type, keyword_value, start, text)

        return Token(token_type, text, start, text)

    def _error_at(self, position: int) -> LexError:
        char = self.source[position]
        if char in ("'", '"'):
            return LexError(
                f"Unterminated string starting at position {position}",
                position,
                self.source,
                length=len(self.source) - position,
            )
        return LexError(f"Unexpected character '{char}'", position, self.source)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return list of tokens."""
        return list(self)


def tokenize(source: str) -> list[Token]:
    """Convenience function to tokenize a filter string."""
    return Lexer(source).tokenize()
