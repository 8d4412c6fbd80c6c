"""
Token definitions for the Solidity type-string lexer.

This module contains the TokenType enum, Token dataclass, and the
single-character punctuation table used when tokenizing ABI type strings
such as ``tuple(uint256,address)[2][]``.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Enumeration of all token types recognized by the type-string lexer."""

    # Names (elementary types and the `tuple` keyword)
    IDENTIFIER = auto()
    TUPLE = auto()

    # Literals
    NUMBER = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()

    # End of input
    EOF = auto()


@dataclass
class Token:
    """A single token: its type, source text and column (1-based)."""
    type: TokenType
    value: str
    column: int


# Keyword mapping; every other name is an IDENTIFIER
KEYWORDS = {
    'tuple': TokenType.TUPLE,
}

SINGLE_CHAR_OPS = {
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
    ',': TokenType.COMMA,
}
