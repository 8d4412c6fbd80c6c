"""
Lexer implementation for Solidity ABI type strings.

The Lexer tokenizes a raw type string into a stream of tokens that can be
consumed by the type parser.
"""

import string
from typing import List

from .tokens import Token, TokenType, KEYWORDS, SINGLE_CHAR_OPS


# Type strings are ASCII only
DIGITS = frozenset(string.digits)
IDENTIFIER_START = frozenset(string.ascii_letters + '_')
IDENTIFIER_CHARS = IDENTIFIER_START | DIGITS


class Lexer:
    """
    Lexer for Solidity ABI type strings.

    Converts a type string into a list of tokens for parsing. Whitespace is
    tolerated between tokens even though canonical type strings have none.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.tokens: List[Token] = []

    def peek(self, offset: int = 0) -> str:
        """Look ahead in the source without consuming."""
        pos = self.pos + offset
        if pos >= len(self.source):
            return ''
        return self.source[pos]

    def advance(self) -> str:
        """Consume and return the current character."""
        ch = self.peek()
        self.pos += 1
        return ch

    def skip_whitespace(self) -> None:
        """Skip over whitespace characters."""
        ch = self.peek()
        while ch and ch in ' \t\r\n':
            self.advance()
            ch = self.peek()

    def read_identifier(self) -> str:
        """Read a name such as ``uint256`` or ``bytes32``."""
        result = ''
        while self.peek() and self.peek() in IDENTIFIER_CHARS:
            result += self.advance()
        return result

    def read_number(self) -> str:
        """Read a decimal array length."""
        result = ''
        while self.peek() and self.peek() in DIGITS:
            result += self.advance()
        return result

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source string."""
        while self.pos < len(self.source):
            self.skip_whitespace()
            if self.pos >= len(self.source):
                break

            column = self.pos + 1
            ch = self.peek()

            if ch in IDENTIFIER_START:
                name = self.read_identifier()
                token_type = KEYWORDS.get(name, TokenType.IDENTIFIER)
                self.tokens.append(Token(token_type, name, column))
            elif ch in DIGITS:
                self.tokens.append(Token(TokenType.NUMBER, self.read_number(), column))
            elif ch in SINGLE_CHAR_OPS:
                self.advance()
                self.tokens.append(Token(SINGLE_CHAR_OPS[ch], ch, column))
            else:
                raise SyntaxError(f"Unexpected character '{ch}' at column {column}")

        self.tokens.append(Token(TokenType.EOF, '', len(self.source) + 1))
        return self.tokens
