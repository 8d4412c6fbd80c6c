"""
Solidity ABI type parser implementation.

The ParamTypeParser converts a stream of tokens from the Lexer into a
ParamType tree. It accepts exactly the type strings that appear in ABI
JSON documents; anything else is reported as a SyntaxError.
"""

import re
from typing import List

from ..lexer import Lexer, Token, TokenType
from .ast_nodes import (
    ParamType,
    BoolType,
    AddressType,
    StringType,
    BytesType,
    FixedBytesType,
    UintType,
    IntType,
    ArrayType,
    FixedArrayType,
    TupleType,
)


INTEGER_PATTERN = re.compile(r'^(u?int)([0-9]*)$')
FIXED_BYTES_PATTERN = re.compile(r'^bytes([0-9]+)$')


class ParamTypeParser:
    """
    Recursive descent parser for Solidity ABI type strings.

    Grammar:
        type     := base ('[' NUMBER? ']')*
        base     := 'tuple'? '(' (type (',' type)*)? ')' | IDENTIFIER
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        """Look ahead in the token stream without consuming."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def current(self) -> Token:
        """Return the current token."""
        return self.peek()

    def advance(self) -> Token:
        """Consume and return the current token."""
        token = self.current()
        self.pos += 1
        return token

    def match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current().type in types

    def expect(self, token_type: TokenType, message: str = '') -> Token:
        """Consume the current token if it matches, otherwise raise an error."""
        if self.current().type != token_type:
            raise SyntaxError(
                f"Expected {token_type.name} but got {self.current().type.name} "
                f"at column {self.current().column}: {message}"
            )
        return self.advance()

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    def parse(self) -> ParamType:
        """Parse the whole token stream as a single type."""
        param_type = self.parse_type()
        self.expect(TokenType.EOF, 'trailing input after type')
        return param_type

    # =========================================================================
    # TYPE PARSING
    # =========================================================================

    def parse_type(self) -> ParamType:
        """Parse a base type followed by any number of array suffixes."""
        if self.match(TokenType.TUPLE):
            self.advance()
            param_type = self.parse_tuple()
        elif self.match(TokenType.LPAREN):
            param_type = self.parse_tuple()
        elif self.match(TokenType.IDENTIFIER):
            param_type = self.parse_elementary(self.advance())
        else:
            token = self.current()
            raise SyntaxError(
                f"Expected a type but got {token.type.name} at column {token.column}"
            )

        while self.match(TokenType.LBRACKET):
            self.advance()
            if self.match(TokenType.NUMBER):
                size_token = self.advance()
                size = int(size_token.value)
                if size == 0:
                    raise SyntaxError(
                        f'Fixed array length must be positive at column {size_token.column}'
                    )
                self.expect(TokenType.RBRACKET, 'unterminated array suffix')
                param_type = FixedArrayType(inner=param_type, size=size)
            else:
                self.expect(TokenType.RBRACKET, 'unterminated array suffix')
                param_type = ArrayType(inner=param_type)

        return param_type

    def parse_tuple(self) -> TupleType:
        """Parse a parenthesised, comma-separated component list."""
        self.expect(TokenType.LPAREN)
        components = []
        if not self.match(TokenType.RPAREN):
            components.append(self.parse_type())
            while self.match(TokenType.COMMA):
                self.advance()
                components.append(self.parse_type())
        self.expect(TokenType.RPAREN, 'unterminated tuple')
        return TupleType(components=tuple(components))

    def parse_elementary(self, token: Token) -> ParamType:
        """Parse an elementary type name."""
        name = token.value

        if name == 'bool':
            return BoolType()
        if name == 'address':
            return AddressType()
        if name == 'string':
            return StringType()
        if name == 'bytes':
            return BytesType()

        fixed_bytes = FIXED_BYTES_PATTERN.match(name)
        if fixed_bytes:
            size = self._parse_width(fixed_bytes.group(1), token)
            if not 1 <= size <= 32:
                raise SyntaxError(f"Invalid fixed bytes size in '{name}' at column {token.column}")
            return FixedBytesType(size=size)

        integer = INTEGER_PATTERN.match(name)
        if integer:
            kind, width = integer.groups()
            bits = self._parse_width(width, token) if width else 256
            if bits % 8 != 0 or not 8 <= bits <= 256:
                raise SyntaxError(f"Invalid integer width in '{name}' at column {token.column}")
            return UintType(bits=bits) if kind == 'uint' else IntType(bits=bits)

        raise SyntaxError(f"Unknown type '{name}' at column {token.column}")

    def _parse_width(self, digits: str, token: Token) -> int:
        """Parse a width suffix, rejecting leading zeros."""
        if digits != str(int(digits)):
            raise SyntaxError(f"Invalid width in '{token.value}' at column {token.column}")
        return int(digits)


def parse_param_type(raw_type: str) -> ParamType:
    """Tokenize and parse a raw ABI type string."""
    tokens = Lexer(raw_type).tokenize()
    return ParamTypeParser(tokens).parse()
