"""
Lexer module for the bridge.

This module provides tokenization of Solidity ABI type strings.
"""

from .tokens import TokenType, Token, KEYWORDS, SINGLE_CHAR_OPS
from .lexer import Lexer

__all__ = [
    'TokenType',
    'Token',
    'KEYWORDS',
    'SINGLE_CHAR_OPS',
    'Lexer',
]
