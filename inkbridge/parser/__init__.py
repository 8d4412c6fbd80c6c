"""
Parser module for the bridge.

This module provides the Solidity ABI type nodes, the type-string parser
and the ABI document reader.
"""

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
from .parser import ParamTypeParser, parse_param_type
from .abi_reader import AbiReader, AbiItem, AbiParam

__all__ = [
    # Type nodes
    'ParamType',
    'BoolType',
    'AddressType',
    'StringType',
    'BytesType',
    'FixedBytesType',
    'UintType',
    'IntType',
    'ArrayType',
    'FixedArrayType',
    'TupleType',
    # Parsing
    'ParamTypeParser',
    'parse_param_type',
    # ABI documents
    'AbiReader',
    'AbiItem',
    'AbiParam',
]
