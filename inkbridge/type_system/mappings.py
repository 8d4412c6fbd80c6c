"""
Type mappings between Solidity and ink! type vocabularies.

This module contains the fixed tables and the pure, recursive translation
from a parsed Solidity ParamType to the ink! type text used in generated
wrapper modules, plus the inverse primitive table used when translating
ink! metadata back to Solidity.
"""

from ..parser.ast_nodes import (
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


# =============================================================================
# TYPE MAPPING CONSTANTS
# =============================================================================

# Integer widths with a native Rust scalar
NATIVE_INTEGER_WIDTHS = (8, 16, 32, 64, 128)

# Simple Solidity types to their ink! equivalents
SOLIDITY_TO_INK_MAP = {
    'bool': 'bool',
    'address': 'H160',
    'bytes': 'Vec<u8>',
    'string': 'String',
}

# Wide integers that have no native Rust scalar
WIDE_UINT = 'U256'
WIDE_INT = 'I256'

# ink! primitive kinds to Solidity type names. `char` has no counterpart.
INK_PRIMITIVE_TO_SOLIDITY = {
    'bool': 'bool',
    'str': 'string',
    'u8': 'uint8',
    'u16': 'uint16',
    'u32': 'uint32',
    'u64': 'uint64',
    'u128': 'uint128',
    'u256': 'uint256',
    'i8': 'int8',
    'i16': 'int16',
    'i32': 'int32',
    'i64': 'int64',
    'i128': 'int128',
    'i256': 'int256',
}

# Byte width of every fixed-size ink! integer primitive
INK_INTEGER_SIZES = {
    'u8': 1, 'u16': 2, 'u32': 4, 'u64': 8, 'u128': 16, 'u256': 32,
    'i8': 1, 'i16': 2, 'i32': 4, 'i64': 8, 'i128': 16, 'i256': 32,
}

# Longest u8 array that still fits a Solidity bytesN value type
MAX_FIXED_BYTES = 32

# Solidity keywords and type names that cannot be identifiers
SOLIDITY_KEYWORDS = frozenset({
    'address', 'bool', 'string', 'bytes', 'byte', 'uint', 'int', 'fixed', 'ufixed',
    'mapping', 'struct', 'enum', 'function', 'event', 'error', 'return', 'returns',
    'if', 'else', 'for', 'while', 'do', 'break', 'continue', 'new', 'delete',
    'emit', 'try', 'catch', 'assembly', 'unchecked', 'using', 'is', 'type',
    'memory', 'storage', 'calldata', 'public', 'private', 'internal', 'external',
    'pure', 'view', 'payable', 'constant', 'immutable', 'override', 'virtual',
    'indexed', 'anonymous', 'contract', 'library', 'interface', 'modifier',
    'constructor', 'fallback', 'receive', 'true', 'false',
})


# =============================================================================
# TYPE CONVERSION FUNCTIONS
# =============================================================================

def param_type_to_ink(param_type: ParamType) -> str:
    """
    Convert a parsed Solidity type to its ink! equivalent.

    Args:
        param_type: The ParamType node to convert

    Returns:
        The ink! (Rust) type string
    """
    if isinstance(param_type, BoolType):
        return SOLIDITY_TO_INK_MAP['bool']
    if isinstance(param_type, AddressType):
        return SOLIDITY_TO_INK_MAP['address']
    if isinstance(param_type, BytesType):
        return SOLIDITY_TO_INK_MAP['bytes']
    if isinstance(param_type, StringType):
        return SOLIDITY_TO_INK_MAP['string']

    if isinstance(param_type, FixedBytesType):
        return f'FixedBytes<{param_type.size}>'

    if isinstance(param_type, UintType):
        if param_type.bits in NATIVE_INTEGER_WIDTHS:
            return f'u{param_type.bits}'
        return WIDE_UINT
    if isinstance(param_type, IntType):
        if param_type.bits in NATIVE_INTEGER_WIDTHS:
            return f'i{param_type.bits}'
        return WIDE_INT

    if isinstance(param_type, ArrayType):
        return f'Vec<{param_type_to_ink(param_type.inner)}>'
    if isinstance(param_type, FixedArrayType):
        return f'[{param_type_to_ink(param_type.inner)}; {param_type.size}]'
    if isinstance(param_type, TupleType):
        return f'({", ".join(param_type_to_ink(c) for c in param_type.components)})'

    raise TypeError(f'Unknown parameter type node: {param_type!r}')


def ink_primitive_to_solidity(kind: str) -> str:
    """
    Get the Solidity type name for an ink! primitive kind.

    Args:
        kind: The primitive kind (e.g., 'u128', 'str')

    Returns:
        The Solidity type name, or an empty string when there is none
    """
    return INK_PRIMITIVE_TO_SOLIDITY.get(kind, '')
