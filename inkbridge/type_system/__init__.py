"""
Types module for the bridge.

This module provides the type mapping tables, the registry of translated
types and the ink! to Solidity type mapper.
"""

from .registry import MappedType, TypeRegistry, SharedRegistry, MAPPED_TYPE_SLOTS
from .mappings import (
    param_type_to_ink,
    ink_primitive_to_solidity,
    SOLIDITY_TO_INK_MAP,
    INK_PRIMITIVE_TO_SOLIDITY,
    INK_INTEGER_SIZES,
    NATIVE_INTEGER_WIDTHS,
    MAX_FIXED_BYTES,
    SOLIDITY_KEYWORDS,
)
from .mapper import (
    EvmTypeMapper,
    StructView,
    FieldView,
    EnumView,
    ArrayEncoderView,
    array_encoder_name,
)

__all__ = [
    'MappedType',
    'TypeRegistry',
    'SharedRegistry',
    'MAPPED_TYPE_SLOTS',
    'param_type_to_ink',
    'ink_primitive_to_solidity',
    'SOLIDITY_TO_INK_MAP',
    'INK_PRIMITIVE_TO_SOLIDITY',
    'INK_INTEGER_SIZES',
    'NATIVE_INTEGER_WIDTHS',
    'MAX_FIXED_BYTES',
    'SOLIDITY_KEYWORDS',
    'EvmTypeMapper',
    'StructView',
    'FieldView',
    'EnumView',
    'ArrayEncoderView',
    'array_encoder_name',
]
