"""
Node definitions for parsed Solidity ABI types.

This module contains the dataclasses representing a Solidity parameter
type after parsing its ABI type string. The tree is immutable and purely
structural; type translation lives in ``type_system``.
"""

from dataclasses import dataclass
from typing import Tuple


# =============================================================================
# BASE NODE
# =============================================================================

@dataclass(frozen=True)
class ParamType:
    """Base class for all parsed Solidity parameter types."""
    pass


# =============================================================================
# ELEMENTARY TYPES
# =============================================================================

@dataclass(frozen=True)
class BoolType(ParamType):
    """Represents ``bool``."""
    pass


@dataclass(frozen=True)
class AddressType(ParamType):
    """Represents ``address``."""
    pass


@dataclass(frozen=True)
class StringType(ParamType):
    """Represents ``string``."""
    pass


@dataclass(frozen=True)
class BytesType(ParamType):
    """Represents dynamic ``bytes``."""
    pass


@dataclass(frozen=True)
class FixedBytesType(ParamType):
    """Represents ``bytesN`` (1 <= N <= 32)."""
    size: int


@dataclass(frozen=True)
class UintType(ParamType):
    """Represents ``uintN``."""
    bits: int


@dataclass(frozen=True)
class IntType(ParamType):
    """Represents ``intN``."""
    bits: int


# =============================================================================
# COMPOUND TYPES
# =============================================================================

@dataclass(frozen=True)
class ArrayType(ParamType):
    """Represents a dynamic array ``T[]``."""
    inner: ParamType


@dataclass(frozen=True)
class FixedArrayType(ParamType):
    """Represents a fixed-length array ``T[N]``."""
    inner: ParamType
    size: int


@dataclass(frozen=True)
class TupleType(ParamType):
    """Represents ``tuple(T1,...,Tn)``."""
    components: Tuple[ParamType, ...] = ()
