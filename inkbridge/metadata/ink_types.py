"""
Decoded ink! metadata (version 3).

This module contains the dataclasses for the portable type registry and
the contract spec. Nodes refer to each other by numeric type id only, so
the registry is a flat arena that mappers index into.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple


# Every primitive kind scale-info can describe
PRIMITIVE_KINDS = (
    'bool', 'char', 'str',
    'u8', 'u16', 'u32', 'u64', 'u128', 'u256',
    'i8', 'i16', 'i32', 'i64', 'i128', 'i256',
)


# =============================================================================
# TYPE DEFINITIONS
# =============================================================================

@dataclass(frozen=True)
class TypeDef:
    """Base class for the definition part of an ink! type."""
    pass


@dataclass(frozen=True)
class PrimitiveDef(TypeDef):
    kind: str  # One of PRIMITIVE_KINDS


@dataclass(frozen=True)
class ArrayDef(TypeDef):
    length: int
    type_id: int


@dataclass(frozen=True)
class TupleDef(TypeDef):
    fields: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Field:
    """A struct or variant field. Tuple-like structs have no names."""
    type_id: int
    name: Optional[str] = None
    type_name: Optional[str] = None
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CompositeDef(TypeDef):
    fields: Tuple[Field, ...] = ()


@dataclass(frozen=True)
class VariantArm:
    """One arm of a variant (enum) type."""
    name: str
    index: int
    fields: Tuple[Field, ...] = ()
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class VariantDef(TypeDef):
    variants: Tuple[VariantArm, ...] = ()


@dataclass(frozen=True)
class UnsupportedDef(TypeDef):
    """A type-def kind the bridge does not translate (sequence, compact, ...)."""
    kind: str


@dataclass(frozen=True)
class TypeParam:
    name: str
    type_id: Optional[int] = None


@dataclass(frozen=True)
class InkType:
    """A single entry of the portable registry."""
    id: int
    type_def: TypeDef
    path: Tuple[str, ...] = ()
    params: Tuple[TypeParam, ...] = ()
    docs: Tuple[str, ...] = ()


class PortableRegistry:
    """Flat, id-keyed collection of ink! types."""

    def __init__(self, types: Optional[List[InkType]] = None):
        self._types: Dict[int, InkType] = {}
        for ink_type in types or []:
            self._types[ink_type.id] = ink_type

    def resolve(self, type_id: int) -> Optional[InkType]:
        """Return the type registered under type_id, if any."""
        return self._types.get(type_id)

    def __contains__(self, type_id: int) -> bool:
        return type_id in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[InkType]:
        """Iterate over types ordered by id."""
        for type_id in sorted(self._types):
            yield self._types[type_id]


# =============================================================================
# CONTRACT SPEC
# =============================================================================

@dataclass(frozen=True)
class TypeSpec:
    """Reference to a registry type plus the name it was written with."""
    type_id: int
    display_name: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MessageParam:
    label: str
    type: TypeSpec


@dataclass(frozen=True)
class EventParam:
    label: str
    type: TypeSpec
    indexed: bool = False
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ConstructorSpec:
    label: str
    selector: str
    args: Tuple[MessageParam, ...] = ()
    payable: bool = False
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MessageSpec:
    label: str
    selector: str
    args: Tuple[MessageParam, ...] = ()
    mutates: bool = False
    payable: bool = False
    return_type: Optional[TypeSpec] = None
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EventSpec:
    label: str
    args: Tuple[EventParam, ...] = ()
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ContractSpec:
    constructors: Tuple[ConstructorSpec, ...] = ()
    messages: Tuple[MessageSpec, ...] = ()
    events: Tuple[EventSpec, ...] = ()
    docs: Tuple[str, ...] = ()


@dataclass
class InkProject:
    """Root of decoded ink! metadata: the type registry and the contract spec."""
    registry: PortableRegistry
    spec: ContractSpec = field(default_factory=ContractSpec)
    name: str = ''
