"""
Metadata module for the bridge.

This module provides the decoded ink! metadata model and its reader.
"""

from .ink_types import (
    PRIMITIVE_KINDS,
    TypeDef,
    PrimitiveDef,
    ArrayDef,
    TupleDef,
    CompositeDef,
    VariantDef,
    UnsupportedDef,
    Field,
    VariantArm,
    TypeParam,
    InkType,
    PortableRegistry,
    TypeSpec,
    MessageParam,
    EventParam,
    ConstructorSpec,
    MessageSpec,
    EventSpec,
    ContractSpec,
    InkProject,
)
from .reader import MetadataReader

__all__ = [
    'PRIMITIVE_KINDS',
    'TypeDef',
    'PrimitiveDef',
    'ArrayDef',
    'TupleDef',
    'CompositeDef',
    'VariantDef',
    'UnsupportedDef',
    'Field',
    'VariantArm',
    'TypeParam',
    'InkType',
    'PortableRegistry',
    'TypeSpec',
    'MessageParam',
    'EventParam',
    'ConstructorSpec',
    'MessageSpec',
    'EventSpec',
    'ContractSpec',
    'InkProject',
    'MetadataReader',
]
