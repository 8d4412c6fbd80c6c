"""
Translation of ink! types to Solidity.

The EvmTypeMapper turns an entry of the ink! portable registry into a
MappedType, recursing through the types it refers to and caching every
result in a TypeRegistry. Types Solidity cannot write inline (structs,
tuples, enums) are given a generated definition and SCALE encoder, which
are rendered through the `struct`, `enum` and `encoder` templates.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..codegen.diagnostics import BridgeDiagnostics
    from ..codegen.renderer import Renderer

from ..errors import CyclicTypeError, MetadataError
from ..metadata.ink_types import (
    ArrayDef,
    CompositeDef,
    Field,
    InkType,
    PortableRegistry,
    PrimitiveDef,
    TupleDef,
    UnsupportedDef,
    VariantDef,
)
from .mappings import INK_INTEGER_SIZES, MAX_FIXED_BYTES, SOLIDITY_KEYWORDS, ink_primitive_to_solidity
from .registry import MappedType, TypeRegistry


# Data location for Solidity reference types
MEMORY = 'memory'


# =============================================================================
# TEMPLATE VIEWS
# =============================================================================

@dataclass
class FieldView:
    """A struct member as the templates see it."""
    name: str
    type_name: str
    encode: str  # Expression encoding `value.<name>`


@dataclass
class StructView:
    """Input of the `struct` and `encoder` templates for composites and tuples."""
    type_id: int
    name: str
    path: List[str] = field(default_factory=list)
    fields: List[FieldView] = field(default_factory=list)
    docs: List[str] = field(default_factory=list)


@dataclass
class EnumView:
    """Input of the `enum` template."""
    type_id: int
    name: str
    path: List[str] = field(default_factory=list)
    variants: List[str] = field(default_factory=list)
    docs: List[str] = field(default_factory=list)


@dataclass
class ArrayEncoderView:
    """Input of the `encoder` template for fixed arrays that are not bytesN."""
    type_id: int
    function_name: str
    type_name: str
    length: int
    element_encode: str  # Expression encoding `value[i]`


# =============================================================================
# MAPPER
# =============================================================================

class EvmTypeMapper:
    """
    Translates ink! types to Solidity MappedTypes.

    The mapper is stateless apart from the ids currently being translated
    (for cycle detection) and the generated names already handed out.
    """

    def __init__(
        self,
        types: PortableRegistry,
        templates: 'Renderer',
        diagnostics: Optional['BridgeDiagnostics'] = None,
    ):
        """
        Initialize the mapper.

        Args:
            types: The ink! portable registry to resolve ids against
            templates: Renderer holding the struct, enum and encoder templates
            diagnostics: Optional collector for dropped variant fields
        """
        self._types = types
        self._templates = templates
        self._diagnostics = diagnostics
        self._in_progress: List[int] = []
        self._names: Dict[str, int] = {}

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def map_type(self, registry: TypeRegistry, type_id: int) -> MappedType:
        """
        Return the MappedType for type_id, translating and registering it if needed.

        Raises:
            MetadataError: The type (or one it refers to) cannot be translated
            CyclicTypeError: The type refers back to itself
        """
        return self._lookup_or_insert(registry, type_id, None)

    def encode_call(self, registry: TypeRegistry, type_id: int, expr: str) -> str:
        """
        Build a Solidity expression that SCALE-encodes expr of type type_id.

        Args:
            registry: Registry the type is (or will be) mapped in
            type_id: The ink! type id of expr
            expr: Solidity expression holding the value

        Returns:
            An expression of type ``bytes memory``
        """
        mapped = self._lookup_or_insert(registry, type_id, None)
        ink_type = self._types.resolve(type_id)
        type_def = ink_type.type_def

        if isinstance(type_def, PrimitiveDef):
            if type_def.kind == 'bool':
                return f'ScaleCodec.encodeBool({expr})'
            if type_def.kind == 'str':
                return f'ScaleCodec.encodeString({expr})'
            size = INK_INTEGER_SIZES[type_def.kind]
            if type_def.kind.startswith('u'):
                return f'ScaleCodec.encodeUint(uint256({expr}), {size})'
            return f'ScaleCodec.encodeInt(int256({expr}), {size})'

        if isinstance(type_def, ArrayDef):
            if mapped.encoder is None:
                # bytesN packs to exactly its N bytes, which is the SCALE form of [u8; N]
                return f'abi.encodePacked({expr})'
            return f'{array_encoder_name(type_id)}({expr})'

        if isinstance(type_def, VariantDef):
            # Field-less enums are encoded as their one-byte discriminant
            return f'ScaleCodec.encodeUint(uint256({expr}), 1)'

        return f'encode_{mapped.type_name}({expr})'

    # =========================================================================
    # RECURSION
    # =========================================================================

    def _lookup_or_insert(
        self,
        registry: TypeRegistry,
        type_id: int,
        parent_id: Optional[int],
    ) -> MappedType:
        existing = registry.lookup(type_id)
        if existing is not None:
            return existing

        if type_id in self._in_progress:
            raise CyclicTypeError(self._in_progress + [type_id])

        ink_type = self._types.resolve(type_id)
        if ink_type is None:
            if parent_id is None:
                raise MetadataError(f'type id {type_id} does not exist')
            raise MetadataError(f'type id {type_id} referenced by type {parent_id} does not exist')

        self._in_progress.append(type_id)
        try:
            return registry.lookup_or_insert(
                type_id, lambda _: self._convert(registry, ink_type)
            )
        finally:
            self._in_progress.pop()

    def _convert(self, registry: TypeRegistry, ink_type: InkType) -> MappedType:
        type_def = ink_type.type_def

        if isinstance(type_def, PrimitiveDef):
            return self._convert_primitive(ink_type, type_def)
        if isinstance(type_def, ArrayDef):
            return self._convert_array(registry, ink_type, type_def)
        if isinstance(type_def, CompositeDef):
            return self._convert_composite(registry, ink_type, type_def)
        if isinstance(type_def, TupleDef):
            return self._convert_tuple(registry, ink_type, type_def)
        if isinstance(type_def, VariantDef):
            return self._convert_variant(ink_type, type_def)
        if isinstance(type_def, UnsupportedDef):
            raise MetadataError(
                f"type {ink_type.id} has unsupported kind '{type_def.kind}'"
            )
        raise MetadataError(f'type {ink_type.id} has an unknown definition')

    # =========================================================================
    # PER-KIND RULES
    # =========================================================================

    def _convert_primitive(self, ink_type: InkType, type_def: PrimitiveDef) -> MappedType:
        reference = ink_primitive_to_solidity(type_def.kind)
        if not reference:
            raise MetadataError(
                f"type {ink_type.id}: primitive '{type_def.kind}' has no Solidity counterpart"
            )
        if type_def.kind == 'str':
            return MappedType(reference=reference, modifier=MEMORY)
        return MappedType(reference=reference)

    def _convert_array(
        self,
        registry: TypeRegistry,
        ink_type: InkType,
        type_def: ArrayDef,
    ) -> MappedType:
        element = self._lookup_or_insert(registry, type_def.type_id, ink_type.id)

        # Byte arrays that fit a word become bytesN value types
        if element.reference == 'uint8' and type_def.length <= MAX_FIXED_BYTES:
            return MappedType(reference=f'bytes{type_def.length}')

        reference = f'{element.type_name}[{type_def.length}]'
        view = ArrayEncoderView(
            type_id=ink_type.id,
            function_name=array_encoder_name(ink_type.id),
            type_name=reference,
            length=type_def.length,
            element_encode=self.encode_call(registry, type_def.type_id, 'value[i]'),
        )
        return MappedType(
            reference=reference,
            modifier=MEMORY,
            encoder=self._templates.render('encoder', view),
        )

    def _convert_composite(
        self,
        registry: TypeRegistry,
        ink_type: InkType,
        type_def: CompositeDef,
    ) -> MappedType:
        view = self._struct_view(registry, ink_type, type_def.fields, 'composite')
        return MappedType(
            reference=view.name,
            definition=self._templates.render('struct', view),
            modifier=MEMORY,
            encoder=self._templates.render('encoder', view),
        )

    def _convert_tuple(
        self,
        registry: TypeRegistry,
        ink_type: InkType,
        type_def: TupleDef,
    ) -> MappedType:
        fields = tuple(Field(type_id=type_id) for type_id in type_def.fields)
        view = self._struct_view(registry, ink_type, fields, 'tuple')

        # Tuples are emitted as structs; references carry their location inline
        return MappedType(
            reference=f'{view.name} {MEMORY}',
            definition=self._templates.render('struct', view),
            encoder=self._templates.render('encoder', view),
        )

    def _convert_variant(self, ink_type: InkType, type_def: VariantDef) -> MappedType:
        for position, variant in enumerate(type_def.variants):
            if variant.index != position:
                raise MetadataError(
                    f"variant type {ink_type.id} ({'::'.join(ink_type.path) or 'anonymous'}) "
                    f"has non-default variant index {variant.index} for '{variant.name}' "
                    f"at position {position}; Solidity enums need indices 0..{len(type_def.variants) - 1}"
                )

        name = self._type_name(ink_type, 'enum')
        if self._diagnostics is not None:
            for variant in type_def.variants:
                if variant.fields:
                    self._diagnostics.warn_variant_fields_dropped(name, variant.name, len(variant.fields))

        # Only C-style enums are expressible; variant fields are dropped
        view = EnumView(
            type_id=ink_type.id,
            name=name,
            path=list(ink_type.path),
            variants=[variant.name for variant in type_def.variants],
            docs=list(ink_type.docs),
        )
        return MappedType(reference=name, definition=self._templates.render('enum', view))

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _struct_view(
        self,
        registry: TypeRegistry,
        ink_type: InkType,
        fields: tuple,
        fallback: str,
    ) -> StructView:
        views: List[FieldView] = []
        for index, ink_field in enumerate(fields):
            member = ink_field.name or f'f{index}'
            if member in SOLIDITY_KEYWORDS:
                member = f'{member}_'
            while any(view.name == member for view in views):
                member = f'{member}_'
            mapped = self._lookup_or_insert(registry, ink_field.type_id, ink_type.id)
            views.append(FieldView(
                name=member,
                type_name=mapped.type_name,
                encode=self.encode_call(registry, ink_field.type_id, f'value.{member}'),
            ))

        return StructView(
            type_id=ink_type.id,
            name=self._type_name(ink_type, fallback),
            path=list(ink_type.path),
            fields=views,
            docs=list(ink_type.docs),
        )

    def _type_name(self, ink_type: InkType, fallback: str) -> str:
        """Solidity name for a named type: its path joined by `_`.

        Generic instances share a path (`Option`, `Result`), so later ids
        reusing a taken name get their id appended.
        """
        name = '_'.join(ink_type.path) or f'{fallback}_{ink_type.id}'
        owner = self._names.get(name)
        if owner is not None and owner != ink_type.id:
            name = f'{name}_{ink_type.id}'
        self._names.setdefault(name, ink_type.id)
        return name


def array_encoder_name(type_id: int) -> str:
    """Name of the generated encoder function for a fixed array type."""
    return f'encode_array_{type_id}'
