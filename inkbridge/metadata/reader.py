"""
Reader for ink! contract metadata.

The MetadataReader decodes the JSON envelope produced by cargo-contract,
picks the ``V3`` project out of it and resolves the portable type registry
into InkType entries. Type-def kinds the bridge cannot translate are kept
as UnsupportedDef so that only the types actually used fail later.
"""

import json
from typing import Any, Dict, List, Optional, Tuple, Union

from ..errors import MalformedJsonError, MetadataError
from .ink_types import (
    PRIMITIVE_KINDS,
    ArrayDef,
    CompositeDef,
    ConstructorSpec,
    ContractSpec,
    EventParam,
    EventSpec,
    Field,
    InkProject,
    InkType,
    MessageParam,
    MessageSpec,
    PortableRegistry,
    PrimitiveDef,
    TupleDef,
    TypeDef,
    TypeParam,
    TypeSpec,
    UnsupportedDef,
    VariantArm,
    VariantDef,
)


METADATA_VERSION_KEY = 'V3'


class MetadataReader:
    """
    Decodes ink! metadata.

    Usage:
        project = MetadataReader(text).read()
    """

    def __init__(self, source: Union[str, bytes]):
        self.source = source

    def read(self) -> InkProject:
        """Parse the source and return the decoded project."""
        try:
            document = json.loads(self.source)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedJsonError(str(e)) from e
        return self.read_document(document)

    def read_document(self, document: Any) -> InkProject:
        """Convert an already decoded JSON envelope into an InkProject."""
        if not isinstance(document, dict):
            raise MetadataError('metadata must be a JSON object')

        project = document.get(METADATA_VERSION_KEY)
        if not isinstance(project, dict):
            raise MetadataError(
                f"missing '{METADATA_VERSION_KEY}' section; only ink! metadata "
                f"version 3 is supported"
            )

        registry = PortableRegistry(self._read_types(project.get('types', [])))
        spec = self._read_spec(_expect(project, 'spec', dict, 'V3'))

        return InkProject(registry=registry, spec=spec, name=self._read_contract_name(document))

    def _read_contract_name(self, document: Dict[str, Any]) -> str:
        contract = document.get('contract')
        if isinstance(contract, dict) and isinstance(contract.get('name'), str):
            return contract['name']
        return ''

    # =========================================================================
    # TYPE REGISTRY
    # =========================================================================

    def _read_types(self, entries: Any) -> List[InkType]:
        if not isinstance(entries, list):
            raise MetadataError("'types' must be a list")

        types = []
        for position, entry in enumerate(entries):
            where = f'types[{position}]'
            if not isinstance(entry, dict):
                raise MetadataError(f'{where} must be an object')

            type_id = entry.get('id', position)
            if not _is_int(type_id):
                raise MetadataError(f"{where}.id must be an integer")

            body = _expect(entry, 'type', dict, where)
            where = f'type {type_id}'
            types.append(InkType(
                id=type_id,
                type_def=self._read_type_def(_expect(body, 'def', dict, where), where),
                path=_read_strings(body.get('path', []), f'{where} path'),
                params=self._read_type_params(body.get('params', []), where),
                docs=_read_strings(body.get('docs', []), f'{where} docs'),
            ))
        return types

    def _read_type_def(self, raw: Dict[str, Any], where: str) -> TypeDef:
        if len(raw) != 1:
            raise MetadataError(f'{where} definition must have exactly one kind')

        kind, body = next(iter(raw.items()))

        if kind == 'primitive':
            if body not in PRIMITIVE_KINDS:
                raise MetadataError(f'{where} has unknown primitive {body!r}')
            return PrimitiveDef(kind=body)

        if kind == 'array':
            if not isinstance(body, dict):
                raise MetadataError(f'{where} array definition must be an object')
            return ArrayDef(
                length=_expect_int(body, 'len', where),
                type_id=_expect_int(body, 'type', where),
            )

        if kind == 'tuple':
            if not isinstance(body, list) or not all(_is_int(v) for v in body):
                raise MetadataError(f'{where} tuple definition must be a list of type ids')
            return TupleDef(fields=tuple(body))

        if kind == 'composite':
            if not isinstance(body, dict):
                raise MetadataError(f'{where} composite definition must be an object')
            return CompositeDef(fields=self._read_fields(body.get('fields', []), where))

        if kind == 'variant':
            if not isinstance(body, dict):
                raise MetadataError(f'{where} variant definition must be an object')
            return VariantDef(variants=self._read_variants(body.get('variants', []), where))

        # sequence, compact, bitSequence and anything newer
        return UnsupportedDef(kind=kind)

    def _read_fields(self, entries: Any, where: str) -> Tuple[Field, ...]:
        if not isinstance(entries, list):
            raise MetadataError(f'{where} fields must be a list')

        fields = []
        for position, entry in enumerate(entries):
            field_where = f'{where} field {position}'
            if not isinstance(entry, dict):
                raise MetadataError(f'{field_where} must be an object')
            fields.append(Field(
                type_id=_expect_int(entry, 'type', field_where),
                name=_optional_str(entry, 'name', field_where),
                type_name=_optional_str(entry, 'typeName', field_where),
                docs=_read_strings(entry.get('docs', []), f'{field_where} docs'),
            ))
        return tuple(fields)

    def _read_variants(self, entries: Any, where: str) -> Tuple[VariantArm, ...]:
        if not isinstance(entries, list):
            raise MetadataError(f'{where} variants must be a list')

        variants = []
        for position, entry in enumerate(entries):
            variant_where = f'{where} variant {position}'
            if not isinstance(entry, dict):
                raise MetadataError(f'{variant_where} must be an object')
            variants.append(VariantArm(
                name=_expect(entry, 'name', str, variant_where),
                index=_expect_int(entry, 'index', variant_where),
                fields=self._read_fields(entry.get('fields', []), variant_where),
                docs=_read_strings(entry.get('docs', []), f'{variant_where} docs'),
            ))
        return tuple(variants)

    def _read_type_params(self, entries: Any, where: str) -> Tuple[TypeParam, ...]:
        if not isinstance(entries, list):
            raise MetadataError(f'{where} params must be a list')

        params = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise MetadataError(f'{where} params must be objects')
            type_id = entry.get('type')
            params.append(TypeParam(
                name=_expect(entry, 'name', str, f'{where} param'),
                type_id=type_id if _is_int(type_id) else None,
            ))
        return tuple(params)

    # =========================================================================
    # CONTRACT SPEC
    # =========================================================================

    def _read_spec(self, raw: Dict[str, Any]) -> ContractSpec:
        return ContractSpec(
            constructors=tuple(
                self._read_constructor(entry, f'constructor {position}')
                for position, entry in enumerate(_expect_list(raw, 'constructors', 'spec'))
            ),
            messages=tuple(
                self._read_message(entry, f'message {position}')
                for position, entry in enumerate(_expect_list(raw, 'messages', 'spec'))
            ),
            events=tuple(
                self._read_event(entry, f'event {position}')
                for position, entry in enumerate(raw.get('events', []) or [])
            ),
            docs=_read_strings(raw.get('docs', []), 'spec docs'),
        )

    def _read_constructor(self, raw: Any, where: str) -> ConstructorSpec:
        if not isinstance(raw, dict):
            raise MetadataError(f'{where} must be an object')
        return ConstructorSpec(
            label=_read_label(raw, where),
            selector=_expect(raw, 'selector', str, where),
            args=self._read_args(raw.get('args', []), where),
            payable=bool(raw.get('payable', False)),
            docs=_read_strings(raw.get('docs', []), f'{where} docs'),
        )

    def _read_message(self, raw: Any, where: str) -> MessageSpec:
        if not isinstance(raw, dict):
            raise MetadataError(f'{where} must be an object')
        return_type = raw.get('returnType')
        return MessageSpec(
            label=_read_label(raw, where),
            selector=_expect(raw, 'selector', str, where),
            args=self._read_args(raw.get('args', []), where),
            mutates=bool(raw.get('mutates', False)),
            payable=bool(raw.get('payable', False)),
            return_type=_read_type_spec(return_type, f'{where} returnType') if return_type else None,
            docs=_read_strings(raw.get('docs', []), f'{where} docs'),
        )

    def _read_event(self, raw: Any, where: str) -> EventSpec:
        if not isinstance(raw, dict):
            raise MetadataError(f'{where} must be an object')
        args = []
        for position, entry in enumerate(raw.get('args', []) or []):
            arg_where = f'{where} arg {position}'
            if not isinstance(entry, dict):
                raise MetadataError(f'{arg_where} must be an object')
            args.append(EventParam(
                label=_read_label(entry, arg_where),
                type=_read_type_spec(entry.get('type'), arg_where),
                indexed=bool(entry.get('indexed', False)),
                docs=_read_strings(entry.get('docs', []), f'{arg_where} docs'),
            ))
        return EventSpec(
            label=_read_label(raw, where),
            args=tuple(args),
            docs=_read_strings(raw.get('docs', []), f'{where} docs'),
        )

    def _read_args(self, entries: Any, where: str) -> Tuple[MessageParam, ...]:
        if not isinstance(entries, list):
            raise MetadataError(f'{where} args must be a list')

        args = []
        for position, entry in enumerate(entries):
            arg_where = f'{where} arg {position}'
            if not isinstance(entry, dict):
                raise MetadataError(f'{arg_where} must be an object')
            args.append(MessageParam(
                label=_read_label(entry, arg_where),
                type=_read_type_spec(entry.get('type'), arg_where),
            ))
        return tuple(args)


# =============================================================================
# FIELD HELPERS
# =============================================================================

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _expect(raw: Dict[str, Any], key: str, kind: type, where: str) -> Any:
    value = raw.get(key)
    if not isinstance(value, kind):
        raise MetadataError(f"{where} is missing '{key}' or it has the wrong type")
    return value


def _expect_int(raw: Dict[str, Any], key: str, where: str) -> int:
    value = raw.get(key)
    if not _is_int(value):
        raise MetadataError(f"{where} is missing integer '{key}'")
    return value


def _expect_list(raw: Dict[str, Any], key: str, where: str) -> List[Any]:
    value = raw.get(key, [])
    if not isinstance(value, list):
        raise MetadataError(f"{where} '{key}' must be a list")
    return value


def _optional_str(raw: Dict[str, Any], key: str, where: str) -> Optional[str]:
    value = raw.get(key)
    if value is not None and not isinstance(value, str):
        raise MetadataError(f"{where} '{key}' must be a string")
    return value


def _read_strings(value: Any, where: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise MetadataError(f'{where} must be a list of strings')
    return tuple(value)


def _read_label(raw: Dict[str, Any], where: str) -> str:
    # Older metadata spells labels as path segments under `name`
    label = raw.get('label', raw.get('name'))
    if isinstance(label, list) and all(isinstance(v, str) for v in label):
        return '::'.join(label)
    if not isinstance(label, str):
        raise MetadataError(f"{where} is missing 'label'")
    return label


def _read_type_spec(raw: Any, where: str) -> TypeSpec:
    if not isinstance(raw, dict):
        raise MetadataError(f"{where} is missing 'type'")
    return TypeSpec(
        type_id=_expect_int(raw, 'type', where),
        display_name=_read_strings(raw.get('displayName', []), f'{where} displayName'),
    )
