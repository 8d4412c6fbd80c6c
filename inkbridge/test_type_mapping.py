#!/usr/bin/env python3
"""
Unit tests for ink! metadata decoding and ink! -> Solidity type mapping.

Run with: python3 -m pytest inkbridge/test_type_mapping.py
   or: cd .. && python3 inkbridge/test_type_mapping.py
"""

import sys
import os
# Add parent directory to path for proper imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import json
import unittest
from inkbridge.codegen import BridgeDiagnostics, CodeGenerationContext, DefinitionGenerator
from inkbridge.errors import CyclicTypeError, MetadataError, TemplateError
from inkbridge.metadata import (
    ArrayDef,
    CompositeDef,
    Field,
    InkType,
    MetadataReader,
    PortableRegistry,
    PrimitiveDef,
    TupleDef,
    UnsupportedDef,
    VariantArm,
    VariantDef,
)
from inkbridge.type_system import EvmTypeMapper, MappedType, SharedRegistry, TypeRegistry


def _erc20_types():
    """Types of an ERC-20 style Transfer struct."""
    return [
        InkType(id=0, type_def=PrimitiveDef(kind='u8')),
        InkType(id=2, type_def=ArrayDef(length=20, type_id=0)),
        InkType(id=3, path=('ink_env', 'types', 'AccountId'),
                type_def=CompositeDef(fields=(Field(type_id=2, type_name='[u8; 20]'),))),
        InkType(id=5, type_def=PrimitiveDef(kind='u128')),
        InkType(id=7, path=('erc20', 'Transfer'), docs=(' Event emitted on transfers.',),
                type_def=CompositeDef(fields=(
                    Field(type_id=3, name='from'),
                    Field(type_id=3, name='to'),
                    Field(type_id=5, name='value'),
                ))),
    ]


class MapperTestCase(unittest.TestCase):
    """Base class building a mapper over a list of types."""

    def make_mapper(self, types, diagnostics=None):
        ctx = CodeGenerationContext.for_output('_', diagnostics)
        DefinitionGenerator(ctx).register()
        self.registry = TypeRegistry()
        self.mapper = EvmTypeMapper(PortableRegistry(types), ctx.renderer, diagnostics)
        return self.mapper

    def map(self, type_id):
        return self.mapper.map_type(self.registry, type_id)


class TestCompositeMapping(MapperTestCase):
    """Test structs and their transitive closure."""

    def test_transfer_struct(self):
        self.make_mapper(_erc20_types())
        mapped = self.map(7)

        for type_id in (3, 5, 7):
            self.assertIn(type_id, self.registry)
        self.assertEqual(mapped.reference, 'erc20_Transfer')
        self.assertEqual(mapped.modifier, 'memory')
        self.assertTrue(mapped.definition)
        self.assertIs(self.registry.lookup(7), mapped)

    def test_transfer_struct_definition(self):
        self.make_mapper(_erc20_types())
        definition = self.map(7).definition

        self.assertIn('struct erc20_Transfer {', definition)
        self.assertIn('    ink_env_types_AccountId from;', definition)
        self.assertIn('    ink_env_types_AccountId to;', definition)
        self.assertIn('    uint128 value;', definition)
        self.assertIn('/// Event emitted on transfers.', definition)
        self.assertIn('// ink! type 7: erc20::Transfer', definition)

    def test_transfer_struct_encoder(self):
        self.make_mapper(_erc20_types())
        encoder = self.map(7).encoder

        self.assertIn(
            'function encode_erc20_Transfer(erc20_Transfer memory value) internal pure returns (bytes memory) {',
            encoder,
        )
        self.assertIn('encode_ink_env_types_AccountId(value.from)', encoder)
        self.assertIn('ScaleCodec.encodeUint(uint256(value.value), 16)', encoder)

    def test_anonymous_fields(self):
        self.make_mapper(_erc20_types())
        account = self.map(3)
        self.assertIn('bytes20 f0;', account.definition)
        self.assertIn('abi.encodePacked(value.f0)', account.encoder)

    def test_keyword_field_names(self):
        self.make_mapper([
            InkType(id=0, type_def=PrimitiveDef(kind='bool')),
            InkType(id=1, path=('Settings',), type_def=CompositeDef(fields=(
                Field(type_id=0, name='storage'),
                Field(type_id=0, name='mapping'),
                Field(type_id=0, name='storage_'),
                Field(type_id=0, name='value'),
            ))),
        ])
        mapped = self.map(1)

        self.assertIn('    bool storage_;', mapped.definition)
        self.assertIn('    bool mapping_;', mapped.definition)
        self.assertIn('    bool storage__;', mapped.definition)
        self.assertIn('    bool value;', mapped.definition)
        self.assertNotIn('bool storage;', mapped.definition)
        self.assertIn('ScaleCodec.encodeBool(value.storage_)', mapped.encoder)
        self.assertIn('ScaleCodec.encodeBool(value.storage__)', mapped.encoder)
        self.assertIn('ScaleCodec.encodeBool(value.mapping_)', mapped.encoder)

    def test_leaves_are_registered_first(self):
        self.make_mapper(_erc20_types())
        self.map(7)
        self.assertEqual(self.registry.ids(), [0, 2, 3, 5, 7])

    def test_unnamed_composite(self):
        self.make_mapper([
            InkType(id=0, type_def=PrimitiveDef(kind='bool')),
            InkType(id=1, type_def=CompositeDef(fields=(Field(type_id=0, name='flag'),))),
        ])
        self.assertEqual(self.map(1).reference, 'composite_1')

    def test_empty_composite(self):
        self.make_mapper([InkType(id=4, path=('Unit',), type_def=CompositeDef())])
        mapped = self.map(4)
        self.assertIn('bool _empty;', mapped.definition)
        self.assertIn('return new bytes(0);', mapped.encoder)

    def test_generic_instances_get_distinct_names(self):
        self.make_mapper([
            InkType(id=0, type_def=PrimitiveDef(kind='u8')),
            InkType(id=1, type_def=PrimitiveDef(kind='u32')),
            InkType(id=6, path=('Wrapper',), type_def=CompositeDef(fields=(Field(type_id=0),))),
            InkType(id=10, path=('Wrapper',), type_def=CompositeDef(fields=(Field(type_id=1),))),
        ])
        self.assertEqual(self.map(6).reference, 'Wrapper')
        self.assertEqual(self.map(10).reference, 'Wrapper_10')


class TestArrayMapping(MapperTestCase):
    """Test the byte-array special case and array encoders."""

    def make_array(self, length, element='u8'):
        self.make_mapper([
            InkType(id=0, type_def=PrimitiveDef(kind=element)),
            InkType(id=1, type_def=ArrayDef(length=length, type_id=0)),
        ])
        return self.map(1)

    def test_byte_array_of_twenty(self):
        mapped = self.make_array(20)
        self.assertEqual(mapped.reference, 'bytes20')
        self.assertIsNone(mapped.definition)
        self.assertIsNone(mapped.encoder)
        self.assertIsNone(mapped.modifier)

    def test_byte_array_limits(self):
        self.assertEqual(self.make_array(1).reference, 'bytes1')
        self.assertEqual(self.make_array(32).reference, 'bytes32')

    def test_long_byte_array(self):
        mapped = self.make_array(33)
        self.assertEqual(mapped.reference, 'uint8[33]')
        self.assertEqual(mapped.modifier, 'memory')
        self.assertIn('function encode_array_1(uint8[33] memory value)', mapped.encoder)
        self.assertIn('ScaleCodec.encodeUint(uint256(value[i]), 1)', mapped.encoder)
        self.assertIn('i < 33', mapped.encoder)

    def test_non_byte_array(self):
        mapped = self.make_array(4, element='u32')
        self.assertEqual(mapped.reference, 'uint32[4]')
        self.assertEqual(self.mapper.encode_call(self.registry, 1, 'x'), 'encode_array_1(x)')

    def test_bytes_n_encoding(self):
        self.make_array(20)
        self.assertEqual(self.mapper.encode_call(self.registry, 1, 'x'), 'abi.encodePacked(x)')


class TestPrimitiveMapping(MapperTestCase):
    """Test primitives and their encoders."""

    def test_primitives(self):
        types = [InkType(id=i, type_def=PrimitiveDef(kind=k))
                 for i, k in enumerate(('bool', 'str', 'u16', 'i64', 'u256'))]
        self.make_mapper(types)
        self.assertEqual(self.map(0), MappedType(reference='bool'))
        self.assertEqual(self.map(1), MappedType(reference='string', modifier='memory'))
        self.assertEqual(self.map(2).reference, 'uint16')
        self.assertEqual(self.map(3).reference, 'int64')
        self.assertEqual(self.map(4).reference, 'uint256')

    def test_primitive_encoders(self):
        types = [InkType(id=i, type_def=PrimitiveDef(kind=k))
                 for i, k in enumerate(('bool', 'str', 'u16', 'i64'))]
        self.make_mapper(types)
        encode = self.mapper.encode_call
        self.assertEqual(encode(self.registry, 0, 'x'), 'ScaleCodec.encodeBool(x)')
        self.assertEqual(encode(self.registry, 1, 'x'), 'ScaleCodec.encodeString(x)')
        self.assertEqual(encode(self.registry, 2, 'x'), 'ScaleCodec.encodeUint(uint256(x), 2)')
        self.assertEqual(encode(self.registry, 3, 'x'), 'ScaleCodec.encodeInt(int256(x), 8)')

    def test_char_is_unsupported(self):
        self.make_mapper([InkType(id=0, type_def=PrimitiveDef(kind='char'))])
        with self.assertRaises(MetadataError):
            self.map(0)
        self.assertNotIn(0, self.registry)

    def test_unsupported_kind(self):
        self.make_mapper([InkType(id=0, type_def=UnsupportedDef(kind='sequence'))])
        with self.assertRaises(MetadataError) as cm:
            self.map(0)
        self.assertIn('sequence', str(cm.exception))

    def test_missing_type_id(self):
        self.make_mapper([InkType(id=1, type_def=ArrayDef(length=2, type_id=9))])
        with self.assertRaises(MetadataError) as cm:
            self.map(1)
        self.assertIn('9', str(cm.exception))


class TestTupleMapping(MapperTestCase):
    """Test tuples, which become structs with an inline location."""

    def test_tuple(self):
        self.make_mapper([
            InkType(id=0, type_def=PrimitiveDef(kind='u8')),
            InkType(id=5, type_def=PrimitiveDef(kind='u128')),
            InkType(id=11, type_def=TupleDef(fields=(5, 0))),
        ])
        mapped = self.map(11)
        self.assertEqual(mapped.reference, 'tuple_11 memory')
        self.assertEqual(mapped.type_name, 'tuple_11')
        self.assertIsNone(mapped.modifier)
        self.assertIn('struct tuple_11 {', mapped.definition)
        self.assertIn('uint128 f0;', mapped.definition)
        self.assertIn('uint8 f1;', mapped.definition)
        self.assertEqual(self.mapper.encode_call(self.registry, 11, 'x'), 'encode_tuple_11(x)')


class TestVariantMapping(MapperTestCase):
    """Test enums and the rejection of non-default discriminants."""

    def test_c_style_enum(self):
        self.make_mapper([InkType(id=4, path=('flipper', 'Error'), type_def=VariantDef(variants=(
            VariantArm(name='Overflow', index=0),
            VariantArm(name='Underflow', index=1),
        )))])
        mapped = self.map(4)
        self.assertEqual(mapped.reference, 'flipper_Error')
        self.assertIn('enum flipper_Error {\n    Overflow,\n    Underflow\n}', mapped.definition)
        self.assertIsNone(mapped.encoder)
        self.assertEqual(
            self.mapper.encode_call(self.registry, 4, 'x'),
            'ScaleCodec.encodeUint(uint256(x), 1)',
        )

    def test_non_contiguous_indices(self):
        self.make_mapper([InkType(id=4, path=('Choice',), type_def=VariantDef(variants=(
            VariantArm(name='A', index=0),
            VariantArm(name='B', index=2),
        )))])
        with self.assertRaises(MetadataError) as cm:
            self.map(4)
        self.assertIn('variant index', str(cm.exception))
        self.assertNotIn(4, self.registry)

    def test_failure_rolls_back_the_whole_mapping(self):
        self.make_mapper([
            InkType(id=1, type_def=PrimitiveDef(kind='u32')),
            InkType(id=8, type_def=VariantDef(variants=(VariantArm(name='A', index=1),))),
            InkType(id=9, path=('Holder',), type_def=CompositeDef(fields=(
                Field(type_id=1, name='count'),
                Field(type_id=8, name='choice'),
            ))),
        ])
        with self.assertRaises(MetadataError):
            self.map(9)
        self.assertEqual(len(self.registry), 0)

    def test_variant_fields_are_dropped(self):
        diagnostics = BridgeDiagnostics()
        self.make_mapper([
            InkType(id=5, type_def=PrimitiveDef(kind='u128')),
            InkType(id=6, path=('Option',), type_def=VariantDef(variants=(
                VariantArm(name='None', index=0),
                VariantArm(name='Some', index=1, fields=(Field(type_id=5),)),
            ))),
        ], diagnostics)
        mapped = self.map(6)
        self.assertIn('None,', mapped.definition)
        self.assertIn('Some', mapped.definition)
        self.assertEqual([d.code for d in diagnostics.warnings], ['W004'])
        # Field types of dropped variants are never mapped
        self.assertNotIn(5, self.registry)


class TestCycles(MapperTestCase):
    """Test detection of cyclic type definitions."""

    def test_self_reference(self):
        self.make_mapper([
            InkType(id=1, path=('Node',), type_def=CompositeDef(fields=(Field(type_id=1, name='next'),))),
        ])
        with self.assertRaises(CyclicTypeError) as cm:
            self.map(1)
        self.assertEqual(cm.exception.id_path, [1, 1])
        self.assertEqual(len(self.registry), 0)

    def test_indirect_cycle(self):
        self.make_mapper([
            InkType(id=1, path=('A',), type_def=CompositeDef(fields=(Field(type_id=2),))),
            InkType(id=2, type_def=TupleDef(fields=(1,))),
        ])
        with self.assertRaises(CyclicTypeError) as cm:
            self.map(1)
        self.assertEqual(cm.exception.id_path, [1, 2, 1])
        self.assertIn('1 -> 2 -> 1', str(cm.exception))

    def test_mapper_recovers_after_cycle(self):
        self.make_mapper([
            InkType(id=0, type_def=PrimitiveDef(kind='bool')),
            InkType(id=1, path=('Node',), type_def=CompositeDef(fields=(Field(type_id=1),))),
        ])
        with self.assertRaises(CyclicTypeError):
            self.map(1)
        self.assertEqual(self.map(0).reference, 'bool')


class TestTypeRegistry(unittest.TestCase):
    """Test the registry and its shared handle."""

    def test_lookup_or_insert_caches(self):
        registry = TypeRegistry()
        calls = []

        def make(type_id):
            calls.append(type_id)
            return MappedType(reference='bool')

        first = registry.lookup_or_insert(3, make)
        second = registry.lookup_or_insert(3, make)
        self.assertIs(first, second)
        self.assertEqual(calls, [3])
        self.assertTrue(registry.has_mapping(3))
        self.assertIsNone(registry.lookup(4))

    def test_lookup_or_insert_rolls_back(self):
        registry = TypeRegistry()
        registry.lookup_or_insert(1, lambda _: MappedType(reference='bool'))

        def make(type_id):
            registry.lookup_or_insert(2, lambda _: MappedType(reference='uint8'))
            raise MetadataError('boom')

        with self.assertRaises(MetadataError):
            registry.lookup_or_insert(3, make)
        self.assertEqual(registry.ids(), [1])

    def test_mapped_type_slots(self):
        mapped = MappedType(reference='Foo', definition='struct Foo {}', modifier='memory')
        self.assertEqual(mapped.slot('reference'), 'Foo')
        self.assertEqual(mapped.slot('modifier'), 'memory')
        self.assertEqual(mapped.slot('encoder'), '')
        with self.assertRaises(KeyError):
            mapped.slot('size')

    def test_empty_reference_is_rejected(self):
        with self.assertRaises(ValueError):
            MappedType(reference='')

    def test_nested_borrow(self):
        shared = SharedRegistry()
        with shared.borrow():
            with self.assertRaises(TemplateError):
                with shared.borrow():
                    pass
        # Released again after the outer borrow
        with shared.borrow() as registry:
            self.assertIs(registry, shared.registry)


class TestMetadataReader(unittest.TestCase):
    """Test decoding of ink! V3 metadata."""

    def document(self, **v3):
        body = {'spec': {'constructors': [], 'messages': [], 'events': [], 'docs': []}, 'types': []}
        body.update(v3)
        return {'source': {'hash': '0x00'}, 'contract': {'name': 'erc20', 'version': '1.0.0'}, 'V3': body}

    def test_types_and_contract_name(self):
        document = self.document(types=[
            {'id': 0, 'type': {'def': {'primitive': 'u8'}}},
            {'id': 1, 'type': {'def': {'array': {'len': 32, 'type': 0}}}},
            {'id': 2, 'type': {'def': {'sequence': {'type': 0}}}},
            {'id': 3, 'type': {'path': ['Option'], 'params': [{'name': 'T', 'type': 0}],
                               'def': {'variant': {'variants': [
                                   {'name': 'None', 'index': 0},
                                   {'name': 'Some', 'index': 1, 'fields': [{'type': 0}]},
                               ]}}}},
        ])
        project = MetadataReader(json.dumps(document)).read()

        self.assertEqual(project.name, 'erc20')
        self.assertEqual(len(project.registry), 4)
        self.assertEqual(project.registry.resolve(1).type_def, ArrayDef(length=32, type_id=0))
        self.assertEqual(project.registry.resolve(2).type_def, UnsupportedDef(kind='sequence'))
        option = project.registry.resolve(3)
        self.assertEqual(option.path, ('Option',))
        self.assertEqual(option.params[0].type_id, 0)
        self.assertEqual([v.index for v in option.type_def.variants], [0, 1])

    def test_messages(self):
        document = self.document(spec={
            'constructors': [{'label': 'new', 'selector': '0x9bae9d5e', 'args': [], 'docs': []}],
            'messages': [{
                'label': 'transfer', 'selector': '0x84a15da1', 'mutates': True, 'payable': False,
                'args': [{'label': 'to', 'type': {'type': 3, 'displayName': ['AccountId']}}],
                'returnType': {'type': 0, 'displayName': ['bool']},
                'docs': [' Transfers tokens.'],
            }, {
                'name': ['PSP22', 'approve'], 'selector': '0x00000001', 'args': [],
            }],
            'events': [],
            'docs': [],
        })
        spec = MetadataReader(json.dumps(document)).read().spec

        self.assertEqual(spec.constructors[0].label, 'new')
        transfer = spec.messages[0]
        self.assertEqual(transfer.selector, '0x84a15da1')
        self.assertTrue(transfer.mutates)
        self.assertEqual(transfer.args[0].type.type_id, 3)
        self.assertEqual(transfer.args[0].type.display_name, ('AccountId',))
        self.assertEqual(transfer.return_type.type_id, 0)
        self.assertEqual(spec.messages[1].label, 'PSP22::approve')
        self.assertIsNone(spec.messages[1].return_type)

    def test_missing_v3(self):
        with self.assertRaises(MetadataError):
            MetadataReader(json.dumps({'V1': {}})).read()

    def test_root_must_be_object(self):
        with self.assertRaises(MetadataError):
            MetadataReader('[]').read()

    def test_unknown_primitive(self):
        document = self.document(types=[{'id': 0, 'type': {'def': {'primitive': 'f32'}}}])
        with self.assertRaises(MetadataError):
            MetadataReader(json.dumps(document)).read()


if __name__ == '__main__':
    unittest.main()
