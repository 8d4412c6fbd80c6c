"""
Solidity wrapper contract generation.

This module provides the `module` template for ink! to Solidity translation:
a Solidity file holding the XVM precompile interface, a SCALE codec library
and a contract exposing one function per ink! message. Each function
SCALE-encodes its arguments behind the message selector and forwards the
call to the ink! contract through the XVM precompile.

Types are mapped while the message functions are rendered; the definitions
and encoders of every mapped type are then emitted ordered by type id.
"""

import re
from typing import Any, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext

from ..errors import MetadataError, TemplateError
from ..metadata import InkProject, MessageSpec
from ..type_system import SOLIDITY_KEYWORDS
from .base import BaseGenerator


# XVM precompile on Astar-style chains and the VM id of ink! contracts
XVM_PRECOMPILE_ADDRESS = '0x0000000000000000000000000000000000005005'
INK_VM_ID = '0x1F'

DEFAULT_CONTRACT_NAME = 'InkContract'

SELECTOR_PATTERN = re.compile(r'0x[0-9a-fA-F]{8}')

SOLIDITY_HEADER = '''\
// SPDX-License-Identifier: MIT
pragma solidity >=0.8.0;'''

XVM_INTERFACE = '''\
interface XVM {
    function xvm_call(
        uint8 vm_id,
        bytes calldata to,
        bytes calldata input
    ) external returns (bool success, bytes memory data);
}'''

SCALE_CODEC_LIBRARY = '''\
/// SCALE encoding of the values ink! messages take as arguments.
library ScaleCodec {
    function encodeBool(bool value) internal pure returns (bytes memory) {
        return abi.encodePacked(value ? uint8(1) : uint8(0));
    }

    /// Little-endian encoding of the low `size` bytes of `value`.
    function encodeUint(uint256 value, uint256 size) internal pure returns (bytes memory) {
        bytes memory result = new bytes(size);
        for (uint256 i = 0; i < size; i++) {
            result[i] = bytes1(uint8(value >> (8 * i)));
        }
        return result;
    }

    function encodeInt(int256 value, uint256 size) internal pure returns (bytes memory) {
        return encodeUint(uint256(value), size);
    }

    function encodeCompact(uint256 value) internal pure returns (bytes memory) {
        if (value < 1 << 6) {
            return encodeUint(value << 2, 1);
        }
        if (value < 1 << 14) {
            return encodeUint((value << 2) | 1, 2);
        }
        if (value < 1 << 30) {
            return encodeUint((value << 2) | 2, 4);
        }
        uint256 size = 0;
        for (uint256 rest = value; rest > 0; rest >>= 8) {
            size++;
        }
        return abi.encodePacked(uint8(((size - 4) << 2) | 3), encodeUint(value, size));
    }

    function encodeString(string memory value) internal pure returns (bytes memory) {
        bytes memory raw = bytes(value);
        return abi.encodePacked(encodeCompact(raw.length), raw);
    }
}'''

# Keywords plus the globals and locals of generated functions
SOLIDITY_RESERVED = SOLIDITY_KEYWORDS | frozenset({
    'this', 'super', 'msg', 'tx', 'block', 'abi', 'value', 'input', 'success',
    'from', 'to',
})


class SolidityContractGenerator(BaseGenerator):
    """
    Generates the Solidity wrapper for an ink! project.

    The generator relies on the `type`, `encode` and `mapped` callbacks
    of its renderer, so the renderer must have been given the project's
    type callbacks before `module` is rendered.
    """

    def __init__(self, ctx: 'CodeGenerationContext'):
        super().__init__(ctx)

    def register(self) -> None:
        """Register the `module` template with the renderer."""
        self._ctx.renderer.add_template('module', self.generate)

    # =========================================================================
    # MODULE
    # =========================================================================

    def generate(self, project: Any) -> str:
        """Generate the Solidity source.

        Args:
            project: The InkProject

        Returns:
            Solidity source code
        """
        if not isinstance(project, InkProject):
            raise TemplateError(
                f"'module' template: ink! project value expected, got {type(project).__name__}"
            )

        # Functions first: rendering them maps every type they reach
        functions = [self._function(message) for message in project.spec.messages]
        definitions = self._definitions(project)
        name = self._contract_name(project)

        body: List[str] = [
            f'XVM constant XVM_PRECOMPILE = XVM({XVM_PRECOMPILE_ADDRESS});',
            f'uint8 constant INK_VM_ID = {INK_VM_ID};',
            '',
            'bytes32 public immutable inkAddress;',
            '',
            'constructor(bytes32 inkAddress_) {',
            f'{self._ctx.indent_str}inkAddress = inkAddress_;',
            '}',
        ]
        for block in definitions + functions:
            body.append('')
            body.extend(block.splitlines())

        lines = [
            SOLIDITY_HEADER,
            '',
            f'// Solidity wrapper for the ink! contract `{project.name or name}`.',
            '// Generated by inkbridge; do not edit.',
            '',
            XVM_INTERFACE,
            '',
            SCALE_CODEC_LIBRARY,
            '',
        ]
        lines.extend(self._doc_lines(project.spec.docs))
        lines.append(f'contract {name} {{')
        lines.extend(self.indented(body))
        lines.append('}')
        return '\n'.join(lines) + '\n'

    def _contract_name(self, project: InkProject) -> str:
        if project.name:
            name = self.fmt('upper_camel', project.name)
            if name:
                return name
        return DEFAULT_CONTRACT_NAME

    def _definitions(self, project: InkProject) -> List[str]:
        """Definitions and encoders of every mapped type, ordered by type id."""
        blocks = []
        for ink_type in project.registry:
            if not self.test('mapped', ink_type.id):
                continue
            for slot in ('definition', 'encoder'):
                source = self.fmt('type', ink_type.id, slot)
                if source:
                    blocks.append(source)
        return blocks

    # =========================================================================
    # FUNCTIONS
    # =========================================================================

    def _function(self, message: MessageSpec) -> str:
        """Generate the Solidity function forwarding one ink! message."""
        if not SELECTOR_PATTERN.fullmatch(message.selector):
            raise MetadataError(
                f"message '{message.label}' has invalid selector '{message.selector}'"
            )

        name = self.fmt('path', message.label.split('::'))
        params = []
        encoded = [f'bytes4({message.selector})']
        for index, arg in enumerate(message.args):
            arg_name = self._arg_name(arg.label, index)
            type_id = arg.type.type_id
            reference = self.fmt('type', type_id, 'reference')
            modifier = self.fmt('type', type_id, 'modifier')
            params.append(f'{reference} {modifier} {arg_name}' if modifier else f'{reference} {arg_name}')
            encoded.append(self.fmt('encode', type_id, arg_name))

        self._ctx.diagnostics.info_message_emitted(message.label, message.selector)

        i = self._ctx.indent_str
        lines = self._doc_lines(message.docs)
        lines.append(f'function {name}({", ".join(params)}) external returns (bool) {{')
        lines.append(f'{i}bytes memory input = abi.encodePacked(')
        lines.append(',\n'.join(f'{i}{i}{part}' for part in encoded))
        lines.append(f'{i});')
        lines.append(f'{i}(bool success, ) = XVM_PRECOMPILE.xvm_call(')
        lines.append(f'{i}{i}INK_VM_ID,')
        lines.append(f'{i}{i}abi.encodePacked(inkAddress),')
        lines.append(f'{i}{i}input')
        lines.append(f'{i});')
        lines.append(f'{i}return success;')
        lines.append('}')
        return '\n'.join(lines)

    def _arg_name(self, label: str, index: int) -> str:
        name = label or f'arg{index}'
        if name in SOLIDITY_RESERVED:
            return f'{name}_'
        return name
