"""
ink! wrapper module generation.

This module provides the `module` template for EVM to ink! translation: an
ink! contract that stores the address of an EVM contract and exposes one
message per wrapped EVM function. Each message ABI-encodes its arguments
behind the function selector and forwards the call through the XVM chain
extension.
"""

from typing import Any, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext

from ..errors import TemplateError
from . import formatters
from .abi import AbiTokenBuilder
from .base import BaseGenerator
from .model import Module, Parameter


# Crate-level attributes and imports of the generated source
HEADER = '''\
#![cfg_attr(not(feature = "std"), no_std)]

use ink_lang as ink;'''


# Rust keywords cannot be argument names
RUST_KEYWORDS = frozenset({
    'as', 'break', 'const', 'continue', 'crate', 'else', 'enum', 'extern', 'false',
    'fn', 'for', 'if', 'impl', 'in', 'let', 'loop', 'match', 'mod', 'move', 'mut',
    'pub', 'ref', 'return', 'self', 'static', 'struct', 'super', 'trait', 'true',
    'type', 'unsafe', 'use', 'where', 'while', 'async', 'await', 'dyn',
})

# Locals of the generated message bodies
MESSAGE_LOCALS = frozenset({'input'})


class InkModuleGenerator(BaseGenerator):
    """
    Generates an ink! contract module from a Module model.

    Overloaded functions become one message per variant, suffixed with the
    variant's position (`approve_0`, `approve_1`, ...).
    """

    def __init__(self, ctx: 'CodeGenerationContext'):
        super().__init__(ctx)
        self._tokens = AbiTokenBuilder()

    def register(self) -> None:
        """Register the `module` template and the `convert_type` formatter."""
        renderer = self._ctx.renderer
        renderer.add_template('module', self.generate)
        renderer.add_formatter('convert_type', formatters.convert_type)

    # =========================================================================
    # MODULE
    # =========================================================================

    def generate(self, module: Any) -> str:
        """Generate the ink! module source.

        Args:
            module: The Module model

        Returns:
            ink! source code
        """
        if not isinstance(module, Module):
            raise TemplateError(f"'module' template: module value expected, got {type(module).__name__}")

        messages = self._messages(module)
        struct_name = self.fmt('upper_camel', module.name)

        body: List[str] = []
        body.extend(self._imports(module))
        body.append('')
        body.append(f'const EVM_ID: u8 = {module.evm_id};')
        body.append('')
        for name, function in messages:
            body.append(
                f'const {name.upper()}_SELECTOR: [u8; 4] = '
                f'hex!["{function.selector_hash}"];'
            )
        body.append('')
        body.append('#[ink(storage)]')
        body.append(f'pub struct {struct_name} {{')
        body.append(f'{self._ctx.indent_str}evm_address: H160,')
        body.append('}')
        body.append('')
        body.append(f'impl {struct_name} {{')
        body.extend(self.indented(self._constructor()))
        for name, function in messages:
            body.append('')
            body.extend(self.indented(self._message(name, function)))
        body.append('}')

        lines = [
            f'//! ink! wrapper for the EVM contract `{module.name}`.',
            '//! Generated by inkbridge; do not edit.',
            HEADER,
            '',
            '#[ink::contract(env = xvm_environment::XvmDefaultEnvironment)]',
            f'pub mod {self.fmt("snake", module.name)} {{',
        ]
        lines.extend(self.indented(body))
        lines.append('}')
        return '\n'.join(lines) + '\n'

    def _messages(self, module: Module) -> list:
        """(message name, Function or Variant) pairs in output order.

        Message names are snake case. A name already taken by an earlier
        message (`approve_0` next to an overloaded `approve`, `balanceOf`
        next to `balance_of`) gets the selector hash appended.
        """
        candidates = [(function.name, function) for function in module.functions]
        for overloaded in module.overloaded_functions:
            for index, variant in enumerate(overloaded.variants):
                candidates.append((f'{overloaded.name}_{index}', variant))

        messages = []
        taken = set()
        for name, function in candidates:
            message = self.fmt('snake', name)
            if message in taken:
                message = f'{message}_{function.selector_hash}'
            suffix = 1
            unique = message
            while unique in taken:
                unique = f'{message}_{suffix}'
                suffix += 1
            taken.add(unique)
            messages.append((unique, function))
        return messages

    def _imports(self, module: Module) -> List[str]:
        ink_types = [param.ink_type for _, function in self._messages(module) for param in function.inputs]
        lines = [
            'use ethabi::{',
            f'{self._ctx.indent_str}ethereum_types::{{H160, U256}},',
            f'{self._ctx.indent_str}Token,',
            '};',
            'use hex_literal::hex;',
            'use ink_prelude::string::String;',
            'use ink_prelude::vec::Vec;',
        ]
        if any('FixedBytes<' in ink_type for ink_type in ink_types):
            lines.append('')
            lines.append('pub type FixedBytes<const N: usize> = [u8; N];')
        if any('I256' in ink_type for ink_type in ink_types):
            lines.append('')
            lines.append('/// 256-bit signed integer as its two\'s complement word.')
            lines.append('pub type I256 = U256;')
        return lines

    # =========================================================================
    # MESSAGES
    # =========================================================================

    def _constructor(self) -> List[str]:
        return [
            '#[ink(constructor)]',
            'pub fn new(evm_address: H160) -> Self {',
            f'{self._ctx.indent_str}Self {{ evm_address }}',
            '}',
        ]

    def _message(self, message: str, function: Any) -> List[str]:
        arg_names = self._arg_names(function.inputs)
        args = [f'{arg}: {self.fmt("convert_type", param.evm_type)}'
                for arg, param in zip(arg_names, function.inputs)]
        tokens = self._tokens.tokens([param.evm_type for param in function.inputs], arg_names)

        i = self._ctx.indent_str
        lines = [
            f'/// Calls `{function.selector}` on the EVM contract.',
            '#[ink(message)]',
            f'pub fn {message}({", ".join(["&mut self"] + args)}) -> {function.output} {{',
        ]
        selector = f'{message.upper()}_SELECTOR'
        if not tokens:
            lines.append(f'{i}let input = {selector}.to_vec();')
        else:
            lines.append(f'{i}let mut input = {selector}.to_vec();')
            lines.append(f'{i}input.extend(ethabi::encode(&[')
            lines.extend(f'{i}{i}{token},' for token in tokens)
            lines.append(f'{i}]));')
        lines.extend([
            f'{i}self.env()',
            f'{i}{i}.extension()',
            f'{i}{i}.xvm_call(EVM_ID, self.evm_address.as_bytes().to_vec(), input)',
            f'{i}{i}.is_ok()',
            '}',
        ])
        return lines

    def _arg_names(self, params: List[Parameter]) -> List[str]:
        """Rust argument names, unique within one message."""
        names: List[str] = []
        for index, param in enumerate(params):
            name = self.fmt('snake', param.name) or f'arg{index}'
            if name in RUST_KEYWORDS or name in MESSAGE_LOCALS:
                name = f'{name}_'
            while name in names:
                name = f'{name}_'
            names.append(name)
        return names
