"""
ethabi token expressions for ink! wrappers.

This module builds the Rust expressions that turn a wrapper message's
arguments into `ethabi::Token` values, which `ethabi::encode` serialises
into EVM call data behind the function selector.
"""

from typing import List

from ..parser import parse_param_type
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
from ..type_system import NATIVE_INTEGER_WIDTHS


class AbiTokenBuilder:
    """
    Builds `ethabi::Token` expressions for typed Rust values.

    Values are consumed by move; nested arrays bind their elements to
    closure variables named by depth (`e0`, `e1`, ...).
    """

    def tokens(self, raw_types: List[str], names: List[str]) -> List[str]:
        """
        Build one token expression per argument.

        Args:
            raw_types: ABI type strings of the arguments
            names: Rust identifiers holding the arguments

        Returns:
            Token expressions in argument order
        """
        return [self.token(parse_param_type(raw), name) for raw, name in zip(raw_types, names)]

    def token(self, param_type: ParamType, expr: str, depth: int = 0) -> str:
        """
        Build the token expression for expr of the given type.

        Args:
            param_type: Parsed ABI type of expr
            expr: Rust expression holding the value
            depth: Nesting depth, used to name closure variables

        Returns:
            A Rust expression of type `Token`
        """
        if isinstance(param_type, BoolType):
            return f'Token::Bool({expr})'
        if isinstance(param_type, AddressType):
            return f'Token::Address({expr})'
        if isinstance(param_type, StringType):
            return f'Token::String({expr})'
        if isinstance(param_type, BytesType):
            return f'Token::Bytes({expr})'
        if isinstance(param_type, FixedBytesType):
            return f'Token::FixedBytes({expr}.to_vec())'

        if isinstance(param_type, UintType):
            if param_type.bits in NATIVE_INTEGER_WIDTHS:
                return f'Token::Uint({expr}.into())'
            return f'Token::Uint({expr})'
        if isinstance(param_type, IntType):
            if param_type.bits in NATIVE_INTEGER_WIDTHS:
                # Sign-extend into a 256-bit two's complement word
                return (f'Token::Int(if {expr} < 0 {{ !U256::from((!{expr}) as u128) }} '
                        f'else {{ U256::from({expr} as u128) }})')
            return f'Token::Int({expr})'

        if isinstance(param_type, ArrayType):
            return f'Token::Array({self._map_elements(param_type.inner, expr, depth)})'
        if isinstance(param_type, FixedArrayType):
            return f'Token::FixedArray({self._map_elements(param_type.inner, expr, depth)})'
        if isinstance(param_type, TupleType):
            members = [
                self.token(component, f'{expr}.{index}', depth)
                for index, component in enumerate(param_type.components)
            ]
            return f'Token::Tuple(vec![{", ".join(members)}])'

        raise TypeError(f'Unknown parameter type node: {param_type!r}')

    def _map_elements(self, inner: ParamType, expr: str, depth: int) -> str:
        var = f'e{depth}'
        return f'{expr}.into_iter().map(|{var}| {self.token(inner, var, depth + 1)}).collect()'
