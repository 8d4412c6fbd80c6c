"""
Definition generation for ink! to Solidity translation.

This module provides the `struct`, `enum` and `encoder` templates the type
mapper renders when an ink! type needs a named Solidity declaration or a
SCALE encoder function.
"""

from typing import Any, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext

from ..errors import TemplateError
from ..type_system import ArrayEncoderView, EnumView, StructView
from .base import BaseGenerator


class DefinitionGenerator(BaseGenerator):
    """
    Generates Solidity declarations and SCALE encoders for mapped types.

    This class handles:
    - Struct definitions (composites and tuples)
    - Enum definitions (field-less variants)
    - Encoder functions for structs and fixed arrays
    """

    def __init__(self, ctx: 'CodeGenerationContext'):
        super().__init__(ctx)

    def register(self) -> None:
        """Register this generator's templates with the renderer."""
        renderer = self._ctx.renderer
        renderer.add_template('struct', self.generate_struct)
        renderer.add_template('enum', self.generate_enum)
        renderer.add_template('encoder', self.generate_encoder)

    # =========================================================================
    # ENUMS
    # =========================================================================

    def generate_enum(self, enum: Any) -> str:
        """Generate a Solidity enum.

        Args:
            enum: The EnumView of a variant type

        Returns:
            Solidity enum code
        """
        if not isinstance(enum, EnumView):
            raise TemplateError(f"'enum' template: enum value expected, got {type(enum).__name__}")

        lines = self._origin_lines(enum.type_id, enum.path, enum.docs)
        if not enum.variants:
            # Solidity rejects empty enums
            raise TemplateError(f"'enum' template: type {enum.type_id} ({enum.name}) has no variants")
        lines.append(f'enum {enum.name} {{')
        lines.append(',\n'.join(self.indented(enum.variants)))
        lines.append('}')
        return '\n'.join(lines)

    # =========================================================================
    # STRUCTS
    # =========================================================================

    def generate_struct(self, struct: Any) -> str:
        """Generate a Solidity struct.

        Solidity does not allow empty structs, so unit types get a single
        placeholder member that is never encoded.

        Args:
            struct: The StructView of a composite or tuple type

        Returns:
            Solidity struct code
        """
        if not isinstance(struct, StructView):
            raise TemplateError(f"'struct' template: struct value expected, got {type(struct).__name__}")

        lines = self._origin_lines(struct.type_id, struct.path, struct.docs)
        lines.append(f'struct {struct.name} {{')
        members = [f'{field.type_name} {field.name};' for field in struct.fields]
        lines.extend(self.indented(members or ['bool _empty;']))
        lines.append('}')
        return '\n'.join(lines)

    # =========================================================================
    # ENCODERS
    # =========================================================================

    def generate_encoder(self, view: Any) -> str:
        """Generate a function SCALE-encoding a struct or fixed array.

        Args:
            view: A StructView or an ArrayEncoderView

        Returns:
            Solidity function code
        """
        if isinstance(view, StructView):
            return self._struct_encoder(view)
        if isinstance(view, ArrayEncoderView):
            return self._array_encoder(view)
        raise TemplateError(
            f"'encoder' template: struct or array value expected, got {type(view).__name__}"
        )

    def _struct_encoder(self, struct: StructView) -> str:
        lines = [
            f'function encode_{struct.name}({struct.name} memory value) '
            f'internal pure returns (bytes memory) {{',
        ]
        if not struct.fields:
            lines.extend(self.indented(['value;', 'return new bytes(0);']))
        else:
            # SCALE encodes struct fields back to back in declaration order
            lines.append(f'{self._ctx.indent_str}return abi.encodePacked(')
            parts = [field.encode for field in struct.fields]
            lines.append(',\n'.join(self.indented(parts, levels=2)))
            lines.append(f'{self._ctx.indent_str});')
        lines.append('}')
        return '\n'.join(lines)

    def _array_encoder(self, array: ArrayEncoderView) -> str:
        body = [
            'bytes memory result;',
            f'for (uint256 i = 0; i < {array.length}; i++) {{',
            f'{self._ctx.indent_str}result = abi.encodePacked(result, {array.element_encode});',
            '}',
            'return result;',
        ]
        lines = [
            f'function {array.function_name}({array.type_name} memory value) '
            f'internal pure returns (bytes memory) {{',
        ]
        lines.extend(self.indented(body))
        lines.append('}')
        return '\n'.join(lines)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _origin_lines(self, type_id: int, path: List[str], docs: List[str]) -> List[str]:
        lines = self._doc_lines(docs)
        origin = '::'.join(path) if path else 'anonymous'
        lines.insert(0, f'// ink! type {type_id}: {origin}')
        return lines
