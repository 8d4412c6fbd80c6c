"""
Base generator class with shared utilities.

This module provides the BaseGenerator class that contains common utilities
used across the generators that implement the bridge's templates.
"""

from typing import Any, Iterable, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext


class BaseGenerator:
    """
    Base class for all template generators.

    Provides shared utilities for:
    - Indentation management
    - Formatter and template access through the renderer
    - Doc comment rendering
    """

    def __init__(self, ctx: 'CodeGenerationContext'):
        """
        Initialize the base generator.

        Args:
            ctx: The code generation context containing all state
        """
        self._ctx = ctx

    # =========================================================================
    # INDENTATION
    # =========================================================================

    def indented(self, lines: Iterable[str], levels: int = 1) -> List[str]:
        """Indent every non-empty line by the given number of levels."""
        prefix = self._ctx.indent_str * levels
        return [f'{prefix}{line}' if line else '' for line in lines]

    # =========================================================================
    # RENDERER ACCESS
    # =========================================================================

    def fmt(self, name: str, value: Any, *args: Any) -> str:
        """Apply a registered formatter."""
        return self._ctx.renderer.format(name, value, *args)

    def render(self, name: str, value: Any) -> str:
        """Expand a registered template."""
        return self._ctx.renderer.render(name, value)

    def test(self, name: str, value: Any) -> bool:
        """Evaluate a registered predicate."""
        return self._ctx.renderer.test(name, value)

    # =========================================================================
    # VALUE FORMATTING
    # =========================================================================

    def _doc_lines(self, docs: Iterable[str], marker: str = '///') -> List[str]:
        """Render doc strings as line comments, one per line of text."""
        lines = []
        for doc in docs:
            for line in doc.splitlines() or ['']:
                text = line.strip()
                lines.append(f'{marker} {text}' if text else marker)
        return lines
