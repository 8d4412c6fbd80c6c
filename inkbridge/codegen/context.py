"""
Code generation context for the bridge's generators.

This module provides a context class that holds the state shared by the
generators of one rendering run: indentation, the renderer holding the
named templates and formatters, and the diagnostics collector.
"""

from dataclasses import dataclass, field
from typing import Optional

from .diagnostics import BridgeDiagnostics
from .renderer import Renderer


@dataclass
class CodeGenerationContext:
    """
    Holds all state needed during one rendering run.

    Generators share one context so that the templates they register can
    call each other's templates and formatters through the renderer.
    """

    renderer: Renderer = field(default_factory=Renderer)

    # One level of indentation in the output
    indent_str: str = '    '

    # Diagnostics collector
    _diagnostics: Optional[BridgeDiagnostics] = None

    @property
    def diagnostics(self) -> BridgeDiagnostics:
        """Get the diagnostics collector, creating one if needed."""
        if self._diagnostics is None:
            self._diagnostics = BridgeDiagnostics()
        return self._diagnostics

    @classmethod
    def for_output(
        cls,
        path_separator: str,
        diagnostics: Optional[BridgeDiagnostics] = None,
    ) -> 'CodeGenerationContext':
        """
        Create a context whose renderer carries the default formatters.

        Args:
            path_separator: Separator of type paths in the output language
            diagnostics: Collector to report to

        Returns:
            A new CodeGenerationContext instance
        """
        renderer = Renderer()
        renderer.add_default_formatters(path_separator)
        return cls(renderer=renderer, _diagnostics=diagnostics)
