"""
Model assembly.

The ModelBuilder produces the value handed to the `module` template: a
Module for EVM to ink! translation, or the InkProject itself for ink! to
EVM translation, whose types are mapped on demand while rendering.
"""

from typing import List, Optional

from ..metadata import InkProject
from ..parser import AbiItem
from .diagnostics import BridgeDiagnostics
from .model import Module
from .normaliser import FunctionNormaliser


class ModelBuilder:
    """Builds template root values from decoded source descriptions."""

    def __init__(self, diagnostics: Optional[BridgeDiagnostics] = None):
        self._diagnostics = diagnostics

    def build_module(self, items: List[AbiItem], name: str, evm_id: str) -> Module:
        """
        Build the Module for an EVM ABI.

        Args:
            items: ABI items in source order
            name: Name of the generated ink! module
            evm_id: EVM id, passed through verbatim

        Returns:
            The assembled Module
        """
        functions, overloaded = FunctionNormaliser(self._diagnostics).normalise(items)
        return Module(
            name=name,
            evm_id=evm_id,
            functions=functions,
            overloaded_functions=overloaded,
        )

    def build_project(self, project: InkProject) -> InkProject:
        """ink! projects are rendered as they are."""
        return project
