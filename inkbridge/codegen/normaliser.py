"""
Function normalisation for EVM ABIs.

The FunctionNormaliser filters the ABI down to the functions the wrapper
exposes, decides which names are overloaded, translates parameter types
and computes selectors. Overload status belongs to the set of items that
share a name, so it is decided in a first pass over all items before any
function is emitted in the second.
"""

from collections import Counter
from typing import List, Optional, Tuple, Union

from ..errors import AbiTypeParseError
from ..parser import AbiItem, parse_param_type
from ..type_system import param_type_to_ink
from .diagnostics import BridgeDiagnostics
from .model import Function, OverloadedFunction, Parameter, Variant
from .selectors import build_selector, selector_hash


# Output type of every wrapped function until multi-output rendering exists
BOOL_OUTPUT = 'bool'


class FunctionNormaliser:
    """
    Groups ABI functions into simple and overloaded sets.

    Usage:
        functions, overloaded = FunctionNormaliser().normalise(items)
    """

    def __init__(self, diagnostics: Optional[BridgeDiagnostics] = None):
        self._diagnostics = diagnostics

    def normalise(
        self,
        items: List[AbiItem],
    ) -> Tuple[List[Function], List[OverloadedFunction]]:
        """
        Normalise ABI items.

        Args:
            items: ABI items in source order

        Returns:
            Simple functions and overloaded functions, both in ABI order;
            overloaded functions are ordered by the first occurrence of their name
        """
        candidates = self.select(items)

        # Pass 1: a name seen more than once is overloaded
        name_counts = Counter(item.name for item in candidates)

        # Pass 2: selectors, bucketed by overload status
        functions: List[Function] = []
        overloaded: List[OverloadedFunction] = []
        overloaded_by_name = {}

        for item in candidates:
            record = self.build(item, overloaded=name_counts[item.name] > 1)
            if isinstance(record, Function):
                functions.append(record)
                continue

            group = overloaded_by_name.get(item.name)
            if group is None:
                group = OverloadedFunction(name=item.name)
                overloaded_by_name[item.name] = group
                overloaded.append(group)
            group.variants.append(record)

        if self._diagnostics is not None:
            for group in overloaded:
                self._diagnostics.info_overloaded_function(group.name, len(group.variants))

        return functions, overloaded

    # =========================================================================
    # FILTERING
    # =========================================================================

    def select(self, items: List[AbiItem]) -> List[AbiItem]:
        """Keep non-view functions whose every output is `bool`."""
        selected = []
        for item in items:
            if not item.is_function:
                if self._diagnostics is not None:
                    self._diagnostics.warn_item_skipped(item.kind or '', item.name or '', item.index)
                continue

            if item.state_mutability == 'view':
                if self._diagnostics is not None:
                    self._diagnostics.warn_view_function_skipped(item.name, item.index)
                continue

            if not all(output.type == BOOL_OUTPUT for output in item.outputs):
                if self._diagnostics is not None:
                    self._diagnostics.warn_output_not_bool(
                        item.name, item.index, [output.type for output in item.outputs]
                    )
                continue

            selected.append(item)
        return selected

    # =========================================================================
    # RECORDS
    # =========================================================================

    def build(self, item: AbiItem, overloaded: bool) -> Union[Function, Variant]:
        """Translate one ABI function into a Function or an overload Variant."""
        inputs = self.convert_inputs(item)

        # Hash the ABI spelling of each type, never the translated one
        selector = build_selector(item.name, [param.evm_type for param in inputs])
        hashed = selector_hash(selector)

        if overloaded:
            return Variant(inputs=inputs, output=BOOL_OUTPUT, selector=selector, selector_hash=hashed)
        return Function(
            name=item.name,
            inputs=inputs,
            output=BOOL_OUTPUT,
            selector=selector,
            selector_hash=hashed,
        )

    def convert_inputs(self, item: AbiItem) -> List[Parameter]:
        """Parse and translate every input type of an ABI function."""
        parameters = []
        for index, param in enumerate(item.inputs):
            try:
                param_type = parse_param_type(param.type)
            except SyntaxError as e:
                raise AbiTypeParseError(param.type, item.name, index, e.msg) from e

            parameters.append(Parameter(
                name=param.name or f'arg{index}',
                evm_type=param.type,
                ink_type=param_type_to_ink(param_type),
            ))
        return parameters
