"""
Reader for EVM contract ABI documents.

The AbiReader decodes a JSON ABI array into AbiItem records in source
order. It only checks that the fields the bridge needs are present and of
the right JSON type; filtering by kind and mutability is left to the
function normaliser.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..errors import MalformedAbiError, MalformedJsonError


@dataclass
class AbiParam:
    """A single input or output of an ABI item."""
    name: str
    type: str  # Raw Solidity type string, tuples expanded to canonical form


@dataclass
class AbiItem:
    """One entry of an ABI document."""
    index: int
    kind: Optional[str]  # 'function', 'event', 'constructor', ...
    name: Optional[str] = None
    state_mutability: str = 'nonpayable'
    inputs: List[AbiParam] = field(default_factory=list)
    outputs: List[AbiParam] = field(default_factory=list)

    @property
    def is_function(self) -> bool:
        return self.kind == 'function'


class AbiReader:
    """
    Decodes an ABI JSON document.

    Usage:
        items = AbiReader(text).read()
    """

    def __init__(self, source: Union[str, bytes]):
        self.source = source

    def read(self) -> List[AbiItem]:
        """Parse the source and return its items in original order."""
        try:
            document = json.loads(self.source)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedJsonError(str(e)) from e
        return self.read_document(document)

    def read_document(self, document: Any) -> List[AbiItem]:
        """Convert an already decoded JSON value into AbiItems."""
        if not isinstance(document, list):
            raise MalformedAbiError(-1, '<root>')
        return [self._read_item(index, raw) for index, raw in enumerate(document)]

    # =========================================================================
    # ITEMS
    # =========================================================================

    def _read_item(self, index: int, raw: Any) -> AbiItem:
        if not isinstance(raw, dict):
            raise MalformedAbiError(index, '<item>')

        kind = raw.get('type')
        if kind is not None and not isinstance(kind, str):
            raise MalformedAbiError(index, 'type')

        item = AbiItem(index=index, kind=kind)
        name = raw.get('name')

        if kind != 'function':
            # Only functions are translated; keep what is cheap to keep
            item.name = name if isinstance(name, str) else None
            return item

        if not isinstance(name, str):
            raise MalformedAbiError(index, 'name')

        item.name = name
        item.state_mutability = self._read_mutability(index, raw)
        item.inputs = self._read_params(index, raw, 'inputs')
        item.outputs = self._read_params(index, raw, 'outputs')
        return item

    def _read_mutability(self, index: int, raw: Dict[str, Any]) -> str:
        """Read stateMutability, deriving it from legacy flags when absent."""
        mutability = raw.get('stateMutability')
        if mutability is not None:
            if not isinstance(mutability, str):
                raise MalformedAbiError(index, 'stateMutability')
            return mutability

        # Pre-0.4.16 ABIs only carry `constant` and `payable`
        if raw.get('constant') is True:
            return 'view'
        if raw.get('payable') is True:
            return 'payable'
        return 'nonpayable'

    # =========================================================================
    # PARAMETERS
    # =========================================================================

    def _read_params(self, index: int, raw: Dict[str, Any], key: str) -> List[AbiParam]:
        entries = raw.get(key)
        if entries is None:
            return []
        if not isinstance(entries, list):
            raise MalformedAbiError(index, key)

        params = []
        for position, entry in enumerate(entries):
            path = f'{key}[{position}]'
            if not isinstance(entry, dict):
                raise MalformedAbiError(index, path)

            name = entry.get('name', '')
            if not isinstance(name, str):
                raise MalformedAbiError(index, f'{path}.name')

            params.append(AbiParam(name=name, type=self._resolve_type(index, entry, path)))
        return params

    def _resolve_type(self, index: int, entry: Dict[str, Any], path: str) -> str:
        """Return the raw type string, expanding `tuple` with its components.

        ``{"type": "tuple[]", "components": [uint256, address]}`` becomes
        ``(uint256,address)[]``, which is the form selectors are hashed over.
        """
        raw_type = entry.get('type')
        if not isinstance(raw_type, str):
            raise MalformedAbiError(index, f'{path}.type')

        if raw_type == 'tuple' or raw_type.startswith('tuple['):
            components = entry.get('components')
            if not isinstance(components, list):
                raise MalformedAbiError(index, f'{path}.components')
            inner = []
            for position, component in enumerate(components):
                component_path = f'{path}.components[{position}]'
                if not isinstance(component, dict):
                    raise MalformedAbiError(index, component_path)
                inner.append(self._resolve_type(index, component, component_path))
            return f'({",".join(inner)}){raw_type[len("tuple"):]}'

        return raw_type
