"""
Intermediate model handed to the ink! module template.

The model is a plain, serialisable tree: a Module holding simple functions
and overloaded functions, each with typed parameters and its selector.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass
class Parameter:
    """A function input in both type vocabularies."""
    name: str
    evm_type: str  # Type string from the ABI
    ink_type: str  # Equivalent type to use in ink! code


@dataclass
class Function:
    """A function whose name is not overloaded."""
    name: str
    inputs: List[Parameter] = field(default_factory=list)
    output: str = 'bool'
    selector: str = ''
    selector_hash: str = ''


@dataclass
class Variant:
    """One signature of an overloaded function; the name lives on the parent."""
    inputs: List[Parameter] = field(default_factory=list)
    output: str = 'bool'
    selector: str = ''
    selector_hash: str = ''


@dataclass
class OverloadedFunction:
    """All signatures sharing one function name, in ABI order."""
    name: str
    variants: List[Variant] = field(default_factory=list)


@dataclass
class Module:
    """Root of the model."""
    name: str
    evm_id: str
    functions: List[Function] = field(default_factory=list)
    overloaded_functions: List[OverloadedFunction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the module; the name is exported as `module_name`."""
        data = asdict(self)
        data['module_name'] = data.pop('name')
        return data
