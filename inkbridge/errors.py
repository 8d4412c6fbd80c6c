"""
Error taxonomy for the bridge.

Every failure that can stop a run is a BridgeError subclass carrying enough
context to point at the offending input element. Only the CLI entry point
turns these into an exit message; everything below it just raises.
"""

from typing import List, Optional


class BridgeError(Exception):
    """Base class for all errors raised by the bridge."""
    pass


# =============================================================================
# I/O BOUNDARIES
# =============================================================================

class ReadInputError(BridgeError):
    """The input file could not be opened or read."""

    def __init__(self, path: str, reason: str = ''):
        self.path = path
        self.reason = reason
        message = f'Unable to open input file {path}'
        if reason:
            message += f': {reason}'
        super().__init__(message)


class WriteOutputError(BridgeError):
    """The output file could not be created or written."""

    def __init__(self, path: str, reason: str = ''):
        self.path = path
        self.reason = reason
        message = f'Unable to create output file {path}'
        if reason:
            message += f': {reason}'
        super().__init__(message)


# =============================================================================
# STRUCTURAL INPUT ERRORS
# =============================================================================

class MalformedJsonError(BridgeError):
    """The input is not valid JSON."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f'Malformed JSON input: {detail}')


class MalformedAbiError(BridgeError):
    """An ABI item is missing a required field or has one of the wrong type.

    An item_index of -1 refers to the document root.
    """

    def __init__(self, item_index: int, field: str):
        self.item_index = item_index
        self.field = field
        if item_index < 0:
            super().__init__(f'Malformed ABI: {field} must be a JSON array of items')
        else:
            super().__init__(
                f"Malformed ABI: '{field}' for ABI item {item_index} "
                f"does not exist or has the wrong type"
            )


class AbiTypeParseError(BridgeError):
    """A Solidity type string could not be parsed."""

    def __init__(self, raw_type: str, item: str, index: int, reason: str = ''):
        self.raw_type = raw_type
        self.item = item
        self.index = index
        self.reason = reason
        message = (
            f"Invalid Solidity type '{raw_type}' in parameter {index} of function {item}"
        )
        if reason:
            message += f' ({reason})'
        super().__init__(message)


# =============================================================================
# SEMANTIC ERRORS
# =============================================================================

class MetadataError(BridgeError):
    """The ink! metadata is structurally valid but cannot be translated."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f'Metadata error: {detail}')


class TemplateError(BridgeError):
    """The renderer hit an unknown type id, a bad formatter call or a wrong value kind."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f'Template error: {detail}')


class CyclicTypeError(BridgeError):
    """A type refers back to itself through its fields."""

    def __init__(self, id_path: List[int], detail: Optional[str] = None):
        self.id_path = list(id_path)
        chain = ' -> '.join(str(type_id) for type_id in self.id_path)
        message = f'Cyclic type reference: {chain}'
        if detail:
            message += f' ({detail})'
        super().__init__(message)
