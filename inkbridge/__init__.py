"""
EVM <-> ink! contract bridge

This package generates wrapper source code between the two contract
ecosystems of an XVM-enabled chain: ink! wrapper modules for EVM contracts
described by an ABI, and Solidity wrapper contracts for ink! contracts
described by their V3 metadata.

Module Structure:
- lexer/: Tokenization of Solidity type strings (TokenType, Token, Lexer)
- parser/: Type nodes, the type-string parser and the ABI reader
- metadata/: The decoded ink! metadata model and its reader
- type_system/: Type mappings, the type registry and the ink! -> Solidity mapper
- codegen/: Normalisation, the model, the renderer and the source generators
- bridge.py: Pipelines and the command line interface

Usage:
    from inkbridge import EvmToInkBridge, InkToEvmBridge

    ink_source = EvmToInkBridge('Erc20').translate(abi_json)
    solidity_source = InkToEvmBridge().translate(metadata_json)
"""

# Re-export main classes for convenience
from .bridge import (
    EvmToInkBridge,
    InkToEvmBridge,
    BridgeOptions,
    run,
    main,
)
from .errors import BridgeError

__all__ = [
    'EvmToInkBridge',
    'InkToEvmBridge',
    'BridgeOptions',
    'BridgeError',
    'run',
    'main',
]
