#!/usr/bin/env python3
"""
EVM <-> ink! contract bridge

Generates wrapper source code that lets contracts of one ecosystem call
contracts of the other through XVM (cross-virtual-machine) calls.

Key features:
- EVM ABI JSON -> ink! wrapper module (ethabi encoding, keccak selectors)
- ink! V3 metadata -> Solidity wrapper contract (SCALE encoding)
- Overloaded EVM functions become one message per signature
- ink! structs, tuples and enums become Solidity declarations

Usage:
    inkbridge -i erc20.json -m Erc20 -o erc20.rs
    inkbridge --mode ink-to-evm -i metadata.json -o Flipper.sol
"""

import json
import sys
from dataclasses import dataclass
from typing import List, Optional, Union

from .errors import BridgeError, ReadInputError, WriteOutputError
from .parser import AbiReader
from .metadata import MetadataReader
from .type_system import SharedRegistry, TypeRegistry
from .codegen import (
    BridgeDiagnostics,
    CodeGenerationContext,
    DefinitionGenerator,
    InkModuleGenerator,
    ModelBuilder,
    Module,
    SolidityContractGenerator,
)


EVM_TO_INK = 'evm-to-ink'
INK_TO_EVM = 'ink-to-evm'
MODES = (EVM_TO_INK, INK_TO_EVM)

DEFAULT_EVM_ID = '0x0F'


@dataclass
class BridgeOptions:
    """Options of one bridge run."""
    input: Optional[str] = None  # None reads stdin
    output: Optional[str] = None  # None writes stdout
    module_name: Optional[str] = None
    evm_id: str = DEFAULT_EVM_ID
    mode: str = EVM_TO_INK
    emit_model: bool = False
    verbose: bool = False


def _terminate(source: str) -> str:
    """Ensure the output ends with exactly one newline."""
    return source.rstrip('\n') + '\n'


class EvmToInkBridge:
    """Translates an EVM ABI into an ink! wrapper module."""

    def __init__(self, module_name: str, evm_id: str = DEFAULT_EVM_ID,
                 diagnostics: Optional[BridgeDiagnostics] = None):
        """
        Initialize the bridge.

        Args:
            module_name: Name of the generated ink! module
            evm_id: EVM id constant, passed through verbatim
            diagnostics: Collector for skipped items and overloads
        """
        self.module_name = module_name
        self.evm_id = evm_id
        self.diagnostics = diagnostics or BridgeDiagnostics()

    def build_model(self, source: Union[str, bytes]) -> Module:
        """Read an ABI document and assemble its Module."""
        items = AbiReader(source).read()
        return ModelBuilder(self.diagnostics).build_module(items, self.module_name, self.evm_id)

    def render(self, module: Module) -> str:
        """Render a Module as ink! source."""
        ctx = CodeGenerationContext.for_output('::', self.diagnostics)
        InkModuleGenerator(ctx).register()
        return _terminate(ctx.renderer.render('module', module))

    def translate(self, source: Union[str, bytes]) -> str:
        """Translate an ABI document to ink! source."""
        return self.render(self.build_model(source))


class InkToEvmBridge:
    """Translates ink! metadata into a Solidity wrapper contract."""

    def __init__(self, diagnostics: Optional[BridgeDiagnostics] = None):
        self.diagnostics = diagnostics or BridgeDiagnostics()
        # Registry of the last translation, for inspection
        self.registry = TypeRegistry()

    def translate(self, source: Union[str, bytes]) -> str:
        """Translate an ink! metadata document to Solidity source."""
        project = ModelBuilder(self.diagnostics).build_project(MetadataReader(source).read())

        self.registry = TypeRegistry()
        ctx = CodeGenerationContext.for_output('_', self.diagnostics)
        DefinitionGenerator(ctx).register()
        SolidityContractGenerator(ctx).register()
        ctx.renderer.add_type_callbacks(project, SharedRegistry(self.registry), self.diagnostics)
        return _terminate(ctx.renderer.render('module', project))


# =============================================================================
# I/O
# =============================================================================

def read_input(path: Optional[str]) -> str:
    """Read the whole input, from stdin when path is None."""
    if path is None:
        try:
            return sys.stdin.read()
        except OSError as e:
            raise ReadInputError('<stdin>', e.strerror or str(e)) from e
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError as e:
        raise ReadInputError(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise ReadInputError(path, 'not valid UTF-8') from e


def write_output(path: Optional[str], text: str) -> None:
    """Write the rendered output, to stdout when path is None."""
    if path is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
    except OSError as e:
        raise WriteOutputError(path, e.strerror or str(e)) from e


def run(options: BridgeOptions) -> BridgeDiagnostics:
    """
    Execute one bridge run.

    Output is only written once rendering succeeded.

    Args:
        options: The run's options

    Returns:
        The diagnostics collected during the run
    """
    diagnostics = BridgeDiagnostics(verbose=options.verbose)
    source = read_input(options.input)

    if options.mode == INK_TO_EVM:
        text = InkToEvmBridge(diagnostics).translate(source)
    else:
        bridge = EvmToInkBridge(options.module_name or '', options.evm_id, diagnostics)
        module = bridge.build_model(source)
        if options.emit_model:
            text = json.dumps(module.to_dict(), indent=2) + '\n'
        else:
            text = bridge.render(module)

    write_output(options.output, text)
    return diagnostics


# =============================================================================
# CLI
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        prog='inkbridge',
        description='Generate ink! wrappers for EVM contracts and Solidity wrappers for ink! contracts',
    )
    parser.add_argument('-i', '--input', help='Input JSON file (default: stdin)')
    parser.add_argument('-o', '--output', help='Output source file (default: stdout)')
    parser.add_argument('-m', '--module-name',
                        help='Name of the generated ink! module (required for evm-to-ink)')
    parser.add_argument('-e', '--evm-id', default=DEFAULT_EVM_ID,
                        help=f'EVM id of the target chain (default: {DEFAULT_EVM_ID})')
    parser.add_argument('--mode', choices=MODES, default=EVM_TO_INK,
                        help=f'Translation direction (default: {EVM_TO_INK})')
    parser.add_argument('--emit-model', action='store_true',
                        help='Print the intermediate model as JSON instead of source (evm-to-ink)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print a summary of skipped and degraded items to stderr')

    args = parser.parse_args(argv)

    if args.mode == EVM_TO_INK and not args.module_name:
        parser.error('--module-name is required in evm-to-ink mode')
    if args.mode == INK_TO_EVM and args.emit_model:
        parser.error('--emit-model is only available in evm-to-ink mode')

    options = BridgeOptions(
        input=args.input,
        output=args.output,
        module_name=args.module_name,
        evm_id=args.evm_id,
        mode=args.mode,
        emit_model=args.emit_model,
        verbose=args.verbose,
    )

    try:
        diagnostics = run(options)
    except BridgeError as e:
        print(f'error: {e}', file=sys.stderr)
        return 1

    if options.verbose:
        diagnostics.print_summary()
    return 0


if __name__ == '__main__':
    sys.exit(main())
