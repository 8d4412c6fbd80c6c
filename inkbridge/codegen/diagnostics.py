"""
Diagnostic/warning system for the bridge.

Collects and reports warnings about interface items that were skipped or
degraded during translation, so users can see which parts of the source
contract the generated wrapper does not cover.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import List


class DiagnosticSeverity(Enum):
    """Severity levels for bridge diagnostics."""
    WARNING = 'warning'
    INFO = 'info'


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    severity: DiagnosticSeverity
    code: str
    message: str
    item: str = ''  # ABI item, message or type the diagnostic is about
    construct: str = ''  # e.g., 'view function', 'variant fields'

    def __str__(self) -> str:
        if self.item:
            return f'[{self.severity.value}] {self.item}: {self.message} ({self.code})'
        return f'[{self.severity.value}] {self.message} ({self.code})'


class BridgeDiagnostics:
    """
    Collects bridge warnings/diagnostics during translation.

    Usage:
        diag = BridgeDiagnostics()
        diag.warn_view_function_skipped("balanceOf", index=3)
        # ... after rendering ...
        diag.print_summary()
    """

    def __init__(self, verbose: bool = False):
        self._diagnostics: List[Diagnostic] = []
        self._verbose = verbose

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        return list(self._diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        """Get only warning-level diagnostics."""
        return [d for d in self._diagnostics if d.severity == DiagnosticSeverity.WARNING]

    @property
    def count(self) -> int:
        """Get total diagnostic count."""
        return len(self._diagnostics)

    def clear(self) -> None:
        """Clear all diagnostics."""
        self._diagnostics.clear()

    # =========================================================================
    # SPECIFIC WARNING METHODS
    # =========================================================================

    def warn_item_skipped(self, kind: str, name: str, index: int) -> None:
        """Warn that a non-function ABI item was ignored."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W001',
            message=f'ABI item of kind "{kind or "unknown"}" is not translated.',
            item=_abi_item_label(name, index),
            construct=kind or 'unknown',
        ))

    def warn_view_function_skipped(self, name: str, index: int) -> None:
        """Warn that a view function was skipped."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W002',
            message='view function was skipped; only state-changing calls are wrapped.',
            item=_abi_item_label(name, index),
            construct='view function',
        ))

    def warn_output_not_bool(self, name: str, index: int, outputs: List[str]) -> None:
        """Warn that a function was skipped because it returns something other than bool."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W003',
            message=f'function returning ({",".join(outputs)}) was skipped; '
                    f'only functions returning bool are wrapped.',
            item=_abi_item_label(name, index),
            construct='non-bool output',
        ))

    def warn_variant_fields_dropped(self, enum_name: str, variant: str, field_count: int) -> None:
        """Warn that the fields of an enum variant were dropped."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W004',
            message=f'{field_count} field(s) of variant "{variant}" were dropped; '
                    f'Solidity enums cannot carry data.',
            item=enum_name,
            construct='variant fields',
        ))

    def info_overloaded_function(self, name: str, variant_count: int) -> None:
        """Info that a function name is overloaded."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I001',
            message=f'overloaded with {variant_count} variants',
            item=name,
            construct='overload',
        ))

    def info_message_emitted(self, label: str, selector: str) -> None:
        """Info that an ink! message was wrapped."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I002',
            message=f'wrapped with selector {selector}',
            item=label,
            construct='message',
        ))

    # =========================================================================
    # REPORTING
    # =========================================================================

    def print_summary(self, file=None) -> None:
        """Print a summary of all diagnostics to stderr (or specified file)."""
        if file is None:
            file = sys.stderr

        if not self._diagnostics:
            return

        warnings = self.warnings
        infos = [d for d in self._diagnostics if d.severity == DiagnosticSeverity.INFO]

        if warnings:
            print(f'\nBridge warnings ({len(warnings)}):', file=file)
            # Group by construct type
            by_construct: dict = {}
            for w in warnings:
                key = w.construct or 'other'
                if key not in by_construct:
                    by_construct[key] = []
                by_construct[key].append(w)

            for construct, diags in sorted(by_construct.items()):
                print(f'  {construct}: {len(diags)} occurrence(s)', file=file)
                if self._verbose:
                    for d in diags:
                        print(f'    {d}', file=file)

        if infos and self._verbose:
            print(f'\nBridge info ({len(infos)}):', file=file)
            for d in infos:
                print(f'  {d}', file=file)

    def get_summary(self) -> str:
        """Get a summary string of all diagnostics."""
        if not self._diagnostics:
            return 'No bridge warnings.'

        by_construct: dict = {}
        for w in self.warnings:
            key = w.construct or 'other'
            if key not in by_construct:
                by_construct[key] = 0
            by_construct[key] += 1

        if not by_construct:
            return 'No bridge warnings.'

        parts = [f'{count} {construct}' for construct, count in sorted(by_construct.items())]
        return f'Bridge warnings: {", ".join(parts)}'


def _abi_item_label(name: str, index: int) -> str:
    if name:
        return f'{name} (ABI item {index})'
    return f'ABI item {index}'
