"""
Code generation module for the bridge.

This module provides the EVM to ink! model, the named-template renderer and
the generators producing ink! and Solidity source.
"""

from .diagnostics import BridgeDiagnostics, Diagnostic, DiagnosticSeverity
from .selectors import build_selector, selector_hash, keccak256
from .model import Parameter, Function, Variant, OverloadedFunction, Module
from .normaliser import FunctionNormaliser
from .builder import ModelBuilder
from .renderer import Renderer
from .context import CodeGenerationContext
from .base import BaseGenerator
from .abi import AbiTokenBuilder
from .definition import DefinitionGenerator
from .ink_module import InkModuleGenerator
from .contract import SolidityContractGenerator

__all__ = [
    'BridgeDiagnostics',
    'Diagnostic',
    'DiagnosticSeverity',
    'build_selector',
    'selector_hash',
    'keccak256',
    'Parameter',
    'Function',
    'Variant',
    'OverloadedFunction',
    'Module',
    'FunctionNormaliser',
    'ModelBuilder',
    'Renderer',
    'CodeGenerationContext',
    'BaseGenerator',
    'AbiTokenBuilder',
    'DefinitionGenerator',
    'InkModuleGenerator',
    'SolidityContractGenerator',
]
