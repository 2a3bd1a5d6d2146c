"""
Build system components for lumosbuild.

This module provides the build system implementation including:
- Source file discovery
- Entry point detection and wrapper generation
- Compilation (arm-none-eabi-gcc/arm-none-eabi-g++)
- Linking and size reporting (arm-none-eabi-g++, arm-none-eabi-size)
- Flash/RAM budget report
- Binary generation (arm-none-eabi-objcopy)
- Build orchestration
"""

from .binary_generator import BinaryGenerator, BinaryGeneratorError
from .build_context import BuildContext, BuildOptions, get_build_dir
from .compiler import CompilationError, Compiler, CompileResult
from .entry_point import EntryPointSynthesizer
from .flag_builder import FlagBuilder
from .linker import Linker, LinkerError, LinkResult, SizeInfo
from .orchestrator import (
    BuildOrchestrator,
    BuildOrchestratorError,
    BuildResult,
    BuildStage,
)
from .process_runner import ProcessResult, ProcessRunner
from .size_report import MemoryRegion, budget_problems, format_size_report, memory_regions
from .source_scanner import (
    NoSourcesError,
    SourceCollection,
    SourceScanner,
    SourceScannerError,
)
from .toolchain import ToolchainPaths

__all__ = [
    'BinaryGenerator',
    'BinaryGeneratorError',
    'BuildContext',
    'BuildOptions',
    'BuildOrchestrator',
    'BuildOrchestratorError',
    'BuildResult',
    'BuildStage',
    'CompilationError',
    'Compiler',
    'CompileResult',
    'EntryPointSynthesizer',
    'FlagBuilder',
    'Linker',
    'LinkerError',
    'LinkResult',
    'MemoryRegion',
    'NoSourcesError',
    'ProcessResult',
    'ProcessRunner',
    'SizeInfo',
    'SourceCollection',
    'SourceScanner',
    'SourceScannerError',
    'ToolchainPaths',
    'budget_problems',
    'format_size_report',
    'get_build_dir',
    'memory_regions',
]
