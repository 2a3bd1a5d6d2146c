"""
ARM compiler wrapper.

This module provides a wrapper around arm-none-eabi-gcc and
arm-none-eabi-g++ for compiling assembly, C and C++ source files to object
files in the build directory.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .build_context import BuildContext
from .flag_builder import FlagBuilder
from .process_runner import ProcessResult, ProcessRunner

ASSEMBLY_EXTENSIONS = {".s", ".S"}
C_EXTENSIONS = {".c"}
ARDUINO_EXTENSIONS = {".ino"}


class CompilationError(Exception):
    """Raised when compilation fails.

    Attributes:
        stderr: Raw diagnostic output of the failing compiler, if any
    """

    def __init__(self, message: str, stderr: Optional[str] = None):
        super().__init__(message)
        self.stderr = stderr


@dataclass
class CompileResult:
    """Result of a compilation operation."""

    success: bool
    source: Path
    object_file: Path
    process: ProcessResult

    @property
    def stderr(self) -> str:
        return self.process.stderr

    @property
    def diagnostic(self) -> str:
        return self.process.diagnostic


class Compiler:
    """
    Wrapper for the ARM GCC compilers.

    Assembly and C sources go through gcc, everything else through g++.
    """

    def __init__(self, context: BuildContext, runner: ProcessRunner):
        """
        Initialize compiler.

        Args:
            context: Build context for this invocation
            runner: Process runner used to invoke the compiler
        """
        self.context = context
        self.runner = runner
        self.flags = FlagBuilder(context)

    @staticmethod
    def is_assembly(source: Path) -> bool:
        # Case matters: .S is preprocessed assembly, .s is plain assembly
        return source.suffix in ASSEMBLY_EXTENSIONS

    def compiler_for(self, source: Path) -> Path:
        """Select gcc or g++ for a source file."""
        if self.is_assembly(source) or source.suffix.lower() in C_EXTENSIONS:
            return self.context.toolchain.cc
        return self.context.toolchain.cxx

    def build_args(self, source: Path, output: Path) -> List[str]:
        """Build the argument list for compiling one source."""
        if self.is_assembly(source):
            return ["-c", str(source), "-o", str(output)] + self.flags.assembly_flags()

        args = ["-c"]
        if source.suffix.lower() in ARDUINO_EXTENSIONS:
            # g++ does not know the .ino extension
            args.extend(["-x", "c++"])
        args.extend([str(source), "-o", str(output)])
        args.extend(self.flags.compile_flags())
        return args

    def compile_file(self, source: Path, output: Optional[Path] = None) -> CompileResult:
        """
        Compile a single source file.

        Args:
            source: Path to source file
            output: Object file path (default: <build_dir>/<stem>.o)

        Returns:
            CompileResult with compilation status
        """
        source = Path(source)
        output = output or self.context.object_path(source)
        process = self.runner.run(
            self.compiler_for(source),
            self.build_args(source, output),
            timeout=self.context.options.timeout,
        )
        return CompileResult(
            success=process.success,
            source=source,
            object_file=output,
            process=process,
        )
