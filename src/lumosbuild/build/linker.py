"""
ARM linker wrapper for creating firmware images.

This module provides a wrapper around the arm-none-eabi-g++ link driver and
arm-none-eabi-size for linking object files into firmware.elf and reporting
its memory usage.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .build_context import BuildContext
from .flag_builder import FlagBuilder
from .process_runner import ProcessResult, ProcessRunner


class LinkerError(Exception):
    """Raised when linking fails.

    Attributes:
        stderr: Raw diagnostic output of the linker, if any
    """

    def __init__(self, message: str, stderr: Optional[str] = None):
        super().__init__(message)
        self.stderr = stderr


@dataclass
class SizeInfo:
    """Firmware size information."""

    text: int  # Program memory (flash) usage in bytes
    data: int  # Initialized data in RAM
    bss: int   # Uninitialized data in RAM
    total_flash: int  # Total flash used (text + data)
    total_ram: int    # Total RAM used (data + bss)
    max_flash: Optional[int] = None  # Maximum flash available
    max_ram: Optional[int] = None    # Maximum RAM available

    @property
    def flash_percent(self) -> Optional[float]:
        """Calculate flash usage percentage."""
        if self.max_flash:
            return (self.total_flash / self.max_flash) * 100
        return None

    @property
    def ram_percent(self) -> Optional[float]:
        """Calculate RAM usage percentage."""
        if self.max_ram:
            return (self.total_ram / self.max_ram) * 100
        return None

    @staticmethod
    def parse(size_output: str, max_flash: Optional[int] = None,
              max_ram: Optional[int] = None) -> 'SizeInfo':
        """
        Parse arm-none-eabi-size output (Berkeley format).

        Example:
               text    data     bss     dec     hex filename
               1234      16    1544    2794     aea firmware.elf

        Args:
            size_output: Output from `arm-none-eabi-size firmware.elf`
            max_flash: Flash size of the board
            max_ram: RAM size of the board

        Returns:
            SizeInfo object with parsed size data (zeros if unparseable)
        """
        text = 0
        data = 0
        bss = 0

        for line in size_output.split('\n'):
            parts = line.split()
            if len(parts) < 3:
                continue
            try:
                text, data, bss = (int(parts[0]), int(parts[1]), int(parts[2]))
                break
            except ValueError:
                continue  # Header line

        return SizeInfo(
            text=text,
            data=data,
            bss=bss,
            total_flash=text + data,
            total_ram=data + bss,
            max_flash=max_flash,
            max_ram=max_ram
        )


@dataclass
class LinkResult:
    """Result of linking operation."""

    success: bool
    elf_path: Optional[Path]
    map_path: Optional[Path]
    process: ProcessResult

    @property
    def stderr(self) -> str:
        return self.process.stderr

    @property
    def diagnostic(self) -> str:
        return self.process.diagnostic


class Linker:
    """
    Wrapper for the ARM link and size tools.

    Objects are passed to the link driver in the order they were compiled.
    """

    def __init__(self, context: BuildContext, runner: ProcessRunner):
        """
        Initialize linker.

        Args:
            context: Build context for this invocation
            runner: Process runner used to invoke the tools
        """
        self.context = context
        self.runner = runner
        self.flags = FlagBuilder(context)

    def build_args(self, objects: List[Path], output_elf: Path) -> List[str]:
        args = [str(obj) for obj in objects]
        args.extend(['-o', str(output_elf)])
        args.extend(self.flags.link_flags())
        return args

    def link(self, objects: List[Path], output_elf: Optional[Path] = None) -> LinkResult:
        """
        Link object files into firmware.elf.

        Args:
            objects: Object files in link order
            output_elf: Output path (default: <build_dir>/firmware.elf)

        Returns:
            LinkResult with linking status
        """
        output_elf = output_elf or self.context.elf_path
        process = self.runner.run(
            self.context.toolchain.cxx,
            self.build_args(objects, output_elf),
            timeout=self.context.options.timeout,
        )
        return LinkResult(
            success=process.success,
            elf_path=output_elf if process.success else None,
            map_path=self.context.map_path if process.success else None,
            process=process,
        )

    def size(self, elf_path: Path) -> ProcessResult:
        """Run the size tool on a linked executable."""
        return self.runner.run(
            self.context.toolchain.size,
            [str(elf_path)],
            timeout=self.context.options.timeout,
        )

    def get_size_info(self, size_result: ProcessResult) -> Optional[SizeInfo]:
        """
        Parse a size tool result into SizeInfo.

        Returns:
            SizeInfo, or None if the size tool failed
        """
        if not size_result.success or not size_result.stdout:
            return None
        return SizeInfo.parse(
            size_result.stdout,
            self.context.board.max_flash,
            self.context.board.max_ram,
        )
