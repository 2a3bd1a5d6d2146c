"""Binary Generation Utilities.

This module converts the linked firmware.elf into a raw firmware.bin image
suitable for flashing, using arm-none-eabi-objcopy.
"""

from pathlib import Path
from typing import Optional

from .build_context import BuildContext
from .process_runner import ProcessResult, ProcessRunner


class BinaryGeneratorError(Exception):
    """Raised when binary generation operations fail."""
    pass


class BinaryGenerator:
    """Handles firmware binary generation from ELF files."""

    def __init__(self, context: BuildContext, runner: ProcessRunner):
        """Initialize binary generator.

        Args:
            context: Build context for this invocation
            runner: Process runner used to invoke objcopy
        """
        self.context = context
        self.runner = runner

    @staticmethod
    def bin_path_for(elf_path: Path) -> Path:
        """firmware.elf -> firmware.bin, next to the ELF."""
        return Path(elf_path).with_suffix(".bin")

    def elf_to_bin(self, elf_path: Path, output_bin: Optional[Path] = None) -> ProcessResult:
        """Run objcopy and return the raw process result."""
        output_bin = output_bin or self.bin_path_for(elf_path)
        return self.runner.run(
            self.context.toolchain.objcopy,
            ["-O", "binary", str(elf_path), str(output_bin)],
            timeout=self.context.options.timeout,
        )

    def generate_bin(self, elf_path: Path, output_bin: Optional[Path] = None) -> Path:
        """Generate firmware.bin from firmware.elf.

        Args:
            elf_path: Path to firmware.elf
            output_bin: Optional path for output .bin file

        Returns:
            Path to generated firmware.bin

        Raises:
            BinaryGeneratorError: If conversion fails
        """
        output_bin = output_bin or self.bin_path_for(elf_path)
        result = self.elf_to_bin(elf_path, output_bin)
        if not result.success:
            raise BinaryGeneratorError(
                f"Failed to convert {Path(elf_path).name} to binary: {result.diagnostic}"
            )
        return output_bin
