"""ARM toolchain binary locations.

The GNU Arm Embedded toolchain is bundled next to the driver:

    lumosbuild/bin/gcc-arm-none-eabi-10.3-2021.10/bin/arm-none-eabi-g++
    lumosbuild/bin/gcc-arm-none-eabi-10.3-2021.10/bin/arm-none-eabi-gcc
    ...

Binaries are not checked for existence here; a missing tool surfaces as a
launch failure when the process runner tries to start it.
"""

import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

TOOLCHAIN_NAME = "gcc-arm-none-eabi-10.3-2021.10"
BINARY_PREFIX = "arm-none-eabi"

DEFAULT_TOOLCHAIN_DIR = Path(__file__).resolve().parent.parent / "bin" / TOOLCHAIN_NAME / "bin"


@dataclass(frozen=True)
class ToolchainPaths:
    """Paths to the four tools a build invokes."""

    cxx: Path      # arm-none-eabi-g++ (C++ compiler and link driver)
    cc: Path       # arm-none-eabi-gcc (C and assembly compiler)
    size: Path     # arm-none-eabi-size
    objcopy: Path  # arm-none-eabi-objcopy

    @classmethod
    def from_bin_dir(cls, bin_dir: Optional[Path] = None) -> "ToolchainPaths":
        """
        Build tool paths from a toolchain bin directory.

        Args:
            bin_dir: Directory containing arm-none-eabi-* binaries
                (default: bundled toolchain)

        Returns:
            ToolchainPaths instance
        """
        bin_dir = Path(bin_dir) if bin_dir else DEFAULT_TOOLCHAIN_DIR
        ext = ".exe" if platform.system() == "Windows" else ""

        def tool(name: str) -> Path:
            return bin_dir / f"{BINARY_PREFIX}-{name}{ext}"

        return cls(
            cxx=tool("g++"),
            cc=tool("gcc"),
            size=tool("size"),
            objcopy=tool("objcopy"),
        )

    def as_dict(self) -> Dict[str, Path]:
        return {
            "g++": self.cxx,
            "gcc": self.cc,
            "size": self.size,
            "objcopy": self.objcopy,
        }
