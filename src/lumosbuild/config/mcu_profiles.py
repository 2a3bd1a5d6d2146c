"""
MCU family profiles for the supported STM32 parts.

This module centralizes the toolchain settings (CPU flags, defines, startup
and system sources, linker script, CMSIS folders) for every MCU family, making
it easier to maintain and extend. Resolution is a pure lookup: an MCU model
string is mapped to a family, and the family to a static profile.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class McuFamily(Enum):
    """Coarse silicon family driving flags, includes and linker script."""

    F4 = "f4"
    H7 = "h7"
    G0 = "g0"
    G4 = "g4"


DEFAULT_FAMILY = McuFamily.F4

# Checked in order; the first substring found in the MCU model wins
FAMILY_PATTERNS: Tuple[Tuple[str, McuFamily], ...] = (
    ("STM32H7", McuFamily.H7),
    ("STM32F4", McuFamily.F4),
    ("STM32G0", McuFamily.G0),
    ("STM32G4", McuFamily.G4),
)

BOARD_CONFIG_DIR = "lumos_config"


@dataclass(frozen=True)
class McuProfile:
    """Toolchain settings for one MCU family."""

    family: McuFamily
    board_dir: str  # Board support package directory under the boards root
    cmsis_device: str  # e.g. STM32F4xx
    startup_file: str
    system_file: str
    linker_script: str
    cpu_flags: Tuple[str, ...]
    defines: Tuple[str, ...]
    description: str

    def board_path(self, boards_root: Path) -> Path:
        """Root of the board support package for this family."""
        return Path(boards_root) / self.board_dir

    def config_dir(self, boards_root: Path) -> Path:
        """Folder holding startup, system and linker script sources."""
        return self.board_path(boards_root) / BOARD_CONFIG_DIR

    def cmsis_device_include(self, boards_root: Path) -> Path:
        return (
            self.board_path(boards_root)
            / "Drivers" / "CMSIS" / "Device" / "ST" / self.cmsis_device / "Include"
        )

    def cmsis_core_include(self, boards_root: Path) -> Path:
        return self.board_path(boards_root) / "Drivers" / "CMSIS" / "Include"

    def startup_path(self, boards_root: Path) -> Path:
        return self.config_dir(boards_root) / self.startup_file

    def system_path(self, boards_root: Path) -> Path:
        return self.config_dir(boards_root) / self.system_file

    def linker_script_path(self, boards_root: Path) -> Path:
        return self.config_dir(boards_root) / self.linker_script


MCU_PROFILES: Mapping[McuFamily, McuProfile] = MappingProxyType({
    McuFamily.F4: McuProfile(
        family=McuFamily.F4,
        board_dir="f4",
        cmsis_device="STM32F4xx",
        startup_file="startup_stm32f407xx.s",
        system_file="system_stm32f4xx.c",
        linker_script="STM32F407VG_FLASH.ld",
        cpu_flags=("-mcpu=cortex-m4", "-mthumb", "-mfloat-abi=soft"),
        defines=("STM32F407xx",),
        description="STM32F407VG (Cortex-M4, 168MHz)",
    ),
    McuFamily.H7: McuProfile(
        family=McuFamily.H7,
        board_dir="h7",
        cmsis_device="STM32H7xx",
        startup_file="startup_stm32h723xx.s",
        system_file="system_stm32h7xx.c",
        linker_script="STM32H723VG_FLASH.ld",
        cpu_flags=("-mcpu=cortex-m7", "-mthumb", "-mfpu=fpv5-d16", "-mfloat-abi=hard"),
        defines=("STM32H723xx", "CORE_CM7", "DATA_IN_D2_SRAM"),
        description="STM32H723VG (Cortex-M7, 550MHz)",
    ),
    McuFamily.G0: McuProfile(
        family=McuFamily.G0,
        board_dir="g0",
        cmsis_device="STM32G0xx",
        startup_file="startup_stm32g0b1xx.s",
        system_file="system_stm32g0xx.c",
        linker_script="STM32G0B1CB_FLASH.ld",
        cpu_flags=("-mcpu=cortex-m0plus", "-mthumb"),
        defines=("STM32G0B1xx",),
        description="STM32G0B1CB (Cortex-M0+, 64MHz)",
    ),
    McuFamily.G4: McuProfile(
        family=McuFamily.G4,
        board_dir="g4",
        cmsis_device="STM32G4xx",
        startup_file="startup_stm32g431xx.s",
        system_file="system_stm32g4xx.c",
        linker_script="STM32G431CB_FLASH.ld",
        cpu_flags=("-mcpu=cortex-m4", "-mthumb", "-mfpu=fpv4-sp-d16", "-mfloat-abi=hard"),
        defines=("STM32G431xx",),
        description="STM32G431CB (Cortex-M4, 170MHz)",
    ),
})


def detect_mcu_family(mcu_model: Optional[str]) -> McuFamily:
    """
    Detect the MCU family from an MCU model string.

    Unknown or empty models fall back to the default family instead of
    failing.

    Args:
        mcu_model: MCU model (e.g., 'STM32H723VGT6')

    Returns:
        Matching McuFamily, or DEFAULT_FAMILY
    """
    if not mcu_model:
        return DEFAULT_FAMILY

    model = mcu_model.upper()
    for pattern, family in FAMILY_PATTERNS:
        if pattern in model:
            return family

    return DEFAULT_FAMILY


def get_mcu_profile(mcu_model: Optional[str]) -> McuProfile:
    """
    Get the toolchain profile for an MCU model.

    Args:
        mcu_model: MCU model string

    Returns:
        McuProfile for the detected family (never None)
    """
    return MCU_PROFILES[detect_mcu_family(mcu_model)]
