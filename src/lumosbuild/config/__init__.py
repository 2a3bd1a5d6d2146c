"""Configuration modules for lumosbuild."""

from .board_config import BOARD_FILES, BOARDS_DIR, BoardConfig, BoardConfigError
from .board_loader import BoardConfigLoader
from .mcu_profiles import (
    DEFAULT_FAMILY,
    MCU_PROFILES,
    McuFamily,
    McuProfile,
    detect_mcu_family,
    get_mcu_profile,
)

__all__ = [
    "BOARD_FILES",
    "BOARDS_DIR",
    "BoardConfig",
    "BoardConfigError",
    "BoardConfigLoader",
    "DEFAULT_FAMILY",
    "MCU_PROFILES",
    "McuFamily",
    "McuProfile",
    "detect_mcu_family",
    "get_mcu_profile",
]
