"""Board configuration loading utilities.

This module resolves a board identifier into the pair of static
configuration records a build needs: the board document and the MCU family
profile derived from its MCU model.
"""

from pathlib import Path
from typing import Optional, Tuple

from .board_config import BoardConfig
from .mcu_profiles import McuProfile, get_mcu_profile


class BoardConfigLoader:
    """Utility class for resolving board configurations."""

    @staticmethod
    def resolve_profile(
        board_id: str, boards_dir: Optional[Path] = None
    ) -> Tuple[BoardConfig, McuProfile]:
        """
        Resolve a board identifier into its board config and MCU profile.

        This is a pure lookup: nothing is written and no process is started.

        Args:
            board_id: Board identifier (e.g., 'lumos-brain')
            boards_dir: Directory holding the board documents (default: bundled)

        Returns:
            Tuple of (BoardConfig, McuProfile)

        Raises:
            BoardConfigError: If the board identifier is unknown
        """
        board_config = BoardConfig.from_board_id(board_id, boards_dir)
        return board_config, get_mcu_profile(board_config.mcu_model)
