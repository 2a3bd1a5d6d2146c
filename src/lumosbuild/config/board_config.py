"""
Board configuration registry for Lumos boards.

This module maps a board identifier to one of the bundled board documents
(JSON files shipped in the ``lumosbuild/boards`` directory) and parses it into
an immutable BoardConfig.

Example board document:
    {
      "board": {"id": "lumos-brain", "name": "Lumos Brain"},
      "mcu": {"model": "STM32H723VGT6", "flash_size": 1048576, "ram_size": 577536}
    }
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

# Bundled board documents and board-support packages live here
BOARDS_DIR = Path(__file__).resolve().parent.parent / "boards"

# Closed set of supported boards
BOARD_FILES = {
    "lumos-brain": "LumosBrain.json",
    "lumos-microbrain": "LumosMicroBrain.json",
}


class BoardConfigError(Exception):
    """Exception raised for board configuration errors."""

    pass


@dataclass(frozen=True)
class BoardConfig:
    """
    Static description of a Lumos board and its microcontroller.

    Usage:
        # Load a bundled board
        config = BoardConfig.from_board_id("lumos-brain")

        # Or create directly with known values
        config = BoardConfig(
            board_id="lumos-brain",
            name="Lumos Brain",
            mcu_model="STM32H723VGT6",
        )
    """

    board_id: str
    name: str
    mcu_model: str
    max_flash: Optional[int] = None  # Flash size in bytes
    max_ram: Optional[int] = None  # RAM size in bytes
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @staticmethod
    def list_boards() -> List[str]:
        """Return the identifiers of every supported board."""
        return sorted(BOARD_FILES)

    @classmethod
    def from_board_id(
        cls, board_id: str, boards_dir: Optional[Path] = None
    ) -> "BoardConfig":
        """
        Load a bundled board configuration by identifier.

        Args:
            board_id: Board identifier (e.g., "lumos-brain")
            boards_dir: Directory holding the board documents (default: bundled)

        Returns:
            BoardConfig instance

        Raises:
            BoardConfigError: If the board is unknown or its document is invalid
        """
        board_file = BOARD_FILES.get(board_id)
        if board_file is None:
            raise BoardConfigError(
                f"Unknown board ID: {board_id}\n"
                + f"Supported boards: {', '.join(cls.list_boards())}"
            )

        board_path = Path(boards_dir or BOARDS_DIR) / board_file
        return cls.from_json(board_path, board_id)

    @classmethod
    def from_json(cls, json_path: Path, board_id: str) -> "BoardConfig":
        """
        Parse a board document.

        Args:
            json_path: Path to the board JSON document
            board_id: Identifier the document was requested under

        Returns:
            BoardConfig instance

        Raises:
            BoardConfigError: If the file is missing, unreadable or incomplete
        """
        try:
            with open(json_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise BoardConfigError(f"Board file not found: {json_path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise BoardConfigError(f"Failed to read board file {json_path}: {e}") from e

        return cls.from_dict(data, board_id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], board_id: str) -> "BoardConfig":
        """
        Build a BoardConfig from an already parsed board document.

        Raises:
            BoardConfigError: If a required field is missing
        """
        try:
            board = data["board"]
            mcu = data["mcu"]
            return cls(
                board_id=board.get("id", board_id),
                name=board["name"],
                mcu_model=mcu["model"],
                max_flash=mcu.get("flash_size"),
                max_ram=mcu.get("ram_size"),
                extra={k: v for k, v in data.items() if k not in {"board", "mcu"}},
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise BoardConfigError(
                f"Board '{board_id}' is missing required field: {e}"
            ) from e

    def __str__(self) -> str:
        return f"{self.name} ({self.mcu_model})"
