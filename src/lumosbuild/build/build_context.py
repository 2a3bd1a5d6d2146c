"""Per-build configuration.

Everything a build needs to know is collected into a BuildContext that is
created fresh for each build() call and handed to every stage explicitly.
Nothing build-specific is kept on long-lived objects, so one build cannot
leak state into the next.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config.board_config import BOARDS_DIR, BoardConfig
from ..config.mcu_profiles import McuProfile
from .toolchain import ToolchainPaths

# Build output lives under <workspace>/.lumos/build
BUILD_MARKER_DIR = ".lumos"
BUILD_SUBDIR = "build"

FIRMWARE_ELF = "firmware.elf"
FIRMWARE_BIN = "firmware.bin"
LINK_MAP = "output.map"


def get_build_dir(workspace_dir: Path) -> Path:
    """Return the build output directory for a workspace."""
    return Path(workspace_dir) / BUILD_MARKER_DIR / BUILD_SUBDIR


@dataclass(frozen=True)
class BuildOptions:
    """User-tunable build settings."""

    extra_flags: List[str] = field(default_factory=list)  # Appended to every compile
    timeout: Optional[float] = None  # Per-tool timeout in seconds
    verbose: bool = False
    toolchain_dir: Optional[Path] = None  # Overrides the bundled toolchain
    boards_dir: Optional[Path] = None  # Overrides the bundled boards directory


@dataclass(frozen=True)
class BuildContext:
    """Immutable configuration for a single build invocation."""

    workspace_dir: Path
    board: BoardConfig
    profile: McuProfile
    build_dir: Path
    toolchain: ToolchainPaths
    boards_dir: Path
    options: BuildOptions

    @classmethod
    def create(
        cls,
        workspace_dir: Path,
        board: BoardConfig,
        profile: McuProfile,
        options: Optional[BuildOptions] = None,
    ) -> "BuildContext":
        options = options or BuildOptions()
        workspace_dir = Path(workspace_dir).resolve()
        return cls(
            workspace_dir=workspace_dir,
            board=board,
            profile=profile,
            build_dir=get_build_dir(workspace_dir),
            toolchain=ToolchainPaths.from_bin_dir(options.toolchain_dir),
            boards_dir=Path(options.boards_dir) if options.boards_dir else BOARDS_DIR,
            options=options,
        )

    @property
    def elf_path(self) -> Path:
        return self.build_dir / FIRMWARE_ELF

    @property
    def map_path(self) -> Path:
        return self.build_dir / LINK_MAP

    def object_path(self, source: Path) -> Path:
        """Object file for a source: <build_dir>/<stem>.o"""
        return self.build_dir / (Path(source).stem + ".o")
