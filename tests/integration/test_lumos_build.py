"""
Integration tests for Lumos firmware builds.

These tests drive the real arm-none-eabi toolchain and the board support
packages, and are skipped when either is not installed. Set
LUMOS_TOOLCHAIN_DIR to use a toolchain other than the bundled one.
"""

import os
import subprocess
from pathlib import Path

import pytest

from lumosbuild.build import BuildOptions, BuildOrchestrator
from lumosbuild.build.toolchain import DEFAULT_TOOLCHAIN_DIR, ToolchainPaths
from lumosbuild.config import BOARDS_DIR, BoardConfigLoader

BLINK_SKETCH = """\
volatile int counter = 0;

void setup() {
    counter = 1;
}

void loop() {
    counter++;
}
"""

BARE_MAIN = """\
int main() {
    volatile int x = 0;
    while (1) {
        x++;
    }
}
"""


def toolchain_dir() -> Path:
    return Path(os.environ.get("LUMOS_TOOLCHAIN_DIR", DEFAULT_TOOLCHAIN_DIR))


def require_toolchain(board_id: str) -> None:
    tools = ToolchainPaths.from_bin_dir(toolchain_dir())
    if not all(path.exists() for path in tools.as_dict().values()):
        pytest.skip(f"ARM toolchain not found in {toolchain_dir()}")

    _, profile = BoardConfigLoader.resolve_profile(board_id)
    if not profile.startup_path(BOARDS_DIR).exists():
        pytest.skip(f"Board support package for {board_id} not installed")


@pytest.mark.integration
class TestLumosBuild:
    """Builds real firmware images"""

    @pytest.mark.parametrize("board_id", ["lumos-brain", "lumos-microbrain"])
    def test_sketch_build(self, tmp_path, board_id):
        """Arduino-style sketch links through the generated wrapper."""
        require_toolchain(board_id)
        (tmp_path / "blink.ino").write_text(BLINK_SKETCH)

        result = BuildOrchestrator().build(
            tmp_path, board_id, BuildOptions(toolchain_dir=toolchain_dir(), timeout=120)
        )

        assert result.success, f"{result.output}\n{result.error}"
        assert result.elf_path.exists()
        assert result.bin_path.exists()
        assert result.bin_path.stat().st_size > 0
        assert (tmp_path / ".lumos" / "build" / "output.map").exists()
        assert result.size_info.total_flash > 0

    def test_main_build(self, tmp_path):
        require_toolchain("lumos-brain")
        (tmp_path / "main.cpp").write_text(BARE_MAIN)

        result = BuildOrchestrator().build(
            tmp_path, "lumos-brain", BuildOptions(toolchain_dir=toolchain_dir(), timeout=120)
        )

        assert result.success, f"{result.output}\n{result.error}"
        assert not (tmp_path / ".lumos" / "build" / "_lumos_main_wrapper.cpp").exists()

    def test_syntax_error(self, tmp_path):
        require_toolchain("lumos-brain")
        (tmp_path / "main.cpp").write_text("int main() { return 0 }\n")

        result = BuildOrchestrator().build(
            tmp_path, "lumos-brain", BuildOptions(toolchain_dir=toolchain_dir(), timeout=120)
        )

        assert not result.success
        assert result.error.startswith("Failed to compile main.cpp:")
        assert "error" in result.stderr

    def test_cli_build(self, tmp_path):
        require_toolchain("lumos-brain")
        (tmp_path / "blink.ino").write_text(BLINK_SKETCH)

        result = subprocess.run(
            ["lumos", "build", "--toolchain-dir", str(toolchain_dir()), str(tmp_path)],
            capture_output=True,
            text=True,
            timeout=300,
        )

        assert result.returncode == 0, f"STDOUT:\n{result.stdout}\nSTDERR:\n{result.stderr}"
        assert "Build successful" in result.stdout
        assert (tmp_path / ".lumos" / "build" / "firmware.bin").exists()
