"""Shared fixtures for lumosbuild tests."""

from pathlib import Path
from typing import Callable, Optional
from unittest.mock import Mock

import pytest

from lumosbuild.build import BuildContext, BuildOptions, ProcessResult, ProcessRunner
from lumosbuild.config import BoardConfigLoader


def ok(stdout: str = "") -> ProcessResult:
    return ProcessResult(success=True, stdout=stdout, stderr="", exit_code=0)


SIZE_OUTPUT = """\
   text    data     bss     dec     hex filename
   1234      16    1544    2794     aea firmware.elf
"""


@pytest.fixture
def workspace(tmp_path) -> Path:
    """Empty workspace directory."""
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws


@pytest.fixture
def make_runner() -> Callable[..., Mock]:
    """
    Build a mock ProcessRunner.

    ``fail_when`` receives (tool, args) and returns a ProcessResult to force a
    failure, or None to succeed.
    """

    def factory(fail_when: Optional[Callable] = None) -> Mock:
        runner = Mock(spec=ProcessRunner)

        def run(tool, args, timeout=None):
            if fail_when is not None:
                result = fail_when(Path(tool), [str(a) for a in args])
                if result is not None:
                    return result
            if Path(tool).name.startswith("arm-none-eabi-size"):
                return ok(SIZE_OUTPUT)
            return ok()

        runner.run.side_effect = run
        return runner

    return factory


@pytest.fixture
def mock_runner(make_runner) -> Mock:
    """ProcessRunner mock where every tool succeeds."""
    return make_runner()


@pytest.fixture
def brain_context(workspace, tmp_path) -> BuildContext:
    """Build context for lumos-brain with a throwaway toolchain dir."""
    board, profile = BoardConfigLoader.resolve_profile("lumos-brain")
    options = BuildOptions(toolchain_dir=tmp_path / "toolchain" / "bin")
    return BuildContext.create(workspace, board, profile, options)


@pytest.fixture
def tool_calls() -> Callable[[Mock, str], list]:
    """Return a helper listing the calls made to a tool, matched by name prefix."""

    def calls(runner: Mock, tool_name: str) -> list:
        return [
            c for c in runner.run.call_args_list
            if Path(c.args[0]).name.startswith(tool_name)
        ]

    return calls
