"""External tool execution.

This module runs compiler, linker and post-processing tools as subprocesses,
capturing their output in memory.

Design:
    - Success is defined solely by exit code zero
    - A configured timeout terminates the whole process tree (psutil)
    - Launch failures (missing binary, permission denied) are reported as
      results with exit code -1, never raised
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

import psutil

TIMEOUT_MESSAGE = "Command timed out"

# Exit code reported when the tool could not be run to completion
FAILED_EXIT_CODE = -1


@dataclass
class ProcessResult:
    """Result of running an external tool."""

    success: bool
    stdout: str
    stderr: str
    exit_code: int
    error: Optional[str] = None
    timed_out: bool = False

    @property
    def diagnostic(self) -> str:
        """Best available failure text."""
        return self.error or self.stderr or ""


class ProcessRunner:
    """Runs external tools with captured output and an optional timeout."""

    def __init__(self, default_timeout: Optional[float] = None):
        """
        Initialize process runner.

        Args:
            default_timeout: Timeout in seconds applied when run() gets none
        """
        self.default_timeout = default_timeout

    def run(
        self,
        tool: Union[str, Path],
        args: Sequence[Union[str, Path]],
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """
        Run a tool and wait for it to finish.

        Args:
            tool: Path to the executable
            args: Command line arguments
            timeout: Timeout in seconds (None: wait forever)

        Returns:
            ProcessResult describing the outcome
        """
        cmd: List[str] = [str(tool)] + [str(arg) for arg in args]
        if timeout is None:
            timeout = self.default_timeout

        logging.debug(f"Running: {subprocess.list2cmdline(cmd)}")

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            logging.debug(f"Failed to launch {tool}: {e}")
            return ProcessResult(
                success=False,
                stdout="",
                stderr="",
                exit_code=FAILED_EXIT_CODE,
                error=str(e),
            )

        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            self._kill_process_tree(proc)
            stdout, stderr = proc.communicate()
            logging.warning(f"{Path(str(tool)).name} timed out after {timeout}s")
            return ProcessResult(
                success=False,
                stdout=stdout or "",
                stderr=stderr or "",
                exit_code=FAILED_EXIT_CODE,
                error=TIMEOUT_MESSAGE,
                timed_out=True,
            )

        success = proc.returncode == 0
        return ProcessResult(
            success=success,
            stdout=stdout or "",
            stderr=stderr or "",
            exit_code=proc.returncode,
            error=None if success else (stderr or ""),
        )

    @staticmethod
    def _kill_process_tree(proc: subprocess.Popen) -> None:
        """Kill a process and all of its children."""
        try:
            children = psutil.Process(proc.pid).children(recursive=True)
        except psutil.NoSuchProcess:
            children = []

        for child in children:
            try:
                child.kill()
            except psutil.NoSuchProcess:
                pass  # Already dead

        proc.kill()
        psutil.wait_procs(children, timeout=3)
