"""Console output and error handling for the lumos CLI.

Commands run inside ``cli_errors()``, which turns whatever escapes them into
a status line and a process exit code:

    0    success
    1    build or clean failure, unexpected error
    2    workspace path missing or not a directory
    130  interrupted with Ctrl-C
"""

import logging
import os
import sys
import traceback
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, TextIO, Tuple, Type

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_PATH = 2
EXIT_INTERRUPTED = 130  # 128 + SIGINT


def setup_logging(verbose: bool = False) -> None:
    """Setup console logging for the CLI.

    Args:
        verbose: Log every external command (DEBUG) instead of warnings only
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)


def use_color(stream: Optional[TextIO] = None) -> bool:
    """ANSI colors only on a terminal, and never when NO_COLOR is set."""
    stream = stream or sys.stdout
    return "NO_COLOR" not in os.environ and stream.isatty()


class ErrorFormatter:
    """Prints ✓/✗ status lines with an optional detail block."""

    STYLES = {
        "error": ("✗", "\033[1;31m"),
        "success": ("✓", "\033[1;32m"),
        "warning": ("!", "\033[1;33m"),
    }
    RESET = "\033[0m"

    @classmethod
    def status(cls, kind: str, title: str, detail: Optional[str] = None) -> None:
        symbol, color = cls.STYLES[kind]
        line = f"{symbol} {title}"
        if use_color():
            line = f"{color}{line}{cls.RESET}"

        print()
        print(line)
        if detail:
            print()
            print(detail)
            print()

    @classmethod
    def print_error(cls, title: str, detail: Optional[str] = None) -> None:
        cls.status("error", title, detail)

    @classmethod
    def print_success(cls, message: str) -> None:
        cls.status("success", message)

    @classmethod
    def print_warning(cls, message: str) -> None:
        cls.status("warning", message)


@contextmanager
def cli_errors(
    action: str,
    verbose: bool = False,
    expected: Tuple[Type[Exception], ...] = (),
) -> Iterator[None]:
    """Report exceptions escaping a command and exit with the matching code.

    Args:
        action: What the command does, used in messages (e.g. "Build")
        verbose: Print the traceback of unexpected errors
        expected: Exception types whose message is shown on its own
    """
    try:
        yield
    except KeyboardInterrupt:
        ErrorFormatter.print_warning(f"{action} interrupted")
        sys.exit(EXIT_INTERRUPTED)
    except PermissionError as e:
        ErrorFormatter.print_error("Permission denied", str(e))
        sys.exit(EXIT_FAILURE)
    except expected as e:
        ErrorFormatter.print_error(f"{action} failed!", str(e))
        sys.exit(EXIT_FAILURE)
    except Exception as e:
        ErrorFormatter.print_error("Unexpected error", f"{type(e).__name__}: {e}")
        if verbose:
            print("Traceback:")
            print(traceback.format_exc())
        sys.exit(EXIT_FAILURE)


class PathValidator:
    """Validates workspace paths."""

    @staticmethod
    def validate_workspace_dir(workspace_dir: Path) -> None:
        """Exit with EXIT_BAD_PATH unless the workspace is an existing directory."""
        if not workspace_dir.exists():
            problem = "Path does not exist"
        elif not workspace_dir.is_dir():
            problem = "Path is not a directory"
        else:
            return

        ErrorFormatter.print_error(f"{problem}: {workspace_dir}")
        sys.exit(EXIT_BAD_PATH)
