"""
Command-line interface for lumosbuild.

This module provides the `lumos` CLI tool for building firmware for Lumos
boards.
"""

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from lumosbuild import __version__
from lumosbuild.build import BuildOptions, BuildOrchestrator, budget_problems, format_size_report
from lumosbuild.build.orchestrator import DEFAULT_BOARD, BuildOrchestratorError
from lumosbuild.cli_utils import (
    EXIT_FAILURE,
    EXIT_OK,
    ErrorFormatter,
    PathValidator,
    cli_errors,
    setup_logging,
)
from lumosbuild.config import BoardConfig, BoardConfigError

# Number of log lines shown when a build fails without --verbose
FAILURE_LOG_TAIL = 20


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    workspace_dir: Path
    board: str = DEFAULT_BOARD
    clean: bool = False
    timeout: Optional[float] = None
    toolchain_dir: Optional[Path] = None
    boards_dir: Optional[Path] = None
    extra_flags: List[str] = field(default_factory=list)
    verbose: bool = False


@dataclass
class CleanArgs:
    """Arguments for the clean command."""

    workspace_dir: Path
    verbose: bool = False


def build_command(args: BuildArgs) -> None:
    """Build firmware for a Lumos board.

    Examples:
        lumos build                        # Build current directory for lumos-brain
        lumos build ~/robot                # Build specific workspace
        lumos build -b lumos-microbrain    # Build for another board
        lumos build --clean                # Clean build
        lumos build --flag=-DDEBUG=1       # Extra compiler flag
        lumos build --verbose              # Verbose output
    """
    print(f"Lumos Build System v{__version__}")
    print()

    with cli_errors("Build", args.verbose, expected=(BuildOrchestratorError,)):
        orchestrator = BuildOrchestrator(verbose=args.verbose)

        if args.clean:
            build_dir = orchestrator.clean(args.workspace_dir)
            if args.verbose:
                print(f"Cleaned {build_dir}")

        if not args.verbose:
            print(f"Building {args.workspace_dir} for {args.board}...")

        options = BuildOptions(
            extra_flags=args.extra_flags,
            timeout=args.timeout,
            verbose=args.verbose,
            toolchain_dir=args.toolchain_dir,
            boards_dir=args.boards_dir,
        )
        result = orchestrator.build(args.workspace_dir, args.board, options)

        if not result.success:
            if not args.verbose:
                tail = result.output.splitlines()[-FAILURE_LOG_TAIL:]
                print("\n".join(tail))
            ErrorFormatter.print_error("Build failed!", result.error)
            sys.exit(EXIT_FAILURE)

        ErrorFormatter.print_success("Build successful!")
        print()
        print(f"Firmware: {result.elf_path}")
        if result.bin_path:
            print(f"Binary:   {result.bin_path}")
        else:
            ErrorFormatter.print_warning("Binary conversion failed, only the ELF is available")

        if result.size_info:
            print()
            print("\n".join(format_size_report(result.size_info)))
            for problem in budget_problems(result.size_info):
                ErrorFormatter.print_warning(problem)

        print()
        print(f"Build time: {result.build_time:.2f}s")
        sys.exit(EXIT_OK)


def clean_command(args: CleanArgs) -> None:
    """Remove build artifacts of a workspace."""
    with cli_errors("Clean", args.verbose, expected=(BuildOrchestratorError,)):
        build_dir = BuildOrchestrator(verbose=args.verbose).clean(args.workspace_dir)
        ErrorFormatter.print_success(f"Cleaned {build_dir}")
        sys.exit(EXIT_OK)


def boards_command() -> None:
    """List supported boards."""
    for board_id in BoardConfig.list_boards():
        try:
            config = BoardConfig.from_board_id(board_id)
            print(f"{board_id:20s} {config}")
        except BoardConfigError as e:
            print(f"{board_id:20s} (unavailable: {e})")
    sys.exit(EXIT_OK)


def main() -> None:
    """lumos - firmware build driver for Lumos boards."""
    parser = argparse.ArgumentParser(
        prog="lumos",
        description="Lumos firmware build driver",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"lumos {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Build command
    build_parser = subparsers.add_parser(
        "build",
        help="Build firmware for a Lumos board",
    )
    build_parser.add_argument(
        "workspace_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Workspace directory (default: current directory)",
    )
    build_parser.add_argument(
        "-b",
        "--board",
        default=DEFAULT_BOARD,
        choices=BoardConfig.list_boards(),
        help=f"Target board (default: {DEFAULT_BOARD})",
    )
    build_parser.add_argument(
        "-c",
        "--clean",
        action="store_true",
        help="Clean build artifacts before building",
    )
    build_parser.add_argument(
        "-t",
        "--timeout",
        default=None,
        type=float,
        help="Timeout in seconds for each tool invocation (default: no timeout)",
    )
    build_parser.add_argument(
        "-f",
        "--flag",
        dest="extra_flags",
        action="append",
        default=[],
        help="Extra compiler flag (repeatable)",
    )
    build_parser.add_argument(
        "--toolchain-dir",
        default=None,
        type=Path,
        help="Directory containing arm-none-eabi-* binaries",
    )
    build_parser.add_argument(
        "--boards-dir",
        default=None,
        type=Path,
        help="Directory containing board documents and board support packages",
    )
    build_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose build output",
    )

    # Clean command
    clean_parser = subparsers.add_parser(
        "clean",
        help="Remove build artifacts",
    )
    clean_parser.add_argument(
        "workspace_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Workspace directory (default: current directory)",
    )
    clean_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    # Boards command
    subparsers.add_parser(
        "boards",
        help="List supported boards",
    )

    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(EXIT_OK)

    setup_logging(getattr(parsed_args, "verbose", False))

    if hasattr(parsed_args, "workspace_dir"):
        PathValidator.validate_workspace_dir(parsed_args.workspace_dir)

    if parsed_args.command == "build":
        build_args = BuildArgs(
            workspace_dir=parsed_args.workspace_dir,
            board=parsed_args.board,
            clean=parsed_args.clean,
            timeout=parsed_args.timeout,
            toolchain_dir=parsed_args.toolchain_dir,
            boards_dir=parsed_args.boards_dir,
            extra_flags=parsed_args.extra_flags,
            verbose=parsed_args.verbose,
        )
        build_command(build_args)
    elif parsed_args.command == "clean":
        clean_command(CleanArgs(
            workspace_dir=parsed_args.workspace_dir,
            verbose=parsed_args.verbose,
        ))
    elif parsed_args.command == "boards":
        boards_command()


if __name__ == "__main__":
    main()
