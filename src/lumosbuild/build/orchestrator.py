"""
Build orchestration for Lumos workspaces.

This module coordinates the entire build process, from resolving the board
configuration to producing a flashable firmware.bin. The build is a strictly
sequential pipeline of stages:

    CONFIG_LOAD -> SETUP_BUILD_DIR -> SCAN -> ENTRY_POINT_CHECK
    -> COMPILE_STARTUP -> COMPILE_SYSTEM_INIT -> COMPILE_CPP -> COMPILE_C
    -> COMPILE_SHIM -> LINK -> SIZE_REPORT -> ELF_TO_BIN -> DONE

Any stage that fails ends the build in FAILED. Nothing is retried and object
files produced before the failure are left in the build directory. The size
report and binary conversion are best effort: their failures never fail a
build whose link succeeded.
"""

import logging
import shutil
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..config.board_config import BoardConfigError
from ..config.board_loader import BoardConfigLoader
from .binary_generator import BinaryGenerator, BinaryGeneratorError
from .build_context import BuildContext, BuildOptions, get_build_dir
from .compiler import CompilationError, Compiler, CompileResult
from .entry_point import EntryPointSynthesizer
from .linker import Linker, LinkerError, SizeInfo
from .process_runner import ProcessRunner
from .source_scanner import NoSourcesError, SourceCollection, SourceScanner

DEFAULT_BOARD = "lumos-brain"


class BuildStage(Enum):
    """Pipeline states, in execution order."""

    CONFIG_LOAD = "config_load"
    SETUP_BUILD_DIR = "setup_build_dir"
    SCAN = "scan"
    ENTRY_POINT_CHECK = "entry_point_check"
    COMPILE_STARTUP = "compile_startup"
    COMPILE_SYSTEM_INIT = "compile_system_init"
    COMPILE_CPP = "compile_cpp"
    COMPILE_C = "compile_c"
    COMPILE_SHIM = "compile_shim"
    LINK = "link"
    SIZE_REPORT = "size_report"
    ELF_TO_BIN = "elf_to_bin"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class BuildResult:
    """Result of a complete build operation."""

    success: bool
    output: str
    elf_path: Optional[Path] = None
    bin_path: Optional[Path] = None
    error: Optional[str] = None
    stderr: Optional[str] = None
    object_files: Tuple[Path, ...] = ()
    size_info: Optional[SizeInfo] = None
    failed_stage: Optional[BuildStage] = None
    build_time: float = 0.0


class BuildOrchestratorError(Exception):
    """Exception raised for build orchestration errors."""
    pass


class BuildLog:
    """Accumulates human-readable build progress."""

    def __init__(self, verbose: bool = False):
        self.lines: List[str] = []
        self.verbose = verbose

    def add(self, line: str = "") -> None:
        self.lines.append(line)
        if self.verbose:
            print(line)

    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class BuildState:
    """Mutable progress of one build; discarded when the build ends."""

    log: BuildLog
    stage: BuildStage = BuildStage.CONFIG_LOAD
    sources: Optional[SourceCollection] = None
    wrapper_path: Optional[Path] = None
    object_files: List[Path] = field(default_factory=list)
    elf_path: Optional[Path] = None
    bin_path: Optional[Path] = None
    size_info: Optional[SizeInfo] = None

    def require_sources(self) -> SourceCollection:
        if self.sources is None:
            raise BuildOrchestratorError(f"{self.stage.value} needs scanned sources")
        return self.sources

    def require_elf(self) -> Path:
        if self.elf_path is None:
            raise BuildOrchestratorError(f"{self.stage.value} needs a linked firmware.elf")
        return self.elf_path


Transition = Callable[[BuildContext, BuildState], None]


class BuildOrchestrator:
    """
    Orchestrates the complete firmware build for a workspace.

    The orchestrator itself holds no per-build state: every build() call
    resolves a fresh BuildContext and passes it to each stage.

    Example usage:
        orchestrator = BuildOrchestrator()
        result = orchestrator.build(Path("~/robot"), "lumos-brain")
        if result.success:
            print(f"Firmware: {result.bin_path}")
        else:
            print(result.output)
            print(result.error)
    """

    def __init__(self, runner: Optional[ProcessRunner] = None, verbose: bool = False):
        """
        Initialize build orchestrator.

        Args:
            runner: Process runner for external tools (default: ProcessRunner())
            verbose: Echo build progress as it happens, for every build
                regardless of the options passed to build()
        """
        self.runner = runner or ProcessRunner()
        self.verbose = verbose

    def _pipeline(self) -> List[Tuple[BuildStage, Transition]]:
        return [
            (BuildStage.SETUP_BUILD_DIR, self._setup_build_dir),
            (BuildStage.SCAN, self._scan_sources),
            (BuildStage.ENTRY_POINT_CHECK, self._check_entry_point),
            (BuildStage.COMPILE_STARTUP, self._compile_startup),
            (BuildStage.COMPILE_SYSTEM_INIT, self._compile_system_init),
            (BuildStage.COMPILE_CPP, self._compile_cpp_sources),
            (BuildStage.COMPILE_C, self._compile_c_sources),
            (BuildStage.COMPILE_SHIM, self._compile_wrapper),
            (BuildStage.LINK, self._link),
            (BuildStage.SIZE_REPORT, self._report_size),
            (BuildStage.ELF_TO_BIN, self._elf_to_bin),
        ]

    def build(
        self,
        workspace_dir: Path,
        board_id: str = DEFAULT_BOARD,
        options: Optional[BuildOptions] = None,
    ) -> BuildResult:
        """
        Execute the complete build process.

        Args:
            workspace_dir: Workspace root containing the sources
            board_id: Target board identifier
            options: Build options (default: BuildOptions()). Progress is
                echoed when either options.verbose or the orchestrator's
                verbose flag is set.

        Returns:
            BuildResult with build status, log and output paths
        """
        start_time = time.time()
        options = options or BuildOptions()
        state = BuildState(log=BuildLog(verbose=options.verbose or self.verbose))

        try:
            context = self._load_config(Path(workspace_dir), board_id, options)
            for stage, transition in self._pipeline():
                state.stage = stage
                transition(context, state)
        except BoardConfigError as e:
            return self._failure(
                state, f"Failed to load board configuration for: {board_id}\n{e}", start_time
            )
        except NoSourcesError as e:
            return self._failure(state, str(e), start_time)
        except (CompilationError, LinkerError) as e:
            return self._failure(state, str(e), start_time, stderr=e.stderr)
        except Exception as e:
            logging.debug(f"Build failed during {state.stage.value}", exc_info=True)
            return self._failure(state, f"{type(e).__name__}: {e}", start_time)

        state.stage = BuildStage.DONE
        state.log.add("=== Compilation Complete ===")

        return BuildResult(
            success=True,
            output=state.log.text(),
            elf_path=state.elf_path,
            bin_path=state.bin_path,
            object_files=tuple(state.object_files),
            size_info=state.size_info,
            build_time=time.time() - start_time,
        )

    # Same entry point under the name used by editor integrations
    compile_workspace = build

    def clean(self, workspace_dir: Path) -> Path:
        """
        Remove all build artifacts for a workspace.

        The build directory is deleted and recreated empty.

        Args:
            workspace_dir: Workspace root

        Returns:
            Path to the (now empty) build directory

        Raises:
            BuildOrchestratorError: If the directory cannot be removed
        """
        build_dir = get_build_dir(Path(workspace_dir).resolve())
        try:
            if build_dir.exists():
                shutil.rmtree(build_dir)
            build_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BuildOrchestratorError(f"Failed to clean {build_dir}: {e}") from e
        return build_dir

    def _failure(
        self,
        state: BuildState,
        error: str,
        start_time: float,
        stderr: Optional[str] = None,
    ) -> BuildResult:
        failed_stage = state.stage
        state.stage = BuildStage.FAILED
        logging.debug(f"Build failed at {failed_stage.value}: {error}")
        return BuildResult(
            success=False,
            output=state.log.text(),
            error=error,
            stderr=stderr,
            object_files=tuple(state.object_files),
            failed_stage=failed_stage,
            build_time=time.time() - start_time,
        )

    # Stage transitions

    def _load_config(
        self, workspace_dir: Path, board_id: str, options: BuildOptions
    ) -> BuildContext:
        board, profile = BoardConfigLoader.resolve_profile(board_id, options.boards_dir)
        return BuildContext.create(workspace_dir, board, profile, options)

    def _setup_build_dir(self, context: BuildContext, state: BuildState) -> None:
        context.build_dir.mkdir(parents=True, exist_ok=True)

        log = state.log
        log.add("=== Lumos Build - ARM Compilation ===")
        log.add(f"Board: {context.board.name}")
        log.add(f"Target: {context.profile.description}")
        log.add(f"Workspace: {context.workspace_dir}")
        log.add(f"Build directory: {context.build_dir}")
        log.add()

    def _scan_sources(self, context: BuildContext, state: BuildState) -> None:
        log = state.log
        log.add("Scanning for source files...")
        sources = SourceScanner(context.workspace_dir).scan()

        if sources.total_compilable == 0:
            raise NoSourcesError("No source files found in workspace")

        log.add(f"Found {len(sources.cpp_sources)} C++ file(s)")
        log.add(f"Found {len(sources.c_sources)} C file(s)")
        log.add(f"Found {len(sources.headers)} header file(s)")
        log.add()
        state.sources = sources

    def _check_entry_point(self, context: BuildContext, state: BuildState) -> None:
        if EntryPointSynthesizer.has_entry_point(state.require_sources()):
            state.log.add("Detected existing main() function, skipping wrapper...")
        else:
            state.log.add("Creating Arduino-style main() wrapper...")
            state.wrapper_path = EntryPointSynthesizer.synthesize_entry_point(context.build_dir)
        state.log.add()

    def _compile_step(
        self,
        context: BuildContext,
        state: BuildState,
        source: Path,
        progress: str,
        failure: str,
    ) -> CompileResult:
        """Compile one source; raise CompilationError on failure."""
        state.log.add(progress)
        object_file = context.object_path(source)
        if object_file in state.object_files:
            # Objects are named by stem, the earlier object is overwritten
            logging.warning(
                f"{source} compiles to {object_file.name}, already produced by another source"
            )
        result = Compiler(context, self.runner).compile_file(source)
        if not result.success:
            raise CompilationError(f"{failure}\n{result.diagnostic}", stderr=result.stderr)
        state.object_files.append(result.object_file)
        return result

    def _compile_startup(self, context: BuildContext, state: BuildState) -> None:
        state.log.add("Compiling source files...")
        self._compile_step(
            context,
            state,
            context.profile.startup_path(context.boards_dir),
            f"  Compiling {context.board.mcu_model} startup code...",
            "Failed to compile startup code:",
        )

    def _compile_system_init(self, context: BuildContext, state: BuildState) -> None:
        self._compile_step(
            context,
            state,
            context.profile.system_path(context.boards_dir),
            f"  Compiling {context.board.mcu_model} system initialization...",
            "Failed to compile system initialization:",
        )
        state.log.add()

    def _compile_user_sources(
        self, context: BuildContext, state: BuildState, sources: List[Path]
    ) -> None:
        for source in sources:
            self._compile_step(
                context,
                state,
                source,
                f"  Compiling {source.name}...",
                f"Failed to compile {source.name}:",
            )

    def _compile_cpp_sources(self, context: BuildContext, state: BuildState) -> None:
        self._compile_user_sources(context, state, state.require_sources().cpp_sources)

    def _compile_c_sources(self, context: BuildContext, state: BuildState) -> None:
        self._compile_user_sources(context, state, state.require_sources().c_sources)

    def _compile_wrapper(self, context: BuildContext, state: BuildState) -> None:
        if state.wrapper_path is not None:
            self._compile_step(
                context,
                state,
                state.wrapper_path,
                "  Compiling Arduino wrapper...",
                "Failed to compile wrapper:",
            )

        state.log.add(f"Successfully compiled {len(state.object_files)} file(s)")
        state.log.add()

    def _link(self, context: BuildContext, state: BuildState) -> None:
        state.log.add("Linking...")
        result = Linker(context, self.runner).link(state.object_files)
        if not result.success:
            raise LinkerError(f"Linking failed:\n{result.diagnostic}", stderr=result.stderr)

        state.elf_path = result.elf_path
        state.log.add("Linking successful")
        state.log.add()

    def _report_size(self, context: BuildContext, state: BuildState) -> None:
        elf_path = state.require_elf()
        state.log.add("Getting binary size...")
        linker = Linker(context, self.runner)
        size_result = linker.size(elf_path)

        # A failed size report is simply left out
        if size_result.success and size_result.stdout:
            state.log.add(size_result.stdout.strip())
            state.size_info = linker.get_size_info(size_result)
        state.log.add()

    def _elf_to_bin(self, context: BuildContext, state: BuildState) -> None:
        elf_path = state.require_elf()
        state.log.add("Creating binary file...")
        generator = BinaryGenerator(context, self.runner)
        try:
            state.bin_path = generator.generate_bin(elf_path)
            state.log.add(f"Binary created: {state.bin_path}")
        except BinaryGeneratorError as e:
            # The linked ELF is still a usable build product
            logging.warning(str(e))
        state.log.add()
