"""Compilation Flag Builder.

This module builds compiler and linker argument lists from a BuildContext.

Design:
    - Assembly sources get only the CPU flags (plus user extra flags)
    - C/C++ sources get include paths, CPU flags, defines, optimization,
      warnings and per-function/per-data sections
    - Link flags select the family linker script, drop unused sections,
      write a link map and use the newlib-nano runtime without OS support
"""

from pathlib import Path
from typing import List

from .build_context import BuildContext

OPTIMIZATION_FLAG = "-O2"

COMMON_COMPILE_FLAGS = [
    OPTIMIZATION_FLAG,         # Optimization level
    "-Wall",                   # Enable warnings
    "-ffunction-sections",     # Each function in its own section
    "-fdata-sections",         # Each data item in its own section
]

RUNTIME_SPECS = [
    "-specs=nosys.specs",      # No OS syscalls
    "--specs=nano.specs",      # newlib-nano
]


class FlagBuilder:
    """Builds compile and link flags for one build."""

    def __init__(self, context: BuildContext):
        """Initialize flag builder.

        Args:
            context: Build context supplying profile, paths and options
        """
        self.context = context

    def include_paths(self) -> List[Path]:
        """Include directories, in search order."""
        profile = self.context.profile
        boards_dir = self.context.boards_dir
        return [
            self.context.workspace_dir,                  # Workspace root
            profile.config_dir(boards_dir),              # Board configuration
            profile.cmsis_device_include(boards_dir),    # Device headers
            profile.cmsis_core_include(boards_dir),      # ARM CMSIS core headers
        ]

    def define_flags(self) -> List[str]:
        return [f"-D{define}" for define in self.context.profile.defines]

    def assembly_flags(self) -> List[str]:
        """Flags for .s/.S sources."""
        return list(self.context.profile.cpu_flags) + list(self.context.options.extra_flags)

    def compile_flags(self) -> List[str]:
        """Flags for C and C++ sources."""
        flags = [f"-I{inc}" for inc in self.include_paths()]
        flags.extend(self.context.profile.cpu_flags)
        flags.extend(self.define_flags())
        flags.extend(COMMON_COMPILE_FLAGS)
        flags.extend(self.context.options.extra_flags)
        return flags

    def link_flags(self) -> List[str]:
        linker_script = self.context.profile.linker_script_path(self.context.boards_dir)
        flags = list(self.context.profile.cpu_flags)
        flags.extend([
            f"-T{linker_script}",                    # Memory layout
            "-Wl,--gc-sections",                     # Remove unused sections
            f"-Wl,-Map={self.context.map_path}",     # Generate map file
        ])
        flags.extend(RUNTIME_SPECS)
        return flags
