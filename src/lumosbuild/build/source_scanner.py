"""
Source file discovery for Lumos workspaces.

This module handles:
- Recursively walking a workspace for source files (.cpp, .ino, .c, .h, .hpp)
- Pruning hidden, build output and package metadata directories
- Building source file collections for compilation
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

# Directory names pruned from traversal (in addition to hidden directories)
EXCLUDED_DIRS = {"build", "node_modules"}

CPP_EXTENSIONS = {".cpp", ".ino"}
C_EXTENSIONS = {".c"}
HEADER_EXTENSIONS = {".h", ".hpp"}


class SourceScannerError(Exception):
    """Raised when source scanning fails."""
    pass


class NoSourcesError(SourceScannerError):
    """Raised when a workspace contains nothing to compile."""
    pass


@dataclass
class SourceCollection:
    """Collection of source files categorized by type."""

    cpp_sources: List[Path] = field(default_factory=list)  # .cpp and .ino files
    c_sources: List[Path] = field(default_factory=list)    # .c files
    headers: List[Path] = field(default_factory=list)       # Informational only

    def compilable_sources(self) -> List[Path]:
        """Get all compilable sources, C++ first."""
        return self.cpp_sources + self.c_sources

    @property
    def total_compilable(self) -> int:
        return len(self.cpp_sources) + len(self.c_sources)


class SourceScanner:
    """
    Scans a workspace for source files.

    The scanner:
    1. Walks the workspace recursively, visiting entries in sorted order
    2. Prunes hidden directories, build output and node_modules
    3. Classifies files by extension (case-insensitive)
    4. Logs and skips subdirectories that cannot be read
    """

    def __init__(self, workspace_dir: Path):
        """
        Initialize source scanner.

        Args:
            workspace_dir: Root workspace directory
        """
        self.workspace_dir = Path(workspace_dir)

    def scan(self) -> SourceCollection:
        """
        Scan the workspace for all source files.

        Returns:
            SourceCollection with all discovered sources
        """
        collection = SourceCollection()
        self._scan_directory(self.workspace_dir, collection)
        return collection

    def _scan_directory(self, directory: Path, collection: SourceCollection) -> None:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logging.warning(f"Error scanning directory {directory}: {e}")
            return

        for entry in entries:
            if self._is_excluded(entry.name):
                continue

            entry_path = Path(entry.path)
            try:
                # Symbolic links are skipped, a link to an ancestor would loop
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
            except OSError as e:
                logging.warning(f"Error reading {entry_path}: {e}")
                continue

            if is_dir:
                self._scan_directory(entry_path, collection)
            elif is_file:
                self._classify(entry_path, collection)

    @staticmethod
    def _is_excluded(name: str) -> bool:
        return name.startswith(".") or name in EXCLUDED_DIRS

    @staticmethod
    def _classify(path: Path, collection: SourceCollection) -> None:
        ext = path.suffix.lower()
        if ext in CPP_EXTENSIONS:
            collection.cpp_sources.append(path)
        elif ext in C_EXTENSIONS:
            collection.c_sources.append(path)
        elif ext in HEADER_EXTENSIONS:
            collection.headers.append(path)
