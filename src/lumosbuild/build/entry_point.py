"""
Program entry point detection and Arduino-style wrapper generation.

Workspaces written in the Arduino style only define ``setup()`` and
``loop()``. When no source defines ``main()``, a small wrapper is generated
in the build directory so every firmware image has exactly one entry point.

Detection is a textual heuristic, not a parse: a ``main(`` declaration inside
a comment or string literal counts as a match, and unusual formatting (for
example a return type on its own line) is not recognized.
"""

import logging
import re
from pathlib import Path

from .source_scanner import SourceCollection

# Matches: int main(, void main(, auto main(
MAIN_PATTERN = re.compile(r"\b(int|void|auto)\s+main\s*\(", re.MULTILINE)

WRAPPER_FILENAME = "_lumos_main_wrapper.cpp"

WRAPPER_SOURCE = """\
// Auto-generated wrapper for Arduino-style setup()/loop()
// C++ linkage: sketches are compiled as C++, so their hooks are mangled
void setup() __attribute__((weak));
void loop() __attribute__((weak));

void setup() {}
void loop() {}

int main() {
    setup();
    while(1) {
        loop();
    }
    return 0;
}
"""


class EntryPointSynthesizer:
    """Finds an existing main() or writes the setup()/loop() wrapper."""

    @staticmethod
    def has_entry_point(sources: SourceCollection) -> bool:
        """
        Check whether any C/C++ source declares main().

        Args:
            sources: Scanned workspace sources

        Returns:
            True if a main() declaration was found
        """
        for source in sources.compilable_sources():
            try:
                content = source.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logging.warning(f"Error reading {source}: {e}")
                continue

            if MAIN_PATTERN.search(content):
                return True

        return False

    @staticmethod
    def synthesize_entry_point(build_dir: Path) -> Path:
        """
        Write the Arduino-style main() wrapper into the build directory.

        Args:
            build_dir: Build output directory

        Returns:
            Path to the generated wrapper source
        """
        wrapper_path = Path(build_dir) / WRAPPER_FILENAME
        wrapper_path.parent.mkdir(parents=True, exist_ok=True)
        wrapper_path.write_text(WRAPPER_SOURCE, encoding="utf-8")
        return wrapper_path
