"""Directory scanning for research directories and entry files."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

RESEARCH_CONFIG_FILE = "research.yaml"
ENTRY_EXTENSION = ".md"
RESERVED_DIRS = frozenset({".research", "resources", ".git", ".idea", "node_modules"})


class DirectoryScanner:
    """Filesystem enumeration. Inaccessible paths yield empty results, never errors."""

    def scan_researches(self, root: Path) -> list[Path]:
        """Immediate subdirectories of root that contain a research.yaml."""
        if not root.is_dir():
            return []
        try:
            return sorted(
                child
                for child in root.iterdir()
                if child.is_dir() and (child / RESEARCH_CONFIG_FILE).is_file()
            )
        except OSError as e:
            logger.error("Failed to scan researches in %s: %s", root, e)
            return []

    def scan_entries(self, research_path: Path) -> list[Path]:
        """Every markdown file below research_path, at any depth."""
        if not research_path.is_dir():
            return []
        try:
            return sorted(p for p in research_path.rglob(f"*{ENTRY_EXTENSION}") if p.is_file())
        except OSError as e:
            logger.error("Failed to scan entries in %s: %s", research_path, e)
            return []

    def get_entry_directories(self, research_path: Path) -> list[str]:
        """Names of immediate subdirectories, minus tooling/reserved ones."""
        if not research_path.is_dir():
            return []
        try:
            return sorted(
                child.name
                for child in research_path.iterdir()
                if child.is_dir() and child.name not in RESERVED_DIRS
            )
        except OSError as e:
            logger.error("Failed to list entry directories in %s: %s", research_path, e)
            return []
