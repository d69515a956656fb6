"""Shared plumbing for the file-backed repositories."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from researchdesk.config import ResearchConfig
from researchdesk.storage.base import StorageError
from researchdesk.storage.file import codec
from researchdesk.storage.file.scanner import DirectoryScanner

logger = logging.getLogger(__name__)


def slugify(text: str, fallback: str = "untitled") -> str:
    """Lowercase slug: word characters and hyphens only, keeps CJK."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug or fallback


def as_str_tuple(value: Any, field: str) -> tuple[str, ...]:
    """Coerce a YAML list field to a tuple of strings. None means empty."""
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise StorageError(f"Field {field} must be a list, got {type(value).__name__}")
    return tuple(str(item) for item in value)


class FileRepository:
    """Base class: path layout, YAML files and markdown files."""

    def __init__(self, config: ResearchConfig, scanner: DirectoryScanner | None = None) -> None:
        self.config = config
        self.scanner = scanner or DirectoryScanner()

    # ── Paths ─────────────────────────────────────────────────

    @property
    def base_path(self) -> Path:
        return self.config.researches_dir

    @property
    def templates_path(self) -> Path:
        return self.config.templates_dir

    def research_path(self, research_id: str) -> Path:
        return self.base_path / research_id

    def ensure_directory(self, path: Path) -> None:
        if not path.exists():
            path.mkdir(parents=True, exist_ok=True)
            logger.debug("Created directory %s", path)

    def generate_filename(self, title: str, extension: str = "md") -> str:
        return f"{slugify(title, fallback='entry')}.{extension}"

    # ── YAML ──────────────────────────────────────────────────

    def read_yaml(self, path: Path) -> dict[str, Any]:
        if not path.is_file():
            raise StorageError(f"File not found: {path}")
        try:
            data = codec.load_yaml(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError as e:
            raise StorageError(f"YAML file '{path}' is not valid UTF-8: {e}") from e
        except yaml.YAMLError as e:
            raise StorageError(f"Failed to parse YAML file '{path}': {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StorageError(f"YAML file '{path}' must contain a mapping")
        return data

    def write_yaml(self, path: Path, data: dict[str, Any]) -> None:
        self.ensure_directory(path.parent)
        path.write_text(codec.dump_yaml(data), encoding="utf-8")
        logger.debug("Wrote YAML file %s", path)

    # ── Markdown ──────────────────────────────────────────────

    def read_markdown(self, path: Path) -> tuple[dict[str, Any], str]:
        if not path.is_file():
            raise StorageError(f"Markdown file not found: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StorageError(f"Markdown file '{path}' is not valid UTF-8: {e}") from e
        return codec.parse(text)

    def write_markdown(self, path: Path, metadata: dict[str, Any], body: str) -> None:
        self.ensure_directory(path.parent)
        path.write_text(codec.combine(metadata, body), encoding="utf-8")
        logger.debug("Wrote markdown file %s", path)
