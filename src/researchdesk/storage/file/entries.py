"""Entries stored as markdown files with YAML frontmatter.

There is no index: an entry is located by scanning the frontmatter of every
markdown file under its research directory.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

from researchdesk.domain.models import Entry, now
from researchdesk.requests import EntryFilters
from researchdesk.storage.base import StorageError
from researchdesk.storage.file import codec
from researchdesk.storage.file.repository import FileRepository, as_str_tuple

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("entry_id", "title", "entry_type", "category", "status")


def _parse_timestamp(value: Any) -> datetime:
    """Timezone-aware datetime; naive values and plain dates are taken as local time."""
    if value is None:
        return now()
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError as e:
            raise StorageError(f"Invalid timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def _contains(haystack: str, needle: str | None) -> bool:
    return needle is None or needle.lower() in haystack.lower()


class FileEntryRepository(FileRepository):
    def find_by_research(
        self, research_id: str, filters: EntryFilters | None = None
    ) -> list[Entry]:
        research_path = self.research_path(research_id)
        if not research_path.exists():
            return []

        files = self.scanner.scan_entries(research_path)
        entries = []
        for path in files:
            entry = self._load(path)
            if entry is not None and self._matches(entry, filters):
                entries.append(entry)

        logger.info(
            "Loaded %d entries for research %s (%d scanned)",
            len(entries),
            research_id,
            len(files),
        )
        return entries

    def find_by_id(self, research_id: str, entry_id: str) -> Entry | None:
        path = self._find_entry_file(self.research_path(research_id), entry_id)
        if path is None:
            return None
        return self._load(path)

    def save(self, research_id: str, entry: Entry) -> Path:
        research_path = self.research_path(research_id)
        if not research_path.exists():
            raise StorageError(f"Research directory not found: {research_path}")

        path = entry.file_path or self._new_entry_path(research_path, entry)
        try:
            self.write_markdown(
                path,
                {
                    "entry_id": entry.entry_id,
                    "title": entry.title,
                    "description": entry.description,
                    "entry_type": entry.entry_type,
                    "category": entry.category,
                    "status": entry.status,
                    "created_at": entry.created_at.isoformat(),
                    "updated_at": entry.updated_at.isoformat(),
                    "tags": list(entry.tags),
                },
                entry.content,
            )
        except OSError as e:
            logger.error("Failed to save entry %s in %s: %s", entry.entry_id, research_id, e)
            raise
        logger.info("Saved entry %s (%s) in research %s", entry.entry_id, entry.title, research_id)
        return path

    def delete(self, research_id: str, entry_id: str) -> bool:
        path = self._find_entry_file(self.research_path(research_id), entry_id)
        if path is None:
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.error("Failed to delete entry %s in %s: %s", entry_id, research_id, e)
            return False
        logger.info("Deleted entry %s in research %s (%s)", entry_id, research_id, path)
        return True

    def exists(self, research_id: str, entry_id: str) -> bool:
        return self._find_entry_file(self.research_path(research_id), entry_id) is not None

    # ── Internals ─────────────────────────────────────────────

    def _find_entry_file(self, research_path: Path, entry_id: str) -> Path | None:
        for path in self.scanner.scan_entries(research_path):
            try:
                metadata = codec.extract_frontmatter(path.read_text(encoding="utf-8"))
            except (StorageError, OSError, UnicodeDecodeError) as e:
                logger.error("Failed to check entry file %s: %s", path, e)
                continue
            if metadata.get("entry_id") == entry_id:
                return path
        return None

    def _new_entry_path(self, research_path: Path, entry: Entry) -> Path:
        """{category}/{entry_type}/{slug}.md, suffixed -2, -3... on collision."""
        directory = research_path / entry.category / entry.entry_type
        self.ensure_directory(directory)
        filename = self.generate_filename(entry.title)
        stem = filename.rsplit(".", 1)[0]
        path = directory / filename
        counter = 2
        while path.exists():
            path = directory / f"{stem}-{counter}.md"
            counter += 1
        return path

    def _load(self, path: Path) -> Entry | None:
        """Read one entry file. Unreadable or incomplete files are logged and skipped."""
        try:
            metadata, content = self.read_markdown(path)
            missing = [name for name in REQUIRED_FIELDS if metadata.get(name) is None]
            if missing:
                raise StorageError(f"Missing required frontmatter field: {missing[0]}")
            return Entry(
                entry_id=str(metadata["entry_id"]),
                title=str(metadata["title"]),
                description=str(metadata.get("description") or ""),
                entry_type=str(metadata["entry_type"]),
                category=str(metadata["category"]),
                status=str(metadata["status"]),
                created_at=_parse_timestamp(metadata.get("created_at")),
                updated_at=_parse_timestamp(metadata.get("updated_at")),
                tags=as_str_tuple(metadata.get("tags"), "tags"),
                content=content,
                file_path=path,
            )
        except (StorageError, OSError, UnicodeDecodeError) as e:
            logger.error("Failed to load entry from %s: %s", path, e)
            return None

    def _matches(self, entry: Entry, filters: EntryFilters | None) -> bool:
        if filters is None:
            return True
        if filters.category is not None and entry.category != filters.category:
            return False
        if filters.status is not None and entry.status != filters.status:
            return False
        if filters.entry_type is not None and entry.entry_type != filters.entry_type:
            return False
        if filters.tags and not set(filters.tags) & set(entry.tags):
            return False
        return (
            _contains(entry.title, filters.title_contains)
            and _contains(entry.description, filters.description_contains)
            and _contains(entry.content, filters.content_contains)
        )
