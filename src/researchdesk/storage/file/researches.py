"""Researches stored as directories holding a research.yaml config."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from researchdesk.domain.models import Research
from researchdesk.requests import ResearchFilters
from researchdesk.storage.base import StorageError
from researchdesk.storage.file.repository import FileRepository, as_str_tuple
from researchdesk.storage.file.scanner import RESEARCH_CONFIG_FILE

logger = logging.getLogger(__name__)


class FileResearchRepository(FileRepository):
    def find_all(self, filters: ResearchFilters | None = None) -> list[Research]:
        paths = self.scanner.scan_researches(self.base_path)
        researches = []
        for path in paths:
            try:
                research = self._load(path)
            except (StorageError, OSError, UnicodeDecodeError) as e:
                logger.error("Failed to load research from %s: %s", path, e)
                continue
            if self._matches(research, filters):
                researches.append(research)

        logger.info("Loaded %d researches (%d scanned)", len(researches), len(paths))
        return researches

    def find_by_id(self, research_id: str) -> Research | None:
        path = self.research_path(research_id)
        if not path.exists():
            return None
        try:
            return self._load(path)
        except (StorageError, OSError, UnicodeDecodeError) as e:
            logger.error("Failed to load research %s from %s: %s", research_id, path, e)
            return None

    def save(self, research: Research) -> None:
        path = self.research_path(research.id)
        try:
            self.ensure_directory(path)
            for entry_dir in research.entry_dirs:
                self.ensure_directory(path / entry_dir)
            self.write_yaml(
                path / RESEARCH_CONFIG_FILE,
                {
                    "name": research.name,
                    "description": research.description,
                    "template": research.template,
                    "status": research.status,
                    "tags": list(research.tags),
                    "memory": list(research.memory),
                    "entries": {"dirs": list(research.entry_dirs)},
                },
            )
        except OSError as e:
            logger.error("Failed to save research %s: %s", research.id, e)
            raise
        logger.info("Saved research %s (%s) at %s", research.id, research.name, path)

    def delete(self, research_id: str) -> bool:
        """Remove the whole research directory tree.

        A failure part-way through leaves whatever was not yet removed on disk
        and reports False.
        """
        path = self.research_path(research_id)
        if not path.exists():
            return False
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.error("Failed to delete research %s at %s: %s", research_id, path, e)
            return False
        logger.info("Deleted research %s at %s", research_id, path)
        return True

    def exists(self, research_id: str) -> bool:
        return (self.research_path(research_id) / RESEARCH_CONFIG_FILE).is_file()

    def _load(self, path: Path) -> Research:
        config_path = path / RESEARCH_CONFIG_FILE
        if not config_path.is_file():
            raise StorageError(f"Research configuration not found: {config_path}")
        data = self.read_yaml(config_path)
        research_id = path.name
        entries = data.get("entries") or {}
        if not isinstance(entries, dict):
            raise StorageError(f"Field entries must be a mapping in {config_path}")
        return Research(
            id=research_id,
            name=str(data.get("name") or research_id),
            description=str(data.get("description") or ""),
            template=str(data.get("template") or ""),
            status=str(data.get("status") or "draft"),
            tags=as_str_tuple(data.get("tags"), "tags"),
            entry_dirs=as_str_tuple(entries.get("dirs"), "entries.dirs"),
            memory=as_str_tuple(data.get("memory"), "memory"),
            path=path,
        )

    def _matches(self, research: Research, filters: ResearchFilters | None) -> bool:
        if filters is None:
            return True
        if filters.status is not None and research.status != filters.status:
            return False
        if filters.template is not None and research.template != filters.template:
            return False
        if filters.tags and not set(filters.tags) & set(research.tags):
            return False
        if (
            filters.name_contains is not None
            and filters.name_contains.lower() not in research.name.lower()
        ):
            return False
        return True
