"""Storage driver that turns requests into domain values on the file store."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from researchdesk.config import ResearchConfig
from researchdesk.domain import resolution
from researchdesk.domain.models import Entry, Research, Template, new_entry_id, now
from researchdesk.exceptions import (
    EntryNotFoundError,
    ResearchNotFoundError,
    TemplateNotFoundError,
    ValidationError,
)
from researchdesk.requests import (
    EntryCreateRequest,
    EntryUpdateRequest,
    ResearchCreateRequest,
    ResearchUpdateRequest,
)
from researchdesk.storage.base import EntryRepository, ResearchRepository, TemplateRepository
from researchdesk.storage.file.repository import slugify

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = ("markdown", "file")


class FileStorageDriver:
    """Builds researches and entries and persists them through the file repositories."""

    def __init__(
        self,
        config: ResearchConfig,
        templates: TemplateRepository,
        researches: ResearchRepository,
        entries: EntryRepository,
    ) -> None:
        self.config = config
        self.templates = templates
        self.researches = researches
        self.entries = entries

    @property
    def name(self) -> str:
        return "file_storage"

    def supports(self, driver_type: str) -> bool:
        return driver_type in SUPPORTED_TYPES

    # ── Researches ────────────────────────────────────────────

    def create_research(self, request: ResearchCreateRequest) -> Research:
        template = self.templates.find_by_key(request.template_id)
        if template is None:
            raise TemplateNotFoundError(f"Template '{request.template_id}' not found")

        research = Research(
            id=self._unique_research_id(request.title),
            name=request.title,
            description=request.description,
            template=request.template_id,
            status=self.config.default_entry_status,
            tags=tuple(request.tags),
            entry_dirs=tuple(request.entry_dirs or [c.name for c in template.categories]),
            memory=tuple(request.memory),
        )
        self.researches.save(research)
        logger.debug("Created research %s (%s)", research.id, research.name)
        return research

    def update_research(self, research_id: str, request: ResearchUpdateRequest) -> Research:
        research = self.researches.find_by_id(research_id)
        if research is None:
            raise ResearchNotFoundError(f"Research '{research_id}' not found")
        if not request.has_updates():
            return research

        updated = research.with_updates(
            name=request.title,
            description=request.description,
            status=request.status,
            tags=request.tags,
            entry_dirs=request.entry_dirs,
            memory=request.memory,
        )
        self.researches.save(updated)
        logger.debug("Updated research %s", research_id)
        return updated

    def delete_research(self, research_id: str) -> bool:
        if not self.researches.exists(research_id):
            return False
        deleted = self.researches.delete(research_id)
        if deleted:
            logger.debug("Deleted research %s", research_id)
        return deleted

    def _unique_research_id(self, title: str) -> str:
        """slug(title); on collision slug(title-<timestamp>), then a counter."""
        candidate = slugify(title)
        if not self.researches.exists(candidate):
            return candidate
        stamped = slugify(f"{title}-{datetime.now():%Y%m%d%H%M%S}")
        candidate, counter = stamped, 2
        while self.researches.exists(candidate):
            candidate = f"{stamped}-{counter}"
            counter += 1
        return candidate

    # ── Entries ───────────────────────────────────────────────

    def create_entry(self, research_id: str, request: EntryCreateRequest) -> Entry:
        """Validate against the research template, then write a new entry file.

        Display names in the request are accepted; they are resolved to keys.
        """
        research = self.researches.find_by_id(research_id)
        if research is None:
            raise ResearchNotFoundError(f"Research '{research_id}' not found")
        template = self.templates.find_by_key(research.template)
        if template is None:
            raise TemplateNotFoundError(f"Template '{research.template}' not found")

        resolved = self._resolve_create_request(template, request)
        errors = resolution.validate_entry(
            template, resolved.category, resolved.entry_type, resolved.status
        )
        if errors:
            raise ValidationError(errors)

        entry_type = template.get_entry_type(resolved.entry_type)
        status = resolved.status or (
            entry_type.default_status if entry_type else self.config.default_entry_status
        )
        timestamp = now()
        entry = Entry(
            entry_id=new_entry_id(),
            title=resolved.processed_title,
            description=resolved.processed_description,
            entry_type=resolved.entry_type,
            category=resolved.category,
            status=status,
            created_at=timestamp,
            updated_at=timestamp,
            tags=tuple(resolved.tags),
            content=resolved.content,
        )
        path = self.entries.save(research_id, entry)
        logger.debug("Created entry %s (%s) in %s", entry.entry_id, entry.title, research_id)
        return replace(entry, file_path=path)

    def update_entry(self, research_id: str, entry_id: str, request: EntryUpdateRequest) -> Entry:
        entry = self.entries.find_by_id(research_id, entry_id)
        if entry is None:
            raise EntryNotFoundError(
                f"Entry '{entry_id}' not found in research '{research_id}'"
            )
        if not request.has_updates():
            return entry

        updated = entry.with_updates(
            title=request.title,
            description=request.description,
            status=request.status,
            tags=request.tags,
            content=request.final_content(entry.content),
        )
        self.entries.save(research_id, updated)
        logger.debug("Updated entry %s in %s", entry_id, research_id)
        return updated

    def delete_entry(self, research_id: str, entry_id: str) -> bool:
        if not self.entries.exists(research_id, entry_id):
            return False
        deleted = self.entries.delete(research_id, entry_id)
        if deleted:
            logger.debug("Deleted entry %s in %s", entry_id, research_id)
        return deleted

    def _resolve_create_request(
        self, template: Template, request: EntryCreateRequest
    ) -> EntryCreateRequest:
        category = resolution.resolve_category_key(template, request.category)
        if category is None:
            raise ValidationError(
                [f"Category '{request.category}' not found in template '{template.key}'"]
            )
        entry_type = resolution.resolve_entry_type_key(template, request.entry_type)
        if entry_type is None:
            raise ValidationError(
                [f"Entry type '{request.entry_type}' not found in template '{template.key}'"]
            )
        status = None
        if request.status is not None:
            status = resolution.resolve_status_value(template, entry_type, request.status)
            if status is None:
                raise ValidationError(
                    [
                        f"Status '{request.status}' not found for entry type "
                        f"'{entry_type}' in template '{template.key}'"
                    ]
                )
        return request.with_resolved_keys(category, entry_type, status)
