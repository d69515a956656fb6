"""Entry lifecycle with template validation.

Display names coming from clients are resolved to internal keys here, before
anything is written. Resolution failures raise ValidationError.
"""

from __future__ import annotations

import logging

from researchdesk.domain.models import Entry
from researchdesk.exceptions import (
    EntryNotFoundError,
    ResearchError,
    ResearchNotFoundError,
    TemplateNotFoundError,
    ValidationError,
)
from researchdesk.requests import EntryCreateRequest, EntryFilters, EntryUpdateRequest
from researchdesk.services.templates import TemplateService
from researchdesk.storage.base import EntryRepository, ResearchRepository, StorageDriver

logger = logging.getLogger(__name__)


class EntryService:
    def __init__(
        self,
        entries: EntryRepository,
        researches: ResearchRepository,
        templates: TemplateService,
        driver: StorageDriver,
    ) -> None:
        self.entries = entries
        self.researches = researches
        self.templates = templates
        self.driver = driver

    def create_entry(self, research_id: str, request: EntryCreateRequest) -> Entry:
        logger.info(
            "Creating entry in %s (category=%r, entry_type=%r)",
            research_id,
            request.category,
            request.entry_type,
        )
        research = self.researches.find_by_id(research_id)
        if research is None:
            logger.error("Research %s not found", research_id)
            raise ResearchNotFoundError(f"Research '{research_id}' not found")

        template = self.templates.get_template(research.template)
        if template is None:
            logger.error("Template %s of research %s not found", research.template, research_id)
            raise TemplateNotFoundError(f"Template '{research.template}' not found")

        category = self.templates.resolve_category_key(template, request.category)
        if category is None:
            raise ValidationError(
                [f"Category '{request.category}' not found in template '{research.template}'"]
            )
        entry_type = self.templates.resolve_entry_type_key(template, request.entry_type)
        if entry_type is None:
            raise ValidationError(
                [f"Entry type '{request.entry_type}' not found in template '{research.template}'"]
            )
        if not template.validate_entry_in_category(category, entry_type):
            raise ValidationError(
                [
                    f"Entry type '{request.entry_type}' is not allowed in "
                    f"category '{request.category}'"
                ]
            )

        if request.status is not None:
            status = self.templates.resolve_status_value(template, entry_type, request.status)
            if status is None:
                raise ValidationError(
                    [
                        f"Status '{request.status}' not found for entry type "
                        f"'{request.entry_type}'"
                    ]
                )
        else:
            status = template.get_entry_type(entry_type).default_status

        try:
            entry = self.driver.create_entry(
                research_id, request.with_resolved_keys(category, entry_type, status)
            )
        except ResearchError:
            raise
        except Exception as e:
            logger.error("Failed to create entry in %s: %s", research_id, e)
            raise ResearchError(f"Failed to create entry: {e}") from e

        logger.info(
            "Entry created: %s (%s) in %s/%s",
            entry.entry_id,
            entry.title,
            entry.category,
            entry.entry_type,
        )
        return entry

    def update_entry(
        self, research_id: str, entry_id: str, request: EntryUpdateRequest
    ) -> Entry:
        logger.info("Updating entry %s in %s", entry_id, research_id)
        research = self.researches.find_by_id(research_id)
        if research is None:
            logger.error("Research %s not found", research_id)
            raise ResearchNotFoundError(f"Research '{research_id}' not found")

        existing = self.entries.find_by_id(research_id, entry_id)
        if existing is None:
            logger.error("Entry %s not found in %s", entry_id, research_id)
            raise EntryNotFoundError(f"Entry '{entry_id}' not found in research '{research_id}'")

        if request.status is not None:
            template = self.templates.get_template(research.template)
            if template is None:
                raise TemplateNotFoundError(f"Template '{research.template}' not found")
            status = self.templates.resolve_status_value(
                template, existing.entry_type, request.status
            )
            if status is None:
                raise ValidationError(
                    [
                        f"Status '{request.status}' not found for entry type "
                        f"'{existing.entry_type}'"
                    ]
                )
            request = request.with_resolved_status(status)

        try:
            entry = self.driver.update_entry(research_id, entry_id, request)
        except ResearchError:
            raise
        except Exception as e:
            logger.error("Failed to update entry %s in %s: %s", entry_id, research_id, e)
            raise ResearchError(f"Failed to update entry: {e}") from e

        logger.info("Entry updated: %s (%s)", entry_id, entry.title)
        return entry

    def get_entry(self, research_id: str, entry_id: str) -> Entry | None:
        if not self.researches.exists(research_id):
            raise ResearchNotFoundError(f"Research '{research_id}' not found")
        try:
            return self.entries.find_by_id(research_id, entry_id)
        except Exception as e:
            logger.error("Failed to read entry %s in %s: %s", entry_id, research_id, e)
            raise ResearchError(f"Failed to retrieve entry: {e}") from e

    def entry_exists(self, research_id: str, entry_id: str) -> bool:
        return self.entries.exists(research_id, entry_id)

    def find_all(self, research_id: str, filters: EntryFilters | None = None) -> list[Entry]:
        """Entries of a research matching every given filter. [] for unknown researches."""
        if not self.researches.exists(research_id):
            logger.warning("Listing entries of non-existent research %s", research_id)
            return []
        try:
            entries = self.entries.find_by_research(research_id, filters)
        except Exception as e:
            logger.error("Failed to list entries of %s: %s", research_id, e)
            raise ResearchError(f"Failed to retrieve entries: {e}") from e
        logger.info("Listed %d entries of %s", len(entries), research_id)
        return entries

    def delete_entry(self, research_id: str, entry_id: str) -> bool:
        logger.info("Deleting entry %s in %s", entry_id, research_id)
        if not self.entries.exists(research_id, entry_id):
            logger.warning("Attempted to delete non-existent entry %s in %s", entry_id, research_id)
            return False
        try:
            deleted = self.driver.delete_entry(research_id, entry_id)
        except Exception as e:
            logger.error("Failed to delete entry %s in %s: %s", entry_id, research_id, e)
            raise ResearchError(f"Failed to delete entry: {e}") from e
        if not deleted:
            logger.warning("Storage driver failed to delete entry %s in %s", entry_id, research_id)
        return deleted
