"""Research lifecycle: create, update, delete, list, memory notes."""

from __future__ import annotations

import logging

from researchdesk.domain.models import Research
from researchdesk.exceptions import ResearchError, ResearchNotFoundError, TemplateNotFoundError
from researchdesk.requests import ResearchCreateRequest, ResearchFilters, ResearchUpdateRequest
from researchdesk.services.templates import TemplateService
from researchdesk.storage.base import ResearchRepository, StorageDriver

logger = logging.getLogger(__name__)


class ResearchService:
    def __init__(
        self,
        researches: ResearchRepository,
        templates: TemplateService,
        driver: StorageDriver,
    ) -> None:
        self.researches = researches
        self.templates = templates
        self.driver = driver

    def create(self, request: ResearchCreateRequest) -> Research:
        logger.info("Creating research %r from template %s", request.title, request.template_id)
        if not self.templates.template_exists(request.template_id):
            logger.error("Template %s not found", request.template_id)
            raise TemplateNotFoundError(f"Template '{request.template_id}' not found")

        try:
            research = self.driver.create_research(request)
        except ResearchError:
            raise
        except Exception as e:
            logger.error("Failed to create research %r: %s", request.title, e)
            raise ResearchError(f"Failed to create research: {e}") from e

        logger.info("Research created: %s (template %s)", research.id, research.template)
        return research

    def update(self, research_id: str, request: ResearchUpdateRequest) -> Research:
        logger.info("Updating research %s", research_id)
        if not self.researches.exists(research_id):
            logger.error("Research %s not found", research_id)
            raise ResearchNotFoundError(f"Research '{research_id}' not found")

        try:
            research = self.driver.update_research(research_id, request)
        except ResearchError:
            raise
        except Exception as e:
            logger.error("Failed to update research %s: %s", research_id, e)
            raise ResearchError(f"Failed to update research: {e}") from e

        logger.info("Research updated: %s (status %s)", research_id, research.status)
        return research

    def delete(self, research_id: str) -> bool:
        """Delete a research and every entry in it. False if it did not exist."""
        logger.info("Deleting research %s", research_id)
        if not self.researches.exists(research_id):
            logger.warning("Attempted to delete non-existent research %s", research_id)
            return False

        try:
            deleted = self.driver.delete_research(research_id)
        except Exception as e:
            logger.error("Failed to delete research %s: %s", research_id, e)
            raise ResearchError(f"Failed to delete research: {e}") from e

        if deleted:
            logger.info("Research deleted: %s", research_id)
        else:
            logger.warning("Storage driver failed to delete research %s", research_id)
        return deleted

    def get(self, research_id: str) -> Research | None:
        research = self.researches.find_by_id(research_id)
        if research is None:
            logger.warning("Research %s not found", research_id)
        return research

    def exists(self, research_id: str) -> bool:
        return self.researches.exists(research_id)

    def find_all(self, filters: ResearchFilters | None = None) -> list[Research]:
        try:
            researches = self.researches.find_all(filters)
        except Exception as e:
            logger.error("Failed to list researches: %s", e)
            raise ResearchError(f"Failed to list researches: {e}") from e
        logger.info("Listed %d researches", len(researches))
        return researches

    def add_memory(self, research_id: str, note: str) -> Research:
        research = self.researches.find_by_id(research_id)
        if research is None:
            logger.error("Research %s not found", research_id)
            raise ResearchNotFoundError(f"Research '{research_id}' not found")

        updated = research.with_added_memory(note)
        try:
            self.researches.save(updated)
        except Exception as e:
            logger.error("Failed to add memory to research %s: %s", research_id, e)
            raise ResearchError(f"Failed to add memory to research: {e}") from e

        logger.info("Memory added to research %s (%d notes)", research_id, len(updated.memory))
        return updated
