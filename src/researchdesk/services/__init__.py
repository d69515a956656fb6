"""Services: validation, resolution and logging around the storage layer."""

from researchdesk.services.entries import EntryService
from researchdesk.services.researches import ResearchService
from researchdesk.services.templates import TemplateService

__all__ = ["EntryService", "ResearchService", "TemplateService"]
