"""Domain model and template resolution."""

from researchdesk.domain.models import (
    Category,
    Entry,
    EntryType,
    Research,
    Status,
    Template,
)

__all__ = ["Category", "Entry", "EntryType", "Research", "Status", "Template"]
