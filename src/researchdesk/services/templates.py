"""Template lookup and display-name resolution, with logging."""

from __future__ import annotations

import logging

from researchdesk.domain import resolution
from researchdesk.domain.models import Template
from researchdesk.storage.base import TemplateRepository

logger = logging.getLogger(__name__)


class TemplateService:
    def __init__(self, templates: TemplateRepository) -> None:
        self.templates = templates

    def find_all(self) -> list[Template]:
        return self.templates.find_all()

    def get_template(self, key: str) -> Template | None:
        return self.templates.find_by_key(key)

    def template_exists(self, key: str) -> bool:
        return self.templates.exists(key)

    def refresh_templates(self) -> None:
        self.templates.refresh()

    def resolve_category_key(self, template: Template, text: str) -> str | None:
        key = resolution.resolve_category_key(template, text)
        if key is None:
            logger.warning(
                "Could not resolve category %r in template %s (available: %s)",
                text,
                template.key,
                ", ".join(f"{c.name}/{c.display_name}" for c in template.categories),
            )
        else:
            logger.debug("Resolved category %r -> %s", text, key)
        return key

    def resolve_entry_type_key(self, template: Template, text: str) -> str | None:
        key = resolution.resolve_entry_type_key(template, text)
        if key is None:
            logger.warning(
                "Could not resolve entry type %r in template %s (available: %s)",
                text,
                template.key,
                ", ".join(f"{t.key}/{t.display_name}" for t in template.entry_types),
            )
        else:
            logger.debug("Resolved entry type %r -> %s", text, key)
        return key

    def resolve_status_value(
        self, template: Template, entry_type_key: str, text: str
    ) -> str | None:
        if not template.has_entry_type(entry_type_key):
            logger.error(
                "Entry type %s not found in template %s for status resolution",
                entry_type_key,
                template.key,
            )
            return None
        value = resolution.resolve_status_value(template, entry_type_key, text)
        if value is None:
            logger.warning(
                "Could not resolve status %r for entry type %s (available: %s)",
                text,
                entry_type_key,
                ", ".join(self.get_available_statuses(template, entry_type_key)),
            )
        else:
            logger.debug("Resolved status %r -> %s", text, value)
        return value

    def get_available_statuses(self, template: Template, entry_type_key: str) -> list[str]:
        entry_type = template.get_entry_type(entry_type_key)
        if entry_type is None:
            return []
        return [status.value for status in entry_type.statuses]
