"""Display-name / internal-key resolution against a template.

Clients usually only see display names, while storage uses internal keys.
Each resolver tries the internal key across the whole collection first and
falls back to the display name, so callers that already pass keys keep working.
"""

from __future__ import annotations

from researchdesk.domain.models import Template


def resolve_category_key(template: Template, text: str) -> str | None:
    for category in template.categories:
        if category.name == text:
            return category.name
    for category in template.categories:
        if category.display_name == text:
            return category.name
    return None


def resolve_entry_type_key(template: Template, text: str) -> str | None:
    for entry_type in template.entry_types:
        if entry_type.key == text:
            return entry_type.key
    for entry_type in template.entry_types:
        if entry_type.display_name == text:
            return entry_type.key
    return None


def resolve_status_value(template: Template, entry_type_key: str, text: str) -> str | None:
    entry_type = template.get_entry_type(entry_type_key)
    if entry_type is None:
        return None
    for status in entry_type.statuses:
        if status.value == text:
            return status.value
    for status in entry_type.statuses:
        if status.display_name == text:
            return status.value
    return None


def validate_entry_in_category(template: Template, category: str, entry_type: str) -> bool:
    return template.validate_entry_in_category(category, entry_type)


def validate_entry(
    template: Template,
    category: str,
    entry_type: str,
    status: str | None = None,
) -> list[str]:
    """Check already-resolved keys against the template. Returns error messages."""
    errors: list[str] = []
    if not template.has_category(category):
        errors.append(f"Category '{category}' not found in template '{template.key}'")
    if not template.has_entry_type(entry_type):
        errors.append(f"Entry type '{entry_type}' not found in template '{template.key}'")
    if errors:
        return errors

    if not template.validate_entry_in_category(category, entry_type):
        errors.append(f"Entry type '{entry_type}' is not allowed in category '{category}'")

    if status is not None:
        definition = template.get_entry_type(entry_type)
        if definition is not None and not definition.has_status(status):
            errors.append(f"Status '{status}' is not valid for entry type '{entry_type}'")
    return errors
