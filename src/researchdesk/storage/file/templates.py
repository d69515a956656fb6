"""Template definitions loaded from YAML files.

Nothing is cached: every query re-reads the templates directory, so edits made
by hand between calls are always visible.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from researchdesk.domain.models import Category, EntryType, Status, Template
from researchdesk.storage.base import StorageError
from researchdesk.storage.file.repository import FileRepository, as_str_tuple

logger = logging.getLogger(__name__)

TEMPLATE_PATTERNS = ("*.yaml", "*.yml")


def _require(data: Any, fields: tuple[str, ...], kind: str) -> None:
    if not isinstance(data, dict):
        raise StorageError(f"Invalid {kind} definition: expected a mapping")
    for name in fields:
        if data.get(name) is None:
            raise StorageError(f"Missing required {kind} field: {name}")


def _list(value: Any, field: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise StorageError(f"Template field {field} must be a list")
    return value


def template_from_data(data: dict[str, Any]) -> Template:
    """Build a Template from parsed YAML. Raises StorageError on schema problems."""
    _require(data, ("key", "name", "description"), "template")

    categories = []
    for category_data in _list(data.get("categories"), "categories"):
        _require(category_data, ("name", "display_name", "entry_types"), "category")
        categories.append(
            Category(
                name=str(category_data["name"]),
                display_name=str(category_data["display_name"]),
                entry_types=as_str_tuple(category_data["entry_types"], "entry_types"),
            )
        )

    entry_types = []
    raw_types = data.get("entry_types") or {}
    if not isinstance(raw_types, dict):
        raise StorageError("Template field entry_types must be a mapping")
    for key, type_data in raw_types.items():
        _require(type_data, ("display_name",), "entry type")
        statuses = []
        for status_data in _list(type_data.get("statuses"), "statuses"):
            _require(status_data, ("value", "display_name"), "status")
            statuses.append(
                Status(value=str(status_data["value"]), display_name=str(status_data["display_name"]))
            )
        entry_types.append(
            EntryType(
                key=str(key),
                display_name=str(type_data["display_name"]),
                content_type=str(type_data.get("content_type", "markdown")),
                default_status=str(type_data.get("default_status", "draft")),
                statuses=tuple(statuses),
            )
        )

    return Template(
        key=str(data["key"]),
        name=str(data["name"]),
        description=str(data["description"]),
        tags=as_str_tuple(data.get("tags"), "tags"),
        categories=tuple(categories),
        entry_types=tuple(entry_types),
        prompt=data.get("prompt"),
    )


class FileTemplateRepository(FileRepository):
    def find_all(self) -> list[Template]:
        templates_dir = self.templates_path
        if not templates_dir.is_dir():
            logger.warning("Templates directory not found: %s", templates_dir)
            return []

        templates = []
        for path in self._template_files(templates_dir):
            template = self._load(path)
            if template is not None:
                templates.append(template)

        logger.debug("Loaded %d templates from %s", len(templates), templates_dir)
        return templates

    def find_by_key(self, key: str) -> Template | None:
        for template in self.find_all():
            if template.key == key:
                return template
        return None

    def exists(self, key: str) -> bool:
        return self.find_by_key(key) is not None

    def refresh(self) -> None:
        logger.info("Template refresh requested (templates are always read from disk)")

    def _template_files(self, templates_dir: Path) -> list[Path]:
        files: set[Path] = set()
        for pattern in TEMPLATE_PATTERNS:
            files.update(p for p in templates_dir.glob(pattern) if p.is_file())
        return sorted(files)

    def _load(self, path: Path) -> Template | None:
        try:
            return template_from_data(self.read_yaml(path))
        except (StorageError, OSError, UnicodeDecodeError) as e:
            logger.error("Failed to load template from %s: %s", path, e)
            return None
