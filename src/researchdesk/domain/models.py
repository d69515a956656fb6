"""Domain values: templates and their parts, researches, entries.

Every value is a frozen dataclass. "Updating" one returns a copy.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any


def now() -> datetime:
    """Local, timezone-aware timestamp with second precision."""
    return datetime.now().astimezone().replace(microsecond=0)


def new_entry_id() -> str:
    return f"entry_{uuid.uuid4().hex}"


# ── Template schema ───────────────────────────────────────────


@dataclass(frozen=True)
class Status:
    value: str
    display_name: str


@dataclass(frozen=True)
class EntryType:
    """Content classification with its own status vocabulary."""

    key: str
    display_name: str
    content_type: str = "markdown"
    default_status: str = "draft"
    statuses: tuple[Status, ...] = ()

    def get_status(self, value: str) -> Status | None:
        for status in self.statuses:
            if status.value == value:
                return status
        return None

    def has_status(self, value: str) -> bool:
        return self.get_status(value) is not None


@dataclass(frozen=True)
class Category:
    """Grouping inside a template that restricts which entry types it holds."""

    name: str
    display_name: str
    entry_types: tuple[str, ...] = ()

    def allows_entry_type(self, entry_type: str) -> bool:
        return entry_type in self.entry_types


@dataclass(frozen=True)
class Template:
    """Reusable schema: allowed categories, entry types and statuses."""

    key: str
    name: str
    description: str
    tags: tuple[str, ...] = ()
    categories: tuple[Category, ...] = ()
    entry_types: tuple[EntryType, ...] = ()
    prompt: str | None = None

    def get_category(self, name: str) -> Category | None:
        for category in self.categories:
            if category.name == name:
                return category
        return None

    def get_entry_type(self, key: str) -> EntryType | None:
        for entry_type in self.entry_types:
            if entry_type.key == key:
                return entry_type
        return None

    def has_category(self, name: str) -> bool:
        return self.get_category(name) is not None

    def has_entry_type(self, key: str) -> bool:
        return self.get_entry_type(key) is not None

    def validate_entry_in_category(self, category_name: str, entry_type_key: str) -> bool:
        category = self.get_category(category_name)
        if category is None:
            return False
        return category.allows_entry_type(entry_type_key)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "template_id": self.key,
            "name": self.name,
            "description": self.description,
            "tags": list(self.tags),
            "categories": [
                {
                    "name": c.name,
                    "display_name": c.display_name,
                    "allowed_entry_types": list(c.entry_types),
                }
                for c in self.categories
            ],
            "entry_types": [
                {
                    "key": t.key,
                    "display_name": t.display_name,
                    "default_status": t.default_status,
                    "statuses": [s.value for s in t.statuses],
                }
                for t in self.entry_types
            ],
        }
        if self.prompt is not None:
            data["prompt"] = self.prompt
        return data


# ── Research & entries ────────────────────────────────────────


@dataclass(frozen=True)
class Research:
    """A research project bound to one template, stored as a directory."""

    id: str
    name: str
    description: str
    template: str
    status: str
    tags: tuple[str, ...] = ()
    entry_dirs: tuple[str, ...] = ()
    memory: tuple[str, ...] = ()
    path: Path | None = None

    def with_updates(
        self,
        *,
        name: str | None = None,
        description: str | None = None,
        status: str | None = None,
        tags: list[str] | None = None,
        entry_dirs: list[str] | None = None,
        memory: list[str] | None = None,
    ) -> Research:
        """Copy with every non-None argument applied."""
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if description is not None:
            changes["description"] = description
        if status is not None:
            changes["status"] = status
        if tags is not None:
            changes["tags"] = tuple(tags)
        if entry_dirs is not None:
            changes["entry_dirs"] = tuple(entry_dirs)
        if memory is not None:
            changes["memory"] = tuple(memory)
        return replace(self, **changes)

    def with_added_memory(self, note: str) -> Research:
        return replace(self, memory=(*self.memory, note))

    def to_dict(self) -> dict[str, Any]:
        return {
            "research_id": self.id,
            "title": self.name,
            "status": self.status,
            "research_type": self.template,
            "metadata": {
                "description": self.description,
                "tags": list(self.tags),
                "memory": list(self.memory),
            },
        }


@dataclass(frozen=True)
class Entry:
    """A single markdown document inside a research."""

    entry_id: str
    title: str
    description: str
    entry_type: str
    category: str
    status: str
    created_at: datetime = field(default_factory=now)
    updated_at: datetime = field(default_factory=now)
    tags: tuple[str, ...] = ()
    content: str = ""
    file_path: Path | None = None

    def with_updates(
        self,
        *,
        title: str | None = None,
        description: str | None = None,
        status: str | None = None,
        tags: list[str] | None = None,
        content: str | None = None,
    ) -> Entry:
        """Copy with every non-None argument applied and updated_at refreshed."""
        changes: dict[str, Any] = {"updated_at": now()}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        if status is not None:
            changes["status"] = status
        if tags is not None:
            changes["tags"] = tuple(tags)
        if content is not None:
            changes["content"] = content
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "title": self.title,
            "description": self.description,
            "entry_type": self.entry_type,
            "category": self.category,
            "status": self.status,
            "tags": list(self.tags),
            "content": self.content,
        }
