"""Request and filter objects passed into the services.

Each request exposes ``validate()`` returning a list of human-readable errors
(empty when valid). Nothing here touches storage.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any

TITLE_MAX = 100
DESCRIPTION_MAX = 200

_HEADING = re.compile(r"^#+\s*")
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def _truncate_description(text: str) -> str:
    if len(text) > DESCRIPTION_MAX:
        return text[: DESCRIPTION_MAX - 3] + "..."
    return text


def _tag_errors(tags: list[str] | None) -> list[str]:
    for tag in tags or []:
        if not isinstance(tag, str) or not tag.strip():
            return ["All tags must be non-empty strings"]
    return []


def _filter_tag_errors(tags: list[str] | None) -> list[str]:
    if tags is None:
        return []
    if not tags:
        return ["Tags array cannot be empty when provided"]
    return _tag_errors(tags)


# ── Researches ────────────────────────────────────────────────


@dataclass(frozen=True)
class ResearchCreateRequest:
    template_id: str
    title: str
    description: str = ""
    tags: list[str] = field(default_factory=list)
    entry_dirs: list[str] = field(default_factory=list)
    memory: list[str] = field(default_factory=list)

    def validate(self) -> list[str]:
        errors = []
        if not self.template_id.strip():
            errors.append("Template ID cannot be empty")
        if not self.title.strip():
            errors.append("Research title cannot be empty")
        errors.extend(_tag_errors(self.tags))
        return errors


@dataclass(frozen=True)
class ResearchUpdateRequest:
    research_id: str
    title: str | None = None
    description: str | None = None
    status: str | None = None
    tags: list[str] | None = None
    entry_dirs: list[str] | None = None
    memory: list[str] | None = None

    def has_updates(self) -> bool:
        return any(
            value is not None
            for value in (
                self.title,
                self.description,
                self.status,
                self.tags,
                self.entry_dirs,
                self.memory,
            )
        )

    def validate(self) -> list[str]:
        errors = []
        if not self.research_id:
            errors.append("Research ID cannot be empty")
        if not self.has_updates():
            errors.append("At least one field must be provided for update")
        errors.extend(_tag_errors(self.tags))
        return errors


@dataclass(frozen=True)
class ResearchFilters:
    status: str | None = None
    template: str | None = None
    tags: list[str] | None = None
    name_contains: str | None = None

    def has_filters(self) -> bool:
        return bool(self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.status is not None:
            data["status"] = self.status
        if self.template is not None:
            data["template"] = self.template
        if self.tags:
            data["tags"] = list(self.tags)
        if self.name_contains is not None:
            data["name_contains"] = self.name_contains
        return data

    def validate(self) -> list[str]:
        errors = _filter_tag_errors(self.tags)
        if self.name_contains is not None and not self.name_contains.strip():
            errors.append("Name filter cannot be empty when provided")
        return errors


# ── Entries ───────────────────────────────────────────────────


@dataclass(frozen=True)
class TextReplace:
    """Find/replace applied to entry content. ``replace`` may be empty."""

    find: str
    replace: str = ""

    def validate(self) -> list[str]:
        if not self.find:
            return ["Find text cannot be empty for text replacement"]
        return []


@dataclass(frozen=True)
class EntryCreateRequest:
    research_id: str
    category: str
    entry_type: str
    content: str
    title: str | None = None
    description: str | None = None
    status: str | None = None
    tags: list[str] = field(default_factory=list)

    @property
    def processed_title(self) -> str:
        """Explicit title, else the first content line without heading markers."""
        if self.title is not None and self.title.strip():
            return self.title.strip()

        first_line = self.content.strip().split("\n")[0].strip()
        if not first_line:
            return "Untitled Entry"
        title = _HEADING.sub("", first_line)
        if len(title) > TITLE_MAX:
            title = title[:TITLE_MAX] + "..."
        return title.strip() or "Untitled Entry"

    @property
    def processed_description(self) -> str:
        """Explicit description, else a summary of up to 3 lines after the title."""
        if self.description is not None and self.description.strip():
            return _truncate_description(self.description.strip())

        lines = _TAG.sub("", self.content).strip().split("\n")
        body = [line for line in lines[1:] if line.strip()]
        if not body:
            return "Entry content"
        summary = _WHITESPACE.sub(" ", " ".join(body[:3]))
        return _truncate_description(summary)

    def with_resolved_keys(
        self, category: str, entry_type: str, status: str | None = None
    ) -> EntryCreateRequest:
        return replace(
            self,
            category=category,
            entry_type=entry_type,
            status=status if status is not None else self.status,
        )

    def validate(self) -> list[str]:
        errors = []
        if not self.research_id:
            errors.append("Research ID cannot be empty")
        if not self.category:
            errors.append("Category cannot be empty")
        if not self.entry_type:
            errors.append("Entry type cannot be empty")
        if not self.content.strip():
            errors.append("Content cannot be empty")
        errors.extend(_tag_errors(self.tags))
        if self.description is not None and len(self.description.strip()) > DESCRIPTION_MAX:
            errors.append(f"Description must not exceed {DESCRIPTION_MAX} characters")
        return errors


@dataclass(frozen=True)
class EntryUpdateRequest:
    research_id: str
    entry_id: str
    title: str | None = None
    description: str | None = None
    content: str | None = None
    status: str | None = None
    content_type: str | None = None
    tags: list[str] | None = None
    text_replace: TextReplace | None = None

    def has_updates(self) -> bool:
        return any(
            value is not None
            for value in (
                self.title,
                self.description,
                self.content,
                self.status,
                self.content_type,
                self.tags,
                self.text_replace,
            )
        )

    def final_content(self, existing: str | None = None) -> str | None:
        """Content to persist, or None to keep the stored content.

        New content (when given) is the base, else the existing content.
        The find/replace is applied on top of that base.
        """
        base = self.content if self.content is not None else existing
        if self.text_replace is not None and base is not None:
            return base.replace(self.text_replace.find, self.text_replace.replace)
        return self.content

    def with_resolved_status(self, status: str | None) -> EntryUpdateRequest:
        return replace(self, status=status)

    def validate(self) -> list[str]:
        errors = []
        if not self.research_id:
            errors.append("Research ID cannot be empty")
        if not self.entry_id:
            errors.append("Entry ID cannot be empty")
        if not self.has_updates():
            errors.append("At least one field must be provided for update")
        errors.extend(_tag_errors(self.tags))
        if self.description is not None and len(self.description.strip()) > DESCRIPTION_MAX:
            errors.append(f"Description must not exceed {DESCRIPTION_MAX} characters")
        if self.text_replace is not None:
            errors.extend(self.text_replace.validate())
        return errors


@dataclass(frozen=True)
class EntryFilters:
    category: str | None = None
    entry_type: str | None = None
    status: str | None = None
    tags: list[str] | None = None
    title_contains: str | None = None
    description_contains: str | None = None
    content_contains: str | None = None

    def has_filters(self) -> bool:
        return bool(self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for name in ("category", "entry_type", "status"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.tags:
            data["tags"] = list(self.tags)
        for name in ("title_contains", "description_contains", "content_contains"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data

    def validate(self) -> list[str]:
        errors = _filter_tag_errors(self.tags)
        for name in ("title_contains", "description_contains", "content_contains"):
            value = getattr(self, name)
            if value is not None and not value.strip():
                errors.append(f"{name} filter cannot be empty when provided")
        return errors
