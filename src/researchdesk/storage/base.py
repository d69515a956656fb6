"""Repository and storage-driver protocols plus shared storage errors."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from researchdesk.domain.models import Entry, Research, Template
    from researchdesk.requests import (
        EntryCreateRequest,
        EntryFilters,
        EntryUpdateRequest,
        ResearchCreateRequest,
        ResearchFilters,
        ResearchUpdateRequest,
    )


class StorageError(RuntimeError):
    """Low-level storage failure (missing file, unreadable YAML, bad schema)."""


@runtime_checkable
class TemplateRepository(Protocol):
    """Read-only access to template definitions."""

    def find_all(self) -> list[Template]: ...

    def find_by_key(self, key: str) -> Template | None: ...

    def exists(self, key: str) -> bool: ...

    def refresh(self) -> None: ...


@runtime_checkable
class ResearchRepository(Protocol):
    def find_all(self, filters: ResearchFilters | None = None) -> list[Research]: ...

    def find_by_id(self, research_id: str) -> Research | None: ...

    def save(self, research: Research) -> None: ...

    def delete(self, research_id: str) -> bool: ...

    def exists(self, research_id: str) -> bool: ...


@runtime_checkable
class EntryRepository(Protocol):
    def find_by_research(
        self, research_id: str, filters: EntryFilters | None = None
    ) -> list[Entry]: ...

    def find_by_id(self, research_id: str, entry_id: str) -> Entry | None: ...

    def save(self, research_id: str, entry: Entry) -> Path:
        """Persist an entry and return the file it was written to."""
        ...

    def delete(self, research_id: str, entry_id: str) -> bool: ...

    def exists(self, research_id: str, entry_id: str) -> bool: ...


@runtime_checkable
class StorageDriver(Protocol):
    """Builds domain values from requests and persists them."""

    @property
    def name(self) -> str: ...

    def supports(self, driver_type: str) -> bool: ...

    def create_research(self, request: ResearchCreateRequest) -> Research: ...

    def update_research(self, research_id: str, request: ResearchUpdateRequest) -> Research: ...

    def delete_research(self, research_id: str) -> bool: ...

    def create_entry(self, research_id: str, request: EntryCreateRequest) -> Entry: ...

    def update_entry(
        self, research_id: str, entry_id: str, request: EntryUpdateRequest
    ) -> Entry: ...

    def delete_entry(self, research_id: str, entry_id: str) -> bool: ...
