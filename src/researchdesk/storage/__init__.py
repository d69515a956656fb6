"""Persistence protocols and the file-backed implementation."""

from researchdesk.storage.base import (
    EntryRepository,
    ResearchRepository,
    StorageDriver,
    StorageError,
    TemplateRepository,
)

__all__ = [
    "EntryRepository",
    "ResearchRepository",
    "StorageDriver",
    "StorageError",
    "TemplateRepository",
]
