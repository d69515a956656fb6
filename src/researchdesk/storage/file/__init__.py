"""File store: YAML templates, research directories, markdown entries."""

from researchdesk.storage.file.driver import FileStorageDriver
from researchdesk.storage.file.entries import FileEntryRepository
from researchdesk.storage.file.researches import FileResearchRepository
from researchdesk.storage.file.scanner import DirectoryScanner
from researchdesk.storage.file.templates import FileTemplateRepository

__all__ = [
    "DirectoryScanner",
    "FileEntryRepository",
    "FileResearchRepository",
    "FileStorageDriver",
    "FileTemplateRepository",
]
