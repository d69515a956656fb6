"""ResearchDesk: wires repositories, the storage driver and the services.

One instance per configured root. Everything is built eagerly; nothing is
cached between calls beyond the objects themselves.
"""

from __future__ import annotations

import logging

from researchdesk.config import ResearchConfig
from researchdesk.services import EntryService, ResearchService, TemplateService
from researchdesk.storage.base import StorageDriver
from researchdesk.storage.file import (
    DirectoryScanner,
    FileEntryRepository,
    FileResearchRepository,
    FileStorageDriver,
    FileTemplateRepository,
)

logger = logging.getLogger(__name__)


class ResearchDesk:
    """Entry point for callers: exposes ``templates``, ``researches`` and ``entries``."""

    def __init__(self, config: ResearchConfig) -> None:
        self.config = config

        scanner = DirectoryScanner()
        self.template_repository = FileTemplateRepository(config, scanner)
        self.research_repository = FileResearchRepository(config, scanner)
        self.entry_repository = FileEntryRepository(config, scanner)
        self.driver = self._build_driver(config.storage_driver)

        self.templates = TemplateService(self.template_repository)
        self.researches = ResearchService(self.research_repository, self.templates, self.driver)
        self.entries = EntryService(
            self.entry_repository, self.research_repository, self.templates, self.driver
        )
        logger.info(
            "ResearchDesk ready (root=%s, driver=%s)", config.root, self.driver.name
        )

    def _build_driver(self, driver_type: str) -> StorageDriver:
        candidates: list[StorageDriver] = [
            FileStorageDriver(
                self.config,
                self.template_repository,
                self.research_repository,
                self.entry_repository,
            ),
        ]
        for driver in candidates:
            if driver.supports(driver_type):
                return driver
        raise ValueError(
            f"Storage driver '{driver_type}' not supported. "
            f"Available: {[d.name for d in candidates]}"
        )
