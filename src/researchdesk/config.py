"""Configuration loading from environment variables and researchdesk.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_CONFIG_FILENAME = "researchdesk.toml"


@dataclass
class ResearchConfig:
    """Top-level researchdesk configuration.

    ``templates_path`` and ``researches_path`` are relative to ``root`` unless
    absolute.
    """

    root: Path = field(default_factory=Path.cwd)
    templates_path: str = ".templates"
    researches_path: str = ".researches"
    storage_driver: str = "markdown"
    default_entry_status: str = "draft"
    log_level: str = "INFO"

    @property
    def templates_dir(self) -> Path:
        return self.root / self.templates_path

    @property
    def researches_dir(self) -> Path:
        return self.root / self.researches_path


def load_config(config_path: Path | None = None) -> ResearchConfig:
    """Load configuration from environment variables and optional researchdesk.toml.

    Priority: environment variables > researchdesk.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.researchdesk/
        for candidate in [
            Path.cwd() / _CONFIG_FILENAME,
            Path.home() / ".researchdesk" / _CONFIG_FILENAME,
        ]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    research_data = file_data.get("research", {})

    root = os.getenv("RESEARCH_ROOT", research_data.get("root"))
    return ResearchConfig(
        root=Path(root).expanduser() if root else Path.cwd(),
        templates_path=os.getenv(
            "RESEARCH_TEMPLATES_PATH", research_data.get("templates_path", ".templates")
        ),
        researches_path=os.getenv(
            "RESEARCH_RESEARCHES_PATH", research_data.get("researches_path", ".researches")
        ),
        storage_driver=os.getenv(
            "RESEARCH_STORAGE_DRIVER", research_data.get("storage_driver", "markdown")
        ),
        default_entry_status=os.getenv(
            "RESEARCH_DEFAULT_STATUS", research_data.get("default_entry_status", "draft")
        ),
        log_level=os.getenv("RESEARCH_LOG_LEVEL", research_data.get("log_level", "INFO")),
    )
