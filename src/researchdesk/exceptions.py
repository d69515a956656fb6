"""Error taxonomy shared by repositories, services and tools."""

from __future__ import annotations


class ResearchError(Exception):
    """Base error for research operations. Wraps unexpected failures."""


class ResearchNotFoundError(ResearchError):
    """Raised when a research cannot be found."""


class EntryNotFoundError(ResearchError):
    """Raised when an entry cannot be found."""


class TemplateNotFoundError(ResearchError):
    """Raised when a template cannot be found."""


class ValidationError(ResearchError):
    """Raised when a request fails template or field validation."""

    def __init__(self, errors: list[str], message: str = "Validation failed") -> None:
        self.errors = list(errors)
        if self.errors:
            message = f"{message}: {', '.join(self.errors)}"
        super().__init__(message)
