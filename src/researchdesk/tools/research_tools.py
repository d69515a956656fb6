"""Agent-facing research tools.

These functions are designed to be exposed as tools to an AI agent. Each takes
plain JSON-compatible arguments and returns a JSON-compatible dict with a
``success`` flag; failures never raise.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Callable

from researchdesk.exceptions import ResearchError, ValidationError
from researchdesk.requests import (
    EntryCreateRequest,
    EntryFilters,
    EntryUpdateRequest,
    ResearchCreateRequest,
    ResearchFilters,
    ResearchUpdateRequest,
    TextReplace,
)

if TYPE_CHECKING:
    from researchdesk.core import ResearchDesk

logger = logging.getLogger(__name__)

RESEARCH_LIMIT_MAX = 100
ENTRY_LIMIT_MAX = 200


def _error(message: str) -> dict[str, Any]:
    return {"success": False, "error": message}


def _validation_error(errors: list[str]) -> dict[str, Any]:
    return {"success": False, "error": "Validation failed", "details": list(errors)}


def _paginate(items: list, limit: int, offset: int) -> tuple[list, dict[str, Any]]:
    page = items[offset : offset + limit]
    return page, {
        "limit": limit,
        "offset": offset,
        "has_more": offset + len(page) < len(items),
    }


def _page_errors(limit: int, offset: int, limit_max: int) -> list[str]:
    errors = []
    if limit < 1 or limit > limit_max:
        errors.append(f"Limit must be between 1 and {limit_max}")
    if offset < 0:
        errors.append("Offset must be non-negative")
    return errors


def _tool(action: str) -> Callable[[Callable[..., dict]], Callable[..., dict]]:
    """Turn exceptions raised by a tool body into error payloads."""

    def decorator(func: Callable[..., dict]) -> Callable[..., dict]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> dict[str, Any]:
            try:
                return func(*args, **kwargs)
            except ValidationError as e:
                logger.warning("Validation failed while trying to %s: %s", action, e.errors)
                return _validation_error(e.errors)
            except ResearchError as e:
                logger.error("Error while trying to %s: %s", action, e)
                return _error(str(e))
            except Exception as e:
                logger.exception("Unexpected error while trying to %s", action)
                return _error(f"Failed to {action}: {e}")

        return wrapper

    return decorator


def get_research_tools(desk: ResearchDesk) -> dict[str, Callable[..., dict]]:
    """Return a dict of tool_name -> callable for research operations.

    These can be registered as MCP tools or called directly.
    """

    @_tool("list templates")
    def list_templates(tag: str | None = None, name_contains: str | None = None) -> dict:
        """List templates, optionally by exact tag and case-insensitive name."""
        errors = []
        if tag is not None and not tag.strip():
            errors.append("Tag filter cannot be empty when provided")
        if name_contains is not None and not name_contains.strip():
            errors.append("Name filter cannot be empty when provided")
        if errors:
            return _validation_error(errors)

        templates = desk.templates.find_all()
        if tag is not None:
            templates = [t for t in templates if tag in t.tags]
        if name_contains is not None:
            needle = name_contains.strip().lower()
            templates = [t for t in templates if needle in t.name.lower()]
        return {"success": True, "templates": [t.to_dict() for t in templates]}

    @_tool("list researches")
    def list_researches(
        filters: dict[str, Any] | None = None, limit: int = 20, offset: int = 0
    ) -> dict:
        """List researches with optional filters (status, template, tags, name_contains)."""
        filters = filters or {}
        research_filters = ResearchFilters(
            status=filters.get("status"),
            template=filters.get("template"),
            tags=filters.get("tags"),
            name_contains=filters.get("name_contains"),
        )
        errors = research_filters.validate() + _page_errors(limit, offset, RESEARCH_LIMIT_MAX)
        if errors:
            return _validation_error(errors)

        researches = desk.researches.find_all(research_filters)
        page, pagination = _paginate(researches, limit, offset)
        return {
            "success": True,
            "researches": [r.to_dict() for r in page],
            "count": len(page),
            "total_count": len(researches),
            "pagination": pagination,
        }

    @_tool("get research")
    def get_research(research_id: str) -> dict:
        """Read a research together with its template."""
        if not research_id:
            return _validation_error(["Research ID cannot be empty"])
        research = desk.researches.get(research_id)
        if research is None:
            return _error(f"Research '{research_id}' not found")
        template = desk.templates.get_template(research.template)
        return {
            "success": True,
            "research": {
                "id": research.id,
                "title": research.name,
                "status": research.status,
                "metadata": {
                    "description": research.description,
                    "tags": list(research.tags),
                    "memory": list(research.memory),
                },
            },
            "template": template.to_dict() if template else None,
        }

    @_tool("create research")
    def create_research(
        template_id: str,
        title: str,
        description: str = "",
        tags: list[str] | None = None,
        entry_dirs: list[str] | None = None,
        memory: list[str] | None = None,
    ) -> dict:
        """Create a research from a template. Entry directories default to its categories."""
        request = ResearchCreateRequest(
            template_id=template_id,
            title=title,
            description=description,
            tags=tags or [],
            entry_dirs=entry_dirs or [],
            memory=memory or [],
        )
        errors = request.validate()
        if errors:
            return _validation_error(errors)
        if not desk.templates.template_exists(template_id):
            return _error(f"Template '{template_id}' not found")

        research = desk.researches.create(request)
        return {
            "success": True,
            "research_id": research.id,
            "title": research.name,
            "template_id": research.template,
            "status": research.status,
        }

    @_tool("update research")
    def update_research(
        research_id: str,
        title: str | None = None,
        description: str | None = None,
        status: str | None = None,
        tags: list[str] | None = None,
        entry_dirs: list[str] | None = None,
        memory: list[str] | None = None,
    ) -> dict:
        """Update research fields. Only the given fields change."""
        request = ResearchUpdateRequest(
            research_id=research_id,
            title=title,
            description=description,
            status=status,
            tags=tags,
            entry_dirs=entry_dirs,
            memory=memory,
        )
        errors = request.validate()
        if errors:
            return _validation_error(errors)
        if not desk.researches.exists(research_id):
            return _error(f"Research '{research_id}' not found")

        desk.researches.update(research_id, request)
        return {"success": True}

    @_tool("list entries")
    def list_entries(
        research_id: str,
        filters: dict[str, Any] | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> dict:
        """List entries of a research, without their content."""
        filters = filters or {}
        entry_filters = EntryFilters(
            category=filters.get("category"),
            entry_type=filters.get("entry_type"),
            status=filters.get("status"),
            tags=filters.get("tags"),
            title_contains=filters.get("title_contains"),
            description_contains=filters.get("description_contains"),
            content_contains=filters.get("content_contains"),
        )
        errors = entry_filters.validate() + _page_errors(limit, offset, ENTRY_LIMIT_MAX)
        if not research_id:
            errors.insert(0, "Research ID cannot be empty")
        if errors:
            return _validation_error(errors)
        if not desk.researches.exists(research_id):
            return _error(f"Research '{research_id}' not found")

        entries = desk.entries.find_all(research_id, entry_filters)
        page, pagination = _paginate(entries, limit, offset)
        listed = []
        for entry in page:
            data = entry.to_dict()
            del data["content"]
            listed.append(data)
        return {
            "success": True,
            "entries": listed,
            "count": len(page),
            "total_count": len(entries),
            "pagination": pagination,
            "filters_applied": entry_filters.to_dict() if entry_filters.has_filters() else None,
        }

    @_tool("read entry")
    def read_entry(research_id: str, entry_id: str) -> dict:
        """Read one entry including its content."""
        errors = []
        if not research_id:
            errors.append("Research ID cannot be empty")
        if not entry_id:
            errors.append("Entry ID cannot be empty")
        if errors:
            return _validation_error(errors)
        if not desk.researches.exists(research_id):
            return _error(f"Research '{research_id}' not found")

        entry = desk.entries.get_entry(research_id, entry_id)
        if entry is None:
            return _error(f"Entry '{entry_id}' not found in research '{research_id}'")
        return {"success": True, "entry": entry.to_dict()}

    @_tool("create entry")
    def create_entry(
        research_id: str,
        category: str,
        entry_type: str,
        content: str,
        title: str | None = None,
        description: str | None = None,
        status: str | None = None,
        tags: list[str] | None = None,
    ) -> dict:
        """Create an entry. Category, type and status accept display names."""
        request = EntryCreateRequest(
            research_id=research_id,
            category=category,
            entry_type=entry_type,
            content=content,
            title=title,
            description=description,
            status=status,
            tags=tags or [],
        )
        errors = request.validate()
        if errors:
            return _validation_error(errors)
        if not desk.researches.exists(research_id):
            return _error(f"Research '{research_id}' not found")

        entry = desk.entries.create_entry(research_id, request)
        return {
            "success": True,
            "entry_id": entry.entry_id,
            "title": entry.title,
            "entry_type": entry.entry_type,
            "category": entry.category,
            "status": entry.status,
            "content_type": "markdown",
            "created_at": entry.created_at.isoformat(),
        }

    @_tool("update entry")
    def update_entry(
        research_id: str,
        entry_id: str,
        title: str | None = None,
        description: str | None = None,
        content: str | None = None,
        status: str | None = None,
        tags: list[str] | None = None,
        text_replace: dict[str, str] | None = None,
    ) -> dict:
        """Update an entry. ``text_replace`` is ``{"find": ..., "replace": ...}``."""
        request = EntryUpdateRequest(
            research_id=research_id,
            entry_id=entry_id,
            title=title,
            description=description,
            content=content,
            status=status,
            tags=tags,
            text_replace=(
                TextReplace(
                    find=text_replace.get("find", ""),
                    replace=text_replace.get("replace", ""),
                )
                if text_replace is not None
                else None
            ),
        )
        errors = request.validate()
        if errors:
            return _validation_error(errors)
        if not desk.researches.exists(research_id):
            return _error(f"Research '{research_id}' not found")
        if not desk.entries.entry_exists(research_id, entry_id):
            return _error(f"Entry '{entry_id}' not found in research '{research_id}'")

        desk.entries.update_entry(research_id, entry_id, request)
        return {"success": True}

    return {
        "list_templates": list_templates,
        "list_researches": list_researches,
        "get_research": get_research,
        "create_research": create_research,
        "update_research": update_research,
        "list_entries": list_entries,
        "read_entry": read_entry,
        "create_entry": create_entry,
        "update_entry": update_entry,
    }
