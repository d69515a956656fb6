"""Tests for request objects: derived titles/descriptions and validation."""

from __future__ import annotations

from researchdesk.requests import (
    EntryCreateRequest,
    EntryFilters,
    EntryUpdateRequest,
    ResearchCreateRequest,
    ResearchFilters,
    ResearchUpdateRequest,
    TextReplace,
)


def _entry_request(content: str = "# Heading\n\nBody", **kwargs) -> EntryCreateRequest:
    return EntryCreateRequest(
        research_id="r", category="posts", entry_type="article", content=content, **kwargs
    )


class TestProcessedTitle:
    def test_explicit_title(self):
        assert _entry_request(title="  Given  ").processed_title == "Given"

    def test_from_heading(self):
        assert _entry_request("## Second level\nrest").processed_title == "Second level"

    def test_blank_title_falls_back_to_content(self):
        assert _entry_request("Plain first line", title="   ").processed_title == "Plain first line"

    def test_truncated(self):
        title = _entry_request("x" * 150).processed_title
        assert title == "x" * 100 + "..."

    def test_untitled(self):
        assert _entry_request("   \n").processed_title == "Untitled Entry"
        assert _entry_request("###").processed_title == "Untitled Entry"


class TestProcessedDescription:
    def test_explicit(self):
        assert _entry_request(description=" Short ").processed_description == "Short"

    def test_from_following_lines(self):
        content = "# Title\n\nLine one\n\n<b>Line</b>   two\nLine three\nLine four"
        assert _entry_request(content).processed_description == "Line one Line two Line three"

    def test_truncated(self):
        content = "# Title\n" + "word " * 100
        description = _entry_request(content).processed_description
        assert len(description) == 200
        assert description.endswith("...")

    def test_default(self):
        assert _entry_request("# Only a title").processed_description == "Entry content"


class TestEntryCreateRequest:
    def test_valid(self):
        assert _entry_request().validate() == []

    def test_errors(self):
        request = EntryCreateRequest(
            research_id="",
            category="",
            entry_type="",
            content="  ",
            tags=["ok", " "],
            description="d" * 201,
        )
        errors = request.validate()
        assert "Research ID cannot be empty" in errors
        assert "Category cannot be empty" in errors
        assert "Entry type cannot be empty" in errors
        assert "Content cannot be empty" in errors
        assert "All tags must be non-empty strings" in errors
        assert "Description must not exceed 200 characters" in errors

    def test_with_resolved_keys(self):
        resolved = _entry_request(status="Draft").with_resolved_keys("posts", "article")
        assert resolved.status == "Draft"
        resolved = resolved.with_resolved_keys("posts", "article", "draft")
        assert resolved.status == "draft"


class TestEntryUpdateRequest:
    def test_requires_a_change(self):
        request = EntryUpdateRequest(research_id="r", entry_id="e")
        assert not request.has_updates()
        assert "At least one field must be provided for update" in request.validate()

    def test_empty_find(self):
        request = EntryUpdateRequest(research_id="r", entry_id="e", text_replace=TextReplace(find=""))
        assert "Find text cannot be empty for text replacement" in request.validate()

    def test_final_content(self):
        replace = TextReplace(find="a", replace="b")
        assert EntryUpdateRequest("r", "e", text_replace=replace).final_content("aXa") == "bXb"
        assert EntryUpdateRequest("r", "e", content="aa", text_replace=replace).final_content("zz") == "bb"
        assert EntryUpdateRequest("r", "e", content="new").final_content("old") == "new"
        assert EntryUpdateRequest("r", "e", title="t").final_content("old") is None

    def test_empty_replace_deletes(self):
        request = EntryUpdateRequest("r", "e", text_replace=TextReplace(find=" draft"))
        assert request.validate() == []
        assert request.final_content("a draft note") == "a note"


class TestResearchRequests:
    def test_create_validation(self):
        assert ResearchCreateRequest(template_id="blog", title="T").validate() == []
        errors = ResearchCreateRequest(template_id=" ", title="").validate()
        assert errors == ["Template ID cannot be empty", "Research title cannot be empty"]

    def test_update_validation(self):
        assert ResearchUpdateRequest(research_id="r", status="done").validate() == []
        assert ResearchUpdateRequest(research_id="r").validate() == [
            "At least one field must be provided for update"
        ]

    def test_update_with_empty_list_counts_as_change(self):
        assert ResearchUpdateRequest(research_id="r", tags=[]).has_updates()


class TestFilters:
    def test_research_filters(self):
        assert not ResearchFilters().has_filters()
        filters = ResearchFilters(status="active", tags=["a"])
        assert filters.to_dict() == {"status": "active", "tags": ["a"]}
        assert ResearchFilters(tags=[]).validate() == ["Tags array cannot be empty when provided"]
        assert ResearchFilters(name_contains=" ").validate() == [
            "Name filter cannot be empty when provided"
        ]

    def test_entry_filters(self):
        assert not EntryFilters().has_filters()
        filters = EntryFilters(category="posts", title_contains="x")
        assert filters.to_dict() == {"category": "posts", "title_contains": "x"}
        assert EntryFilters(content_contains="").validate() == [
            "content_contains filter cannot be empty when provided"
        ]
