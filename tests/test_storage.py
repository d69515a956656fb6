"""Tests for the file-backed research and entry repositories."""

from __future__ import annotations

from datetime import datetime

import pytest

from researchdesk.config import ResearchConfig
from researchdesk.domain.models import Entry, Research, now
from researchdesk.requests import EntryFilters, ResearchFilters
from researchdesk.storage.base import StorageError
from researchdesk.storage.file import codec
from researchdesk.storage.file.entries import FileEntryRepository
from researchdesk.storage.file.repository import as_str_tuple, slugify
from researchdesk.storage.file.researches import FileResearchRepository


@pytest.fixture
def researches(config: ResearchConfig) -> FileResearchRepository:
    return FileResearchRepository(config)


@pytest.fixture
def entries(config: ResearchConfig) -> FileEntryRepository:
    return FileEntryRepository(config)


def _research(research_id: str = "alpha", **kwargs) -> Research:
    fields = {
        "name": "Alpha",
        "description": "First research",
        "template": "blog",
        "status": "draft",
        "tags": ("ml",),
        "entry_dirs": ("posts", "ideas"),
    }
    fields.update(kwargs)
    return Research(id=research_id, **fields)


def _entry(entry_id: str = "entry_1", **kwargs) -> Entry:
    fields = {
        "title": "First Post",
        "description": "About things",
        "entry_type": "article",
        "category": "posts",
        "status": "draft",
        "tags": ("a",),
        "content": "# First Post\n\nHello world",
    }
    fields.update(kwargs)
    return Entry(entry_id=entry_id, **fields)


class TestSlugify:
    def test_basic(self):
        assert slugify("Hello, World!") == "hello-world"
        assert slugify("  many   spaces__and-dashes ") == "many-spaces-and-dashes"

    def test_keeps_unicode_words(self):
        assert slugify("机器学习 笔记") == "机器学习-笔记"

    def test_fallback(self):
        assert slugify("!!!") == "untitled"
        assert slugify("", fallback="entry") == "entry"


class TestAsStrTuple:
    def test_list_items_become_strings(self):
        assert as_str_tuple(["a", 2, 3.5], "tags") == ("a", "2", "3.5")
        assert as_str_tuple(("x",), "tags") == ("x",)

    def test_none_is_empty(self):
        assert as_str_tuple(None, "tags") == ()

    @pytest.mark.parametrize("value", [5, "foo", {"a": 1}])
    def test_non_list_rejected(self, value):
        with pytest.raises(StorageError, match="tags"):
            as_str_tuple(value, "tags")


class TestFileResearchRepository:
    def test_save_and_find(self, researches: FileResearchRepository, config: ResearchConfig):
        researches.save(_research(memory=("remember this",)))

        path = config.researches_dir / "alpha"
        assert (path / "research.yaml").is_file()
        assert (path / "posts").is_dir()
        assert (path / "ideas").is_dir()

        found = researches.find_by_id("alpha")
        assert found.name == "Alpha"
        assert found.tags == ("ml",)
        assert found.entry_dirs == ("posts", "ideas")
        assert found.memory == ("remember this",)
        assert found.path == path

    def test_yaml_layout(self, researches: FileResearchRepository, config: ResearchConfig):
        researches.save(_research())
        data = codec.load_yaml((config.researches_dir / "alpha" / "research.yaml").read_text())
        assert data["template"] == "blog"
        assert data["entries"] == {"dirs": ["posts", "ideas"]}

    def test_missing(self, researches: FileResearchRepository):
        assert researches.find_by_id("missing") is None
        assert not researches.exists("missing")

    def test_dir_without_config_is_not_a_research(
        self, researches: FileResearchRepository, config: ResearchConfig
    ):
        (config.researches_dir / "loose").mkdir(parents=True)
        assert not researches.exists("loose")
        assert researches.find_all() == []

    def test_find_all_skips_corrupt(self, researches: FileResearchRepository, config: ResearchConfig):
        researches.save(_research())
        bad = config.researches_dir / "bad"
        bad.mkdir()
        (bad / "research.yaml").write_text("- just\n- a list\n")
        assert [r.id for r in researches.find_all()] == ["alpha"]

    @pytest.mark.parametrize(
        "content",
        [
            b"name: \xff\xfe\n",
            b"name: Bad\ntags: 5\n",
            b"name: Bad\ntags: foo\n",
            b"name: Bad\nmemory: remember\n",
            b"name: Bad\nentries:\n  dirs: posts\n",
            b"name: Bad\nentries: posts\n",
        ],
    )
    def test_malformed_config_is_skipped(
        self, researches: FileResearchRepository, config: ResearchConfig, content: bytes
    ):
        researches.save(_research())
        bad = config.researches_dir / "bad"
        bad.mkdir()
        (bad / "research.yaml").write_bytes(content)

        assert [r.id for r in researches.find_all()] == ["alpha"]
        assert researches.find_by_id("bad") is None

    def test_scalar_fields_are_strings(
        self, researches: FileResearchRepository, config: ResearchConfig
    ):
        path = config.researches_dir / "numeric"
        path.mkdir(parents=True)
        (path / "research.yaml").write_text(
            "name: 2024\ndescription: 42\ntemplate: 7\nstatus: 1\ntags: [1, two]\n"
        )

        found = researches.find_by_id("numeric")
        assert found.name == "2024"
        assert found.description == "42"
        assert found.template == "7"
        assert found.status == "1"
        assert found.tags == ("1", "two")
        assert [r.id for r in researches.find_all(ResearchFilters(name_contains="20"))] == ["numeric"]

    def test_filters(self, researches: FileResearchRepository):
        researches.save(_research("alpha", tags=("ml", "nlp")))
        researches.save(_research("beta", name="Beta Study", status="active", tags=("db",)))
        researches.save(_research("gamma", name="Gamma", template="paper", tags=()))

        def ids(**kwargs):
            return [r.id for r in researches.find_all(ResearchFilters(**kwargs))]

        assert ids(status="active") == ["beta"]
        assert ids(template="paper") == ["gamma"]
        assert ids(tags=["nlp", "db"]) == ["alpha", "beta"]
        assert ids(name_contains="STUDY") == ["beta"]
        assert ids() == ["alpha", "beta", "gamma"]

    def test_delete(self, researches: FileResearchRepository, config: ResearchConfig):
        researches.save(_research())
        (config.researches_dir / "alpha" / "posts" / "x.md").write_text("x")

        assert researches.delete("alpha")
        assert not (config.researches_dir / "alpha").exists()
        assert not researches.exists("alpha")
        assert not researches.delete("alpha")


class TestFileEntryRepository:
    @pytest.fixture(autouse=True)
    def _research_dir(self, researches: FileResearchRepository):
        researches.save(_research())

    def test_save_layout(self, entries: FileEntryRepository, config: ResearchConfig):
        path = entries.save("alpha", _entry())
        assert path == config.researches_dir / "alpha" / "posts" / "article" / "first-post.md"

        metadata, body = codec.parse(path.read_text(encoding="utf-8"))
        assert list(metadata) == [
            "entry_id",
            "title",
            "description",
            "entry_type",
            "category",
            "status",
            "created_at",
            "updated_at",
            "tags",
        ]
        assert body == "# First Post\n\nHello world"

    def test_round_trip(self, entries: FileEntryRepository):
        created = datetime(2024, 1, 2, 3, 4, 5).astimezone()
        path = entries.save("alpha", _entry(created_at=created, updated_at=created))

        found = entries.find_by_id("alpha", "entry_1")
        assert found.title == "First Post"
        assert found.tags == ("a",)
        assert found.created_at == created
        assert found.file_path == path

    def test_filename_collision_gets_suffix(self, entries: FileEntryRepository):
        first = entries.save("alpha", _entry("entry_1"))
        second = entries.save("alpha", _entry("entry_2"))
        assert first.name == "first-post.md"
        assert second.name == "first-post-2.md"
        assert entries.find_by_id("alpha", "entry_1").entry_id == "entry_1"
        assert entries.find_by_id("alpha", "entry_2").entry_id == "entry_2"

    def test_save_existing_rewrites_same_file(self, entries: FileEntryRepository):
        path = entries.save("alpha", _entry())
        found = entries.find_by_id("alpha", "entry_1")
        again = entries.save("alpha", found.with_updates(title="Renamed"))
        assert again == path
        assert entries.find_by_id("alpha", "entry_1").title == "Renamed"

    def test_save_requires_research_dir(self, entries: FileEntryRepository):
        with pytest.raises(StorageError):
            entries.save("missing", _entry())

    def test_missing_research(self, entries: FileEntryRepository):
        assert entries.find_by_research("missing") == []
        assert entries.find_by_id("missing", "entry_1") is None

    def test_incomplete_files_are_skipped(self, entries: FileEntryRepository, config: ResearchConfig):
        entries.save("alpha", _entry())
        posts = config.researches_dir / "alpha" / "posts"
        (posts / "no-frontmatter.md").write_text("# Just text\n")
        (posts / "no-status.md").write_text(
            "---\nentry_id: e9\ntitle: T\nentry_type: article\ncategory: posts\n---\nbody\n"
        )
        (posts / "broken.md").write_text("---\ntitle: [oops\n---\nbody\n")

        assert [e.entry_id for e in entries.find_by_research("alpha")] == ["entry_1"]

    def test_malformed_files_are_skipped(self, entries: FileEntryRepository, config: ResearchConfig):
        entries.save("alpha", _entry())
        posts = config.researches_dir / "alpha" / "posts"
        header = "---\nentry_id: {}\ntitle: T\nentry_type: article\ncategory: posts\nstatus: draft\n"
        (posts / "int-tags.md").write_text(header.format("e2") + "tags: 5\n---\nbody\n")
        (posts / "str-tags.md").write_text(header.format("e3") + "tags: foo\n---\nbody\n")
        (posts / "binary.md").write_bytes(b"---\nentry_id: e4\ntitle: \xff\xfe\n---\n")

        assert [e.entry_id for e in entries.find_by_research("alpha")] == ["entry_1"]
        assert entries.find_by_id("alpha", "e2") is None
        assert entries.find_by_id("alpha", "entry_1").entry_id == "entry_1"

    def test_timestamps_are_timezone_aware(
        self, entries: FileEntryRepository, config: ResearchConfig
    ):
        posts = config.researches_dir / "alpha" / "posts"
        (posts / "dated.md").write_text(
            "---\nentry_id: e5\ntitle: T\nentry_type: article\ncategory: posts\nstatus: draft\n"
            "created_at: 2024-01-02\nupdated_at: '2024-01-03T04:05:06'\n---\nbody\n"
        )

        found = entries.find_by_id("alpha", "e5")
        assert found.created_at.tzinfo is not None
        assert found.updated_at.tzinfo is not None
        assert (found.created_at.year, found.created_at.month, found.created_at.day) == (2024, 1, 2)
        assert found.created_at < found.updated_at < now()

    def test_invalid_timestamp_is_skipped(self, entries: FileEntryRepository, config: ResearchConfig):
        posts = config.researches_dir / "alpha" / "posts"
        (posts / "bad-date.md").write_text(
            "---\nentry_id: e6\ntitle: T\nentry_type: article\ncategory: posts\nstatus: draft\n"
            "created_at: yesterday\n---\nbody\n"
        )
        assert entries.find_by_id("alpha", "e6") is None

    def test_filters(self, entries: FileEntryRepository):
        entries.save("alpha", _entry("e1", title="Neural Nets", tags=("ml",)))
        entries.save(
            "alpha",
            _entry(
                "e2",
                title="Idea",
                category="ideas",
                entry_type="note",
                status="open",
                description="Databases",
                tags=("db", "ml"),
                content="Index structures",
            ),
        )
        entries.save("alpha", _entry("e3", title="Other", status="published", tags=()))

        def ids(**kwargs):
            return sorted(e.entry_id for e in entries.find_by_research("alpha", EntryFilters(**kwargs)))

        assert ids(category="ideas") == ["e2"]
        assert ids(entry_type="article") == ["e1", "e3"]
        assert ids(status="published") == ["e3"]
        assert ids(tags=["ml"]) == ["e1", "e2"]
        assert ids(tags=["db", "nope"]) == ["e2"]
        assert ids(title_contains="neural") == ["e1"]
        assert ids(description_contains="DATA") == ["e2"]
        assert ids(content_contains="index") == ["e2"]
        assert ids(category="posts", status="draft") == ["e1"]

    def test_delete(self, entries: FileEntryRepository):
        path = entries.save("alpha", _entry())
        assert entries.exists("alpha", "entry_1")
        assert entries.delete("alpha", "entry_1")
        assert not path.exists()
        assert not entries.exists("alpha", "entry_1")
        assert not entries.delete("alpha", "entry_1")
