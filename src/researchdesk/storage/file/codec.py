"""YAML frontmatter + markdown body codec.

Parsing is delegated to python-frontmatter. Dumping goes through a SafeDumper
subclass that keeps key order and writes multi-line strings as literal blocks.
"""

from __future__ import annotations

from typing import Any

import frontmatter
import yaml

from researchdesk.storage.base import StorageError

DELIMITER = "---"


class FrontmatterError(StorageError):
    """The YAML between the frontmatter delimiters is malformed."""


class _BlockDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_str(data)


_BlockDumper.add_representer(str, _represent_str)

_DUMP_OPTIONS: dict[str, Any] = {
    "Dumper": _BlockDumper,
    "default_flow_style": False,
    "allow_unicode": True,
    "sort_keys": False,
    "indent": 2,
}


def dump_yaml(data: dict[str, Any]) -> str:
    """Serialize a mapping as block-style YAML."""
    return yaml.dump(data, **_DUMP_OPTIONS)


def load_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def parse(content: str) -> tuple[dict[str, Any], str]:
    """Split file content into (frontmatter, body).

    Content that does not open with a ``---`` line has no frontmatter; the
    whole trimmed text is the body. Only the first block is recognized.
    """
    text = content.strip()
    if text.split("\n", 1)[0].rstrip() != DELIMITER:
        return {}, text
    try:
        metadata, body = frontmatter.parse(text)
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Failed to parse YAML frontmatter: {e}") from e
    return dict(metadata), body.strip()


def combine(metadata: dict[str, Any], body: str) -> str:
    """Render frontmatter and body back into file content."""
    if not metadata:
        return body
    post = frontmatter.Post(body)
    post.metadata.update(metadata)
    return frontmatter.dumps(post, **_DUMP_OPTIONS) + "\n"


def extract_frontmatter(content: str) -> dict[str, Any]:
    return parse(content)[0]
