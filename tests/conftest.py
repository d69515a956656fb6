"""Shared fixtures: a temporary root with one "blog" template."""

from __future__ import annotations

from pathlib import Path

import pytest

from researchdesk.config import ResearchConfig
from researchdesk.core import ResearchDesk

BLOG_TEMPLATE = """\
key: blog
name: Blog Research
description: Collect and draft blog posts
tags:
  - writing
  - content
categories:
  - name: posts
    display_name: Blog Posts
    entry_types:
      - article
      - note
  - name: ideas
    display_name: Ideas
    entry_types:
      - note
entry_types:
  article:
    display_name: Article
    default_status: draft
    statuses:
      - value: draft
        display_name: Draft
      - value: published
        display_name: Published
  note:
    display_name: Quick Note
    default_status: open
    statuses:
      - value: open
        display_name: Open
      - value: done
        display_name: Done
prompt: |
  You are helping write a blog.
  Keep it short.
"""


@pytest.fixture
def config(tmp_path: Path) -> ResearchConfig:
    templates_dir = tmp_path / ".templates"
    templates_dir.mkdir()
    (templates_dir / "blog.yaml").write_text(BLOG_TEMPLATE, encoding="utf-8")
    return ResearchConfig(root=tmp_path)


@pytest.fixture
def desk(config: ResearchConfig) -> ResearchDesk:
    return ResearchDesk(config)
