from __future__ import annotations

import pathlib
from datetime import datetime, timezone

import pytest

from blogtools.utils import yaml_frontmatter_block

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def write_post(root: pathlib.Path, name: str, front, body: str = "Body.\n", folder: str = "_posts") -> pathlib.Path:
    path = root / folder / name
    path.parent.mkdir(parents=True, exist_ok=True)
    head = front if isinstance(front, str) else yaml_frontmatter_block(front)
    path.write_text(head + body, encoding="utf-8")
    return path


def write_page(site: pathlib.Path, rel: str, html: str) -> pathlib.Path:
    path = site / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"<html><body>{html}</body></html>", encoding="utf-8")
    return path


@pytest.fixture
def blog(tmp_path):
    (tmp_path / "_config.yml").write_text(
        "title: Test\nbaseurl: ''\n"
        "defaults:\n"
        "  - scope: {path: '', type: posts}\n"
        "    values: {layout: post, permalink: /posts/:title/}\n",
        encoding="utf-8",
    )
    write_post(tmp_path, "2024-03-09-only-values.md", {
        "title": "Only and values",
        "date": "2024-03-09 21:30:00 +0900",
        "categories": ["Django", "ORM"],
        "tags": ["django", "queryset"],
    }, "See [the iterator post](/posts/iterator/).\n")
    write_post(tmp_path, "2024-03-23-iterator.md", {
        "title": "Iterator",
        "date": "2024-03-23 22:10:00 +0900",
        "categories": ["Django", "ORM"],
        "tags": ["django", "memory"],
    }, "```python\nfor x in qs.iterator():\n    print(x)  # [not a link](/posts/nope/)\n```\n")
    return tmp_path
