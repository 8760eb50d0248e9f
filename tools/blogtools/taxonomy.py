from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from .posts import Issue, Post
from .utils import slugify


def _instant(when: datetime) -> datetime:
    # Naive dates are read as local time
    if when.tzinfo is None:
        when = when.astimezone()
    return when.astimezone(timezone.utc)


def _newest_first(posts: List[Post]) -> List[Post]:
    # Undated posts sort last, then by slug for a stable order; pinned posts lead
    ordered = sorted(
        posts,
        key=lambda p: (p.date is not None, _instant(p.date) if p.date else 0, p.slug),
        reverse=True,
    )
    return sorted(ordered, key=lambda p: not p.pinned)


def build_index(posts: List[Post]) -> Dict[str, Dict[str, List[Post]]]:
    index: Dict[str, Dict[str, List[Post]]] = {"categories": {}, "tags": {}}
    for p in _newest_first([p for p in posts if p.published and not p.draft]):
        for c in p.categories:
            if isinstance(c, str) and c.strip():
                index["categories"].setdefault(c, []).append(p)
        for t in p.tags:
            if isinstance(t, str) and t.strip():
                index["tags"].setdefault(t, []).append(p)
    return index


def check_taxonomy(posts: List[Post]) -> List[Issue]:
    """Flag spellings that end up on the same archive page."""
    issues: List[Issue] = []
    index = build_index(posts)
    for kind, entries in index.items():
        by_slug: Dict[str, str] = {}
        for name, members in entries.items():
            key = slugify(name)
            first = by_slug.setdefault(key, name)
            if first != name:
                issues.append(Issue(
                    members[0].path,
                    f"{'tag' if kind == 'tags' else 'category'} {name!r} "
                    f"shares the archive page '{key}' with {first!r}",
                    "warning",
                ))
    return issues


def index_report(index: Dict[str, Dict[str, List[Post]]]) -> Dict[str, Any]:
    report: Dict[str, Any] = {}
    for kind, entries in index.items():
        report[kind] = {
            name: {
                "count": len(members),
                "posts": [p.title for p in members],
            }
            for name, members in entries.items()
        }
    return report
