from __future__ import annotations

import pathlib
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from .config import POSTS_DIR
from .utils import slugify, yaml_frontmatter_block


def new_post(
    root: pathlib.Path,
    title: str,
    categories: Iterable[str] = (),
    tags: Iterable[str] = (),
    date: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> pathlib.Path:
    """
    Create ``_posts/YYYY-MM-DD-<slug>.md`` with a Chirpy front matter block.

    Never overwrites an existing post.
    """
    slug = slugify(title)
    if not slug:
        raise ValueError(f"cannot derive a filename from title {title!r}")

    when = date or datetime.now(tz)
    if when.tzinfo is None:
        when = when.replace(tzinfo=tz) if tz is not None else when.astimezone()

    out_dir = root / POSTS_DIR
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"{when.date().isoformat()}-{slug}.md"
    if path.exists():
        raise FileExistsError(f"post already exists: {path}")

    fm = {
        "title": title.strip(),
        "date": when.replace(microsecond=0),
        "categories": [c for c in categories if c],
        "tags": [t for t in tags if t],
    }
    path.write_text(yaml_frontmatter_block(fm), encoding="utf-8")
    return path
