from __future__ import annotations

import pathlib
import re
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

import yaml

from .config import SLUG_PRETTY_RE, SLUG_RE


class FrontMatterError(ValueError):
    """Front matter block that Jekyll would refuse to read."""


def slugify(s: str) -> str:
    return SLUG_RE.sub("-", s.lower()).strip("-")


def slugify_pretty(s: str) -> str:
    """Slug for `:title`, keeping case like Jekyll does for post URLs."""
    return SLUG_PRETTY_RE.sub("-", s).strip("-")


def natural_key(s: str):
    return [int(t) if t.isdigit() else t for t in re.split(r'(\d+)', s.lower())]


def read_yaml(path: pathlib.Path) -> Dict[str, Any]:
    if path.exists():
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return {}


def norm_text(s: str) -> str:
    return s.replace('\r\n', '\n').replace('\r', '\n').lstrip('\ufeff')


_JEKYLL_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
)


def coerce_datetime(v) -> Optional[datetime]:
    if isinstance(v, datetime):
        return v
    if isinstance(v, date):
        return datetime(v.year, v.month, v.day)
    if isinstance(v, str):
        s = v.strip().strip('"').strip("'")
        if not s:
            return None
        for fmt in _JEKYLL_DATE_FORMATS:
            try:
                return datetime.strptime(s, fmt)
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            return None
    return None


def format_jekyll_date(v) -> str:
    if isinstance(v, datetime):
        if v.tzinfo is not None:
            return v.strftime("%Y-%m-%d %H:%M:%S %z")
        return v.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(v, date):
        return v.isoformat()
    return v


def yaml_frontmatter_block(data: Dict[str, Any]) -> str:
    data = {k: format_jekyll_date(v) if isinstance(v, date) else v
            for k, v in data.items()}
    dumped = yaml.safe_dump(
        data, sort_keys=False, allow_unicode=True
    ).rstrip()
    return f"---\n{dumped}\n---\n\n"


def parse_frontmatter(text: str) -> Tuple[Optional[Dict[str, Any]], str]:
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != "---":
        return None, text

    for i in range(1, len(lines)):
        if lines[i].rstrip() in ("---", "..."):
            fm_text = "".join(lines[1:i])
            body = "".join(lines[i + 1 :])
            try:
                fm = yaml.safe_load(fm_text)
            except (yaml.YAMLError, ValueError) as exc:
                raise FrontMatterError(f"invalid YAML in front matter: {exc}") from exc
            if fm is None:
                return {}, body
            if not isinstance(fm, dict):
                raise FrontMatterError(
                    f"front matter must be a mapping, got {type(fm).__name__}"
                )
            return fm, body
    raise FrontMatterError("front matter block is not closed with '---' or '...'")
