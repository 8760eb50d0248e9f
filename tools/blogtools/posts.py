from __future__ import annotations

import pathlib
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .config import (
    DEFAULT_PERMALINK,
    DRAFTS_DIR,
    LIST_FIELDS,
    MARKDOWN_SUFFIXES,
    MAX_CATEGORY_DEPTH,
    POST_FILENAME,
    POSTS_DIR,
)
from .site import baseurl, post_permalink, site_timezone
from .utils import (
    FrontMatterError,
    coerce_datetime,
    natural_key,
    norm_text,
    parse_frontmatter,
    slugify,
    slugify_pretty,
)


@dataclass
class Issue:
    path: pathlib.Path
    message: str
    level: str = "error"

    def __str__(self) -> str:
        return f"{self.path}: {self.level}: {self.message}"


@dataclass
class Post:
    path: pathlib.Path
    slug: str
    title: str
    date: Optional[datetime]
    categories: List[Any] = field(default_factory=list)
    tags: List[Any] = field(default_factory=list)
    body: str = ""
    front: Dict[str, Any] = field(default_factory=dict)
    published: bool = True
    pinned: bool = False
    draft: bool = False

    def url(self, permalink: str = DEFAULT_PERMALINK, baseurl: str = "") -> str:
        """Expand a Jekyll permalink pattern for this post."""
        when = self.date or datetime.min
        categories = "/".join(
            slugify(str(c)) for c in self.categories if str(c).strip()
        )
        tokens = {
            "title": self.slug,
            "slug": self.slug,
            "year": f"{when.year:04d}",
            "month": f"{when.month:02d}",
            "i_month": str(when.month),
            "day": f"{when.day:02d}",
            "i_day": str(when.day),
            "categories": categories,
        }

        def _repl(m):
            return tokens.get(m.group(1), m.group(0))

        path = re.sub(r":([a-z_]+)", _repl, permalink)
        url = f"{baseurl.rstrip('/')}/{path.lstrip('/')}"
        return re.sub(r"/{2,}", "/", url)


def split_post_filename(path: pathlib.Path) -> Optional[Tuple[date, str]]:
    m = POST_FILENAME.match(path.name)
    if not m:
        return None
    try:
        when = date(int(m.group("year")), int(m.group("month")), int(m.group("day")))
    except ValueError:
        return None
    return when, m.group("slug")


def _as_list(value) -> List[Any]:
    # Jekyll splits a scalar categories/tags value on whitespace
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def load_post(path: pathlib.Path, draft: bool = False) -> Post:
    text = norm_text(path.read_text(encoding="utf-8"))
    fm, body = parse_frontmatter(text)
    if fm is None:
        raise FrontMatterError("missing front matter block")

    parsed = split_post_filename(path)
    slug = slugify_pretty(str(fm.get("slug") or (parsed[1] if parsed else path.stem)))
    raw_title = fm.get("title")
    title = str(raw_title).strip() if raw_title is not None else ""

    return Post(
        path=path,
        slug=slug,
        title=title,
        date=coerce_datetime(fm.get("date")),
        categories=_as_list(fm.get("categories", fm.get("category"))),
        tags=_as_list(fm.get("tags", fm.get("tag"))),
        body=body,
        front=fm,
        published=fm.get("published", True) is not False,
        pinned=bool(fm.get("pin", False)),
        draft=draft,
    )


def iter_post_files(root: pathlib.Path, drafts: bool = False) -> Iterator[Tuple[pathlib.Path, bool]]:
    dirs = [(root / POSTS_DIR, False)]
    if drafts:
        dirs.append((root / DRAFTS_DIR, True))
    for base, is_draft in dirs:
        if not base.exists():
            continue
        files = [
            p for p in base.rglob("*")
            if p.is_file() and p.suffix.lower() in MARKDOWN_SUFFIXES
        ]
        for p in sorted(files, key=lambda p: natural_key(p.relative_to(base).as_posix())):
            yield p, is_draft


def _check_list_field(post: Post, name: str) -> List[Issue]:
    issues: List[Issue] = []
    raw = post.front.get(name)
    if raw is not None and not isinstance(raw, (str, list, tuple)):
        issues.append(Issue(post.path, f"'{name}' must be a list of strings"))
        return issues

    values = post.categories if name == "categories" else post.tags
    seen = set()
    for v in values:
        if not isinstance(v, str) or not v.strip():
            issues.append(Issue(post.path, f"'{name}' entries must be non-empty strings, got {v!r}"))
            continue
        if v in seen:
            issues.append(Issue(post.path, f"duplicate entry {v!r} in '{name}'", "warning"))
        seen.add(v)
    return issues


def _aware(when: datetime, tz: Optional[tzinfo]) -> datetime:
    if when.tzinfo is not None:
        return when
    if tz is not None:
        return when.replace(tzinfo=tz)
    return when.astimezone()


def validate_post(
    post: Post,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    allow_future: bool = False,
) -> List[Issue]:
    issues: List[Issue] = []

    if not post.title:
        issues.append(Issue(post.path, "title is missing or empty"))

    if post.date is None:
        if "date" in post.front:
            issues.append(Issue(post.path, f"date {post.front['date']!r} is not a valid date"))
        elif not post.draft:
            issues.append(Issue(post.path, "date is missing"))

    for name in LIST_FIELDS:
        issues.extend(_check_list_field(post, name))

    if len(post.categories) > MAX_CATEGORY_DEPTH:
        issues.append(Issue(
            post.path,
            f"{len(post.categories)} categories given, only the first "
            f"{MAX_CATEGORY_DEPTH} levels are shown",
            "warning",
        ))

    if not post.draft:
        parsed = split_post_filename(post.path)
        if parsed is None:
            issues.append(Issue(
                post.path,
                "filename must look like YYYY-MM-DD-title.md to be picked up as a post",
            ))
        elif post.date is not None and parsed[0] != post.date.date():
            issues.append(Issue(
                post.path,
                f"filename date {parsed[0].isoformat()} differs from "
                f"front matter date {post.date.date().isoformat()}",
                "warning",
            ))

    if post.date is not None and not allow_future:
        now = now or datetime.now(timezone.utc)
        if _aware(post.date, tz) > _aware(now, tz):
            issues.append(Issue(
                post.path,
                "date is in the future, the post will not be built without 'future: true'",
                "warning",
            ))

    return issues


def check_unique(
    posts: List[Post],
    permalink: str = DEFAULT_PERMALINK,
    baseurl: str = "",
) -> List[Issue]:
    issues: List[Issue] = []
    by_url: Dict[str, Post] = {}
    by_path: Dict[pathlib.Path, Post] = {}
    for p in posts:
        if not p.published or p.draft:
            continue
        key = p.path.resolve()
        if key in by_path:
            issues.append(Issue(p.path, "post loaded twice"))
            continue
        by_path[key] = p

        url = p.url(permalink, baseurl)
        other = by_url.get(url)
        if other is not None:
            issues.append(Issue(p.path, f"URL {url} is already used by {other.path.name}"))
        else:
            by_url[url] = p
    return issues


def check_posts(
    root: pathlib.Path,
    site_config: Optional[Dict[str, Any]] = None,
    drafts: bool = False,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> Tuple[List[Post], List[Issue]]:
    site_config = site_config or {}
    if tz is None:
        tz = site_timezone(site_config)
    posts: List[Post] = []
    issues: List[Issue] = []

    for path, is_draft in iter_post_files(root, drafts=drafts):
        try:
            post = load_post(path, draft=is_draft)
        except FrontMatterError as exc:
            issues.append(Issue(path, str(exc)))
            continue
        posts.append(post)
        issues.extend(validate_post(
            post,
            now=now,
            tz=tz,
            allow_future=bool(site_config.get("future", False)),
        ))

    issues.extend(check_unique(
        posts,
        permalink=post_permalink(site_config),
        baseurl=baseurl(site_config),
    ))
    return posts, issues
