from __future__ import annotations

import pathlib
from typing import Any, Dict, List, Optional, Set
from urllib.parse import unquote, urlsplit

from .config import (
    EXTERNAL_SCHEMES,
    HTML_ANCHOR_ID,
    HTML_PRE_CODE,
    HTML_SRC_OR_HREF,
)
from .markdown_processing import extract_links
from .posts import Issue, Post
from .site import baseurl as site_baseurl
from .site import post_permalink


def is_external(url: str) -> bool:
    low = url.strip().lower()
    return low.startswith(EXTERNAL_SCHEMES) or low.startswith("//")


def _is_liquid(url: str) -> bool:
    return "{{" in url or "{%" in url


def _strip_baseurl(path: str, base: str) -> Optional[str]:
    if not base:
        return path
    if path == base or path.startswith(base + "/"):
        return path[len(base):] or "/"
    return None


# ---------- Source side

def _permalink_prefix(permalink: str) -> str:
    static = permalink.split(":", 1)[0]
    return static if static.endswith("/") else static.rsplit("/", 1)[0] + "/"


def check_source_links(
    posts: List[Post],
    site_config: Dict[str, Any],
    root: pathlib.Path,
) -> List[Issue]:
    """
    Check links written in post bodies against the known post URLs and
    local image files.
    """
    issues: List[Issue] = []
    base = site_baseurl(site_config)
    permalink = post_permalink(site_config)
    prefix = _permalink_prefix(permalink)

    known = {
        p.url(permalink, base).rstrip("/")
        for p in posts
        if p.published and not p.draft
    }

    for post in posts:
        for url, is_image in extract_links(post.body):
            url = url.strip()
            if not url or url.startswith("#") or is_external(url) or _is_liquid(url):
                continue
            path = unquote(urlsplit(url).path)
            if not path:
                continue

            if path.startswith("/"):
                local = _strip_baseurl(path, base)
                if local is None:
                    continue
                if prefix != "/" and local.startswith(prefix) and not is_image:
                    if (base + local).rstrip("/") not in known:
                        issues.append(Issue(post.path, f"link to unknown post {url}"))
                    continue
                if is_image:
                    top = local.lstrip("/").split("/", 1)[0]
                    # Directories not in this repo come from the theme gem
                    if (root / top).is_dir() and not (root / local.lstrip("/")).is_file():
                        issues.append(Issue(post.path, f"missing image {url}"))
                continue

            if is_image:
                bases = [post.path.parent, root]
                subpath = post.front.get("media_subpath") or post.front.get("img_path")
                if subpath and is_external(str(subpath)):
                    continue
                if subpath:
                    # Chirpy prefixes relative media with this path
                    bases.insert(0, root / str(subpath).strip("/"))
                if not any((b / path).is_file() for b in bases):
                    issues.append(Issue(post.path, f"missing image {url}"))
    return issues


# ---------- Build side

def _page_text(page: pathlib.Path) -> str:
    return page.read_text(encoding="utf-8", errors="replace")


def collect_pages(site_dir: pathlib.Path) -> Dict[pathlib.Path, Set[str]]:
    pages: Dict[pathlib.Path, Set[str]] = {}
    for page in sorted(site_dir.rglob("*.html")):
        text = _page_text(page)
        pages[page.resolve()] = {m.group("id") for m in HTML_ANCHOR_ID.finditer(text)}
    return pages


def resolve_target(
    site_dir: pathlib.Path,
    page: pathlib.Path,
    url: str,
    baseurl: str = "",
) -> Optional[pathlib.Path]:
    path = unquote(urlsplit(url).path)
    site_dir = site_dir.resolve()

    if not path:
        return page.resolve()
    if path.startswith("/"):
        local = _strip_baseurl(path, baseurl.rstrip("/"))
        if local is None:
            return None
        candidate = site_dir / local.lstrip("/")
    else:
        candidate = page.parent / path

    candidate = candidate.resolve()
    if candidate != site_dir and site_dir not in candidate.parents:
        return None

    if path.endswith("/") or candidate.is_dir():
        index = candidate / "index.html"
        return index if index.is_file() else None
    if candidate.is_file():
        return candidate
    html = candidate.with_name(candidate.name + ".html")
    if html.is_file():
        return html
    return None


def check_site_links(
    site_dir: pathlib.Path,
    baseurl: str = "",
    check_anchors: bool = True,
) -> List[Issue]:
    if not site_dir.is_dir():
        raise FileNotFoundError(f"build output not found: {site_dir}")

    pages = collect_pages(site_dir)
    issues: List[Issue] = []

    for page in pages:
        rel = page.relative_to(site_dir.resolve())
        text = HTML_PRE_CODE.sub("", _page_text(page))
        for m in HTML_SRC_OR_HREF.finditer(text):
            url = m.group("url").strip()
            if not url or url == "#" or is_external(url):
                continue

            target = resolve_target(site_dir, page, url, baseurl)
            if target is None:
                issues.append(Issue(rel, f"broken link {url}"))
                continue

            fragment = urlsplit(url).fragment
            if check_anchors and fragment and target.suffix == ".html":
                ids = pages.get(target.resolve(), set())
                if unquote(fragment) not in ids:
                    issues.append(Issue(rel, f"missing anchor {url}"))
    return issues
