#!/usr/bin/env python3
from __future__ import annotations

import pathlib
import re

# ---------- Paths

# This assumes the package sits in tools/ at the repo root.
ROOT = pathlib.Path(__file__).resolve().parents[2]
POSTS_DIR = "_posts"
DRAFTS_DIR = "_drafts"
SITE_DIR = "_site"
SITE_CONFIG = "_config.yml"

# ---------- Config

MARKDOWN_SUFFIXES = (".md", ".markdown")
LIST_FIELDS = ("categories", "tags")
DEFAULT_PERMALINK = "/posts/:title/"
MAX_CATEGORY_DEPTH = 2

# Schemes never resolved against the build output
EXTERNAL_SCHEMES = ("http:", "https:", "mailto:", "tel:", "data:", "javascript:", "ftp:")

# Some shared regexes

POST_FILENAME = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})-(?P<slug>.+?)"
    r"(?P<ext>\.md|\.markdown)$"
)
MD_LINK_IMG = re.compile(
    r'(!?)\[(?P<alt>[^\]]*)\]\((?P<url>[^)\s]+)(?:\s+"[^"]*")?\)'
)
HTML_SRC_OR_HREF = re.compile(
    r'(?<![\w:-])(?P<attr>src|href)\b\s*=\s*([\'"])(?P<url>[^\'"]*)\2'
)
HTML_ANCHOR_ID = re.compile(
    r'(?<![\w:-])(?:id|name)\s*=\s*([\'"])(?P<id>[^\'"]+)\1'
)
HTML_PRE_CODE = re.compile(
    r"<(?P<tag>pre|code)\b[^>]*>.*?</(?P=tag)>", re.IGNORECASE | re.DOTALL
)
FENCE = re.compile(r"(^[ \t]*(```|~~~).*?$)(.*?)(^[ \t]*\2[ \t]*$)",
                   re.MULTILINE | re.DOTALL)
INLINE_CODE = re.compile(r"(`+)(?!`).+?(?<!`)\1(?!`)", re.DOTALL)
SLUG_RE = re.compile(r"[^a-z0-9]+")
# Jekyll's "pretty" slugify: everything else collapses to '-', underscores too
SLUG_PRETTY_RE = re.compile(r"(?:[^\w.~!$&'()+,;=@]|_)+")
