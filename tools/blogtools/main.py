#!/usr/bin/env python3
"""
Content checks for the Jekyll/Chirpy blog.

- check  -> front matter of _posts/*.md (title, date, categories, tags),
            filename convention, unique post URLs, tag/category collisions,
            links between posts and local images
- links  -> broken internal links and anchors in the built _site/
- index  -> categories and tags with their posts, as YAML
- new    -> scaffold _posts/YYYY-MM-DD-<slug>.md

Code blocks inside posts are example text and are never checked.
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import List, Optional

import yaml

from .config import POSTS_DIR, SITE_CONFIG, SITE_DIR
from .links import check_site_links, check_source_links
from .posts import Issue, check_posts
from .scaffold import new_post
from .site import baseurl, load_site_config, site_timezone
from .taxonomy import build_index, check_taxonomy, index_report


def report(issues: List[Issue], strict: bool = False) -> int:
    errors = [i for i in issues if i.level == "error"]
    warnings = [i for i in issues if i.level != "error"]
    for i in warnings:
        print(f"! {i}")
    for i in errors:
        print(f"ERROR: {i}", file=sys.stderr)
    failed = bool(errors) or (strict and bool(warnings))
    return 1 if failed else 0


def cmd_check(root: pathlib.Path, drafts: bool, strict: bool) -> int:
    if not (root / POSTS_DIR).exists():
        print(f"ERROR: {POSTS_DIR}/ missing at {root}", file=sys.stderr)
        return 1

    cfg = load_site_config(root)
    posts, issues = check_posts(root, cfg, drafts=drafts)
    issues.extend(check_taxonomy(posts))
    issues.extend(check_source_links(posts, cfg, root))

    code = report(issues, strict=strict)
    if code == 0:
        print(f"✓ checked {len(posts)} posts")
    return code


def cmd_links(root: pathlib.Path, site: Optional[str], anchors: bool) -> int:
    cfg = load_site_config(root)
    site_dir = pathlib.Path(site) if site else root / SITE_DIR
    try:
        issues = check_site_links(site_dir, baseurl(cfg), check_anchors=anchors)
    except FileNotFoundError as exc:
        print(f"ERROR: {exc} (run the Jekyll build first)", file=sys.stderr)
        return 1

    code = report(issues)
    if code == 0:
        print(f"✓ no broken links in {site_dir}")
    return code


def cmd_index(root: pathlib.Path) -> int:
    cfg = load_site_config(root)
    posts, issues = check_posts(root, cfg)
    for i in issues:
        if i.level == "error":
            print(f"- skipping {i}", file=sys.stderr)
    dumped = yaml.safe_dump(
        index_report(build_index(posts)), sort_keys=False, allow_unicode=True
    )
    print(dumped.rstrip())
    return 0


def cmd_new(root: pathlib.Path, title: str, categories, tags) -> int:
    cfg = load_site_config(root)
    try:
        path = new_post(
            root, title, categories or (), tags or (), tz=site_timezone(cfg)
        )
    except (FileExistsError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    print(f"✓ created {path.relative_to(root)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blogtools",
        description=f"Checks for the posts and build output of a site with {SITE_CONFIG}.",
    )
    parser.add_argument("--root", default=".", help="site root (default: current directory)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="validate post front matter and links")
    p_check.add_argument("--drafts", action="store_true", help="include _drafts/")
    p_check.add_argument("--strict", action="store_true", help="fail on warnings too")

    p_links = sub.add_parser("links", help="check links in the built site")
    p_links.add_argument("--site", help=f"build output (default: {SITE_DIR}/)")
    p_links.add_argument("--no-anchors", action="store_true", help="skip #fragment checks")

    sub.add_parser("index", help="print categories and tags")

    p_new = sub.add_parser("new", help="scaffold a new post")
    p_new.add_argument("title")
    p_new.add_argument("-c", "--category", action="append", dest="categories")
    p_new.add_argument("-t", "--tag", action="append", dest="tags")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    root = pathlib.Path(args.root).resolve()

    if args.command == "check":
        return cmd_check(root, args.drafts, args.strict)
    if args.command == "links":
        return cmd_links(root, args.site, not args.no_anchors)
    if args.command == "index":
        return cmd_index(root)
    return cmd_new(root, args.title, args.categories, args.tags)


if __name__ == "__main__":
    sys.exit(main())
