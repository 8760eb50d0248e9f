from __future__ import annotations

import pathlib
from datetime import tzinfo
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import DEFAULT_PERMALINK, SITE_CONFIG
from .utils import read_yaml


def load_site_config(root: pathlib.Path) -> Dict[str, Any]:
    cfg = read_yaml(root / SITE_CONFIG)
    if not isinstance(cfg, dict):
        return {}
    return cfg


def post_permalink(cfg: Dict[str, Any]) -> str:
    """
    Permalink pattern applied to posts.

    Front matter defaults scoped to ``type: posts`` win over the top-level
    ``permalink`` key, which is how Chirpy ships its ``/posts/:title/``.
    """
    for entry in cfg.get("defaults") or []:
        if not isinstance(entry, dict):
            continue
        scope = entry.get("scope") or {}
        values = entry.get("values") or {}
        if scope.get("type") == "posts" and values.get("permalink"):
            return str(values["permalink"])
    permalink = cfg.get("permalink")
    if permalink and str(permalink).startswith("/"):
        return str(permalink)
    return DEFAULT_PERMALINK


def baseurl(cfg: Dict[str, Any]) -> str:
    return str(cfg.get("baseurl") or "").rstrip("/")


def site_timezone(cfg: Dict[str, Any]) -> Optional[tzinfo]:
    name = cfg.get("timezone")
    if not name:
        return None
    try:
        return ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError):
        print(f"! unknown timezone {name!r} in {SITE_CONFIG}, using local time")
        return None
