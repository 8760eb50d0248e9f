from __future__ import annotations

from typing import List, Tuple

from .config import (
    FENCE,
    HTML_SRC_OR_HREF,
    INLINE_CODE,
    MD_LINK_IMG,
)


def map_noncode(md: str, fn):
    parts, last = [], 0
    for m in FENCE.finditer(md):
        pre = md[last : m.start()]
        parts.append(fn(pre))
        parts.append(md[m.start() : m.end()])
        last = m.end()
    parts.append(fn(md[last:]))
    return "".join(parts)


def map_noncode_noninline(md: str, fn):
    """Like `map_noncode`, but inline code spans are held back from `fn` too."""

    def _strip_inline(s):
        spans, tokens = [], []

        def repl(m):
            token = f"@@C{len(spans)}@@"
            spans.append(m.group(0))
            tokens.append(token)
            return token

        t = INLINE_CODE.sub(repl, s)
        t = fn(t)
        for token, span in zip(tokens, spans):
            t = t.replace(token, span, 1)
        return t

    return map_noncode(md, _strip_inline)


def extract_links(md: str) -> List[Tuple[str, bool]]:
    """
    (url, is_image) for Markdown and inline HTML links in prose.

    Fenced blocks and inline code are example text and are skipped.
    """
    found: List[Tuple[str, bool]] = []

    def _collect(s):
        for m in MD_LINK_IMG.finditer(s):
            found.append((m.group("url"), m.group(1) == "!"))
        for m in HTML_SRC_OR_HREF.finditer(s):
            found.append((m.group("url"), m.group("attr") == "src"))
        return s

    map_noncode_noninline(md, _collect)
    return found
