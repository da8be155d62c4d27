"""Table-of-contents section -> Confluence TOC macro"""

import re

from mdcf.core import nodes
from mdcf.core.models import AdfDocument, StripResult, TocBlock
from mdcf.core.placeholders import emit_sentinel, is_fence, replace_sentinels, sentinel_pattern


TOC_PREFIX = "CONFLUENCE_TOC_MACRO_PLACEHOLDER_"
TOC_HEADING_RE = re.compile(r'^#{1,6}\s+(table of contents|toc|contents)\s*#*\s*$', re.IGNORECASE)
HEADING_RE = re.compile(r'^#{1,6}(\s|$)')


def _section_end(lines: list[str], start: int) -> int:
    """Index of the next heading outside fenced code, or len(lines)."""
    in_fence = False
    for j in range(start, len(lines)):
        if is_fence(lines[j]):
            in_fence = not in_fence
        elif not in_fence and HEADING_RE.match(lines[j]):
            return j
    return len(lines)


def strip_toc_section(markdown: str) -> StripResult:
    """Replace each TOC heading and its body (up to the next heading) with a sentinel."""
    lines = markdown.split("\n")
    out: list[str] = []
    blocks: list[TocBlock] = []
    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        if is_fence(line):
            in_fence = not in_fence
        m = None if in_fence else TOC_HEADING_RE.match(line)
        if not m:
            out.append(line)
            i += 1
            continue

        i = _section_end(lines, i + 1)
        emit_sentinel(out, f"{TOC_PREFIX}{len(blocks)}")
        blocks.append(TocBlock(index=len(blocks), heading=m.group(1)))

    if not blocks:
        return StripResult(markdown=markdown)
    return StripResult(markdown="\n".join(out), blocks=blocks)


def inject_toc_macro(doc: AdfDocument, min_level: int = 1, max_level: int = 2) -> AdfDocument:
    """Swap TOC sentinels for the TOC extension node."""
    return replace_sentinels(doc, sentinel_pattern(TOC_PREFIX), lambda m: [nodes.toc_macro(min_level, max_level)])
