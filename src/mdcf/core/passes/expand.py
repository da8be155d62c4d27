"""`:::expand Title` ... `:::` directives <-> Confluence expand sections"""

import re
from typing import Optional

from mdcf.core import nodes
from mdcf.core.models import AdfDocument, ExpandBlock, PanelBlock, StripResult
from mdcf.core.parse import DEFAULT_PRESET, markdown_to_adf_baseline
from mdcf.core.passes.panels import inject_panel_adf
from mdcf.core.placeholders import (
    emit_sentinel, index_blocks, is_fence, replace_sentinels, sentinel_pattern,
)


EXPAND_PREFIX = "CONFLUENCE_EXPAND_PLACEHOLDER_"
EXPAND_OPEN_RE = re.compile(r'^:::expand(?:\s+(.*?))?\s*$')
EXPAND_CLOSE = ":::"
DEFAULT_TITLE = "Details"


def _find_close(lines: list[str], start: int) -> int:
    """Index of the closing ``:::`` at or after start, ignoring fenced code; -1 if none."""
    in_fence = False
    for j in range(start, len(lines)):
        if is_fence(lines[j]):
            in_fence = not in_fence
        elif not in_fence and lines[j].strip() == EXPAND_CLOSE:
            return j
    return -1


def strip_expand_blocks(markdown: str) -> StripResult:
    """Lift expand directives out of markdown; unterminated directives are left alone."""
    lines = markdown.split("\n")
    out: list[str] = []
    blocks: list[ExpandBlock] = []
    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        if is_fence(line):
            in_fence = not in_fence
        m = None if in_fence else EXPAND_OPEN_RE.match(line)
        close = _find_close(lines, i + 1) if m else -1
        if close < 0:
            out.append(line)
            i += 1
            continue

        emit_sentinel(out, f"{EXPAND_PREFIX}{len(blocks)}")
        blocks.append(ExpandBlock(
            index=len(blocks),
            title=(m.group(1) or "").strip() or DEFAULT_TITLE,
            content_markdown="\n".join(lines[i + 1:close]).strip("\n"),
        ))
        i = close + 1

    if not blocks:
        return StripResult(markdown=markdown)
    return StripResult(markdown="\n".join(out), blocks=blocks)


def inject_expand_adf(
    doc: AdfDocument,
    expands: list[ExpandBlock],
    preset: str = DEFAULT_PRESET,
    panels: Optional[list[PanelBlock]] = None,
    ) -> AdfDocument:
    """Replace expand sentinels with expand nodes wrapping each converted body.

    Panels lifted from inside an expand body are injected into that body.
    """
    by_index = index_blocks(expands)

    def build(m: re.Match):
        block = by_index.get(int(m.group(1)))
        if block is None:
            return None
        body = markdown_to_adf_baseline(block.content_markdown, preset) if block.content_markdown else AdfDocument()
        if panels:
            body = inject_panel_adf(body, panels, preset)
        return [nodes.expand(block.title, body.content)]

    return replace_sentinels(doc, sentinel_pattern(EXPAND_PREFIX), build)
