"""GFM alert blockquotes (> [!NOTE] ...) <-> Confluence panels"""

import re

from mdcf.core import nodes
from mdcf.core.models import AdfDocument, PanelBlock, StripResult, panel_type_from_alert
from mdcf.core.parse import DEFAULT_PRESET, markdown_to_adf_baseline
from mdcf.core.placeholders import (
    emit_sentinel, index_blocks, is_fence, replace_sentinels, sentinel_pattern,
)


PANEL_PREFIX = "CONFLUENCE_PANEL_PLACEHOLDER_"
ALERT_RE = re.compile(r'^\s*>\s*\[!(NOTE|TIP|IMPORTANT|WARNING|CAUTION)\]\s*$', re.IGNORECASE)
QUOTE_RE = re.compile(r'^\s*>')
QUOTE_MARKER_RE = re.compile(r'^\s*> ?')


def strip_panel_blocks(markdown: str) -> StripResult:
    """Lift alert blockquotes out of markdown, leaving one sentinel per panel."""
    lines = markdown.split("\n")
    out: list[str] = []
    blocks: list[PanelBlock] = []
    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        if is_fence(line):
            in_fence = not in_fence
        m = None if in_fence else ALERT_RE.match(line)
        if not m:
            out.append(line)
            i += 1
            continue

        body: list[str] = []
        i += 1
        while i < len(lines) and QUOTE_RE.match(lines[i]):
            body.append(QUOTE_MARKER_RE.sub("", lines[i], count=1))
            i += 1
        emit_sentinel(out, f"{PANEL_PREFIX}{len(blocks)}")
        blocks.append(PanelBlock(
            index=len(blocks),
            panel_type=panel_type_from_alert(m.group(1)),
            content_markdown="\n".join(body).strip(),
        ))

    if not blocks:
        return StripResult(markdown=markdown)
    return StripResult(markdown="\n".join(out), blocks=blocks)


def inject_panel_adf(doc: AdfDocument, panels: list[PanelBlock], preset: str = DEFAULT_PRESET) -> AdfDocument:
    """Replace panel sentinels with panel nodes built from each body's own conversion."""
    by_index = index_blocks(panels)

    def build(m: re.Match):
        block = by_index.get(int(m.group(1)))
        if block is None:
            return None
        body = markdown_to_adf_baseline(block.content_markdown, preset) if block.content_markdown else AdfDocument()
        return [nodes.panel(block.panel_type, body.content)]

    return replace_sentinels(doc, sentinel_pattern(PANEL_PREFIX), build)
