"""Markdown -> ADF pipeline: strip TOC/panels/expands, convert, inject them back"""

import re
from typing import Optional

from mdcf.core.models import AdfDocument
from mdcf.core.parse import DEFAULT_PRESET, markdown_to_adf_baseline
from mdcf.core.passes.expand import inject_expand_adf, strip_expand_blocks
from mdcf.core.passes.panels import inject_panel_adf, strip_panel_blocks
from mdcf.core.passes.toc import inject_toc_macro, strip_toc_section


H1_RE = re.compile(r'^#\s+(.+)$')


def markdown_to_adf(markdown: str, preset: str = DEFAULT_PRESET) -> AdfDocument:
    """Convert markdown to an ADF document including TOC, panel and expand nodes.

    Mermaid blocks are not handled here; run strip_mermaid_blocks first and
    inject_mermaid_adf once attachments exist.
    """
    toc = strip_toc_section(markdown)
    panels = strip_panel_blocks(toc.markdown)
    expands = strip_expand_blocks(panels.markdown)

    doc = markdown_to_adf_baseline(expands.markdown, preset)

    if toc.found:
        doc = inject_toc_macro(doc)
    if panels.found:
        doc = inject_panel_adf(doc, panels.blocks, preset)
    if expands.found:
        doc = inject_expand_adf(doc, expands.blocks, preset, panels.blocks)
    return doc


def extract_title(markdown: str) -> Optional[str]:
    """Return the first H1 heading text, or None."""
    for line in markdown.split("\n"):
        m = H1_RE.match(line)
        if m:
            return m.group(1).strip()
    return None
