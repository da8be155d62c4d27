"""Two-phase Mermaid handling.

Phase 1 runs on markdown before conversion: each ```mermaid block is rendered
through the supplied callable and swapped for a sentinel. Phase 2 runs on the
converted ADF once the rendered images have been uploaded and their
attachment ids are known.
"""

import logging
import re
from typing import Callable

from mdcf.core import nodes
from mdcf.core.models import (
    AdfDocument, AdfNode, AttachmentMap, MermaidBlock, RenderResult, StripResult,
)
from mdcf.core.placeholders import emit_sentinel, index_blocks, is_fence, replace_sentinels


logger = logging.getLogger(__name__)

DIAGRAM_PREFIX = "MERMAID_DIAGRAM_PLACEHOLDER_"
ERROR_PREFIX = "MERMAID_ERROR_PLACEHOLDER_"
MERMAID_SENTINEL_RE = re.compile(r'MERMAID_(DIAGRAM|ERROR)_PLACEHOLDER_(\d+)')
MERMAID_OPEN_RE = re.compile(r'^```mermaid\s*$')
FENCE_CLOSE_RE = re.compile(r'^```\s*$')
SOURCE_TITLE = "View Mermaid Source Code"

Renderer = Callable[[str, int], RenderResult]


def _scan(lines: list[str]):
    """Yield (open_index, close_index) for each mermaid fence outside other fenced code."""
    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        if not in_fence and MERMAID_OPEN_RE.match(line):
            close = next((j for j in range(i + 1, len(lines)) if FENCE_CLOSE_RE.match(lines[j])), -1)
            if close >= 0:
                yield i, close
                i = close + 1
                continue
        if is_fence(line):
            in_fence = not in_fence
        i += 1


def has_mermaid_blocks(markdown: str) -> bool:
    return next(_scan(markdown.split("\n")), None) is not None


def strip_mermaid_blocks(markdown: str, render: Renderer) -> StripResult:
    """Render each mermaid block and replace it with a diagram or error sentinel."""
    lines = markdown.split("\n")
    out: list[str] = []
    blocks: list[MermaidBlock] = []
    pos = 0
    for start, close in _scan(lines):
        out.extend(lines[pos:start])
        index = len(blocks)
        code = "\n".join(lines[start + 1:close]).strip()
        result = render(code, index)
        if result.success:
            blocks.append(MermaidBlock(index=index, success=True, code=code,
                                       png_bytes=result.png_bytes, filename=result.filename))
            emit_sentinel(out, f"{DIAGRAM_PREFIX}{index}")
        else:
            logger.warning("Mermaid diagram %d failed to render: %s", index, result.error)
            blocks.append(MermaidBlock(index=index, success=False, code=code, error=result.error))
            emit_sentinel(out, f"{ERROR_PREFIX}{index}")
        pos = close + 1

    if not blocks:
        return StripResult(markdown=markdown)
    out.extend(lines[pos:])
    return StripResult(markdown="\n".join(out), blocks=blocks)


def _source_expand(block: MermaidBlock, failed: bool) -> AdfNode:
    title = f"Mermaid Source (render failed: {block.error or 'unknown error'})" if failed else SOURCE_TITLE
    return nodes.expand(title, [nodes.code_block(block.code, "text")])


def inject_mermaid_adf(doc: AdfDocument, blocks: list[MermaidBlock], attachments: AttachmentMap) -> AdfDocument:
    """Replace mermaid sentinels with the uploaded image (when available) and a source expand."""
    by_index = index_blocks(blocks)

    def build(m: re.Match):
        block = by_index.get(int(m.group(2)))
        if block is None:
            return None
        failed = m.group(1) == "ERROR" or not block.success
        out: list[AdfNode] = []
        if not failed and block.filename:
            ref = attachments.get(block.filename)
            if ref is not None:
                out.append(nodes.attachment_image(ref, block.filename))
            else:
                logger.info("No attachment for %s; emitting source only", block.filename)
        out.append(_source_expand(block, failed))
        return out

    return replace_sentinels(doc, MERMAID_SENTINEL_RE, build)
