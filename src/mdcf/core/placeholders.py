"""Sentinel placeholders: lift markdown spans out before conversion, splice ADF back in after.

A strip pass replaces each matched span with a line ``<PREFIX><index>``
(blank-line padded so it parses as its own paragraph). The matching inject
pass searches each top-level ADF node depth-first for a text node holding a
sentinel and swaps the whole top-level node for freshly built nodes.
"""

import logging
import re
from typing import Callable, Optional

from mdcf.core.models import AdfDocument, AdfNode


logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r'^\s*(```|~~~)')

Builder = Callable[[re.Match], Optional[list[AdfNode]]]


def is_fence(line: str) -> bool:
    """True for a line that opens or closes a fenced code block."""
    return bool(FENCE_RE.match(line))


def sentinel_pattern(prefix: str) -> re.Pattern:
    """Compiled pattern matching ``<prefix><digits>``; group 1 is the index."""
    return re.compile(re.escape(prefix) + r'(\d+)')


def emit_sentinel(out: list[str], token: str) -> None:
    out.extend(["", token, ""])


def find_sentinel(node: AdfNode, pattern: re.Pattern) -> Optional[re.Match]:
    """Depth-first search for the first text containing the pattern."""
    if node.text:
        m = pattern.search(node.text)
        if m:
            return m
    for child in node.content or []:
        m = find_sentinel(child, pattern)
        if m:
            return m
    return None


def replace_sentinels(doc: AdfDocument, pattern: re.Pattern, build: Builder) -> AdfDocument:
    """Return a new document with every sentinel-bearing top-level node rebuilt.

    ``build`` returns the replacement nodes for a match, or None when no
    block exists for it; the original node (sentinel text included) is then
    kept so the miss stays visible.
    """
    content: list[AdfNode] = []
    for node in doc.content:
        m = find_sentinel(node, pattern)
        replacement = build(m) if m else None
        if replacement is None:
            if m:
                logger.warning("No block for placeholder %s; leaving it in place", m.group(0))
            content.append(node)
        else:
            content.extend(replacement)
    return doc.with_content(content)


def index_blocks(blocks: list) -> dict[int, object]:
    return {b.index: b for b in blocks}
