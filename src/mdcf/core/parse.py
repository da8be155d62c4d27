"""Markdown-it parsing and the baseline syntax-tree to ADF mapping"""

import logging
import re

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from mdcf.core import nodes
from mdcf.core.models import AdfDocument, AdfMark, AdfNode


logger = logging.getLogger(__name__)

DEFAULT_PRESET = "gfm-like"
CONFLUENCE_COMMENT_RE = re.compile(r'^<!--\s*confluence:([\w.-]+)\s*-->$')

_SIMPLE_MARKS = {"strong": "strong", "em": "em", "s": "strike"}
_BREAKS = ("softbreak", "hardbreak")


def make_parser(preset: str = DEFAULT_PRESET) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def markdown_to_adf_baseline(markdown: str, preset: str = DEFAULT_PRESET) -> AdfDocument:
    """Convert markdown to ADF with no panel/expand/TOC handling."""
    tree = SyntaxTreeNode(make_parser(preset).parse(markdown))
    return AdfDocument(content=_blocks(tree.children))


def _blocks(children: list) -> list[AdfNode]:
    out: list[AdfNode] = []
    for child in children:
        out.extend(_block(child))
    return out


def _block(node) -> list[AdfNode]:
    """Map one block-level syntax node to zero or more ADF nodes."""
    kind = node.type
    if kind == "heading":
        return [AdfNode(type="heading", attrs={"level": int(node.tag[1:])}, content=_inline_of(node))]
    if kind == "paragraph":
        return _paragraph(node)
    if kind == "bullet_list":
        return [AdfNode(type="bulletList", content=_blocks(node.children))]
    if kind == "ordered_list":
        start = int(node.attrs.get("start", 1))
        return [AdfNode(type="orderedList", attrs={"order": start}, content=_blocks(node.children))]
    if kind == "list_item":
        return [AdfNode(type="listItem", content=_blocks(node.children) or [nodes.paragraph()])]
    if kind == "blockquote":
        return [AdfNode(type="blockquote", content=_blocks(node.children) or [nodes.paragraph()])]
    if kind in ("fence", "code_block"):
        language = node.info.strip().split()[0] if node.info and node.info.strip() else None
        source = node.content[:-1] if node.content.endswith("\n") else node.content
        return [nodes.code_block(source, language)]
    if kind == "hr":
        return [AdfNode(type="rule")]
    if kind == "table":
        return [_table(node)]
    if kind == "html_block":
        return _html_block(node.content.strip())
    logger.debug("No ADF mapping for %s; descending into children", kind)
    return _blocks(node.children)


def _paragraph(node) -> list[AdfNode]:
    inline = node.children[0] if node.children else None
    parts = [c for c in (inline.children if inline else [])
             if c.type not in _BREAKS and not (c.type == "text" and not c.content.strip())]
    if parts and all(c.type == "image" for c in parts):
        return [nodes.external_image(c.attrs.get("src", ""), c.content) for c in parts]
    return [nodes.paragraph(_inline_of(node))]


def _table(node) -> AdfNode:
    rows = []
    for section in node.children:
        for tr in section.children:
            cells = [
                AdfNode(
                    type="tableHeader" if cell.type == "th" else "tableCell",
                    content=[nodes.paragraph(_inline_of(cell))],
                )
                for cell in tr.children
            ]
            rows.append(AdfNode(type="tableRow", content=cells))
    return AdfNode(type="table", attrs={"isNumberColumnEnabled": False, "layout": "default"}, content=rows)


def _html_block(source: str) -> list[AdfNode]:
    m = CONFLUENCE_COMMENT_RE.match(source)
    if m and m.group(1) == "toc":
        return [nodes.toc_macro()]
    return [nodes.paragraph([nodes.text(source)])] if source else []


def _inline_of(node) -> list[AdfNode]:
    """Inline content of a block node whose first child is the inline container."""
    if not node.children or node.children[0].type != "inline":
        return []
    return _merge_text(_inline(node.children[0].children, []))


def _inline(children: list, marks: list[AdfMark]) -> list[AdfNode]:
    out: list[AdfNode] = []
    for child in children:
        kind = child.type
        if kind in ("text", "html_inline"):
            if child.content:
                out.append(nodes.text(child.content, marks))
        elif kind == "softbreak":
            out.append(nodes.text(" ", marks))
        elif kind == "hardbreak":
            out.append(AdfNode(type="hardBreak"))
        elif kind == "code_inline":
            out.append(nodes.text(child.content, marks + [AdfMark(type="code")]))
        elif kind in _SIMPLE_MARKS:
            out.extend(_inline(child.children, marks + [AdfMark(type=_SIMPLE_MARKS[kind])]))
        elif kind == "link":
            link = AdfMark(type="link", attrs={"href": child.attrs.get("href", "")})
            out.extend(_inline(child.children, marks + [link]))
        elif kind == "image":
            # images mixed with text cannot be media nodes; keep them as links
            src = child.attrs.get("src", "")
            label = child.content or src
            if label:
                out.append(nodes.text(label, marks + [AdfMark(type="link", attrs={"href": src})]))
        else:
            out.extend(_inline(child.children, marks))
    return out


def _merge_text(content: list[AdfNode]) -> list[AdfNode]:
    """Join neighbouring text nodes that carry identical marks."""
    merged: list[AdfNode] = []
    for node in content:
        prev = merged[-1] if merged else None
        if (prev is not None and node.type == "text" and prev.type == "text"
                and _mark_key(prev) == _mark_key(node)):
            merged[-1] = prev.model_copy(update={"text": (prev.text or "") + (node.text or "")})
        else:
            merged.append(node)
    return merged


def _mark_key(node: AdfNode) -> list:
    return [m.model_dump(exclude_none=True) for m in node.marks or []]
