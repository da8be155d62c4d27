"""ADF -> Markdown rendering for the node subset Confluence pages produce.

Unknown or malformed nodes never raise: they fall back to their inline text.
"""

import logging
from typing import Any, Optional

from mdcf.core.models import AdfDocument, AdfMark, AdfNode, alert_type_from_panel


logger = logging.getLogger(__name__)

# Applied innermost first, so strong+em renders as ***text***
MARK_ORDER = ("strong", "em", "code", "strike", "link")
MARK_WRAPPERS = {"strong": "**{}**", "em": "*{}*", "code": "`{}`", "strike": "~~{}~~"}
NESTED_INDENT = "  "


def adf_to_markdown(doc: AdfDocument) -> str:
    """Render a whole document: blocks separated by blank lines, one trailing newline."""
    body = "\n\n".join(_node(node, "") for node in doc.content)
    return body.rstrip() + "\n"


def _attr(node: AdfNode, key: str, default: Any = None) -> Any:
    value = (node.attrs or {}).get(key)
    return default if value in (None, "") else value


def _blocks(content: Optional[list[AdfNode]]) -> str:
    return "\n\n".join(_node(child, "") for child in content or [])


def _node(node: AdfNode, indent: str) -> str:
    kind = node.type
    if kind == "heading":
        return _heading(node)
    if kind == "paragraph":
        return _inline(node.content)
    if kind == "bulletList":
        return _list(node, indent, ordered=False)
    if kind == "orderedList":
        return _list(node, indent, ordered=True)
    if kind == "codeBlock":
        return f"```{_attr(node, 'language', '')}\n{_inline(node.content)}\n```"
    if kind == "blockquote":
        return _quote(_blocks(node.content)) if node.content else ">"
    if kind == "table":
        return _table(node)
    if kind == "rule":
        return "---"
    if kind == "mediaSingle":
        return _media_single(node)
    if kind == "panel":
        alert = alert_type_from_panel(_attr(node, "panelType"))
        return f"> [!{alert.value}]\n{_quote(_blocks(node.content))}"
    if kind in ("expand", "nestedExpand"):
        return f":::expand {_attr(node, 'title', 'Details')}\n{_blocks(node.content)}\n:::"
    if kind in ("extension", "bodiedExtension"):
        return f"<!-- confluence:{_attr(node, 'extensionKey', 'unknown')} -->"
    logger.debug("Unsupported ADF node %r rendered as inline text", kind)
    return _inline(node.content)


def _heading(node: AdfNode) -> str:
    level = _attr(node, "level", 1)
    if not isinstance(level, int) or not 1 <= level <= 6:
        level = 1
    return f"{'#' * level} {_inline(node.content)}"


def _quote(text: str) -> str:
    return "\n".join(f"> {line}" for line in text.split("\n"))


def _list(node: AdfNode, indent: str, ordered: bool) -> str:
    items = node.content or []
    return "\n".join(
        _list_item(item, indent, f"{i}. " if ordered else "- ")
        for i, item in enumerate(items, start=1)
    )


def _list_item(item: AdfNode, indent: str, prefix: str) -> str:
    parts = []
    for child in item.content or []:
        if child.type == "paragraph":
            parts.append(_inline(child.content))
        elif child.type in ("bulletList", "orderedList"):
            parts.append(_list(child, indent + NESTED_INDENT, ordered=child.type == "orderedList"))
        else:
            parts.append(_node(child, indent + NESTED_INDENT))
    if not parts:
        return f"{indent}{prefix}"
    return "\n".join([f"{indent}{prefix}{parts[0]}", *parts[1:]])


def _table(node: AdfNode) -> str:
    rows: list[list[str]] = []
    for row in node.content or []:
        if row.type != "tableRow" or not row.content:
            continue
        rows.append([_cell(cell) for cell in row.content])
    if not rows:
        return ""

    width = max(len(r) for r in rows)
    rows = [r + [""] * (width - len(r)) for r in rows]
    lines = [_row(rows[0]), _row(["---"] * width)]
    lines.extend(_row(r) for r in rows[1:])
    return "\n".join(lines)


def _cell(cell: AdfNode) -> str:
    text = " ".join(_inline(block.content) for block in cell.content or [])
    return text.replace("|", "\\|")


def _row(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def _media_single(node: AdfNode) -> str:
    media = next((c for c in node.content or [] if c.type == "media"), None)
    if media is None:
        return ""
    alt = _attr(media, "alt", "image")
    url = _attr(media, "url")
    if url:
        return f"![{alt}]({url})"
    return f"![{alt}](attachment:{_attr(media, 'id', '')})"


def _inline(content: Optional[list[AdfNode]]) -> str:
    return "".join(_inline_node(child) for child in content or [])


def _inline_node(node: AdfNode) -> str:
    kind = node.type
    if kind == "text":
        return _apply_marks(node.text or "", node.marks)
    if kind == "hardBreak":
        return "\n"
    if kind == "inlineCard":
        url = _attr(node, "url")
        return f"<{url}>" if url else ""
    if kind in ("mention", "emoji"):
        return str(_attr(node, "text", ""))
    return _inline(node.content)


def _apply_marks(text: str, marks: Optional[list[AdfMark]]) -> str:
    if not text or not marks:
        return text
    present = {mark.type: mark for mark in marks}
    for name in MARK_ORDER:
        mark = present.get(name)
        if mark is None:
            continue
        if name == "link":
            href = (mark.attrs or {}).get("href")
            if href:
                text = f"[{text}]({href})"
        else:
            text = MARK_WRAPPERS[name].format(text)
    return text
