"""Builders for the ADF nodes emitted by the converter and its passes"""

from typing import Any, Optional

from mdcf.core.models import AdfMark, AdfNode, AttachmentRef, PanelType


TOC_EXTENSION_TYPE = "com.atlassian.confluence.macro.core"


def text(value: str, marks: Optional[list[AdfMark]] = None) -> AdfNode:
    return AdfNode(type="text", text=value, marks=list(marks) if marks else None)


def paragraph(content: Optional[list[AdfNode]] = None) -> AdfNode:
    return AdfNode(type="paragraph", content=list(content or []))


def code_block(source: str, language: Optional[str] = None) -> AdfNode:
    """codeBlock with a single text child; empty source yields no children."""
    attrs = {"language": language} if language else None
    return AdfNode(type="codeBlock", attrs=attrs, content=[text(source)] if source else [])


def panel(panel_type: PanelType, content: list[AdfNode]) -> AdfNode:
    return AdfNode(type="panel", attrs={"panelType": PanelType(panel_type).value}, content=list(content))


def expand(title: str, content: list[AdfNode]) -> AdfNode:
    return AdfNode(type="expand", attrs={"title": title}, content=list(content))


def toc_macro(min_level: int = 1, max_level: int = 2) -> AdfNode:
    """Confluence table-of-contents macro as a block extension node."""
    params: dict[str, Any] = {
        "minLevel": {"value": str(min_level)},
        "maxLevel": {"value": str(max_level)},
    }
    return AdfNode(
        type="extension",
        attrs={
            "extensionType": TOC_EXTENSION_TYPE,
            "extensionKey": "toc",
            "parameters": {"macroParams": params},
        },
    )


def external_image(url: str, alt: str = "") -> AdfNode:
    media_attrs = {"type": "external", "url": url}
    if alt:
        media_attrs["alt"] = alt
    return AdfNode(
        type="mediaSingle",
        attrs={"layout": "center"},
        content=[AdfNode(type="media", attrs=media_attrs)],
    )


def attachment_image(ref: AttachmentRef, alt: str) -> AdfNode:
    return AdfNode(
        type="mediaSingle",
        attrs={"layout": "center"},
        content=[AdfNode(type="media", attrs={
            "type": "file",
            "collection": ref.collection_name,
            "id": ref.file_id,
            "alt": alt,
        })],
    )
