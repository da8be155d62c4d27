"""Publish one markdown document to Confluence.

The flow is: split frontmatter, render mermaid diagrams (phase 1), convert
to ADF, then create or update the page. On update with a merging strategy the
remote page is rendered back to markdown and reconciled with the local text
first. Rendered diagrams are uploaded as attachments afterwards and the page
is updated once more with image references (phase 2).

Transport is not implemented here; callers pass any object satisfying
ConfluencePages.
"""

import logging
from abc import abstractmethod
from typing import Callable, Optional, Protocol

from pydantic import BaseModel

from mdcf.core.converter import extract_title, markdown_to_adf
from mdcf.core.frontmatter import split_frontmatter
from mdcf.core.merge import merge_markdown
from mdcf.core.models import (
    AdfDocument, AttachmentMap, AttachmentRef, MergeResult, MergeStrategy, MermaidBlock, RenderResult,
)
from mdcf.core.parse import DEFAULT_PRESET
from mdcf.core.passes.mermaid import has_mermaid_blocks, inject_mermaid_adf, strip_mermaid_blocks
from mdcf.core.render import adf_to_markdown
from mdcf.core.utils.titles import title_from_filename
from mdcf.urls import ConfluenceUrl, build_page_web_url, parse_confluence_url


logger = logging.getLogger(__name__)

DIAGRAM_VERSION_MESSAGE = "Updated mermaid diagrams"


class SyncError(Exception):
    """A sync could not be completed; wraps the underlying client or input error."""


class ConfluencePage(BaseModel):
    id: str
    title: str
    space_id: str
    version: int = 0
    body_adf: Optional[str] = None
    web_ui: Optional[str] = None


class ConfluenceSpace(BaseModel):
    id: str
    key: str
    name: str = ""


class AttachmentUpload(BaseModel):
    success: bool
    file_id: Optional[str] = None
    collection_name: Optional[str] = None
    error: Optional[str] = None


class ConfluencePages(Protocol):
    """Page and attachment operations the sync flow needs from a Confluence client."""

    @abstractmethod
    def get_page(self, page_id: str) -> ConfluencePage:
        """Fetch a page including its ADF body and current version number."""

    @abstractmethod
    def get_space(self, space_key: str) -> ConfluenceSpace:
        """Resolve a space key to the space record."""

    @abstractmethod
    def create_page(
        self, space_id: str, title: str, adf: AdfDocument, parent_id: Optional[str] = None,
    ) -> ConfluencePage:
        """Create a page in a space, optionally below a parent page or folder."""

    @abstractmethod
    def update_page(
        self, page_id: str, title: str, adf: AdfDocument, version: int, message: Optional[str] = None,
    ) -> ConfluencePage:
        """Replace a page body; version must be the current version + 1."""

    @abstractmethod
    def upload_attachment(self, page_id: str, filename: str, data: bytes) -> AttachmentUpload:
        """Attach a file to a page."""


class SyncOptions(BaseModel):
    title: Optional[str] = None
    create: bool = False
    strategy: MergeStrategy = MergeStrategy.local_wins
    skip_mermaid: bool = False
    dry_run: bool = False
    parser_config: str = DEFAULT_PRESET


class SyncResult(BaseModel):
    page_id: Optional[str] = None
    page_url: str
    action: str  # "created" | "updated"
    title: str
    dry_run: bool = False
    diagrams: int = 0
    merge: Optional[MergeResult] = None


def _call(what: str, fn: Callable, *args, **kwargs):
    try:
        return fn(*args, **kwargs)
    except SyncError:
        raise
    except Exception as e:
        raise SyncError(f"Failed to {what}: {e}") from e


def _page_url(base_url: str, page: ConfluencePage, target: ConfluenceUrl) -> str:
    if page.web_ui:
        return build_page_web_url(base_url, page.web_ui)
    return build_page_web_url(base_url, f"/spaces/{target.space_key}/pages/{page.id}")


def resolve_title(markdown: str, source: str, explicit: Optional[str] = None, frontmatter: dict = None) -> str:
    """Explicit title, then frontmatter ``title``, then first H1, then the file name."""
    fm_title = (frontmatter or {}).get("title")
    return explicit or (str(fm_title) if fm_title else None) or extract_title(markdown) or title_from_filename(source)


def sync_markdown(
    markdown: str,
    source: str,
    url: str,
    client: Optional[ConfluencePages],
    options: Optional[SyncOptions] = None,
    render: Optional[Callable[[str, int], RenderResult]] = None,
    ) -> SyncResult:
    """Create or update the Confluence page at url from markdown.

    Args:
        markdown: Document text, frontmatter allowed.
        source: File path or URL the text came from; used for the fallback title.
        url: Confluence space, page or folder URL.
        client: Page operations; unused (and may be None) when dry_run is set.
        options: Title override, create/update, merge strategy, mermaid and dry-run flags.
        render: Diagram renderer, required when the document contains mermaid blocks.

    Raises:
        SyncError: invalid input, missing renderer or a failing client call.
    """
    options = options or SyncOptions()
    try:
        frontmatter, body = split_frontmatter(markdown)
        target = parse_confluence_url(url)
    except ValueError as e:
        raise SyncError(str(e)) from e

    title = resolve_title(body, source, options.title, frontmatter)

    blocks: list[MermaidBlock] = []
    if not options.skip_mermaid and has_mermaid_blocks(body):
        if render is None:
            raise SyncError("Mermaid diagrams found but mmdc is not installed; use --skip-mermaid to sync without them")
        stripped = strip_mermaid_blocks(body, render)
        body, blocks = stripped.markdown, stripped.blocks
        logger.info("Rendered %d/%d mermaid diagram(s)", sum(b.success for b in blocks), len(blocks))

    adf = markdown_to_adf(body, options.parser_config)
    action = "created" if options.create else "updated"

    if options.dry_run:
        logger.info("Dry run: would %s %r at %s", action.rstrip("d"), title, url)
        return SyncResult(page_id=target.page_id, page_url=url, action=action, title=title,
                          dry_run=True, diagrams=len(blocks))

    if client is None:
        raise SyncError("A Confluence client is required unless dry_run is set")

    merge: Optional[MergeResult] = None
    if options.create:
        page = _create(client, target, title, inject_mermaid_adf(adf, blocks, {}))
    else:
        page, adf, merge = _update(client, target, title, adf, body, options, blocks)

    uploaded = _upload_diagrams(client, page.id, blocks)
    if uploaded:
        current = _call("fetch page version", client.get_page, page.id)
        page = _call("update page with diagrams", client.update_page, page.id, title,
                     inject_mermaid_adf(adf, blocks, uploaded), current.version + 1, DIAGRAM_VERSION_MESSAGE)

    return SyncResult(page_id=page.id, page_url=_page_url(target.base_url, page, target), action=action,
                      title=title, diagrams=len(blocks), merge=merge)


def _create(client: ConfluencePages, target: ConfluenceUrl, title: str, adf: AdfDocument) -> ConfluencePage:
    """Create under the page/folder in target, or at the space root."""
    if target.page_id and not target.is_folder:
        parent = _call("fetch parent page", client.get_page, target.page_id)
        space_id, parent_id = parent.space_id, parent.id
    else:
        space = _call("fetch space", client.get_space, target.space_key)
        space_id, parent_id = space.id, target.page_id
    logger.info("Creating %r in space %s (parent %s)", title, space_id, parent_id)
    return _call("create page", client.create_page, space_id, title, adf, parent_id)


def _update(
    client: ConfluencePages,
    target: ConfluenceUrl,
    title: str,
    adf: AdfDocument,
    local_markdown: str,
    options: SyncOptions,
    blocks: list[MermaidBlock],
    ) -> tuple[ConfluencePage, AdfDocument, Optional[MergeResult]]:
    """Update the page in target, merging with the remote body unless local wins."""
    if not target.page_id or target.is_folder:
        raise SyncError("URL must point to a specific page for updates; use create to add a new page")

    existing = _call("fetch page", client.get_page, target.page_id)
    merge: Optional[MergeResult] = None
    if options.strategy != MergeStrategy.local_wins and existing.body_adf:
        try:
            remote_markdown = adf_to_markdown(AdfDocument.from_json(existing.body_adf))
        except ValueError as e:
            raise SyncError(f"Remote page body is not valid ADF: {e}") from e
        merge = merge_markdown(local_markdown, remote_markdown, options.strategy)
        stats = merge.stats
        log = logger.warning if merge.has_conflicts else logger.info
        log("Merged with %s%s [+%d -%d ~%d]", options.strategy.value,
            " (conflicts, local preferred)" if merge.has_conflicts else "",
            stats.added, stats.removed, stats.unchanged)
        adf = markdown_to_adf(merge.markdown, options.parser_config)

    page = _call("update page", client.update_page, existing.id, title,
                 inject_mermaid_adf(adf, blocks, {}), existing.version + 1)
    return page, adf, merge


def _upload_diagrams(client: ConfluencePages, page_id: str, blocks: list[MermaidBlock]) -> AttachmentMap:
    """Upload each rendered diagram; failures are logged and left out of the map."""
    attachments: AttachmentMap = {}
    for block in blocks:
        if not (block.success and block.png_bytes and block.filename):
            continue
        result = _call("upload attachment", client.upload_attachment, page_id, block.filename, block.png_bytes)
        if result.success and result.file_id:
            attachments[block.filename] = AttachmentRef(
                file_id=result.file_id,
                collection_name=result.collection_name or f"contentId-{page_id}",
            )
        else:
            logger.warning("Upload of %s failed: %s", block.filename, result.error or "unknown error")
    return attachments
