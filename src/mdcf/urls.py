"""Parsing and building Confluence Cloud URLs.

Supported page URL forms::

    https://acme.atlassian.net/wiki/spaces/SPACE/pages/12345/Page+Title
    https://acme.atlassian.net/wiki/spaces/SPACE/pages/12345
    https://acme.atlassian.net/wiki/spaces/SPACE/folder/12345
    https://acme.atlassian.net/wiki/spaces/SPACE
"""

import re
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel


FOLDER_RE = re.compile(r'/wiki/spaces/([^/]+)/folder/(\d+)')
PAGE_RE = re.compile(r'/wiki/spaces/([^/]+)/pages/(\d+)')
SPACE_RE = re.compile(r'/wiki/spaces/([^/]+)/?$')
PAGE_ID_RE = re.compile(r'^\d+$')


class ConfluenceUrl(BaseModel):
    base_url: str
    space_key: str
    page_id: Optional[str] = None
    is_folder: bool = False


def parse_confluence_url(url: str) -> ConfluenceUrl:
    """Split a Confluence URL into site, space key and optional page/folder id."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid URL: {url}")
    base_url = f"{parsed.scheme}://{parsed.netloc}"

    if m := FOLDER_RE.search(parsed.path):
        return ConfluenceUrl(base_url=base_url, space_key=m.group(1), page_id=m.group(2), is_folder=True)
    if m := PAGE_RE.search(parsed.path):
        return ConfluenceUrl(base_url=base_url, space_key=m.group(1), page_id=m.group(2))
    if m := SPACE_RE.search(parsed.path):
        return ConfluenceUrl(base_url=base_url, space_key=m.group(1))

    raise ValueError(
        f"Could not parse Confluence URL: {url}. Expected "
        "https://domain.atlassian.net/wiki/spaces/SPACE/pages/12345 or .../folder/12345"
    )


def build_api_base_url(base_url: str) -> str:
    """Base URL of the Confluence v2 REST API."""
    return f"{base_url.rstrip('/')}/wiki/api/v2"


def build_page_web_url(base_url: str, web_ui_path: str) -> str:
    """Browser URL for a page from its ``_links.webui`` path."""
    return f"{base_url.rstrip('/')}/wiki{web_ui_path}"


def extract_page_id(value: str) -> str:
    """Accept a raw numeric id or a page URL; raise ValueError when there is no id."""
    if PAGE_ID_RE.match(value):
        return value
    parsed = parse_confluence_url(value)
    if not parsed.page_id:
        raise ValueError(f"No page ID found in: {value}")
    return parsed.page_id
