"""Page titles derived from file names and URLs"""

import re
from urllib.parse import urlparse


URL_RE = re.compile(r'^[a-z][a-z0-9+.-]*://', re.IGNORECASE)
EXTENSION_RE = re.compile(r'\.\w+$')
UNTITLED = "Untitled"


def title_from_filename(source: str) -> str:
    """Turn a path or URL into a page title: ``docs/getting-started.md`` -> ``Getting Started``."""
    path = urlparse(source).path if URL_RE.match(source) else source.replace("\\", "/")
    segments = [s for s in path.split("/") if s]
    name = segments[-1] if segments else UNTITLED

    name = EXTENSION_RE.sub("", name)
    name = re.sub(r'[-_]+', " ", name).strip()
    if not name:
        return UNTITLED
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), name, flags=re.ASCII)
