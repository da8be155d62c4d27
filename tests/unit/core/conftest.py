"""Shared fixtures for core unit tests"""

import pytest

from mdcf.core.models import AdfDocument, AdfNode
from mdcf.core import nodes


SAMPLE_MD = """\
# Heading 1

A paragraph with **bold** text.

## Heading 2

- item one
- item two

```python
print("hello")
```

---

Footer paragraph.
"""

RICH_MD = """\
# Release notes

## Table of Contents

- [Changes](#changes)

## Changes

> [!WARNING]
> Back up first.

:::expand Migration steps
1. Stop the service
2. Run the upgrade
:::

| Name | Value |
| --- | --- |
| a | 1 |
"""


@pytest.fixture(name="make_doc")
def make_doc_fixture():
    """Build an AdfDocument from top-level nodes."""
    def _make(*content: AdfNode) -> AdfDocument:
        return AdfDocument(content=list(content))
    return _make


@pytest.fixture(name="para")
def para_fixture():
    """Paragraph holding one plain text node."""
    return lambda value: nodes.paragraph([nodes.text(value)])


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="rich_md")
def rich_md_fixture():
    return RICH_MD
