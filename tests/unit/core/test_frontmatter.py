"""Unit tests for core/frontmatter.py"""

import pytest

from mdcf.core.frontmatter import split_frontmatter


def test_split_frontmatter_with_yaml():
    """The YAML header is parsed and removed from the body."""
    fm, body = split_frontmatter("---\ntitle: Hello\ntags: [a, b]\n---\n# Body\n")
    assert fm == {"title": "Hello", "tags": ["a", "b"]}
    assert body == "# Body\n"


def test_split_frontmatter_header_only():
    """A header with nothing after it leaves an empty body."""
    fm, body = split_frontmatter("---\ntitle: Only\n---")
    assert fm == {"title": "Only"}
    assert body == ""


def test_split_frontmatter_none():
    """Text without a header is returned untouched."""
    text = "# No frontmatter\n\n---\n"
    assert split_frontmatter(text) == ({}, text)


def test_split_frontmatter_invalid_yaml():
    with pytest.raises(ValueError, match="Invalid YAML frontmatter"):
        split_frontmatter("---\nkey: [unclosed\n---\nbody")


def test_split_frontmatter_not_a_mapping():
    """A YAML list header is rejected."""
    with pytest.raises(ValueError, match="expected a mapping"):
        split_frontmatter("---\n- a\n- b\n---\nbody")
