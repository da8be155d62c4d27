"""Unit tests for core/utils/titles.py"""

import pytest

from mdcf.core.utils.titles import title_from_filename


@pytest.mark.parametrize("source,expected", [
    ("docs/guides/getting-started.md", "Getting Started"),
    ("my_notes.md", "My Notes"),
    ("api--reference__v2.markdown", "Api Reference V2"),
    ("README.md", "README"),
    ("C:\\docs\\release-plan.md", "Release Plan"),
    ("https://example.com/raw/main/docs/setup-guide.md", "Setup Guide"),
    ("https://example.com/", "Untitled"),
    ("", "Untitled"),
    ("notes", "Notes"),
    (".md", "Untitled"),
    ("docs/__.md", "Untitled"),
])
def test_title_from_filename(source, expected):
    """Path or URL tail, extension dropped, separators spaced, words capitalised."""
    assert title_from_filename(source) == expected
