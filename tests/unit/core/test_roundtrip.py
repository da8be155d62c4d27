"""Markdown -> ADF -> markdown round trips"""

from mdcf.core.converter import markdown_to_adf
from mdcf.core.render import adf_to_markdown


DOC_MD = """\
# Title

Some **bold** and *em* text with `code` and a [link](https://example.com).

- a
- b
  - c

1. one
2. two

> [!NOTE]
> note body

:::expand More
hidden
:::

```python
x = 1
```

---

| A | B |
| --- | --- |
| 1 | 2 |
"""


def _round(md: str) -> str:
    return adf_to_markdown(markdown_to_adf(md))


def test_heading_level_six_round_trip():
    """Six '#' survive the trip."""
    out = _round("###### Deep")
    assert out == "###### Deep\n"
    assert out.split(" ")[0].count("#") == 6


def test_table_round_trip():
    """A 2x2 table keeps its cells and a separator of the same width."""
    out = _round("| A | B |\n| --- | --- |\n| 1 | 2 |")
    lines = out.splitlines()
    assert lines[0] == "| A | B |"
    assert lines[1] == "| --- | --- |"
    assert lines[2] == "| 1 | 2 |"


def test_panel_round_trip_keeps_type():
    """A panel comes back as the same alert and converts to the same panel type."""
    out = _round("> [!CAUTION]\n> hot")
    assert out == "> [!CAUTION]\n> hot\n"
    assert markdown_to_adf(out).content[0].attrs == {"panelType": "error"}


def test_expand_round_trip():
    out = _round(":::expand Title here\nbody\n:::")
    assert out == ":::expand Title here\nbody\n:::\n"


def test_toc_round_trips_as_comment():
    """A TOC macro renders as a confluence comment that converts back to the macro."""
    out = _round("## Contents\n- [x](#x)\n\n# X")
    assert out.startswith("<!-- confluence:toc -->")
    assert markdown_to_adf(out).content[0].attrs["extensionKey"] == "toc"


def test_document_converges_after_one_round():
    """Rendering the converted document again is a fixed point."""
    first = adf_to_markdown(markdown_to_adf(DOC_MD))
    assert _round(first) == first


def test_document_round_trip_text():
    """The full sample renders back to itself."""
    assert _round(DOC_MD) == DOC_MD
