"""Integration tests for the convert and to-md commands"""

import json

from mdcf.cli import commands
from mdcf.cli.cli import app
from mdcf.core.models import RenderResult


DOC = """\
---
title: Ignored
---
# Guide

> [!TIP]
> Use the fast path.

:::expand Details
More here.
:::
"""

MERMAID_DOC = "# D\n\n```mermaid\ngraph TD\n  A-->B\n```\n"


def test_convert_writes_adf_json(runner, tmp_path):
    """convert --out writes an ADF document with panel and expand nodes; frontmatter is dropped."""
    (tmp_path / "guide.md").write_text(DOC)
    result = runner.invoke(app, ["convert", "guide.md", "--out", "guide.json"])
    assert result.exit_code == 0, result.output

    doc = json.loads((tmp_path / "guide.json").read_text())
    assert doc["version"] == 1 and doc["type"] == "doc"
    assert [n["type"] for n in doc["content"]] == ["heading", "panel", "expand"]
    assert doc["content"][1]["attrs"] == {"panelType": "success"}
    assert "Ignored" not in (tmp_path / "guide.json").read_text()


def test_convert_to_stdout(runner, tmp_path):
    (tmp_path / "a.md").write_text("hello\n")
    result = runner.invoke(app, ["convert", "a.md"])
    assert result.exit_code == 0, result.output
    assert '"type": "doc"' in result.output


def test_convert_missing_file(runner):
    result = runner.invoke(app, ["convert", "nope.md"])
    assert result.exit_code == 1
    assert "Error: Cannot read nope.md" in result.output


def test_convert_invalid_frontmatter(runner, tmp_path):
    (tmp_path / "bad.md").write_text("---\nkey: [unclosed\n---\nbody\n")
    result = runner.invoke(app, ["convert", "bad.md"])
    assert result.exit_code == 1
    assert "Invalid YAML frontmatter" in result.output


def test_convert_mermaid_without_mmdc(runner, tmp_path, monkeypatch):
    """Diagrams with no mmdc available fail with a hint about --skip-mermaid."""
    monkeypatch.setattr(commands, "find_mmdc", lambda explicit=None: None)
    (tmp_path / "d.md").write_text(MERMAID_DOC)
    result = runner.invoke(app, ["convert", "d.md"])
    assert result.exit_code == 1
    assert "--skip-mermaid" in result.output


def test_convert_mermaid_rendered_source_kept(runner, tmp_path, monkeypatch):
    """Rendered diagrams have no attachment offline, so the source expand is emitted."""
    monkeypatch.setattr(commands, "find_mmdc", lambda explicit=None: "mmdc")
    monkeypatch.setattr(commands, "make_renderer", lambda path, timeout: (
        lambda code, index: RenderResult(success=True, png_bytes=b"p", filename=f"mermaid-diagram-{index}.png")
    ))
    (tmp_path / "d.md").write_text(MERMAID_DOC)
    result = runner.invoke(app, ["convert", "d.md", "-o", "d.json"])
    assert result.exit_code == 0, result.output
    doc = json.loads((tmp_path / "d.json").read_text())
    assert [n["type"] for n in doc["content"]] == ["heading", "expand"]
    assert doc["content"][1]["attrs"]["title"] == "View Mermaid Source Code"


def test_convert_skip_mermaid(runner, tmp_path, monkeypatch):
    """--skip-mermaid keeps the diagram as a mermaid code block and never looks for mmdc."""
    monkeypatch.setattr(commands, "find_mmdc", lambda explicit=None: 1 / 0)
    (tmp_path / "d.md").write_text(MERMAID_DOC)
    result = runner.invoke(app, ["convert", "d.md", "--skip-mermaid", "-o", "d.json"])
    assert result.exit_code == 0, result.output
    doc = json.loads((tmp_path / "d.json").read_text())
    assert doc["content"][1]["attrs"] == {"language": "mermaid"}


def test_to_md_renders_markdown(runner, tmp_path):
    """to-md renders an ADF JSON file back to markdown."""
    adf = {"version": 1, "type": "doc", "content": [
        {"type": "heading", "attrs": {"level": 2}, "content": [{"type": "text", "text": "Hi"}]},
        {"type": "panel", "attrs": {"panelType": "warning"},
         "content": [{"type": "paragraph", "content": [{"type": "text", "text": "careful"}]}]},
    ]}
    (tmp_path / "page.json").write_text(json.dumps(adf))
    result = runner.invoke(app, ["to-md", "page.json", "--out", "page.md"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "page.md").read_text() == "## Hi\n\n> [!WARNING]\n> careful\n"


def test_to_md_invalid_json(runner, tmp_path):
    (tmp_path / "bad.json").write_text("{not json")
    result = runner.invoke(app, ["to-md", "bad.json"])
    assert result.exit_code == 1
    assert "not a valid ADF document" in result.output


def test_convert_then_to_md(runner, tmp_path):
    """convert followed by to-md reproduces the constructs."""
    (tmp_path / "guide.md").write_text(DOC)
    assert runner.invoke(app, ["convert", "guide.md", "-o", "g.json"]).exit_code == 0
    assert runner.invoke(app, ["to-md", "g.json", "-o", "g.md"]).exit_code == 0
    assert (tmp_path / "g.md").read_text() == (
        "# Guide\n\n> [!TIP]\n> Use the fast path.\n\n:::expand Details\nMore here.\n:::\n"
    )
