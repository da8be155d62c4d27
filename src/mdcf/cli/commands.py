"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdcf.config import Settings, load_config, mask_token, missing_credentials
from mdcf.core.converter import markdown_to_adf
from mdcf.core.frontmatter import split_frontmatter
from mdcf.core.merge import merge_markdown
from mdcf.core.models import AdfDocument, MergeStrategy
from mdcf.core.passes.mermaid import has_mermaid_blocks, inject_mermaid_adf, strip_mermaid_blocks
from mdcf.core.render import adf_to_markdown
from mdcf.core.utils.diff import unified_diff
from mdcf.core.utils.titles import title_from_filename
from mdcf.mermaid import find_mmdc, make_renderer


LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _read(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot read {path}", e)


def _write(text: str, out: Optional[str]) -> None:
    """Write to out when given, otherwise echo to stdout."""
    if not out:
        typer.echo(text, nl=not text.endswith("\n"))
        return
    try:
        Path(out).write_text(text, encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot write {out}", e)
    typer.echo(f"Wrote {out}", err=True)


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")] = False,
    ):
    """Markdown <-> Confluence ADF conversion and merge."""
    level = "DEBUG" if verbose else _settings().log_level
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def convert_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to convert")],
    out: Annotated[Optional[str], typer.Option("--out", "-o", help="Write ADF JSON here instead of stdout")] = None,
    skip_mermaid: Annotated[bool, typer.Option("--skip-mermaid", help="Keep mermaid blocks as code")] = False,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Convert a markdown file to ADF JSON. Mermaid sources are kept as expand sections."""
    settings = _settings(overrides={"skip_mermaid": skip_mermaid or None, "parser_config": parser})
    try:
        _, body = split_frontmatter(_read(path))
    except ValueError as e:
        _fail(str(e))

    blocks = []
    if not settings.skip_mermaid and has_mermaid_blocks(body):
        mmdc = find_mmdc(settings.mmdc_path)
        if not mmdc:
            _fail("Mermaid diagrams found but mmdc is not installed. Use --skip-mermaid to convert without them.")
        stripped = strip_mermaid_blocks(body, make_renderer(mmdc, settings.mermaid_timeout))
        body, blocks = stripped.markdown, stripped.blocks

    doc = inject_mermaid_adf(markdown_to_adf(body, settings.parser_config), blocks, {})
    _write(doc.to_json(indent=2) + "\n", out)


def to_md_cmd(
    path: Annotated[str, typer.Argument(help="ADF JSON file to render")],
    out: Annotated[Optional[str], typer.Option("--out", "-o", help="Write markdown here instead of stdout")] = None,
    ):
    """Render an ADF JSON document as markdown."""
    try:
        doc = AdfDocument.from_json(_read(path))
    except ValueError as e:
        _fail(f"{path} is not a valid ADF document", e)
    _write(adf_to_markdown(doc), out)


def merge_cmd(
    local: Annotated[str, typer.Argument(help="Local markdown file")],
    remote: Annotated[str, typer.Argument(help="Remote markdown file")],
    strategy: Annotated[Optional[MergeStrategy], typer.Option("--strategy", "-s", help="Merge strategy")] = None,
    out: Annotated[Optional[str], typer.Option("--out", "-o", help="Write merged markdown here instead of stdout")] = None,
    show_diff: Annotated[bool, typer.Option("--diff", help="Print a remote -> merged unified diff to stderr")] = False,
    ):
    """Merge local and remote markdown and report line stats."""
    settings = _settings(overrides={"strategy": strategy.value if strategy else None})
    local_text, remote_text = _read(local), _read(remote)
    result = merge_markdown(local_text, remote_text, settings.strategy)

    if show_diff:
        for line in unified_diff(remote_text, result.markdown, from_label=remote, to_label="merged"):
            typer.echo(line, nl=False, err=True)
    _write(result.markdown, out)

    stats = result.stats
    summary = f"+{stats.added} -{stats.removed} ~{stats.unchanged}"
    if result.has_conflicts:
        typer.echo(f"Merged with conflicts (local preferred) [{summary}]", err=True)
    else:
        typer.echo(f"Merged [{summary}]", err=True)


def title_cmd(
    source: Annotated[str, typer.Argument(help="File path or URL")],
    ):
    """Print the page title derived from a file name or URL."""
    typer.echo(title_from_filename(source))


def config_cmd():
    """Show the effective configuration with the token masked."""
    settings = _settings()
    for name, value in settings.model_dump().items():
        if name == "token" and value:
            value = mask_token(value)
        typer.echo(f"{name}: {'' if value is None else value}")
    missing = missing_credentials(settings)
    if missing:
        typer.echo(f"Missing credentials: {', '.join(missing)}", err=True)
