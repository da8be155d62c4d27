"""Render mermaid diagrams to PNG with the mermaid-cli (mmdc) binary"""

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Optional

from mdcf.core.models import RenderResult


logger = logging.getLogger(__name__)

LOCAL_MMDC = Path("node_modules") / ".bin" / "mmdc"
DEFAULT_TIMEOUT = 60


class MermaidError(Exception):
    """Raised when mmdc fails to produce a PNG."""


def find_mmdc(explicit: Optional[str] = None) -> Optional[str]:
    """Locate mmdc: explicit path, then PATH, then ./node_modules/.bin. None if absent."""
    if explicit:
        return explicit
    on_path = shutil.which("mmdc")
    if on_path:
        return on_path
    if LOCAL_MMDC.exists():
        return str(LOCAL_MMDC.resolve())
    return None


def diagram_filename(index: int) -> str:
    return f"mermaid-diagram-{index}.png"


def render_png(code: str, mmdc_path: str, timeout: int = DEFAULT_TIMEOUT) -> bytes:
    """Run mmdc on a diagram in a scratch directory and return the PNG bytes.

    Raises:
        MermaidError: non-zero exit, timeout, missing output or OS failure.
    """
    with tempfile.TemporaryDirectory(prefix="mdcf-mermaid-") as tmp:
        input_path = Path(tmp) / "diagram.mmd"
        output_path = Path(tmp) / "diagram.png"
        input_path.write_text(code, encoding="utf-8")

        cmd = [mmdc_path, "-i", str(input_path), "-o", str(output_path), "-b", "white", "-s", "2", "--quiet"]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            raise MermaidError(f"mmdc timed out after {timeout}s") from e
        except OSError as e:
            raise MermaidError(f"Could not run mmdc: {e}") from e

        if result.returncode != 0:
            raise MermaidError(result.stderr.strip() or f"mmdc exited with status {result.returncode}")
        if not output_path.exists():
            raise MermaidError("PNG file was not generated")
        return output_path.read_bytes()


def make_renderer(mmdc_path: str, timeout: int = DEFAULT_TIMEOUT) -> Callable[[str, int], RenderResult]:
    """Build the render callable the mermaid strip pass expects."""

    def render(code: str, index: int) -> RenderResult:
        try:
            png = render_png(code, mmdc_path, timeout)
        except MermaidError as e:
            logger.error("Mermaid diagram %d: %s", index, e)
            return RenderResult(success=False, error=str(e))
        logger.info("Rendered mermaid diagram %d (%d bytes)", index, len(png))
        return RenderResult(success=True, png_bytes=png, filename=diagram_filename(index))

    return render
