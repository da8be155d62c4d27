"""Pure line-diff utilities shared by the merge engine and the CLI preview"""

import difflib
import re
from dataclasses import dataclass


LINE_RE = re.compile(r'[^\n]*\n|[^\n]+')


@dataclass(frozen=True)
class Segment:
    """A run of lines that is unchanged, only in the new text, or only in the old."""
    kind: str  # "equal" | "added" | "removed"
    lines: tuple[str, ...]

    @property
    def text(self) -> str:
        return "".join(self.lines)

    @property
    def count(self) -> int:
        return len(self.lines)


def split_lines(text: str) -> list[str]:
    """Split into newline-terminated tokens; a final unterminated line is kept as-is."""
    return LINE_RE.findall(text)


def count_lines(text: str) -> int:
    """Number of lines, not counting the empty string after a trailing newline."""
    if not text:
        return 0
    parts = text.split("\n")
    return len(parts) - 1 if parts[-1] == "" else len(parts)


def diff_segments(old: str, new: str) -> list[Segment]:
    """Ordered segments turning old into new. A replacement is a removed segment then an added one."""
    old_lines, new_lines = split_lines(old), split_lines(new)
    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    segments: list[Segment] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            segments.append(Segment("equal", tuple(old_lines[i1:i2])))
        if tag in ("replace", "delete"):
            segments.append(Segment("removed", tuple(old_lines[i1:i2])))
        if tag in ("replace", "insert"):
            segments.append(Segment("added", tuple(new_lines[j1:j2])))

    return segments


def diff_summary(old: str, new: str) -> dict[str, int]:
    """Return added/removed/unchanged line counts. Useful for compact change stats."""
    summary = {"added": 0, "removed": 0, "unchanged": 0}
    keys = {"added": "added", "removed": "removed", "equal": "unchanged"}
    for seg in diff_segments(old, new):
        summary[keys[seg.kind]] += count_lines(seg.text)
    return summary


def unified_diff(
    old: str,
    new: str,
    from_label: str = "remote",
    to_label: str = "local",
    context: int = 3,
    ) -> list[str]:
    """Return unified diff lines comparing old to new. Empty list if identical.

    Returns a list of lines; join with '' for display (lines already include newlines).
    """
    old_lines = old.splitlines(keepends=True)
    new_lines = new.splitlines(keepends=True)
    return list(
        difflib.unified_diff(old_lines, new_lines, fromfile=from_label, tofile=to_label, n=context)
    )
