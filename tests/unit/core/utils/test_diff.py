"""Unit tests for core/utils/diff.py"""

from mdcf.core.utils.diff import count_lines, diff_segments, diff_summary, split_lines, unified_diff


def test_count_lines_ignores_trailing_newline():
    """A trailing newline does not add an empty last line."""
    assert count_lines("") == 0
    assert count_lines("a") == 1
    assert count_lines("a\n") == 1
    assert count_lines("a\nb") == 2
    assert count_lines("\n") == 1
    assert count_lines("a\n\n") == 2


def test_split_lines_keeps_terminators():
    assert split_lines("a\nb") == ["a\n", "b"]
    assert split_lines("a\n\n") == ["a\n", "\n"]
    assert split_lines("") == []


def test_diff_segments_replace_is_removed_then_added():
    """A changed line shows up as a removed segment followed by an added one."""
    segs = diff_segments("x\nold\ny\n", "x\nnew\ny\n")
    assert [(s.kind, s.text) for s in segs] == [
        ("equal", "x\n"), ("removed", "old\n"), ("added", "new\n"), ("equal", "y\n"),
    ]


def test_diff_segments_identical():
    segs = diff_segments("a\nb\n", "a\nb\n")
    assert [(s.kind, s.count) for s in segs] == [("equal", 2)]


def test_diff_summary_counts():
    """diff_summary counts added, removed and unchanged lines."""
    assert diff_summary("a\nb\n", "a\nc\nd\n") == {"added": 2, "removed": 1, "unchanged": 1}


def test_unified_diff_empty_when_identical():
    assert unified_diff("same\n", "same\n") == []


def test_unified_diff_labels():
    """Headers carry the given labels and changed lines are prefixed."""
    lines = unified_diff("a\n", "b\n", from_label="remote", to_label="local")
    assert lines[0].startswith("--- remote")
    assert lines[1].startswith("+++ local")
    assert "-a\n" in lines and "+b\n" in lines
