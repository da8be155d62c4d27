"""Line-based reconciliation of local and remote markdown"""

import logging
from typing import Callable

from mdcf.core.models import MergeResult, MergeStats, MergeStrategy
from mdcf.core.utils.diff import count_lines, diff_segments, diff_summary


logger = logging.getLogger(__name__)

APPEND_SEPARATOR = "\n\n---\n\n"


def _stats(old: str, new: str) -> MergeStats:
    summary = diff_summary(old, new)
    return MergeStats(**summary)


def _local_wins(local: str, remote: str) -> MergeResult:
    return MergeResult(markdown=local, has_conflicts=False, stats=_stats(remote, local))


def _remote_wins(local: str, remote: str) -> MergeResult:
    return MergeResult(markdown=remote, has_conflicts=False, stats=_stats(local, remote))


def _append(local: str, remote: str) -> MergeResult:
    return MergeResult(
        markdown=remote.rstrip() + APPEND_SEPARATOR + local.lstrip(),
        has_conflicts=False,
        stats=MergeStats(added=count_lines(local), removed=0, unchanged=count_lines(remote)),
    )


def _auto_merge(local: str, remote: str) -> MergeResult:
    """Walk the remote -> local diff keeping local edits.

    A removed segment directly followed by an added one is a conflicting edit:
    local wins and the result is flagged. A removed segment on its own is a
    local deletion.
    """
    if local == remote:
        return MergeResult(markdown=local, has_conflicts=False,
                           stats=MergeStats(unchanged=count_lines(local)))

    segments = diff_segments(remote, local)
    out: list[str] = []
    added = removed = unchanged = 0
    conflicts = False
    i = 0
    while i < len(segments):
        seg = segments[i]
        nxt = segments[i + 1] if i + 1 < len(segments) else None
        if seg.kind == "equal":
            out.append(seg.text)
            unchanged += count_lines(seg.text)
        elif seg.kind == "added":
            out.append(seg.text)
            added += count_lines(seg.text)
        elif nxt is not None and nxt.kind == "added":
            out.append(nxt.text)
            removed += count_lines(seg.text)
            added += count_lines(nxt.text)
            conflicts = True
            i += 1
        else:
            removed += count_lines(seg.text)
        i += 1

    if conflicts:
        logger.info("Auto-merge kept local content over conflicting remote edits")
    return MergeResult(
        markdown="".join(out),
        has_conflicts=conflicts,
        stats=MergeStats(added=added, removed=removed, unchanged=unchanged),
    )


STRATEGIES: dict[MergeStrategy, Callable[[str, str], MergeResult]] = {
    MergeStrategy.local_wins: _local_wins,
    MergeStrategy.remote_wins: _remote_wins,
    MergeStrategy.append: _append,
    MergeStrategy.auto_merge: _auto_merge,
}


def merge_markdown(local: str, remote: str, strategy: MergeStrategy | str) -> MergeResult:
    """Merge local and remote markdown under the given strategy.

    Raises ValueError for an unknown strategy.
    """
    return STRATEGIES[MergeStrategy(strategy)](local, remote)
