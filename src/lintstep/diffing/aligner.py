"""Longest-common-subsequence alignment of two sequences.

Produces an sdiff-style edit script: every element of both inputs appears in
exactly one op, in order. Used on whole files (lists of lines) and on single
lines (strings, aligned character by character).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, List, Tuple

from lintstep.diffing.models import EditOp, EditScript, OpKind


def _as_list(seq: Any, name: str) -> List[Any]:
    if not isinstance(seq, Sequence):
        raise TypeError(f"{name} must be a finite sequence, got {type(seq).__name__}")
    return list(seq)


def _lcs_pairs(a: List[Any], b: List[Any]) -> List[Tuple[int, int]]:
    """Return matched index pairs of a longest common subsequence of *a* and *b*.

    ``lengths[i][j]`` holds the LCS length of ``a[i:]`` and ``b[j:]``. The
    forward walk takes a match as soon as both heads are equal, which always
    lies on some optimal path and yields the earliest matches. On a tie the
    old side is consumed first.
    """
    n, m = len(a), len(b)
    if n == 0 or m == 0:
        return []

    lengths = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row = lengths[i]
        below = lengths[i + 1]
        ai = a[i]
        for j in range(m - 1, -1, -1):
            if ai == b[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = below[j] if below[j] >= row[j + 1] else row[j + 1]

    pairs: List[Tuple[int, int]] = []
    i = j = 0
    while i < n and j < m:
        if a[i] == b[j]:
            pairs.append((i, j))
            i += 1
            j += 1
        elif lengths[i + 1][j] >= lengths[i][j + 1]:
            i += 1
        else:
            j += 1
    return pairs


def _emit_gap(
    script: EditScript,
    olds: List[Any],
    news: List[Any],
    first_pos: int,
) -> None:
    """Append ops for an unmatched stretch: paired changes, then the leftover."""
    paired = min(len(olds), len(news))
    pos = first_pos
    for k in range(paired):
        script.append(EditOp(OpKind.CHANGE, old=olds[k], new=news[k], old_pos=pos))
        pos += 1
    for old in olds[paired:]:
        script.append(EditOp(OpKind.DELETE, old=old, old_pos=pos))
        pos += 1
    for new in news[paired:]:
        script.append(EditOp(OpKind.INSERT, new=new))


def align(old: Sequence[Any], new: Sequence[Any]) -> EditScript:
    """Compute the edit script turning *old* into *new*.

    Deterministic for identical inputs. Raises TypeError if either argument
    is not a sequence.
    """
    a = _as_list(old, "old")
    b = _as_list(new, "new")

    # Common prefix / suffix never need the quadratic table
    prefix = 0
    limit = min(len(a), len(b))
    while prefix < limit and a[prefix] == b[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < limit - prefix
        and a[len(a) - 1 - suffix] == b[len(b) - 1 - suffix]
    ):
        suffix += 1

    script: EditScript = []
    for k in range(prefix):
        script.append(EditOp(OpKind.MATCH, old=a[k], new=b[k], old_pos=k + 1))

    a_mid = a[prefix:len(a) - suffix]
    b_mid = b[prefix:len(b) - suffix]

    prev_i = prev_j = 0
    for i, j in _lcs_pairs(a_mid, b_mid):
        _emit_gap(script, a_mid[prev_i:i], b_mid[prev_j:j], prefix + prev_i + 1)
        script.append(
            EditOp(OpKind.MATCH, old=a_mid[i], new=b_mid[j], old_pos=prefix + i + 1)
        )
        prev_i, prev_j = i + 1, j + 1
    _emit_gap(script, a_mid[prev_i:], b_mid[prev_j:], prefix + prev_i + 1)

    tail_start = len(a) - suffix
    for k in range(suffix):
        script.append(
            EditOp(
                OpKind.MATCH,
                old=a[tail_start + k],
                new=b[len(b) - suffix + k],
                old_pos=tail_start + k + 1,
            )
        )

    return script
