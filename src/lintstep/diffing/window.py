"""Patch window extraction — isolate the part of a whole-file correction
that belongs to a single target line.

The corrector rewrites the whole file even when asked about one rule, and
the same rule often fires on neighbouring lines. A window therefore holds
exactly one hunk plus up to ``context`` unchanged lines on each side, and
context expansion stops at any other change.

Example: corrections on lines 4, 6 and 8, target line 6::

    [0] match  1   [3] change 4   [6] change 8
    [1] match  2   [4] match  5   [7] match  9
    [2] match  3   [5] change 6*

    Before the hunk: [4] is context, [3] is a change -> stop.
    After the hunk:  [6] is a change -> stop immediately.

    start_line=5
    "   y = 1\\n"
    "-  z = \\"world\\"\\n"
    "+  z = 'world'\\n"
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from lintstep.diffing.aligner import align
from lintstep.diffing.models import EditScript, OpKind, PatchWindow

CONTEXT_LINES = 2


def _locate_hunk(script: EditScript, target_line: int) -> Optional[Tuple[int, int]]:
    """Return the (first, last) op indices of the hunk attributed to *target_line*.

    The hunk starts at the first non-match op after which the count of
    consumed original lines equals *target_line*; inserts that follow the
    op consuming the target line land on the same count and are attributed
    to it. Inserts before any original line belong to line 1 only.

    The hunk then runs over following non-match ops as long as they do not
    consume past *target_line*, which merges a delete with the inserts that
    replace it and keeps every later line's change out.
    """
    consumed = 0
    first: Optional[int] = None
    for idx, op in enumerate(script):
        if op.consumes_original:
            consumed += 1
        if consumed > target_line:
            break
        if op.kind is OpKind.MATCH:
            continue
        if consumed == target_line or (consumed == 0 and target_line == 1):
            first = idx
            break

    if first is None:
        return None

    last = first
    for idx in range(first + 1, len(script)):
        op = script[idx]
        if op.kind is OpKind.MATCH:
            break
        if op.consumes_original:
            consumed += 1
        if consumed > target_line:
            break
        last = idx
    return first, last


def _expand_context(script: EditScript, idx: int, step: int, context: int) -> int:
    added = 0
    while added < context:
        nxt = idx + step
        if nxt < 0 or nxt >= len(script):
            break
        if script[nxt].kind is not OpKind.MATCH:
            break
        idx = nxt
        added += 1
    return idx


def extract_from_script(
    script: EditScript,
    target_line: int,
    *,
    context: int = CONTEXT_LINES,
) -> Optional[PatchWindow]:
    """Build the PatchWindow for *target_line* out of a prebuilt edit script."""
    located = _locate_hunk(script, target_line)
    if located is None:
        return None
    first, last = located

    start = _expand_context(script, first, -1, context)
    end = _expand_context(script, last, 1, context)

    start_line = 1 + sum(1 for op in script[:start] if op.consumes_original)

    rendered: List[str] = []
    for op in script[start:end + 1]:
        rendered.extend(op.render())

    window = PatchWindow(start_line=start_line, lines=tuple(rendered))
    if not window.has_changes:
        return None
    return window


def extract(
    original_lines: Sequence[str],
    corrected_lines: Sequence[str],
    target_line: int,
    *,
    correctable: bool = True,
    context: int = CONTEXT_LINES,
) -> Optional[PatchWindow]:
    """Return the window of the correction attributable to *target_line*.

    ``None`` when the diagnostic is not correctable, the correction is a
    no-op, or nothing in the correction maps to *target_line*.
    """
    if not correctable:
        return None
    if list(original_lines) == list(corrected_lines):
        return None
    script = align(original_lines, corrected_lines)
    return extract_from_script(script, target_line, context=context)


def _write_span(script: EditScript, first: int, last: int) -> Tuple[int, int]:
    """Widen a hunk to its whole run of non-match ops when that run drops lines.

    A run of one-to-one rewrites splits cleanly per line. A run containing a
    ``delete`` joins several original lines into fewer ones (``if x / foo /
    end`` becoming ``foo if x``), and writing only part of it leaves the
    file broken.
    """
    start, end = first, last
    while start > 0 and script[start - 1].kind is not OpKind.MATCH:
        start -= 1
    while end + 1 < len(script) and script[end + 1].kind is not OpKind.MATCH:
        end += 1
    if any(op.kind is OpKind.DELETE for op in script[start:end + 1]):
        return start, end
    return first, last


def isolate_hunk(
    original_lines: Sequence[str],
    corrected_lines: Sequence[str],
    target_line: int,
) -> Optional[List[str]]:
    """Apply only the hunk attributed to *target_line* to *original_lines*.

    Every other change in *corrected_lines* is dropped, so lines above the
    hunk keep their numbers. When the surrounding run of changes removes
    lines, the whole run is applied. Returns ``None`` when no hunk maps to
    the line.
    """
    if list(original_lines) == list(corrected_lines):
        return None
    script = align(original_lines, corrected_lines)
    located = _locate_hunk(script, target_line)
    if located is None:
        return None
    first, last = _write_span(script, *located)

    result: List[str] = []
    for idx, op in enumerate(script):
        if op.kind is OpKind.MATCH:
            result.append(op.old)
        elif first <= idx <= last:
            if op.kind is not OpKind.DELETE:
                result.append(op.new)
        elif op.consumes_original:
            result.append(op.old)
    return result
