"""Diffing — sequence alignment and patch window extraction."""

from lintstep.diffing.aligner import align
from lintstep.diffing.models import EditOp, EditScript, OpKind, PatchWindow
from lintstep.diffing.window import CONTEXT_LINES, extract, extract_from_script, isolate_hunk

__all__ = [
    "CONTEXT_LINES",
    "EditOp",
    "EditScript",
    "OpKind",
    "PatchWindow",
    "align",
    "extract",
    "extract_from_script",
    "isolate_hunk",
]
