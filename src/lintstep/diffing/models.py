"""Data models for edit scripts and patch windows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple


class OpKind(str, Enum):
    MATCH = "match"
    CHANGE = "change"
    DELETE = "delete"
    INSERT = "insert"


# Ops that consume one element of the original sequence
CONSUMING = frozenset({OpKind.MATCH, OpKind.CHANGE, OpKind.DELETE})


@dataclass(frozen=True, slots=True)
class EditOp:
    """One step of an edit script.

    ``old_pos`` is the 1-based position in the original sequence for ops
    that consume an original element, ``None`` for inserts.
    """

    kind: OpKind
    old: Optional[Any] = None
    new: Optional[Any] = None
    old_pos: Optional[int] = None

    @property
    def consumes_original(self) -> bool:
        return self.kind in CONSUMING

    def render(self) -> List[str]:
        """Prefixed display lines for this op."""
        if self.kind is OpKind.MATCH:
            return [f" {self.old}"]
        if self.kind is OpKind.CHANGE:
            return [f"-{self.old}", f"+{self.new}"]
        if self.kind is OpKind.DELETE:
            return [f"-{self.old}"]
        return [f"+{self.new}"]


EditScript = List[EditOp]


@dataclass(frozen=True)
class PatchWindow:
    """A rendered slice of a diff attributable to one target line."""

    start_line: int
    lines: Tuple[str, ...]

    @property
    def has_changes(self) -> bool:
        return any(not line.startswith(" ") for line in self.lines)

    @property
    def removed(self) -> List[str]:
        return [line[1:] for line in self.lines if line.startswith("-")]

    @property
    def added(self) -> List[str]:
        return [line[1:] for line in self.lines if line.startswith("+")]
