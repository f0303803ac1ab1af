"""Diagnostic and session item models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class ItemState(str, Enum):
    PENDING = "pending"
    CORRECTED = "corrected"
    SKIPPED = "skipped"
    DISABLED = "disabled"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single offense reported by the analysis tool.

    Instances are never patched in place: a rescan builds new ones.
    """

    file_path: str
    rule_id: str
    message: str
    severity: str
    correctable: bool
    safe_to_autofix: bool
    line: int
    column: int
    length: int

    @property
    def location(self) -> str:
        return f"{self.file_path}:{self.line}:{self.column}"

    @property
    def key(self) -> Tuple[str, str, int, int]:
        """Structural identity that survives a rescan."""
        return (self.file_path, self.rule_id, self.line, self.column)

    def __str__(self) -> str:
        return f"[{self.severity}] {self.rule_id}: {self.message} ({self.location})"


@dataclass
class SessionItem:
    """A diagnostic plus its lifecycle state within one review session."""

    diagnostic: Diagnostic
    state: ItemState = ItemState.PENDING

    @property
    def is_pending(self) -> bool:
        return self.state is ItemState.PENDING
