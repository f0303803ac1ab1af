"""Action vocabulary and the dispatcher that turns actions into file mutations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from lintstep.config.schema import DirectivesConfig
from lintstep.corrector.base import CollaboratorFailure, CorrectionApplier
from lintstep.diagnostics.models import Diagnostic
from lintstep.diffing.models import PatchWindow
from lintstep.diffing.window import CONTEXT_LINES, extract, isolate_hunk
from lintstep.files import read_lines, write_source
from lintstep.session.errors import UserInputError

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    APPLY = "apply"
    APPLY_UNSAFE = "apply_unsafe"
    CORRECT_ALL = "correct_all"
    DISABLE_LINE = "disable_line"
    DISABLE_FILE = "disable_file"
    SKIP = "skip"
    NAVIGATE_PREV = "navigate_prev"
    NAVIGATE_NEXT = "navigate_next"
    PREVIEW_PATCH = "preview_patch"
    QUIT = "quit"


MUTATING_ACTIONS = frozenset({
    ActionKind.APPLY,
    ActionKind.APPLY_UNSAFE,
    ActionKind.CORRECT_ALL,
    ActionKind.DISABLE_LINE,
    ActionKind.DISABLE_FILE,
})


@dataclass(frozen=True)
class Action:
    """One user action. ``rule_id`` is only meaningful for correct_all."""

    kind: ActionKind
    rule_id: Optional[str] = None

    @property
    def is_mutating(self) -> bool:
        return self.kind in MUTATING_ACTIONS


def parse_action(token: str) -> Action:
    """Map an action token to an Action.

    ``correct_all`` may carry a rule: ``correct_all:Style/StringLiterals``.
    Raises UserInputError for anything outside the vocabulary.
    """
    name, sep, arg = token.strip().partition(":")
    try:
        kind = ActionKind(name)
    except ValueError:
        raise UserInputError(f"Unknown action: {token!r}") from None

    if sep and kind is not ActionKind.CORRECT_ALL:
        raise UserInputError(f"Action {kind.value} takes no argument")
    if sep and not arg.strip():
        raise UserInputError("correct_all: expected a rule id after ':'")
    return Action(kind, arg.strip() or None)


class Outcome(str, Enum):
    CORRECTED = "corrected"
    DISABLED = "disabled"
    UNCHANGED = "unchanged"


def _line_ending(line: str) -> str:
    body = line.rstrip("\r\n")
    return line[len(body):] or "\n"


class ActionDispatcher:
    """Performs corrections and disable directives on single files.

    The text of a correction comes from the applier; only the hunk that
    belongs to the diagnostic's line, or the multi-line rewrite it is part
    of, is written back.
    """

    def __init__(
        self,
        applier: CorrectionApplier,
        directives: Optional[DirectivesConfig] = None,
        *,
        context_lines: int = CONTEXT_LINES,
    ) -> None:
        self.applier = applier
        self._directives = directives or DirectivesConfig()
        self._context = context_lines

    def _read(self, diagnostic: Diagnostic) -> Optional[List[str]]:
        try:
            return read_lines(diagnostic.file_path)
        except OSError as exc:
            logger.warning("Cannot read %s: %s", diagnostic.file_path, exc)
            return None

    def _corrected_lines(self, diagnostic: Diagnostic) -> Optional[List[str]]:
        try:
            corrected = self.applier.apply(
                diagnostic.file_path, diagnostic.rule_id, diagnostic.line
            )
        except CollaboratorFailure as exc:
            logger.warning("Correction of %s failed: %s", diagnostic.location, exc)
            return None
        if corrected is None:
            return None
        return corrected.splitlines(keepends=True)

    def preview(self, diagnostic: Diagnostic) -> Optional[PatchWindow]:
        """Return the patch window a correction would write, without writing it."""
        if not diagnostic.correctable:
            return None
        original = self._read(diagnostic)
        if original is None:
            return None
        corrected = self._corrected_lines(diagnostic)
        if corrected is None:
            return None
        return extract(original, corrected, diagnostic.line, context=self._context)

    def apply_correction(self, diagnostic: Diagnostic) -> Outcome:
        original = self._read(diagnostic)
        if original is None:
            return Outcome.UNCHANGED
        corrected = self._corrected_lines(diagnostic)
        if corrected is None:
            return Outcome.UNCHANGED

        narrowed = isolate_hunk(original, corrected, diagnostic.line)
        if narrowed is None or narrowed == original:
            logger.info("No change for %s at %s", diagnostic.rule_id, diagnostic.location)
            return Outcome.UNCHANGED

        write_source(diagnostic.file_path, "".join(narrowed))
        logger.info("Corrected %s at %s", diagnostic.rule_id, diagnostic.location)
        return Outcome.CORRECTED

    def disable_line(self, diagnostic: Diagnostic) -> Outcome:
        lines = self._read(diagnostic)
        if lines is None:
            return Outcome.UNCHANGED
        idx = diagnostic.line - 1
        if not 0 <= idx < len(lines):
            logger.warning("Line %d is outside %s", diagnostic.line, diagnostic.file_path)
            return Outcome.UNCHANGED

        directive = self._directives.disable_line.format(rule_id=diagnostic.rule_id)
        body = lines[idx].rstrip("\r\n")
        if body.endswith(directive):
            return Outcome.UNCHANGED
        lines[idx] = body + directive + _line_ending(lines[idx])
        write_source(diagnostic.file_path, "".join(lines))
        return Outcome.DISABLED

    def disable_file(self, diagnostic: Diagnostic) -> Outcome:
        lines = self._read(diagnostic)
        if lines is None:
            return Outcome.UNCHANGED
        ending = _line_ending(lines[0]) if lines else "\n"
        start = self._directives.disable_file_start.format(rule_id=diagnostic.rule_id)
        end = self._directives.disable_file_end.format(rule_id=diagnostic.rule_id)

        if lines and not lines[-1].endswith(("\n", "\r")):
            lines[-1] += ending
        lines.insert(0, start + ending)
        lines.append(end + ending)
        write_source(diagnostic.file_path, "".join(lines))
        return Outcome.DISABLED
