"""Session controller — the review state machine.

The controller is either browsing an index into the item list or done.
Mutating actions rewrite one file, then that file is rescanned and its
fresh diagnostics are spliced back into the catalog before the next action
is read. Items are addressed by index; a rescan rebuilds them and carries
lifecycle states over by structural key.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from lintstep.corrector.base import CollaboratorFailure, CorrectionApplier
from lintstep.diagnostics.catalog import CatalogError, DiagnosticCatalog, parse_offenses
from lintstep.diagnostics.models import Diagnostic, ItemState, SessionItem
from lintstep.diffing.models import PatchWindow
from lintstep.session.actions import Action, ActionDispatcher, ActionKind, Outcome, parse_action
from lintstep.session.errors import LintStepError, PolicyViolation, UserInputError

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    corrected: int = 0
    disabled: int = 0
    skipped: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class Step:
    """What the presentation layer renders for one prompt."""

    diagnostic: Diagnostic
    index: int
    total: int
    state: ItemState


class SessionUI(Protocol):
    def show_step(self, step: Step) -> None: ...

    def read_action(self, step: Step) -> str: ...

    def show_patch(self, window: Optional[PatchWindow]) -> None: ...

    def show_error(self, error: LintStepError) -> None: ...

    def show_stats(self, stats: SessionStats) -> None: ...


class SessionController:
    """Owns the position, dispatches actions and reconciles after mutations."""

    def __init__(
        self,
        catalog: DiagnosticCatalog,
        applier: CorrectionApplier,
        *,
        dispatcher: Optional[ActionDispatcher] = None,
        unsafe_rules: Iterable[str] = (),
    ) -> None:
        self._catalog = catalog
        self._applier = applier
        self._dispatcher = dispatcher or ActionDispatcher(applier)
        self._unsafe_rules = frozenset(unsafe_rules)
        self._items: List[SessionItem] = [SessionItem(d) for d in catalog]
        self._index = 0
        self._done = not self._items
        self.stats = SessionStats()

        self._handlers: Dict[ActionKind, Callable[[Action], Optional[PatchWindow]]] = {
            ActionKind.APPLY: lambda a: self.apply_correction(),
            ActionKind.APPLY_UNSAFE: lambda a: self.apply_correction(unsafe_confirmed=True),
            ActionKind.CORRECT_ALL: lambda a: self.correct_all(a.rule_id),
            ActionKind.DISABLE_LINE: lambda a: self.disable_line(),
            ActionKind.DISABLE_FILE: lambda a: self.disable_file(),
            ActionKind.SKIP: lambda a: self.skip(),
            ActionKind.NAVIGATE_PREV: lambda a: self.navigate_prev(),
            ActionKind.NAVIGATE_NEXT: lambda a: self.navigate_next(),
            ActionKind.PREVIEW_PATCH: lambda a: self.preview_patch(),
            ActionKind.QUIT: lambda a: self.quit(),
        }

    # ---- queries ----

    @property
    def done(self) -> bool:
        return self._done

    @property
    def index(self) -> int:
        return self._index

    @property
    def total(self) -> int:
        return len(self._items)

    @property
    def items(self) -> List[SessionItem]:
        return list(self._items)

    @property
    def catalog(self) -> DiagnosticCatalog:
        return self._catalog

    @property
    def current(self) -> SessionItem:
        if self._done:
            raise UserInputError("The session is finished")
        return self._items[self._index]

    def step(self) -> Step:
        item = self.current
        return Step(
            diagnostic=item.diagnostic,
            index=self._index,
            total=len(self._items),
            state=item.state,
        )

    # ---- dispatch ----

    def handle(self, action: Action) -> Optional[PatchWindow]:
        """Apply one action. Returns the window for preview_patch, else None."""
        if self._done:
            raise UserInputError("The session is finished")
        return self._handlers[action.kind](action)

    def run(self, ui: SessionUI) -> SessionStats:
        """Prompt for actions until the list is exhausted or the user quits."""
        redraw = True
        while not self._done:
            step = self.step()
            if redraw:
                ui.show_step(step)
            redraw = True

            token = ui.read_action(step)
            try:
                action = parse_action(token)
                window = self.handle(action)
            except (UserInputError, PolicyViolation) as exc:
                ui.show_error(exc)
                redraw = False
                continue

            if action.kind is ActionKind.PREVIEW_PATCH:
                ui.show_patch(window)
                redraw = False

        ui.show_stats(self.stats)
        return self.stats

    # ---- navigation ----

    def navigate_prev(self) -> None:
        if self._index == 0:
            raise UserInputError("Already at the first offense")
        self._index -= 1

    def navigate_next(self) -> None:
        if self._index >= len(self._items) - 1:
            raise UserInputError("Already at the last offense")
        self._index += 1

    def skip(self) -> None:
        if self._index >= len(self._items) - 1:
            self._done = True
            return
        self._index += 1

    def quit(self) -> None:
        self._done = True

    def preview_patch(self) -> Optional[PatchWindow]:
        return self._dispatcher.preview(self.current.diagnostic)

    # ---- mutations ----

    def apply_correction(self, *, unsafe_confirmed: bool = False) -> None:
        item = self.current
        self._check_policy([item.diagnostic], unsafe_confirmed)
        outcome = self._dispatcher.apply_correction(item.diagnostic)
        self._after_mutation(item, outcome, ItemState.CORRECTED)

    def disable_line(self) -> None:
        item = self.current
        self._after_mutation(item, self._dispatcher.disable_line(item.diagnostic), ItemState.DISABLED)

    def disable_file(self) -> None:
        item = self.current
        self._after_mutation(item, self._dispatcher.disable_file(item.diagnostic), ItemState.DISABLED)

    def correct_all(self, rule_id: Optional[str] = None, *, unsafe_confirmed: bool = False) -> None:
        """Correct every pending, correctable instance of a rule from the current index on.

        Instances the analyzer cannot correct stay pending. Within a file the
        targets are corrected bottom-up: a hunk never moves the lines above
        it, so the remaining targets stay valid without a rescan in between.
        Each touched file is reconciled once at the end.
        """
        rule = rule_id or self.current.diagnostic.rule_id
        pending = [
            item for item in self._items[self._index:]
            if item.diagnostic.rule_id == rule and item.is_pending
        ]
        if not pending:
            raise UserInputError(f"No pending {rule} offenses from here on")
        targets = [item for item in pending if item.diagnostic.correctable]
        if not targets:
            raise PolicyViolation(f"No {rule} offense from here on can be corrected automatically")
        self._check_policy([t.diagnostic for t in targets], unsafe_confirmed)

        by_file: Dict[str, List[SessionItem]] = {}
        for item in targets:
            by_file.setdefault(item.diagnostic.file_path, []).append(item)

        touched: List[str] = []
        for file_path, group in by_file.items():
            group.sort(key=lambda it: (it.diagnostic.line, it.diagnostic.column), reverse=True)
            corrected_lines: set[int] = set()
            for item in group:
                line = item.diagnostic.line
                if line in corrected_lines:
                    # Same-line instances were rewritten by the hunk already applied
                    self._mark(item, ItemState.CORRECTED)
                    continue
                outcome = self._dispatcher.apply_correction(item.diagnostic)
                if outcome is Outcome.CORRECTED:
                    corrected_lines.add(line)
                    self._mark(item, ItemState.CORRECTED)
                else:
                    self._mark(item, ItemState.SKIPPED)
            if corrected_lines:
                touched.append(file_path)

        logger.info("correct_all %s: %d targets in %d files", rule, len(targets), len(by_file))
        if not touched:
            self.skip()
            return
        self._reconcile(touched)

    # ---- internals ----

    def _check_policy(self, diagnostics: List[Diagnostic], unsafe_confirmed: bool) -> None:
        for d in diagnostics:
            if not d.correctable:
                raise PolicyViolation(f"{d.rule_id} at {d.location} cannot be corrected automatically")
        if unsafe_confirmed:
            return
        unsafe = [d for d in diagnostics if not d.safe_to_autofix]
        if unsafe:
            raise PolicyViolation(
                f"{unsafe[0].rule_id} has an unsafe correction; use apply_unsafe to confirm"
            )

    def _mark(self, item: SessionItem, state: ItemState) -> None:
        """Record an outcome. A no-op never overwrites an earlier outcome."""
        if state is ItemState.SKIPPED:
            if not item.is_pending:
                return
            self.stats.skipped += 1
        elif state is ItemState.CORRECTED:
            self.stats.corrected += 1
        elif state is ItemState.DISABLED:
            self.stats.disabled += 1
        item.state = state

    def _after_mutation(self, item: SessionItem, outcome: Outcome, state: ItemState) -> None:
        if outcome is Outcome.UNCHANGED:
            self._mark(item, ItemState.SKIPPED)
            self.skip()
            return
        self._mark(item, state)
        self._reconcile([item.diagnostic.file_path])

    def _reconcile(self, file_paths: List[str]) -> None:
        """Rescan each file, splice it into the catalog and rebuild the items."""
        for file_path in file_paths:
            try:
                offenses = self._applier.rescan(file_path)
                fresh = parse_offenses(file_path, offenses, self._unsafe_rules)
            except (CollaboratorFailure, CatalogError) as exc:
                logger.warning("Rescan of %s failed, keeping previous offenses: %s", file_path, exc)
                continue
            self._catalog.splice(file_path, fresh)

        states: Dict[Tuple[str, str, int, int], ItemState] = {
            item.diagnostic.key: item.state
            for item in self._items
            if not item.is_pending
        }
        self._items = [
            SessionItem(d, states.get(d.key, ItemState.PENDING)) for d in self._catalog
        ]
        logger.debug("Reconciled %s: %d offenses remain", ", ".join(file_paths), len(self._items))

        if not self._items:
            self._done = True
            return
        self._index = min(self._index, len(self._items) - 1)
