"""Interactive terminal UI — single-keypress prompt on top of the Rich renderers."""

from __future__ import annotations

from typing import Callable, Dict, Optional

import click
from rich.console import Console
from rich.markup import escape

from lintstep.config.schema import DisplayConfig
from lintstep.diagnostics.models import Diagnostic
from lintstep.diffing.models import PatchWindow
from lintstep.output import terminal
from lintstep.session.controller import SessionStats, Step
from lintstep.session.errors import LintStepError, UserInputError

# Escape sequences click.getchar() returns for arrow keys
_RIGHT = ("\x1b[C", "\x1bOC", "\xe0M")
_LEFT = ("\x1b[D", "\x1bOD", "\xe0K")

KEYMAP: Dict[str, str] = {
    "a": "apply",
    "A": "apply_unsafe",
    "L": "correct_all",
    "d": "disable_line",
    "D": "disable_file",
    "s": "skip",
    "j": "navigate_next",
    "k": "navigate_prev",
    "v": "preview_patch",
    "q": "quit",
    **{k: "navigate_next" for k in _RIGHT},
    **{k: "navigate_prev" for k in _LEFT},
}

_HELP = [
    ("a", "Apply the correction", True),
    ("A", "Apply an unsafe correction", True),
    ("L", "Correct all remaining offenses of this rule", True),
    ("d", "Disable the rule for this line", False),
    ("D", "Disable the rule for the whole file", False),
    ("s", "Skip this offense", False),
    ("j / →", "Next offense", False),
    ("k / ←", "Previous offense", False),
    ("v", "Preview the patch", True),
    ("q", "Quit", False),
]

Previewer = Callable[[Diagnostic], Optional[PatchWindow]]


class TerminalUI:
    """SessionUI implementation reading one key per action."""

    def __init__(
        self,
        display: Optional[DisplayConfig] = None,
        *,
        console: Optional[Console] = None,
        previewer: Optional[Previewer] = None,
        getchar: Callable[[], str] = click.getchar,
    ) -> None:
        self._display = display or DisplayConfig()
        self._console = console or Console(stderr=True)
        self._previewer = previewer
        self._getchar = getchar

    # ---- SessionUI ----

    def show_summary(self, total: int) -> None:
        terminal.render_summary(self._console, total)

    def show_step(self, step: Step) -> None:
        terminal.render_step(self._console, step)
        d = step.diagnostic
        if self._display.show_patch and self._previewer is not None and d.correctable:
            self.show_patch(self._previewer(d))

    def read_action(self, step: Step) -> str:
        while True:
            self._print_prompt(step.diagnostic)
            try:
                key = self._getchar()
            except (KeyboardInterrupt, EOFError):
                key = ""
            if not key:
                # Interrupt, or end of input
                self._console.print()
                return "quit"
            self._console.print(key if key.isprintable() else "")

            if key == "?":
                self._show_help(step.diagnostic)
                continue
            token = KEYMAP.get(key)
            if token is None:
                self._console.print(f"[yellow]Unknown key {key!r}. Press '?' for help.[/yellow]")
                continue
            if token == "correct_all":
                rule = step.diagnostic.rule_id
                if not self._confirm(f"Correct all remaining {rule} offenses?"):
                    continue
                return f"correct_all:{rule}"
            if token in ("apply", "apply_unsafe") and self._display.confirm_patch:
                if self._previewer is not None:
                    self.show_patch(self._previewer(step.diagnostic))
                if not self._confirm("Apply this patch?"):
                    continue
            return token

    def show_patch(self, window: Optional[PatchWindow]) -> None:
        terminal.render_patch(self._console, window, inline=self._display.inline_highlight)

    def show_error(self, error: LintStepError) -> None:
        if isinstance(error, UserInputError):
            self._console.bell()
        self._console.print(f"[yellow]{escape(str(error))}[/yellow]", highlight=False)

    def show_stats(self, stats: SessionStats) -> None:
        if self._display.summary_on_exit:
            terminal.render_stats(self._console, stats)

    # ---- helpers ----

    def _confirm(self, question: str) -> bool:
        self._console.print(f"{question} [y/N] ", end="", markup=False, highlight=False)
        try:
            answer = self._getchar()
        except (KeyboardInterrupt, EOFError):
            answer = "n"
        self._console.print(answer if answer.isprintable() else "")
        return answer.lower() == "y"

    def _print_prompt(self, diagnostic: Diagnostic) -> None:
        options = ["[a]pply", "[L] all", "[d]isable line", "[D]isable file", "[s]kip", "[v]iew", "[q]uit", "[?]"]
        if not diagnostic.correctable:
            options = [o for o in options if o not in ("[a]pply", "[L] all", "[v]iew")]
        elif not diagnostic.safe_to_autofix:
            options[0] = "[A]pply unsafe"
        self._console.print(" ".join(options) + " > ", end="", markup=False, highlight=False)

    def _show_help(self, diagnostic: Diagnostic) -> None:
        self._console.print()
        self._console.print("[bold]Actions:[/bold]")
        for key, text, needs_fix in _HELP:
            if needs_fix and not diagnostic.correctable:
                continue
            self._console.print(f"  [cyan]{key:<6}[/cyan] {text}")
        self._console.print()
