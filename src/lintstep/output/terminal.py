"""Rich terminal rendering — offense header, code context, patch preview, summary."""

from __future__ import annotations

from typing import List, Optional, Tuple

from rich.console import Console
from rich.text import Text

from lintstep.diagnostics.models import Diagnostic, ItemState
from lintstep.diffing.aligner import align
from lintstep.diffing.models import OpKind, PatchWindow
from lintstep.files import read_lines
from lintstep.session.controller import SessionStats, Step

_SEVERITY_STYLE = {
    "fatal": "bold white on red",
    "error": "bold white on red",
    "warning": "bold black on yellow",
    "convention": "bold black on bright_cyan",
    "refactor": "bold white on blue",
    "info": "bold black on white",
}

_STATE_STYLE = {
    ItemState.PENDING: "dim",
    ItemState.CORRECTED: "bold green",
    ItemState.SKIPPED: "yellow",
    ItemState.DISABLED: "magenta",
}

_OLD_STYLE = "red"
_NEW_STYLE = "green"
_CONTEXT_STYLE = "dim"


def _severity_pill(severity: str) -> Text:
    style = _SEVERITY_STYLE.get(severity, "")
    return Text(f" {severity.upper()} ", style=style)


def render_summary(console: Console, total: int) -> None:
    console.print(f"[bold]Found {total} offense(s) to review[/bold]")
    console.rule(style="dim")


def render_step(console: Console, step: Step, *, code_context: bool = True) -> None:
    d = step.diagnostic
    header = Text.assemble(
        (f"[{step.index + 1}/{step.total}] ", "bold"),
        _severity_pill(d.severity),
        " ",
        (d.rule_id, "cyan"),
    )
    if step.state is not ItemState.PENDING:
        header.append(f"  ({step.state.value})", style=_STATE_STYLE[step.state])
    console.print()
    console.print(header)
    console.print(f"  {d.message}", markup=False, highlight=False)
    console.print(Text(f"  {d.location}", style="magenta"))
    if not d.correctable:
        console.print("  [dim]not auto-correctable[/dim]")
    elif not d.safe_to_autofix:
        console.print("  [yellow]unsafe correction — use [bold]A[/bold] to apply[/yellow]")
    if code_context:
        console.print()
        render_code_context(console, d)


def render_code_context(console: Console, diagnostic: Diagnostic, before: int = 2, after: int = 1) -> None:
    """Print numbered source lines around the diagnostic, marking its line."""
    try:
        lines = read_lines(diagnostic.file_path)
    except OSError:
        return
    first = max(diagnostic.line - before, 1)
    last = min(diagnostic.line + after, len(lines))
    for line_no in range(first, last + 1):
        marker = ">" if line_no == diagnostic.line else " "
        style = "bold" if line_no == diagnostic.line else _CONTEXT_STYLE
        text = Text(f"{marker} {line_no:>4}: ", style=style)
        text.append(lines[line_no - 1].rstrip("\r\n"))
        console.print(text, highlight=False)


def inline_highlight(old: str, new: str) -> Tuple[Text, Text]:
    """Highlight the characters that differ between two versions of a line."""
    old_text = Text("-", style=_OLD_STYLE)
    new_text = Text("+", style=_NEW_STYLE)
    for op in align(old, new):
        if op.kind is OpKind.MATCH:
            old_text.append(op.old, style=_OLD_STYLE)
            new_text.append(op.new, style=_NEW_STYLE)
        elif op.kind is OpKind.CHANGE:
            old_text.append(op.old, style=f"bold reverse {_OLD_STYLE}")
            new_text.append(op.new, style=f"bold reverse {_NEW_STYLE}")
        elif op.kind is OpKind.DELETE:
            old_text.append(op.old, style=f"bold reverse {_OLD_STYLE}")
        else:
            new_text.append(op.new, style=f"bold reverse {_NEW_STYLE}")
    return old_text, new_text


def patch_lines(window: PatchWindow, *, inline: bool = True, line_numbers: bool = True) -> List[Text]:
    """Build the styled lines of a patch window.

    A ``-`` line directly followed by a ``+`` line is shown with
    per-character highlighting. Added lines carry no line number.
    """
    result: List[Text] = []
    lines = window.lines
    current = window.start_line
    i = 0
    while i < len(lines):
        line = lines[i]
        gutter = f"{current:>4} " if line_numbers else ""
        blank = "     " if line_numbers else ""
        if (
            inline
            and line.startswith("-")
            and i + 1 < len(lines)
            and lines[i + 1].startswith("+")
        ):
            old_text, new_text = inline_highlight(line[1:].rstrip("\r\n"), lines[i + 1][1:].rstrip("\r\n"))
            result.append(Text(gutter) + old_text)
            result.append(Text(blank) + new_text)
            current += 1
            i += 2
            continue
        body = line.rstrip("\r\n")
        if line.startswith("-"):
            result.append(Text(gutter) + Text(body, style=_OLD_STYLE))
            current += 1
        elif line.startswith("+"):
            result.append(Text(blank) + Text(body, style=_NEW_STYLE))
        else:
            result.append(Text(gutter) + Text(body, style=_CONTEXT_STYLE))
            current += 1
        i += 1
    return result


def render_patch(console: Console, window: Optional[PatchWindow], *, inline: bool = True) -> None:
    console.print()
    if window is None:
        console.print("[dim]No patch available for this offense.[/dim]")
        return
    console.print(
        f"[bold]Patch[/bold] [dim](from line {window.start_line}, "
        f"-{len(window.removed)} +{len(window.added)})[/dim]"
    )
    for text in patch_lines(window, inline=inline):
        console.print(text, highlight=False)


def render_stats(console: Console, stats: SessionStats) -> None:
    console.print()
    console.rule(style="dim")
    console.print("[bold]Summary:[/bold]")
    console.print(f"  [dim]Corrected:[/dim] {stats.corrected}")
    console.print(f"  [dim]Disabled:[/dim]  {stats.disabled}")
    console.print(f"  [dim]Skipped:[/dim]   {stats.skipped}")
