"""lintstep CLI — Typer application with review, preview, and init commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from lintstep import __version__

app = typer.Typer(
    name="lintstep",
    help="Review linter offenses one at a time and fix them with a precise preview.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _configure_logging(verbose: bool, debug: bool) -> None:
    """Route the lintstep logger through Rich on stderr."""
    logger = logging.getLogger("lintstep")
    logger.handlers.clear()
    handler = RichHandler(console=console, show_time=False, show_path=debug, markup=False)
    logger.addHandler(handler)
    logger.propagate = False
    if debug:
        logger.setLevel(logging.DEBUG)
    elif verbose:
        logger.setLevel(logging.INFO)
    else:
        logger.setLevel(logging.WARNING)


def _load_config(config: Optional[str]):
    from lintstep.config.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        console.print(f"[bold red]Input not found:[/bold red] {source}")
        raise typer.Exit(code=2)
    return path.read_text(encoding="utf-8")


# ── review ────────────────────────────────────────────────────────────────────


@app.command()
def review(
    files: Optional[List[str]] = typer.Argument(None, help="Files or directories to analyze"),
    input: Optional[str] = typer.Option(None, "--input", "-i", help="Read a JSON offense collection ('-' for stdin)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .lintstep.toml"),
    format: str = typer.Option("terminal", "--format", "-f", help="Final report: terminal | json"),
    fail_on_pending: bool = typer.Option(False, "--fail-on-pending", help="Exit 1 if offenses are left pending"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """Step through offenses interactively: apply, disable, or skip each one."""
    from lintstep.corrector.base import CollaboratorFailure
    from lintstep.corrector.rubocop import RubocopApplier
    from lintstep.diagnostics.catalog import CatalogError, DiagnosticCatalog
    from lintstep.output import json_report
    from lintstep.output.prompt import TerminalUI
    from lintstep.session.actions import ActionDispatcher
    from lintstep.session.controller import SessionController

    _configure_logging(verbose, debug)

    if format not in ("terminal", "json"):
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)

    cfg = _load_config(config)
    applier = RubocopApplier(cfg.tool, Path.cwd())

    try:
        # --- Load offenses ---
        if input:
            raw = _read_input(input)
        else:
            console.print("[dim]Running the analyzer...[/dim]")
            try:
                raw = applier.scan(files or [])
            except CollaboratorFailure as exc:
                console.print(f"[bold red]Analyzer error:[/bold red] {exc}")
                raise typer.Exit(code=2) from exc

        try:
            catalog = DiagnosticCatalog.parse(raw, unsafe_rules=cfg.review.unsafe_rules)
        except CatalogError as exc:
            console.print(f"[bold red]Input error:[/bold red] {exc}")
            raise typer.Exit(code=2) from exc

        if not len(catalog):
            console.print("[bold green]No offenses found.[/bold green]")
            if format == "json":
                from lintstep.session.controller import SessionStats

                print(json_report.render(SessionStats(), []))
            raise typer.Exit(code=0)

        # --- Run session ---
        dispatcher = ActionDispatcher(
            applier, cfg.directives, context_lines=cfg.review.context_lines
        )
        controller = SessionController(
            catalog, applier, dispatcher=dispatcher, unsafe_rules=cfg.review.unsafe_rules
        )
        ui = TerminalUI(cfg.display, console=console, previewer=dispatcher.preview)
        ui.show_summary(len(catalog))
        stats = controller.run(ui)
    finally:
        applier.cleanup()

    if format == "json":
        print(json_report.render(stats, controller.items))

    if fail_on_pending and any(item.is_pending for item in controller.items):
        raise typer.Exit(code=1)
    raise typer.Exit(code=0)


# ── preview ───────────────────────────────────────────────────────────────────


@app.command()
def preview(
    file: str = typer.Argument(..., help="File containing the offense"),
    line: int = typer.Argument(..., help="1-based line of the offense"),
    rule: str = typer.Argument(..., help="Rule (cop) id, e.g. Style/StringLiterals"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .lintstep.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Show the patch a correction would make at FILE:LINE, without writing it."""
    from lintstep.corrector.rubocop import RubocopApplier
    from lintstep.diagnostics.models import Diagnostic
    from lintstep.output import terminal
    from lintstep.session.actions import ActionDispatcher

    _configure_logging(verbose, False)
    cfg = _load_config(config)

    if not Path(file).is_file():
        console.print(f"[bold red]File not found:[/bold red] {file}")
        raise typer.Exit(code=2)

    diagnostic = Diagnostic(
        file_path=file,
        rule_id=rule,
        message="",
        severity="convention",
        correctable=True,
        safe_to_autofix=True,
        line=line,
        column=1,
        length=0,
    )
    applier = RubocopApplier(cfg.tool, Path.cwd())
    dispatcher = ActionDispatcher(applier, cfg.directives, context_lines=cfg.review.context_lines)
    try:
        window = dispatcher.preview(diagnostic)
    finally:
        applier.cleanup()

    terminal.render_patch(Console(), window, inline=cfg.display.inline_highlight)
    if window is None:
        raise typer.Exit(code=1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .lintstep.toml in the current directory."""
    from lintstep.config.defaults import DEFAULT_TOML
    from lintstep.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"lintstep {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """lintstep — review linter offenses one at a time."""
