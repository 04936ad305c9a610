"""
elfscope CLI -- ELF32 Inspector
================================

Click-based command-line interface for the elfscope inspector.  Offers
one-shot commands for scripting and an interactive menu shell that keeps
up to two files loaded between actions.

Usage::

    # Header of one file
    elfscope header a.o

    # Sections / symbols of one or two files
    elfscope sections a.o b.o
    elfscope symbols a.o --json

    # Symbol names defined in both files
    elfscope compare a.o b.o

    # Interactive menu
    elfscope shell

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any, Callable

import click
from rich.markup import escape

from shared.config import ScopeConfig
from shared.console import ScopeConsole
from shared.logger import ScopeLogger
from shared.models import SlotOutcome

from elfscope import __version__
from elfscope.core.commands import Command, CommandDispatcher
from elfscope.core.engine import ScopeEngine
from elfscope.core.errors import ScopeError
from elfscope.output.console import ScopeConsoleOutput


@dataclass(slots=True)
class _CliState:
    engine: ScopeEngine
    output: ScopeConsoleOutput
    json_output: bool = False


def _dump(value: Any) -> Any:
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return value


def _outcome_json(outcome: SlotOutcome, key: str) -> dict[str, Any]:
    entry: dict[str, Any] = {"file": outcome.slot + 1, "path": outcome.path}
    if outcome.ok:
        entry[key] = _dump(outcome.value)
    else:
        entry["error"] = outcome.error.value if outcome.error else None
        entry["message"] = outcome.message
    return entry


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


# ---------------------------------------------------------------------------
# Actions shared by one-shot commands and the shell
# ---------------------------------------------------------------------------

def _examine(state: _CliState, path: str) -> bool:
    try:
        session = state.engine.open_file(path)
    except ScopeError as exc:
        state.output.display_failure(exc.kind, str(exc))
        return False
    if state.json_output:
        data = session.header.model_dump(mode="json", exclude={"magic"})
        data.update(file=session.slot + 1, path=session.path, magic=session.header.magic_string)
        _echo_json(data)
    else:
        state.output.display_header(session.slot + 1, session.path, session.header)
    return True


def _show_outcomes(
    state: _CliState,
    outcomes: list[SlotOutcome],
    key: str,
    render: Callable[[int, str, Any], None],
) -> bool:
    if state.json_output:
        _echo_json([_outcome_json(outcome, key) for outcome in outcomes])
        return all(outcome.ok for outcome in outcomes)

    if not outcomes:
        state.output.console.info("No ELF files loaded")
        return True
    for outcome in outcomes:
        if outcome.ok:
            render(outcome.slot + 1, outcome.path, outcome.value)
        else:
            state.output.display_outcome_failure(outcome)
    return all(outcome.ok for outcome in outcomes)


def _show_sections(state: _CliState) -> bool:
    return _show_outcomes(
        state, state.engine.all_sections(), "sections", state.output.display_sections
    )


def _show_symbols(state: _CliState) -> bool:
    return _show_outcomes(
        state, state.engine.all_symbols(), "symbols", state.output.display_symbols
    )


def _check_merge(state: _CliState) -> bool:
    try:
        matches = state.engine.find_conflicts()
    except ScopeError as exc:
        state.output.display_failure(exc.kind, str(exc))
        return False
    if state.json_output:
        _echo_json(_dump(matches))
    else:
        state.output.display_matches(matches)
    return True


def _merge(state: _CliState) -> None:
    try:
        state.engine.merge()
    except NotImplementedError:
        state.output.console.info("Not implemented yet.")


def _toggle_debug(state: _CliState) -> None:
    enabled = state.engine.toggle_debug()
    state.output.console.info(f"Debug mode {'on' if enabled else 'off'}")


def _load_all(state: _CliState, paths: tuple[str, ...]) -> bool:
    """Open every path quietly; report the first failure."""
    for path in paths:
        try:
            state.engine.open_file(path)
        except ScopeError as exc:
            state.output.display_failure(exc.kind, str(exc))
            return False
    return True


# ---------------------------------------------------------------------------
# CLI group / commands
# ---------------------------------------------------------------------------

@click.group("elfscope")
@click.version_option(__version__, prog_name="elfscope")
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a TOML configuration file.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print results as JSON instead of tables (default: inspector.output_format).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    verbose: bool,
    json_output: bool,
) -> None:
    """elfscope -- ELF32 object file inspector.

    Examine headers, sections and symbols of up to two ELF32 files and
    list the symbol names they both define.
    """
    config = ScopeConfig.load(config_path)
    settings = config.global_settings
    logger = ScopeLogger(
        "engine",
        log_level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file or None,
        json_logs=settings.log_json,
    )
    engine = ScopeEngine(config=config, logger=logger)
    ctx.call_on_close(engine.close_all)
    ctx.obj = _CliState(
        engine=engine,
        output=ScopeConsoleOutput(ScopeConsole()),
        json_output=json_output or config.inspector.output_format == "json",
    )


@cli.command("header")
@click.argument("path", type=click.Path())
@click.pass_obj
def header_cmd(state: _CliState, path: str) -> None:
    """Print the ELF header of PATH."""
    if not _examine(state, path):
        sys.exit(1)


@cli.command("sections")
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.pass_obj
def sections_cmd(state: _CliState, paths: tuple[str, ...]) -> None:
    """List the sections of one or two files."""
    if not _load_all(state, paths) or not _show_sections(state):
        sys.exit(1)


@cli.command("symbols")
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.pass_obj
def symbols_cmd(state: _CliState, paths: tuple[str, ...]) -> None:
    """List the symbols of one or two files."""
    if not _load_all(state, paths) or not _show_symbols(state):
        sys.exit(1)


@cli.command("compare")
@click.argument("first", type=click.Path())
@click.argument("second", type=click.Path())
@click.pass_obj
def compare_cmd(state: _CliState, first: str, second: str) -> None:
    """List symbol names defined in both FIRST and SECOND."""
    if not _load_all(state, (first, second)) or not _check_merge(state):
        sys.exit(1)


@cli.command("shell")
@click.pass_obj
def shell_cmd(state: _CliState) -> None:
    """Interactive menu over up to two loaded files."""
    running = True

    def _quit() -> None:
        nonlocal running
        running = False

    dispatcher = CommandDispatcher()
    dispatcher.register(Command.TOGGLE_DEBUG, lambda: _toggle_debug(state))
    dispatcher.register(
        Command.EXAMINE,
        lambda: _examine(state, click.prompt("Enter ELF file name", type=str)),
    )
    dispatcher.register(Command.SECTIONS, lambda: _show_sections(state))
    dispatcher.register(Command.SYMBOLS, lambda: _show_symbols(state))
    dispatcher.register(Command.CHECK_MERGE, lambda: _check_merge(state))
    dispatcher.register(Command.MERGE, lambda: _merge(state))
    dispatcher.register(Command.QUIT, _quit)

    while running:
        click.echo("Choose action:")
        for number, label in dispatcher.menu():
            click.echo(f"{number}-{label}")
        try:
            choice = click.prompt("Choice", type=int)
        except click.Abort:
            break
        try:
            command = Command.from_choice(choice)
        except ValueError:
            state.output.console.error(escape(f"Invalid choice {choice}"))
            continue
        try:
            dispatcher.dispatch(command)
        except click.Abort:
            break

    state.engine.close_all()


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for the ``elfscope`` script and ``python -m elfscope``."""
    cli()


if __name__ == "__main__":
    main()
