"""
elfscope Console Output
========================

Rich-powered terminal display of inspection results: header panels,
section and symbol tables, symbol-conflict listings and per-file
failures.  All styling goes through :class:`~shared.console.ScopeConsole`.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shared.console import ScopeConsole
from shared.models import ErrorKind, SlotOutcome

from elfscope.core.models import ElfHeader, SectionEntry, SymbolEntry, SymbolMatch

_DATA_ENCODINGS: dict[int, str] = {
    0: "none",
    1: "2's complement, little endian",
    2: "2's complement, big endian",
}


def _table() -> Table:
    return Table(
        border_style="bright_cyan",
        header_style="bold bright_magenta",
        padding=(0, 1),
    )


class ScopeConsoleOutput:
    """Rich terminal display for elfscope results.

    Usage::

        output = ScopeConsoleOutput()
        output.display_header(1, session.path, header)
        output.display_sections(1, session.path, sections)
    """

    def __init__(self, console: ScopeConsole | None = None) -> None:
        self._console: ScopeConsole = console or ScopeConsole()

    @property
    def console(self) -> ScopeConsole:
        return self._console

    # ------------------------------------------------------------------ #
    #  Header
    # ------------------------------------------------------------------ #

    def display_header(self, file_number: int, path: str, header: ElfHeader) -> None:
        encoding = _DATA_ENCODINGS.get(header.ei_data, "unknown")
        lines: list[str] = [
            f"[bold]Magic:[/bold]                        {escape(header.magic_string)}",
            f"[bold]Data encoding:[/bold]                {header.ei_data} ({encoding})",
            f"[bold]Entry point:[/bold]                  0x{header.e_entry:x}",
            f"[bold]Section header offset:[/bold]        {header.e_shoff}",
            f"[bold]Number of section headers:[/bold]    {header.e_shnum}",
            f"[bold]Size of each section header:[/bold]  {header.e_shentsize}",
            f"[bold]Program header offset:[/bold]        {header.e_phoff}",
            f"[bold]Number of program headers:[/bold]    {header.e_phnum}",
            f"[bold]Size of each program header:[/bold]  {header.e_phentsize}",
        ]
        panel = Panel(
            "\n".join(lines),
            title=f"[bold bright_cyan]File {file_number}: {escape(path)}[/bold bright_cyan]",
            border_style="bright_cyan",
            padding=(0, 2),
        )
        self._console.print(panel)

    # ------------------------------------------------------------------ #
    #  Sections
    # ------------------------------------------------------------------ #

    def display_sections(
        self, file_number: int, path: str, sections: list[SectionEntry]
    ) -> None:
        self._console.section(f"File {file_number}: {escape(path)}")

        tbl = _table()
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Name", style="bold")
        tbl.add_column("Address", justify="right")
        tbl.add_column("Offset", justify="right")
        tbl.add_column("Size", justify="right")
        tbl.add_column("Type")

        for sec in sections:
            tbl.add_row(
                f"{sec.index:2d}",
                escape(sec.name),
                f"0x{sec.sh_addr:08x}",
                f"0x{sec.sh_offset:08x}",
                f"0x{sec.sh_size:08x}",
                f"{sec.sh_type} ({sec.type_name})",
            )

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Symbols
    # ------------------------------------------------------------------ #

    def display_symbols(
        self, file_number: int, path: str, symbols: list[SymbolEntry]
    ) -> None:
        self._console.section(f"File {file_number}: {escape(path)}")

        tbl = _table()
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Value", justify="right")
        tbl.add_column("Ndx", justify="right")
        tbl.add_column("Section")
        tbl.add_column("Name", style="bold")

        for sym in symbols:
            section_style = "yellow" if sym.is_absolute else ""
            tbl.add_row(
                f"{sym.index:2d}",
                f"0x{sym.value:08x}",
                f"{sym.shndx:2d}",
                f"[{section_style}]{escape(sym.section_name)}[/{section_style}]"
                if section_style
                else escape(sym.section_name),
                escape(sym.name),
            )

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Cross-file matches
    # ------------------------------------------------------------------ #

    def display_matches(self, matches: list[SymbolMatch]) -> None:
        if not matches:
            self._console.info("No symbol is defined in both files")
            return
        for match in matches:
            self._console.print(f"Symbol {escape(match.name)} found in both files")

    # ------------------------------------------------------------------ #
    #  Failures
    # ------------------------------------------------------------------ #

    def display_failure(self, kind: ErrorKind, message: str) -> None:
        text = f"{kind.value}: {escape(message)}"
        if kind is ErrorKind.NO_SYMTAB:
            self._console.warning(text)
        else:
            self._console.error(text)

    def display_outcome_failure(self, outcome: SlotOutcome) -> None:
        """Report a failed per-slot outcome under its file heading."""
        if outcome.error is None:
            return
        if outcome.error is ErrorKind.NO_SYMTAB:
            self._console.warning(f"No symbol table found in file {outcome.slot + 1}")
            return
        self.display_failure(outcome.error, f"file {outcome.slot + 1}: {outcome.message}")
