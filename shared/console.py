"""
elfscope Console Interface
===========================

Rich console wrapper shared by every elfscope command: section rules,
status-prefixed messages and a pass-through ``print`` for tables and
panels built by the output layer.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.theme import Theme

_SCOPE_THEME = Theme(
    {
        "scope.section": "bold bright_magenta",
        "scope.warning": "bold yellow",
        "scope.error": "bold red",
        "scope.info": "bold bright_blue",
    }
)


class ScopeConsole:
    """Themed console for elfscope output.

    Usage::

        con = ScopeConsole()
        con.section("File 1: /bin/true")
        con.warning("No symbol table found in file 1")

    Messages are Rich markup; callers escape untrusted text such as
    paths and symbol names.
    """

    def __init__(self, *, quiet: bool = False, width: int | None = None) -> None:
        self._console = Console(
            theme=_SCOPE_THEME,
            quiet=quiet,
            highlight=False,
            width=width,
        )

    def section(self, title: str) -> None:
        """Print a rule headed by *title*."""
        self._console.rule(
            f"  {title}  ",
            style="scope.section",
            characters="─",
        )

    def warning(self, message: str) -> None:
        self._console.print(
            f"[scope.warning][⚠] WARNING:[/scope.warning] {message}"
        )

    def error(self, message: str) -> None:
        self._console.print(
            f"[scope.error][✘] ERROR:[/scope.error] {message}"
        )

    def info(self, message: str) -> None:
        self._console.print(
            f"[scope.info][ℹ] INFO:[/scope.info] {message}"
        )

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._console.print(*args, **kwargs)
