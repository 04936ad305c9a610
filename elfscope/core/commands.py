"""
Inspector Commands
===================

The actions offered by the interactive shell, in menu order.  The shell
maps a menu number to a :class:`Command` and a :class:`CommandDispatcher`
maps the command to the handler registered for it.
"""

from __future__ import annotations

import enum
from typing import Callable


class Command(str, enum.Enum):
    """Interactive shell actions."""

    TOGGLE_DEBUG = "toggle_debug"
    EXAMINE = "examine"
    SECTIONS = "sections"
    SYMBOLS = "symbols"
    CHECK_MERGE = "check_merge"
    MERGE = "merge"
    QUIT = "quit"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_choice(cls, choice: int) -> Command:
        """Command at menu position *choice*.

        Raises:
            ValueError: *choice* is not a menu position.
        """
        members = list(cls)
        if not 0 <= choice < len(members):
            raise ValueError(f"invalid choice {choice}")
        return members[choice]


_LABELS: dict[Command, str] = {
    Command.TOGGLE_DEBUG: "Toggle Debug Mode",
    Command.EXAMINE: "Examine ELF File",
    Command.SECTIONS: "Print Section Names",
    Command.SYMBOLS: "Print Symbols",
    Command.CHECK_MERGE: "Check Files for Merge",
    Command.MERGE: "Merge ELF Files",
    Command.QUIT: "Quit",
}


class CommandDispatcher:
    """Registry of one handler per :class:`Command`.

    Usage::

        dispatcher = CommandDispatcher()
        dispatcher.register(Command.SYMBOLS, show_symbols)
        dispatcher.dispatch(Command.SYMBOLS)
    """

    def __init__(self) -> None:
        self._handlers: dict[Command, Callable[[], None]] = {}

    def register(self, command: Command, handler: Callable[[], None]) -> None:
        self._handlers[command] = handler

    def dispatch(self, command: Command) -> None:
        try:
            handler = self._handlers[command]
        except KeyError:
            raise LookupError(f"no handler registered for {command.label!r}") from None
        handler()

    def menu(self) -> list[tuple[int, str]]:
        """``(number, label)`` rows for every command, in menu order."""
        return [(number, command.label) for number, command in enumerate(Command)]
