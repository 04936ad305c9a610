"""
elfscope Inspection Engine
===========================

Holds the session registry (at most two mapped ELF files) and exposes
every inspection operation over it: examining a file, listing sections
and symbols of each loaded file, and detecting symbol names defined in
both files.

Session lifecycle:
    1. ``open_file`` reserves the lowest empty slot, maps the file and
       validates its header.  Any failure closes the handle and leaves
       the slot empty.
    2. Inspection operations re-derive section and symbol tables from
       the mapped bytes each time, so structural corruption is reported
       per operation and never changes the session.
    3. ``close_file`` / ``close_all`` release each mapping exactly once.

Failures raised while dispatching over several sessions are captured
per slot in :class:`~shared.models.SlotOutcome` objects; one file's
corruption never affects another loaded file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from shared.config import ScopeConfig
from shared.logger import ScopeLogger
from shared.models import SlotOutcome

from elfscope.analyzers.matcher import find_conflicts
from elfscope.core.errors import (
    AllSlotsFullError,
    NotEnoughFilesError,
    ScopeError,
)
from elfscope.core.models import ElfHeader, SectionEntry, SymbolEntry, SymbolMatch
from elfscope.parsers.header import parse_header
from elfscope.parsers.mapped import MappedFile
from elfscope.parsers.sections import SectionTable
from elfscope.parsers.symbols import SymbolTable

MAX_FILES: int = 2


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Session:
    """One mapped, magic-checked ELF image occupying a registry slot."""

    slot: int
    handle: MappedFile
    header: ElfHeader
    encoding: str = "ascii"

    @property
    def path(self) -> str:
        return self.handle.path

    @property
    def size(self) -> int:
        return self.handle.size

    def section_table(self) -> SectionTable:
        return SectionTable(self.handle, self.header, encoding=self.encoding)

    def symbol_table(self) -> SymbolTable:
        return SymbolTable(self.section_table())

    def close(self) -> None:
        self.handle.close()


class SessionRegistry:
    """Fixed-size slot table of open sessions.

    Slots are handed out lowest index first.  A slot reserved by
    :meth:`acquire_slot` stays empty until :meth:`attach` fills it, so a
    failed open needs no cleanup here.
    """

    def __init__(self, max_files: int = MAX_FILES) -> None:
        self._slots: list[Optional[Session]] = [None] * max_files

    def acquire_slot(self) -> int:
        """Index of the lowest empty slot.

        Raises:
            AllSlotsFullError: Every slot holds a session.
        """
        for index, session in enumerate(self._slots):
            if session is None:
                return index
        raise AllSlotsFullError(
            f"maximum number of open files ({len(self._slots)}) reached"
        )

    def attach(self, slot: int, session: Session) -> None:
        if self._slots[slot] is not None:
            raise ValueError(f"slot {slot} is already occupied")
        self._slots[slot] = session

    def get(self, slot: int) -> Session:
        session = self._slots[slot] if 0 <= slot < len(self._slots) else None
        if session is None:
            raise KeyError(f"slot {slot} is empty")
        return session

    def release(self, slot: int) -> None:
        """Unmap and close *slot*.

        Releasing an empty slot, or an index outside the table, is a no-op.
        """
        session = self._slots[slot] if 0 <= slot < len(self._slots) else None
        if session is None:
            return
        self._slots[slot] = None
        session.close()

    def occupied_slots(self) -> list[int]:
        """Indices of occupied slots in ascending order."""
        return [index for index, session in enumerate(self._slots) if session is not None]

    def sessions(self) -> list[Session]:
        return [self._slots[index] for index in self.occupied_slots()]  # type: ignore[misc]

    def close_all(self) -> None:
        for slot in self.occupied_slots():
            self.release(slot)

    @property
    def capacity(self) -> int:
        return len(self._slots)


# ---------------------------------------------------------------------------
# ScopeEngine
# ---------------------------------------------------------------------------

class ScopeEngine:
    """Entry point for every inspection operation.

    Usage::

        with ScopeEngine() as engine:
            first = engine.open_file("a.o")
            second = engine.open_file("b.o")
            for name in engine.common_symbols():
                print(f"Symbol {name} found in both files")
    """

    def __init__(
        self,
        config: ScopeConfig | None = None,
        logger: ScopeLogger | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: elfscope configuration.  Defaults are used if not provided.
            logger: Logger instance.  A new one is created if not provided.
        """
        self._config: ScopeConfig = config or ScopeConfig()
        settings = self._config.global_settings
        self._logger: ScopeLogger = logger or ScopeLogger(
            "engine",
            log_level=settings.log_level,
            log_file=settings.log_file or None,
            json_logs=settings.log_json,
        )
        self._registry = SessionRegistry()
        self._debug = False
        self._base_level = self._logger.level
        if settings.debug:
            self.toggle_debug()

    # ------------------------------------------------------------------ #
    #  Session lifecycle
    # ------------------------------------------------------------------ #

    def open_file(self, path: str | Path) -> Session:
        """Map *path* into the lowest empty slot and validate its header.

        Raises:
            AllSlotsFullError: Both slots are occupied; nothing is opened.
            OpenError: The file cannot be opened.
            MappingError: The file cannot be mapped.
            TooSmallError, BadMagicError: The file is not an ELF image;
                it is closed and the slot stays empty.
        """
        with self._logger.operation("open_file"):
            slot = self._registry.acquire_slot()
            handle = MappedFile.open(path)
            try:
                header = parse_header(handle, self._logger)
            except ScopeError as exc:
                handle.close()
                self._logger.warning("Rejected %s: %s", handle.path, exc)
                raise

            session = Session(
                slot=slot,
                handle=handle,
                header=header,
                encoding=self._config.inspector.string_encoding,
            )
            self._registry.attach(slot, session)
            self._logger.info("Loaded %s into slot %d", session.path, slot)
            self._logger.debug("Mapped file %s, size %d", session.path, session.size)
            return session

    def close_file(self, slot: int) -> None:
        """Release *slot*; closing an empty slot does nothing."""
        if slot in self._registry.occupied_slots():
            self._logger.info("Closing slot %d", slot)
        self._registry.release(slot)

    def close_all(self) -> None:
        self._registry.close_all()

    def __enter__(self) -> ScopeEngine:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close_all()

    # ------------------------------------------------------------------ #
    #  Per-session operations
    # ------------------------------------------------------------------ #

    def session(self, slot: int) -> Session:
        return self._registry.get(slot)

    def header(self, slot: int) -> ElfHeader:
        return self._registry.get(slot).header

    def sections(self, slot: int) -> list[SectionEntry]:
        """Section entries of *slot* with names resolved.

        The reserved null section at index 0 is left out unless
        ``inspector.show_null_section`` is set.

        Raises:
            TruncatedTableError, BadShstrndxError, OutOfBoundsError
        """
        with self._logger.operation("sections", slot):
            table = self._registry.get(slot).section_table()
            start = 0 if self._config.inspector.show_null_section else 1
            self._logger.debug("Slot %d: %d section headers", slot, len(table))
            return [table.entry(index) for index in range(start, len(table))]

    def symbols(self, slot: int) -> list[SymbolEntry]:
        """Symbols of *slot*, null symbol excluded.

        Raises:
            NoSymtabError, NoLinkedStrtabError, TruncatedTableError,
            BadShstrndxError, OutOfBoundsError
        """
        with self._logger.operation("symbols", slot):
            table = self._registry.get(slot).symbol_table()
            self._logger.debug(
                "Slot %d: symbol table %d with %d entries",
                slot,
                table.section.index,
                table.entry_count,
            )
            return list(table)

    # ------------------------------------------------------------------ #
    #  Dispatch over all loaded files
    # ------------------------------------------------------------------ #

    def for_each_session(
        self, operation: Callable[[Session], Any]
    ) -> list[SlotOutcome]:
        """Run *operation* on every occupied slot, lowest first.

        A :class:`ScopeError` raised for one slot is recorded in that
        slot's outcome and the remaining slots still run.
        """
        outcomes: list[SlotOutcome] = []
        for session in self._registry.sessions():
            try:
                value = operation(session)
            except ScopeError as exc:
                self._logger.debug("Slot %d: %s: %s", session.slot, exc.kind.value, exc)
                outcomes.append(
                    SlotOutcome(
                        slot=session.slot,
                        path=session.path,
                        error=exc.kind,
                        message=str(exc),
                    )
                )
            else:
                outcomes.append(
                    SlotOutcome(slot=session.slot, path=session.path, value=value)
                )
        return outcomes

    def all_sections(self) -> list[SlotOutcome]:
        return self.for_each_session(lambda session: self.sections(session.slot))

    def all_symbols(self) -> list[SlotOutcome]:
        return self.for_each_session(lambda session: self.symbols(session.slot))

    # ------------------------------------------------------------------ #
    #  Cross-file operations
    # ------------------------------------------------------------------ #

    def _require_pair(self) -> tuple[Session, Session]:
        sessions = self._registry.sessions()
        if len(sessions) != self._registry.capacity:
            raise NotEnoughFilesError(
                f"exactly {self._registry.capacity} ELF files are required, "
                f"{len(sessions)} loaded"
            )
        return sessions[0], sessions[1]

    def find_conflicts(self) -> list[SymbolMatch]:
        """Pairs of equal symbol names across the two loaded files.

        Raises:
            NotEnoughFilesError: Fewer than two files are loaded.
            MissingSymtabError: Either file lacks a symbol table.
        """
        with self._logger.operation("check_merge"):
            first, second = self._require_pair()
            matches = find_conflicts(
                first.section_table(),
                second.section_table(),
                slots=(first.slot, second.slot),
            )
            self._logger.debug("%d symbol matches", len(matches))
            return matches

    def common_symbols(self) -> list[str]:
        """Names defined in both loaded files, once per matching pair."""
        return [match.name for match in self.find_conflicts()]

    def merge(self) -> None:
        raise NotImplementedError("merging ELF files is not implemented")

    # ------------------------------------------------------------------ #
    #  Debug mode
    # ------------------------------------------------------------------ #

    def toggle_debug(self) -> bool:
        """Flip debug mode and return the new state.

        Leaving debug mode restores the level the logger had when the
        engine was created.
        """
        self._debug = not self._debug
        self._logger.set_level("DEBUG" if self._debug else self._base_level)
        return self._debug

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    @property
    def config(self) -> ScopeConfig:
        return self._config

    @property
    def logger(self) -> ScopeLogger:
        return self._logger
