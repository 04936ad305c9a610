"""
Symbol Table Resolver
======================

Finds the first ``SHT_SYMTAB`` section of an image, follows its
``sh_link`` to the string table holding symbol names and enumerates the
symbols with their names and owning-section names resolved.

Symbol 0 is the reserved null symbol and is never yielded.  A symbol
whose ``st_shndx`` is not below ``e_shnum`` (``SHN_ABS``, ``SHN_COMMON``
and friends) has no owning section and is reported as ``"ABS"``.
"""

from __future__ import annotations

from typing import Iterator, Optional

from elfscope.core.errors import (
    NoLinkedStrtabError,
    NoSymtabError,
    TruncatedTableError,
)
from elfscope.core.models import ElfHeader, SectionEntry, SymbolEntry
from elfscope.parsers.constants import (
    ABS_SECTION_NAME,
    SHT_SYMTAB,
    STB_NAMES,
    STT_NAMES,
    SYM,
    SYM_SIZE,
    symbol_bind,
    symbol_type,
)
from elfscope.parsers.mapped import MappedFile
from elfscope.parsers.sections import SectionTable


class SymbolTable:
    """Lazy, restartable view over the symbol table of one image.

    Iterating walks the table from index 1 each time; nothing is cached
    and the mapped bytes are never modified.

    Usage::

        table = SymbolTable(section_table)
        for sym in table:
            print(sym.index, sym.name, sym.section_name)

    Raises:
        NoSymtabError: The image has no ``SHT_SYMTAB`` section.
        NoLinkedStrtabError: ``sh_link`` is 0 or not below ``e_shnum``.
        TruncatedTableError: ``sh_entsize`` is 0 or smaller than an
            ``Elf32_Sym``, or the table runs past the end of the file.
    """

    def __init__(self, section_table: SectionTable) -> None:
        symtab = section_table.first_of_type(SHT_SYMTAB)
        if symtab is None:
            raise NoSymtabError("no symbol table found")

        if symtab.sh_link == 0 or symtab.sh_link >= len(section_table):
            raise NoLinkedStrtabError(
                f"symbol table links to section {symtab.sh_link}, "
                f"file has {len(section_table)}"
            )
        if symtab.sh_entsize == 0:
            raise TruncatedTableError("symbol table entry size is 0")
        if symtab.sh_entsize < SYM_SIZE:
            raise TruncatedTableError(
                f"symbol table entry size {symtab.sh_entsize} "
                f"is smaller than {SYM_SIZE}"
            )

        handle = section_table.handle
        if not handle.contains(symtab.sh_offset, symtab.sh_size):
            raise TruncatedTableError(
                f"symbol table [{symtab.sh_offset}, {symtab.end}) "
                f"runs past the {handle.size}-byte file"
            )

        self._sections = section_table
        self._symtab = symtab
        self._strtab = section_table.string_table(symtab.sh_link, label="symbol names")

    # ------------------------------------------------------------------ #
    #  Enumeration
    # ------------------------------------------------------------------ #

    @property
    def entry_count(self) -> int:
        """Number of records in the table, the null symbol included."""
        return self._symtab.sh_size // self._symtab.sh_entsize

    def __len__(self) -> int:
        return max(self.entry_count - 1, 0)

    def __iter__(self) -> Iterator[SymbolEntry]:
        for index in range(1, self.entry_count):
            yield self.symbol(index)

    def _record(self, index: int) -> tuple[int, int, int, int, int, int]:
        if not 1 <= index < self.entry_count:
            raise IndexError(f"symbol index {index} out of range")
        offset = self._symtab.sh_offset + index * self._symtab.sh_entsize
        return SYM.unpack(self._sections.handle.byte_at(offset, SYM_SIZE))

    def symbol(self, index: int) -> SymbolEntry:
        """Decode symbol *index* (1-based; the null symbol is not readable)."""
        st_name, st_value, st_size, st_info, st_other, st_shndx = self._record(index)

        is_absolute = st_shndx >= len(self._sections)
        if is_absolute:
            section_name = ABS_SECTION_NAME
        else:
            section_name = self._sections.resolve_name(st_shndx)

        bind = symbol_bind(st_info)
        kind = symbol_type(st_info)
        return SymbolEntry(
            index=index,
            st_name=st_name,
            name=self._strtab.string_at(st_name),
            value=st_value,
            size=st_size,
            info=st_info,
            other=st_other,
            shndx=st_shndx,
            section_name=section_name,
            is_absolute=is_absolute,
            type_name=STT_NAMES.get(kind, f"UNKNOWN({kind})"),
            bind_name=STB_NAMES.get(bind, f"UNKNOWN({bind})"),
        )

    def raw_names(self) -> Iterator[tuple[int, bytes]]:
        """``(index, name bytes)`` for every symbol, in table order.

        Only ``st_name`` is read, so a symbol whose owning section
        has a corrupt name still yields its own name.
        """
        for index in range(1, self.entry_count):
            yield index, self._strtab.bytes_at(self._record(index)[0])

    def decode_name(self, raw: bytes) -> str:
        return self._strtab.decode(raw)

    def names(self) -> list[str]:
        """Symbol names in table order, index 0 excluded."""
        return [self.decode_name(raw) for _, raw in self.raw_names()]

    @property
    def section(self) -> SectionEntry:
        """The ``SHT_SYMTAB`` section this table was read from."""
        return self._symtab


def symbols(
    handle: MappedFile,
    header: ElfHeader,
    section_table: Optional[SectionTable] = None,
) -> SymbolTable:
    """Build the :class:`SymbolTable` of *handle*.

    *section_table* is reused when given, otherwise it is read from
    *handle* first.
    """
    if section_table is None:
        section_table = SectionTable(handle, header)
    return SymbolTable(section_table)
