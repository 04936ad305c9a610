"""
Section Table Resolver
=======================

Locates the section header table of a mapped ELF32 image, decodes its
entries and resolves section names through the section-name string
table selected by ``e_shstrndx``.

Two levels of indirection are involved (header -> table -> string
table), and each hop is validated against the mapped region:

    1. The table span ``[e_shoff, e_shoff + e_shnum * e_shentsize)`` must
       fit inside the file, otherwise :class:`TruncatedTableError`.
    2. ``e_shstrndx`` must name an entry of the table, otherwise
       :class:`BadShstrndxError`.
    3. Each name offset, and the terminator of the string it starts,
       must lie inside the string table, otherwise
       :class:`OutOfBoundsError`.
"""

from __future__ import annotations

from typing import Iterator, Optional, Union

from elfscope.core.errors import (
    BadShstrndxError,
    OutOfBoundsError,
    TruncatedTableError,
)
from elfscope.core.models import ElfHeader, SectionEntry
from elfscope.parsers.constants import SHDR, SHDR_SIZE, section_type_name
from elfscope.parsers.mapped import MappedFile


# ---------------------------------------------------------------------------
# String tables
# ---------------------------------------------------------------------------

class StringTable:
    """A window ``[offset, offset + size)`` of the image holding C strings.

    The bytes are never copied as a whole; each lookup reads only the
    string it needs through the handle.
    """

    def __init__(
        self,
        handle: MappedFile,
        offset: int,
        size: int,
        *,
        label: str = "string table",
        encoding: str = "ascii",
    ) -> None:
        self._handle = handle
        self._offset = offset
        self._size = size
        self._label = label
        self._encoding = encoding

    def bytes_at(self, offset: int) -> bytes:
        """Raw bytes of the null-terminated string starting *offset* bytes in.

        Raises:
            OutOfBoundsError: *offset* is at or past the table's size, the
                table itself lies outside the mapped region, or no
                terminator occurs before the table ends.
        """
        if offset < 0 or offset >= self._size:
            raise OutOfBoundsError(
                f"{self._label}: offset {offset} outside {self._size}-byte table"
            )
        if not self._handle.contains(self._offset, self._size):
            raise OutOfBoundsError(
                f"{self._label}: table [{self._offset}, {self._offset + self._size}) "
                f"outside {self._handle.size}-byte file"
            )

        start = self._offset + offset
        end = self._handle.find(b"\x00", start, self._offset + self._size)
        if end == -1:
            raise OutOfBoundsError(
                f"{self._label}: string at offset {offset} is not terminated "
                f"inside the table"
            )
        return self._handle.byte_at(start, end - start)

    def decode(self, raw: bytes) -> str:
        """Display form of *raw*; undecodable bytes become U+FFFD."""
        return raw.decode(self._encoding, errors="replace")

    def string_at(self, offset: int) -> str:
        """:meth:`bytes_at` decoded for display.

        Distinct byte strings may decode to the same text, so comparisons
        between names use :meth:`bytes_at`.
        """
        return self.decode(self.bytes_at(offset))

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def size(self) -> int:
        return self._size


# ---------------------------------------------------------------------------
# Section header table
# ---------------------------------------------------------------------------

class SectionTable:
    """Decoded section header table of one mapped image.

    Usage::

        table = SectionTable(handle, header)
        for index, entry in table.entries():
            print(index, entry.name, hex(entry.sh_addr))

    Raises:
        TruncatedTableError: The table runs past the end of the file or
            its entry size is smaller than an ``Elf32_Shdr``.
        BadShstrndxError: ``e_shstrndx`` is not below ``e_shnum``.
    """

    def __init__(
        self,
        handle: MappedFile,
        header: ElfHeader,
        *,
        encoding: str = "ascii",
    ) -> None:
        self._handle = handle
        self._header = header
        self._encoding = encoding

        count = header.e_shnum
        if count > 0:
            if header.e_shentsize < SHDR_SIZE:
                raise TruncatedTableError(
                    f"section header entry size {header.e_shentsize} "
                    f"is smaller than {SHDR_SIZE}"
                )
            if not handle.contains(header.e_shoff, header.section_table_size):
                raise TruncatedTableError(
                    f"section table [{header.e_shoff}, {header.section_table_end}) "
                    f"runs past the {handle.size}-byte file"
                )
        if header.e_shstrndx >= count:
            raise BadShstrndxError(
                f"e_shstrndx {header.e_shstrndx} is not below e_shnum {count}"
            )

        self._raw: list[SectionEntry] = [
            self._read_entry(index) for index in range(count)
        ]
        self._names = self.string_table(header.e_shstrndx, label="section names")

    def _read_entry(self, index: int) -> SectionEntry:
        offset = self._header.e_shoff + index * self._header.e_shentsize
        (
            sh_name, sh_type, sh_flags, sh_addr,
            sh_offset, sh_size, sh_link, sh_info,
            sh_addralign, sh_entsize,
        ) = SHDR.unpack(self._handle.byte_at(offset, SHDR_SIZE))
        return SectionEntry(
            index=index,
            sh_name=sh_name,
            sh_type=sh_type,
            type_name=section_type_name(sh_type),
            sh_flags=sh_flags,
            sh_addr=sh_addr,
            sh_offset=sh_offset,
            sh_size=sh_size,
            sh_link=sh_link,
            sh_info=sh_info,
            sh_addralign=sh_addralign,
            sh_entsize=sh_entsize,
        )

    # ------------------------------------------------------------------ #
    #  Lookup
    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return len(self._raw)

    def __iter__(self) -> Iterator[SectionEntry]:
        for index in range(len(self._raw)):
            yield self.entry(index)

    def raw_entry(self, index: int) -> SectionEntry:
        """Entry *index* with its name left unresolved."""
        if not 0 <= index < len(self._raw):
            raise IndexError(f"section index {index} out of range")
        return self._raw[index]

    def entry(self, index: int) -> SectionEntry:
        """Entry *index* with its name resolved."""
        raw = self.raw_entry(index)
        return raw.model_copy(update={"name": self.resolve_name(raw)})

    def entries(self) -> list[tuple[int, SectionEntry]]:
        """All ``(index, entry)`` pairs in table order, names resolved."""
        return [(entry.index, entry) for entry in self]

    def resolve_name(self, entry: Union[SectionEntry, int]) -> str:
        """Resolve a section's name through the section-name string table.

        Raises:
            OutOfBoundsError: The name offset or its terminator lies
                outside the string table.
        """
        if isinstance(entry, int):
            entry = self.raw_entry(entry)
        return self._names.string_at(entry.sh_name)

    def first_of_type(self, sh_type: int) -> Optional[SectionEntry]:
        """The lowest-indexed entry of *sh_type*, or ``None``."""
        for entry in self._raw:
            if entry.sh_type == sh_type:
                return entry
        return None

    def string_table(self, index: int, *, label: str = "string table") -> StringTable:
        """A :class:`StringTable` over the data of section *index*."""
        entry = self.raw_entry(index)
        return StringTable(
            self._handle,
            entry.sh_offset,
            entry.sh_size,
            label=label,
            encoding=self._encoding,
        )

    @property
    def header(self) -> ElfHeader:
        return self._header

    @property
    def handle(self) -> MappedFile:
        return self._handle


def sections(
    handle: MappedFile,
    header: ElfHeader,
    *,
    encoding: str = "ascii",
) -> SectionTable:
    """Build the :class:`SectionTable` of *handle*."""
    return SectionTable(handle, header, encoding=encoding)
