"""
elfscope Data Models
=====================

Pydantic value objects describing the parts of an ELF32 image that the
inspector exposes: the file header, section header entries, symbol
entries and cross-file symbol matches.

Each model is a frozen snapshot of values read through the bounds-checked
accessor; none of them hold references into the mapped region.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - Linux man page: elf(5).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


_FROZEN = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# File header
# ---------------------------------------------------------------------------

class ElfHeader(BaseModel):
    """Fields of an ``Elf32_Ehdr`` plus derived table bounds.

    Attributes:
        magic: The first four identification bytes.
        ei_class: File class (1 = ELF32, 2 = ELF64).
        ei_data: Data encoding code (1 = little-endian, 2 = big-endian).
        e_entry: Entry point virtual address.
        e_shoff: File offset of the section header table.
        e_shnum: Number of section header entries.
        e_shentsize: Size of one section header entry.
        e_phoff: File offset of the program header table.
        e_phnum: Number of program header entries.
        e_phentsize: Size of one program header entry.
        e_shstrndx: Index of the section holding section names.
    """

    model_config = _FROZEN

    magic: bytes
    ei_class: int = 0
    ei_data: int = 0
    ei_version: int = 0
    ei_osabi: int = 0
    e_type: int = 0
    e_machine: int = 0
    e_version: int = 0
    e_entry: int = 0
    e_phoff: int = 0
    e_shoff: int = 0
    e_flags: int = 0
    e_ehsize: int = 0
    e_phentsize: int = 0
    e_phnum: int = 0
    e_shentsize: int = 0
    e_shnum: int = 0
    e_shstrndx: int = 0

    # Derived bounds.  Later components check these against the mapped
    # region again before dereferencing anything.
    section_table_size: int = 0
    section_table_end: int = 0
    program_table_size: int = 0
    program_table_end: int = 0

    @property
    def magic_string(self) -> str:
        """Printable part of the magic (``"ELF"`` for valid files)."""
        return self.magic[1:4].decode("ascii", errors="replace")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

class SectionEntry(BaseModel):
    """One row of the section header table."""

    model_config = _FROZEN

    index: int = Field(..., ge=0)
    sh_name: int = 0
    name: str = ""
    sh_type: int = 0
    type_name: str = ""
    sh_flags: int = 0
    sh_addr: int = 0
    sh_offset: int = 0
    sh_size: int = 0
    sh_link: int = 0
    sh_info: int = 0
    sh_addralign: int = 0
    sh_entsize: int = 0

    @property
    def end(self) -> int:
        """File offset one past the section's last byte."""
        return self.sh_offset + self.sh_size


# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------

class SymbolEntry(BaseModel):
    """One row of a symbol table, with names resolved.

    Attributes:
        index: Position in the symbol table (never 0).
        name: Name resolved through the linked string table.
        value: Symbol value, usually an address.
        shndx: Raw owning section index.
        section_name: Owning section name, or ``"ABS"`` when *shndx* is not
            a valid index into the section table.
        is_absolute: Whether the symbol has no owning section.
    """

    model_config = _FROZEN

    index: int = Field(..., ge=1)
    st_name: int = 0
    name: str = ""
    value: int = 0
    size: int = 0
    info: int = 0
    other: int = 0
    shndx: int = 0
    section_name: str = ""
    is_absolute: bool = False
    type_name: str = ""
    bind_name: str = ""


class SymbolMatch(BaseModel):
    """A symbol name found in both loaded files.

    One match is produced per pair of equal names, so a name that occurs
    ``k`` times in the first file and ``m`` times in the second yields
    ``k * m`` matches.
    """

    model_config = _FROZEN

    name: str
    first_index: int = Field(..., ge=1)
    second_index: int = Field(..., ge=1)
