"""
ELF32 Header Parser
====================

Validates the identification bytes of a mapped image and extracts the
``Elf32_Ehdr`` fields verbatim, together with the byte spans of the
section and program header tables.

The spans are derived values only: nothing here checks that the tables
fit in the file.  The section and symbol resolvers re-validate every
span against the mapped region before they read from it.
"""

from __future__ import annotations

from typing import Optional

from shared.logger import ScopeLogger

from elfscope.core.errors import BadMagicError, TooSmallError
from elfscope.core.models import ElfHeader
from elfscope.parsers.constants import (
    EHDR_BODY,
    EHDR_SIZE,
    EI_CLASS,
    EI_DATA,
    EI_NIDENT,
    EI_OSABI,
    EI_VERSION,
    ELF_MAGIC,
    ELFCLASS32,
)
from elfscope.parsers.mapped import MappedFile


def parse_header(handle: MappedFile, logger: Optional[ScopeLogger] = None) -> ElfHeader:
    """Parse the ELF32 file header of *handle*.

    Args:
        handle: An open mapped file.
        logger: Optional logger for diagnostics about unusual files.

    Returns:
        The header fields plus derived table bounds.

    Raises:
        TooSmallError: The file is shorter than an ``Elf32_Ehdr``.
        BadMagicError: The first four bytes are not ``7F 'E' 'L' 'F'``.
    """
    if handle.size < EHDR_SIZE:
        raise TooSmallError(
            f"{handle.path}: {handle.size} bytes, "
            f"an ELF32 header needs {EHDR_SIZE}"
        )

    ident = handle.byte_at(0, EI_NIDENT)
    if ident[:4] != ELF_MAGIC:
        raise BadMagicError(f"{handle.path}: not an ELF file")

    if logger is not None and ident[EI_CLASS] != ELFCLASS32:
        logger.warning(
            "%s: class %d is not ELF32, reading it as ELF32",
            handle.path,
            ident[EI_CLASS],
        )

    (
        e_type, e_machine, e_version, e_entry,
        e_phoff, e_shoff, e_flags, e_ehsize,
        e_phentsize, e_phnum, e_shentsize, e_shnum,
        e_shstrndx,
    ) = EHDR_BODY.unpack(handle.byte_at(EI_NIDENT, EHDR_BODY.size))

    section_table_size = e_shnum * e_shentsize
    program_table_size = e_phnum * e_phentsize

    return ElfHeader(
        magic=bytes(ident[:4]),
        ei_class=ident[EI_CLASS],
        ei_data=ident[EI_DATA],
        ei_version=ident[EI_VERSION],
        ei_osabi=ident[EI_OSABI],
        e_type=e_type,
        e_machine=e_machine,
        e_version=e_version,
        e_entry=e_entry,
        e_phoff=e_phoff,
        e_shoff=e_shoff,
        e_flags=e_flags,
        e_ehsize=e_ehsize,
        e_phentsize=e_phentsize,
        e_phnum=e_phnum,
        e_shentsize=e_shentsize,
        e_shnum=e_shnum,
        e_shstrndx=e_shstrndx,
        section_table_size=section_table_size,
        section_table_end=e_shoff + section_table_size,
        program_table_size=program_table_size,
        program_table_end=e_phoff + program_table_size,
    )
