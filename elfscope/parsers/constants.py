"""
ELF32 Constants and Record Layouts
===================================

Identification bytes, type codes and ``struct`` layouts for the ELF32
records the inspector reads.  Layouts use native byte order (``=``):
fields are taken as the host lays them out, without conversion.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - Linux man page: elf(5).
"""

from __future__ import annotations

import struct

# ---------------------------------------------------------------------------
# Identification
# ---------------------------------------------------------------------------

ELF_MAGIC: bytes = b"\x7fELF"

EI_CLASS: int = 4
EI_DATA: int = 5
EI_VERSION: int = 6
EI_OSABI: int = 7
EI_NIDENT: int = 16

ELFCLASSNONE: int = 0
ELFCLASS32: int = 1
ELFCLASS64: int = 2

ELFDATANONE: int = 0
ELFDATA2LSB: int = 1  # Little-endian
ELFDATA2MSB: int = 2  # Big-endian

# ---------------------------------------------------------------------------
# Record layouts (native byte order)
# ---------------------------------------------------------------------------

# Elf32_Ehdr after e_ident: type, machine, version, entry, phoff, shoff,
# flags, ehsize, phentsize, phnum, shentsize, shnum, shstrndx
EHDR_BODY = struct.Struct("=HHIIIIIHHHHHH")
EHDR_SIZE: int = EI_NIDENT + EHDR_BODY.size  # 52

# Elf32_Shdr: name, type, flags, addr, offset, size, link, info,
# addralign, entsize
SHDR = struct.Struct("=IIIIIIIIII")
SHDR_SIZE: int = SHDR.size  # 40

# Elf32_Sym: name, value, size, info, other, shndx
SYM = struct.Struct("=IIIBBH")
SYM_SIZE: int = SYM.size  # 16

# ---------------------------------------------------------------------------
# Section header types
# ---------------------------------------------------------------------------

SHT_NULL: int = 0
SHT_PROGBITS: int = 1
SHT_SYMTAB: int = 2
SHT_STRTAB: int = 3
SHT_RELA: int = 4
SHT_HASH: int = 5
SHT_DYNAMIC: int = 6
SHT_NOTE: int = 7
SHT_NOBITS: int = 8
SHT_REL: int = 9
SHT_DYNSYM: int = 11
SHT_INIT_ARRAY: int = 14
SHT_FINI_ARRAY: int = 15

SHT_NAMES: dict[int, str] = {
    SHT_NULL: "NULL",
    SHT_PROGBITS: "PROGBITS",
    SHT_SYMTAB: "SYMTAB",
    SHT_STRTAB: "STRTAB",
    SHT_RELA: "RELA",
    SHT_HASH: "HASH",
    SHT_DYNAMIC: "DYNAMIC",
    SHT_NOTE: "NOTE",
    SHT_NOBITS: "NOBITS",
    SHT_REL: "REL",
    SHT_DYNSYM: "DYNSYM",
    SHT_INIT_ARRAY: "INIT_ARRAY",
    SHT_FINI_ARRAY: "FINI_ARRAY",
}

# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------

STB_LOCAL: int = 0
STB_GLOBAL: int = 1
STB_WEAK: int = 2

STB_NAMES: dict[int, str] = {
    STB_LOCAL: "LOCAL",
    STB_GLOBAL: "GLOBAL",
    STB_WEAK: "WEAK",
}

STT_NOTYPE: int = 0
STT_OBJECT: int = 1
STT_FUNC: int = 2
STT_SECTION: int = 3
STT_FILE: int = 4

STT_NAMES: dict[int, str] = {
    STT_NOTYPE: "NOTYPE",
    STT_OBJECT: "OBJECT",
    STT_FUNC: "FUNC",
    STT_SECTION: "SECTION",
    STT_FILE: "FILE",
}

ABS_SECTION_NAME: str = "ABS"


def section_type_name(sh_type: int) -> str:
    return SHT_NAMES.get(sh_type, f"0x{sh_type:x}")


def symbol_bind(st_info: int) -> int:
    return (st_info >> 4) & 0xF


def symbol_type(st_info: int) -> int:
    return st_info & 0xF
