"""Shared fixtures: a small in-memory ELF32 image builder."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

import pytest

from shared.logger import ScopeLogger

from elfscope.core.engine import ScopeEngine
from elfscope.parsers.constants import (
    SHT_NULL,
    SHT_PROGBITS,
    SHT_STRTAB,
    SHT_SYMTAB,
    STB_GLOBAL,
    STT_FUNC,
)

EHDR = struct.Struct("=16sHHIIIIIHHHHHH")
SHDR = struct.Struct("=IIIIIIIIII")
SYM = struct.Struct("=IIIBBH")

IDENT = b"\x7fELF" + bytes([1, 1, 1, 0]) + bytes(8)

_HEADER_ORDER = (
    "e_type", "e_machine", "e_version", "e_entry", "e_phoff", "e_shoff",
    "e_flags", "e_ehsize", "e_phentsize", "e_phnum", "e_shentsize",
    "e_shnum", "e_shstrndx",
)


@dataclass
class _Section:
    name: str
    sh_type: int
    data: bytes = b""
    link: int = 0
    entsize: int = 0
    addr: int = 0
    size: Optional[int] = None


@dataclass
class ElfBuilder:
    """Lays out ``ehdr | section data | .shstrtab | section header table``."""

    entry: int = 0x08048000
    ident: bytes = IDENT
    overrides: dict[str, int] = field(default_factory=dict)
    sections: list[_Section] = field(
        default_factory=lambda: [_Section("", SHT_NULL)]
    )

    def add_section(
        self,
        name: str,
        sh_type: int,
        data: bytes = b"",
        *,
        link: int = 0,
        entsize: int = 0,
        addr: int = 0,
        size: Optional[int] = None,
    ) -> int:
        self.sections.append(_Section(name, sh_type, data, link, entsize, addr, size))
        return len(self.sections) - 1

    def add_symbols(self, names: list[Union[str, bytes]], shndx: int = 1) -> int:
        """Add ``.strtab`` + ``.symtab`` holding *names*; return the symtab index.

        ``bytes`` names are stored as given, ``str`` names UTF-8 encoded.
        """
        strtab = b"\x00"
        records = [SYM.pack(0, 0, 0, 0, 0, 0)]
        for position, name in enumerate(names):
            records.append(
                SYM.pack(
                    len(strtab),
                    0x1000 + position * 0x10,
                    4,
                    (STB_GLOBAL << 4) | STT_FUNC,
                    0,
                    shndx,
                )
            )
            strtab += (name if isinstance(name, bytes) else name.encode()) + b"\x00"
        strtab_index = self.add_section(".strtab", SHT_STRTAB, strtab)
        return self.add_section(
            ".symtab", SHT_SYMTAB, b"".join(records), link=strtab_index, entsize=SYM.size
        )

    @property
    def section_names(self) -> list[str]:
        return [s.name for s in self.sections] + [".shstrtab"]

    def build(self) -> bytes:
        shstrtab = b"\x00"
        name_offsets: list[int] = []
        for name in self.section_names:
            if name:
                name_offsets.append(len(shstrtab))
                shstrtab += name.encode() + b"\x00"
            else:
                name_offsets.append(0)

        all_sections = self.sections + [_Section(".shstrtab", SHT_STRTAB, shstrtab)]
        body = bytearray()
        offsets: list[int] = []
        for section in all_sections:
            if section.sh_type == SHT_NULL:
                offsets.append(0)
                continue
            offsets.append(EHDR.size + len(body))
            body += section.data
        while (EHDR.size + len(body)) % 4:
            body += b"\x00"

        table = b"".join(
            SHDR.pack(
                name_offsets[index],
                section.sh_type,
                0,
                section.addr,
                offsets[index],
                len(section.data) if section.size is None else section.size,
                section.link,
                0,
                4 if section.data else 0,
                section.entsize,
            )
            for index, section in enumerate(all_sections)
        )

        fields = {
            "e_type": 1,
            "e_machine": 3,
            "e_version": 1,
            "e_entry": self.entry,
            "e_phoff": 0,
            "e_shoff": EHDR.size + len(body),
            "e_flags": 0,
            "e_ehsize": EHDR.size,
            "e_phentsize": 0,
            "e_phnum": 0,
            "e_shentsize": SHDR.size,
            "e_shnum": len(all_sections),
            "e_shstrndx": len(all_sections) - 1,
        }
        fields.update(self.overrides)
        header = EHDR.pack(self.ident, *(fields[key] for key in _HEADER_ORDER))
        return header + bytes(body) + table


def object_file(
    symbols: Optional[list[Union[str, bytes]]] = None, **kwargs: int
) -> bytes:
    """``.text`` plus, when *symbols* is given, a symbol table naming them."""
    builder = ElfBuilder()
    builder.add_section(".text", SHT_PROGBITS, b"\x90" * 16, addr=0x1000)
    if symbols is not None:
        builder.add_symbols(symbols, **kwargs)
    return builder.build()


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[..., Path]:
    counter = {"n": 0}

    def _write(data: bytes, name: Optional[str] = None) -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"file{counter['n']}.o")
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def quiet_logger() -> ScopeLogger:
    return ScopeLogger("test", console_output=False)


@pytest.fixture
def engine(quiet_logger: ScopeLogger):
    eng = ScopeEngine(logger=quiet_logger)
    yield eng
    eng.close_all()
