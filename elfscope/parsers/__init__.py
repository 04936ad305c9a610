"""
elfscope Parsers
=================

Bounds-checked readers for the ELF32 structures: the mapped file
handle, the file header, the section header table and the symbol table.
"""

from elfscope.parsers.header import parse_header
from elfscope.parsers.mapped import MappedFile
from elfscope.parsers.sections import SectionTable, StringTable, sections
from elfscope.parsers.symbols import SymbolTable, symbols

__all__ = [
    "MappedFile",
    "SectionTable",
    "StringTable",
    "SymbolTable",
    "parse_header",
    "sections",
    "symbols",
]
