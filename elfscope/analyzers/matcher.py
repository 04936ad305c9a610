"""
Cross-File Symbol Matcher
==========================

Reports symbol names defined in both of two loaded files: the conflicts
a merge of the two would have to resolve.

Matching compares the raw name bytes, so two names that only decode
to the same text never match, and only the symbol string tables are
read.  It keeps multiplicity: a name occurring ``k`` times in the first
file and ``m`` times in the second is reported ``k * m`` times, ordered
by the first file's symbol order.
That is the same output as comparing every pair of symbols, computed
from a name -> indices map of the second file instead.
"""

from __future__ import annotations

from collections import defaultdict

from elfscope.core.errors import MissingSymtabError, NoSymtabError
from elfscope.core.models import SymbolMatch
from elfscope.parsers.sections import SectionTable
from elfscope.parsers.symbols import SymbolTable


def _load_pair(
    first: SectionTable,
    second: SectionTable,
    slots: tuple[int, int],
) -> tuple[SymbolTable, SymbolTable]:
    tables: list[SymbolTable] = []
    missing: list[int] = []
    for slot, section_table in zip(slots, (first, second)):
        try:
            tables.append(SymbolTable(section_table))
        except NoSymtabError:
            missing.append(slot)
    if missing:
        raise MissingSymtabError(tuple(missing))
    return tables[0], tables[1]


def find_conflicts(
    first: SectionTable,
    second: SectionTable,
    slots: tuple[int, int] = (0, 1),
) -> list[SymbolMatch]:
    """Every pair of equal symbol names across two files.

    Args:
        first: Section table of the first file.
        second: Section table of the second file.
        slots: Slot indices of the two files, used in error reports.

    Raises:
        MissingSymtabError: Either file has no symbol table; ``which``
            lists the slots lacking one.
    """
    table_a, table_b = _load_pair(first, second, slots)

    positions: dict[bytes, list[int]] = defaultdict(list)
    for index, raw in table_b.raw_names():
        positions[raw].append(index)

    matches: list[SymbolMatch] = []
    for index, raw in table_a.raw_names():
        others = positions.get(raw)
        if not others:
            continue
        name = table_a.decode_name(raw)
        for other_index in others:
            matches.append(
                SymbolMatch(name=name, first_index=index, second_index=other_index)
            )
    return matches


def common_symbols(
    first: SectionTable,
    second: SectionTable,
    slots: tuple[int, int] = (0, 1),
) -> list[str]:
    """Names present in both files, once per matching pair."""
    return [match.name for match in find_conflicts(first, second, slots)]
