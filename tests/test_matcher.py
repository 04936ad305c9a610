"""Tests for cross-file symbol matching."""

from __future__ import annotations

import struct
from collections import Counter

import pytest

from conftest import object_file

from elfscope.analyzers.matcher import common_symbols, find_conflicts
from elfscope.core.errors import MissingSymtabError
from elfscope.parsers.header import parse_header
from elfscope.parsers.mapped import MappedFile
from elfscope.parsers.sections import SectionTable


@pytest.fixture
def load(write_file):
    handles: list[MappedFile] = []

    def _load(names) -> SectionTable:
        data = names if isinstance(names, (bytes, bytearray)) else object_file(names)
        handle = MappedFile.open(write_file(bytes(data)))
        handles.append(handle)
        return SectionTable(handle, parse_header(handle))

    yield _load
    for handle in handles:
        handle.close()


def test_reports_each_matching_pair(load):
    first = load(["foo", "bar"])
    second = load(["bar", "bar", "qux"])
    assert common_symbols(first, second) == ["bar", "bar"]


def test_multiplicity_is_product_of_counts(load):
    first = load(["x", "y", "x"])
    second = load(["x", "x", "x", "z"])
    assert common_symbols(first, second) == ["x"] * 6


def test_no_common_names(load):
    assert common_symbols(load(["a", "b"]), load(["c"])) == []


@pytest.mark.parametrize(
    "names_a, names_b",
    [
        (["foo", "bar"], ["bar", "bar", "qux"]),
        (["a", "b", "c", "a"], ["c", "a", "d"]),
        ([], ["a"]),
    ],
)
def test_matching_is_symmetric(load, names_a, names_b):
    first, second = load(names_a), load(names_b)
    assert Counter(common_symbols(first, second)) == Counter(common_symbols(second, first))


def test_conflicts_carry_both_indices(load):
    matches = find_conflicts(load(["foo", "bar"]), load(["bar", "qux", "bar"]))
    assert [(m.name, m.first_index, m.second_index) for m in matches] == [
        ("bar", 2, 1),
        ("bar", 2, 3),
    ]


def test_missing_symbol_table_names_the_side(load):
    with pytest.raises(MissingSymtabError) as info:
        common_symbols(load(["foo"]), load(None), slots=(0, 1))
    assert info.value.which == (1,)

    with pytest.raises(MissingSymtabError) as info:
        common_symbols(load(None), load(None))
    assert info.value.which == (0, 1)


def test_names_compare_as_bytes(load):
    # Both names decode to "sym\ufffd" under ASCII.
    first = load([b"sym\xe9", b"common"])
    second = load([b"sym\xfc", b"common"])
    assert common_symbols(first, second) == ["common"]


def test_identical_non_ascii_names_match(load):
    matches = find_conflicts(load([b"caf\xe9"]), load(["x", b"caf\xe9"]))
    assert [(m.name, m.first_index, m.second_index) for m in matches] == [
        ("caf\ufffd", 1, 2),
    ]


def test_corrupt_section_name_does_not_block_matching(load):
    data = bytearray(object_file(["foo"]))
    shoff = struct.unpack_from("=I", data, 32)[0]
    # sh_name of .text, the section every symbol points into
    struct.pack_into("=I", data, shoff + 40, 0xFFFF)

    assert common_symbols(load(data), load(["foo", "bar"])) == ["foo"]
