"""Tests for the bounds-checked mapped file handle."""

from __future__ import annotations

import os

import pytest

from shared.models import ErrorKind

from elfscope.core.errors import (
    ClosedHandleError,
    NotFoundError,
    OutOfBoundsError,
    PermissionDeniedError,
)
from elfscope.parsers.mapped import MappedFile


def test_open_missing_file(tmp_path):
    with pytest.raises(NotFoundError) as info:
        MappedFile.open(tmp_path / "missing.o")
    assert info.value.kind is ErrorKind.NOT_FOUND


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="root ignores file permissions",
)
def test_open_unreadable_file(write_file):
    path = write_file(b"\x7fELF")
    path.chmod(0)
    try:
        with pytest.raises(PermissionDeniedError):
            MappedFile.open(path)
    finally:
        path.chmod(0o644)


def test_empty_file_opens_with_empty_region(write_file):
    with MappedFile.open(write_file(b"")) as handle:
        assert handle.size == 0
        assert handle.byte_at(0, 0) == b""
        with pytest.raises(OutOfBoundsError):
            handle.byte_at(0, 1)


def test_byte_at_returns_requested_range(write_file):
    with MappedFile.open(write_file(b"0123456789")) as handle:
        assert handle.byte_at(0, 4) == b"0123"
        assert handle.byte_at(6, 4) == b"6789"
        assert handle.byte_at(10, 0) == b""


@pytest.mark.parametrize(
    "offset, length",
    [(0, 11), (10, 1), (9, 2), (-1, 1), (0, -1), (100, 0)],
)
def test_byte_at_rejects_ranges_outside_region(write_file, offset, length):
    with MappedFile.open(write_file(b"0123456789")) as handle:
        with pytest.raises(OutOfBoundsError):
            handle.byte_at(offset, length)


def test_find_is_limited_to_window(write_file):
    with MappedFile.open(write_file(b"ab\x00cd\x00")) as handle:
        assert handle.find(b"\x00", 0, 6) == 2
        assert handle.find(b"\x00", 3, 6) == 5
        assert handle.find(b"\x00", 3, 5) == -1
        with pytest.raises(OutOfBoundsError):
            handle.find(b"\x00", 3, 7)


def test_contains(write_file):
    with MappedFile.open(write_file(b"abcd")) as handle:
        assert handle.contains(0, 4)
        assert handle.contains(4, 0)
        assert not handle.contains(2, 3)
        assert not handle.contains(-1, 1)


def test_close_is_idempotent(write_file):
    handle = MappedFile.open(write_file(b"abcd"))
    handle.close()
    handle.close()
    assert handle.closed


def test_access_after_close_fails(write_file):
    handle = MappedFile.open(write_file(b"abcd"))
    handle.close()
    with pytest.raises(ClosedHandleError):
        handle.byte_at(0, 1)
    with pytest.raises(OutOfBoundsError):
        handle.find(b"a", 0, 4)
