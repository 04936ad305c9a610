"""
Mapped File Handle
===================

Owns an open file descriptor and a read-only memory mapping of the whole
file.  Every other component reads the image exclusively through
:meth:`MappedFile.byte_at` (and :meth:`MappedFile.find` for string
terminators), so a corrupt offset or size anywhere in the file turns
into an :class:`~elfscope.core.errors.OutOfBoundsError` instead of a read
outside the mapping.
"""

from __future__ import annotations

import mmap
import os
from pathlib import Path
from typing import Any, Optional

from elfscope.core.errors import (
    ClosedHandleError,
    FileIOError,
    MappingError,
    NotFoundError,
    OutOfBoundsError,
    PermissionDeniedError,
)


class MappedFile:
    """Read-only, bounds-checked view over a memory-mapped file.

    Usage::

        with MappedFile.open("a.out") as handle:
            ident = handle.byte_at(0, 16)

    A 0-byte file opens successfully with an empty region; ``mmap``
    refuses to map empty files, so no mapping is created for it.
    """

    def __init__(self, path: str, fd: int, size: int, region: Optional[mmap.mmap]) -> None:
        self._path = path
        self._fd: Optional[int] = fd
        self._size = size
        self._region = region
        self._closed = False

    # ------------------------------------------------------------------ #
    #  Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def open(cls, path: str | Path) -> MappedFile:
        """Open *path* read-only and map its full length.

        Raises:
            NotFoundError: The path does not exist.
            PermissionDeniedError: The file cannot be read.
            FileIOError: Any other failure to open or measure the file.
            MappingError: The mapping failed; the descriptor is closed.
        """
        path_str = str(path)
        try:
            fd = os.open(path_str, os.O_RDONLY)
        except FileNotFoundError as exc:
            raise NotFoundError(f"cannot open file: {path_str}: {exc.strerror}") from exc
        except PermissionError as exc:
            raise PermissionDeniedError(
                f"cannot open file: {path_str}: {exc.strerror}"
            ) from exc
        except OSError as exc:
            raise FileIOError(f"cannot open file: {path_str}: {exc.strerror}") from exc

        try:
            size = os.fstat(fd).st_size
        except OSError as exc:
            os.close(fd)
            raise FileIOError(f"cannot stat file: {path_str}: {exc.strerror}") from exc

        region: Optional[mmap.mmap] = None
        if size > 0:
            try:
                region = mmap.mmap(fd, size, access=mmap.ACCESS_READ)
            except (OSError, ValueError) as exc:
                os.close(fd)
                raise MappingError(f"mmap failed: {path_str}: {exc}") from exc

        return cls(path_str, fd, size, region)

    # ------------------------------------------------------------------ #
    #  Bounds-checked access
    # ------------------------------------------------------------------ #

    def _check_range(self, offset: int, length: int) -> None:
        if self._closed:
            raise ClosedHandleError(f"{self._path} is closed")
        if offset < 0 or length < 0 or offset + length > self._size:
            raise OutOfBoundsError(
                f"range [{offset}, {offset + length}) outside "
                f"{self._size}-byte region of {self._path}"
            )

    def byte_at(self, offset: int, length: int) -> bytes:
        """Return *length* bytes starting at *offset*.

        Raises:
            OutOfBoundsError: Any part of the range lies outside the region.
            ClosedHandleError: The handle has been closed.
        """
        self._check_range(offset, length)
        if length == 0 or self._region is None:
            return b""
        return self._region[offset:offset + length]

    def find(self, needle: bytes, start: int, end: int) -> int:
        """Return the lowest index of *needle* inside ``[start, end)``, or -1.

        Raises:
            OutOfBoundsError: The search window lies outside the region.
        """
        self._check_range(start, end - start)
        if self._region is None:
            return -1
        return self._region.find(needle, start, end)

    def contains(self, offset: int, length: int) -> bool:
        """Whether ``[offset, offset + length)`` lies inside the region."""
        return 0 <= offset and 0 <= length and offset + length <= self._size

    # ------------------------------------------------------------------ #
    #  Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """Release the mapping and the descriptor.  Closing twice is a no-op."""
        if self._closed:
            return
        self._closed = True
        if self._region is not None:
            self._region.close()
            self._region = None
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> MappedFile:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"{self._size} bytes"
        return f"MappedFile({self._path!r}, {state})"

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def path(self) -> str:
        return self._path

    @property
    def size(self) -> int:
        """File length in bytes at open time."""
        return self._size

    @property
    def closed(self) -> bool:
        return self._closed
