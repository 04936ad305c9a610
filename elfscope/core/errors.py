"""
elfscope Error Taxonomy
========================

Every failure the inspector can report is a :class:`ScopeError`
subclass tagged with an :class:`~shared.models.ErrorKind`.  Failures are
local to one operation on one session: none of them invalidate another
loaded file, and none are retried because they describe deterministic
properties of the input.
"""

from __future__ import annotations

from shared.models import ErrorKind


class ScopeError(Exception):
    """Base exception for elfscope."""

    kind: ErrorKind = ErrorKind.IO_ERROR


# ---------------------------------------------------------------------------
# Opening and mapping
# ---------------------------------------------------------------------------

class OpenError(ScopeError):
    """The file could not be opened or measured."""


class NotFoundError(OpenError):
    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(OpenError):
    kind = ErrorKind.PERMISSION_DENIED


class FileIOError(OpenError):
    """Any other operating-system failure while opening the file."""

    kind = ErrorKind.IO_ERROR


class MappingError(ScopeError):
    """The file was opened but could not be memory-mapped."""

    kind = ErrorKind.MAPPING_ERROR


# ---------------------------------------------------------------------------
# Malformed input
# ---------------------------------------------------------------------------

class TooSmallError(ScopeError):
    """The file is shorter than an ELF32 file header."""

    kind = ErrorKind.TOO_SMALL


class BadMagicError(ScopeError):
    """The file does not start with the ELF identification bytes."""

    kind = ErrorKind.BAD_MAGIC


class TruncatedTableError(ScopeError):
    """A table's span runs past the mapped region or has a bad entry size."""

    kind = ErrorKind.TRUNCATED_TABLE


class BadShstrndxError(ScopeError):
    """``e_shstrndx`` does not name a section of the table."""

    kind = ErrorKind.BAD_SHSTRNDX


class OutOfBoundsError(ScopeError):
    """A read was requested outside the mapped region or a string table."""

    kind = ErrorKind.OUT_OF_BOUNDS


class ClosedHandleError(OutOfBoundsError):
    """A read was requested from a handle that has already been closed."""


# ---------------------------------------------------------------------------
# Valid but incomplete files
# ---------------------------------------------------------------------------

class NoSymtabError(ScopeError):
    """The file has no ``SHT_SYMTAB`` section."""

    kind = ErrorKind.NO_SYMTAB


class NoLinkedStrtabError(ScopeError):
    """The symbol table's ``sh_link`` does not name a usable section."""

    kind = ErrorKind.NO_LINKED_STRTAB


class MissingSymtabError(ScopeError):
    """One or both sides of a comparison have no symbol table.

    Attributes:
        which: Slot indices of the files lacking a symbol table.
    """

    kind = ErrorKind.MISSING_SYMTAB

    def __init__(self, which: tuple[int, ...]) -> None:
        self.which = which
        files = " and ".join(f"file {slot + 1}" for slot in which)
        super().__init__(f"No symbol table in {files}")


# ---------------------------------------------------------------------------
# Registry preconditions
# ---------------------------------------------------------------------------

class AllSlotsFullError(ScopeError):
    kind = ErrorKind.ALL_SLOTS_FULL


class NotEnoughFilesError(ScopeError):
    kind = ErrorKind.NOT_ENOUGH_FILES
