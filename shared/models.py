"""
elfscope Shared Data Models
============================

Pydantic v2 models shared across elfscope packages: the failure
taxonomy used to report errors to the presentation layer, and the
per-slot outcome produced when an operation is dispatched over every
loaded file.

References:
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    """Failure kinds reported by the inspector.

    Every exception raised by the engine carries one of these so that a
    caller can report *what* went wrong without matching on classes.
    """

    NOT_FOUND = "NotFound"
    PERMISSION_DENIED = "PermissionDenied"
    IO_ERROR = "IoError"
    MAPPING_ERROR = "MappingError"
    TOO_SMALL = "TooSmall"
    BAD_MAGIC = "BadMagic"
    TRUNCATED_TABLE = "TruncatedTable"
    BAD_SHSTRNDX = "BadShstrndx"
    OUT_OF_BOUNDS = "OutOfBounds"
    NO_SYMTAB = "NoSymtab"
    NO_LINKED_STRTAB = "NoLinkedStrtab"
    MISSING_SYMTAB = "MissingSymtab"
    ALL_SLOTS_FULL = "AllSlotsFull"
    NOT_ENOUGH_FILES = "NotEnoughFiles"


class SlotOutcome(BaseModel):
    """Result of running one operation against one loaded file.

    Attributes:
        slot:    Slot index the operation ran against.
        path:    Path of the file held in that slot.
        value:   Operation result on success.
        error:   Failure kind when the operation raised.
        message: Human-readable failure description.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    slot: int = Field(..., ge=0)
    path: str = ""
    value: Any = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None
