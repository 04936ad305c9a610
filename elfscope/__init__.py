"""
elfscope -- ELF32 Object File Inspector
========================================

Loads up to two ELF32 object files into read-only memory mappings,
validates their structure and exposes header, section and symbol
metadata, plus detection of symbol names defined in both files.

Every offset and count read from a file is checked against the mapped
region before use, so truncated or hostile inputs fail with a
:class:`~elfscope.core.errors.ScopeError` instead of reading past the
mapping.

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2.
    - Linux man page: elf(5).
"""

__version__ = "1.0.0"
__all__ = [
    "ScopeEngine",
    "ScopeError",
]

from elfscope.core.engine import ScopeEngine
from elfscope.core.errors import ScopeError
