"""
elfscope Core Module
=====================

Session registry, engine, error taxonomy and data models of the
inspector.
"""

from elfscope.core.engine import MAX_FILES, ScopeEngine, Session, SessionRegistry
from elfscope.core.models import ElfHeader, SectionEntry, SymbolEntry, SymbolMatch

__all__ = [
    "MAX_FILES",
    "ElfHeader",
    "ScopeEngine",
    "SectionEntry",
    "Session",
    "SessionRegistry",
    "SymbolEntry",
    "SymbolMatch",
]
