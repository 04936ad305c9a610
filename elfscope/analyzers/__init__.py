"""
elfscope Analyzers
===================

Cross-file analyses over loaded images.
"""

from elfscope.analyzers.matcher import common_symbols, find_conflicts

__all__ = ["common_symbols", "find_conflicts"]
