"""
elfscope Output Module
=======================

Rich terminal rendering of inspection results.
"""

from elfscope.output.console import ScopeConsoleOutput

__all__ = ["ScopeConsoleOutput"]
