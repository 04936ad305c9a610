"""
elfscope Shared Module
======================

Configuration, logging, console and model helpers shared by every
elfscope package.
"""

from shared.config import ScopeConfig

__all__ = ["ScopeConfig"]
