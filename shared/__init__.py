"""
espwatch Shared Module
=======================

Configuration, structured logging and console utilities used by the
espwatch package.
"""

from shared.config import WatchConfig

__all__ = ["WatchConfig"]
