"""
espwatch Output
================

Console output for espwatch scan results.
"""

from espwatch.output.console import EspwatchConsoleOutput

__all__ = ["EspwatchConsoleOutput"]
