"""
Terminal UI Module - Textual-based TUI
======================================

This module provides a terminal chat interface using Textual.
"""

from .app import ElizaApp, run_tui

__all__ = [
    "ElizaApp",
    "run_tui",
]
