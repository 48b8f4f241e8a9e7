"""
ELIZA Responder - Rule-driven conversational responder
======================================================

A keyword and pattern-matching responder in the style of Weizenbaum's ELIZA.
Rule sets (keywords, decomposition patterns, reassembly templates, word
substitutions and synonym classes) are loaded from JSON or YAML and can be
replaced at runtime. Front ends:
1. Interactive prompt and one-shot CLI
2. Textual terminal UI
3. FastAPI web API

Version: 1.0.0
"""

__version__ = "1.0.0"
