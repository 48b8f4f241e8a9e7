"""
Rules Module - ELIZA-style response engine
==========================================

This module provides the rule-driven response system:
- Rule set data model (keywords, decompositions, synonym classes)
- Wildcard and synonym pattern matching
- Weighted keyword selection
- Template reassembly with word substitution
- Loading rule documents from files and URLs
"""

from .models import RuleSet, Keyword, Decomposition, FALLBACK_KEYWORD
from .pattern import match_pattern
from .templates import rewrite, reassemble
from .engine import Engine, Response, KeywordMatch, select_keyword
from .loader import load_rules, fetch_rules, save_rules, default_rules_path

__all__ = [
    "RuleSet",
    "Keyword",
    "Decomposition",
    "FALLBACK_KEYWORD",
    "match_pattern",
    "rewrite",
    "reassemble",
    "Engine",
    "Response",
    "KeywordMatch",
    "select_keyword",
    "load_rules",
    "fetch_rules",
    "save_rules",
    "default_rules_path",
]
