"""
Core Module - Foundation components for ELIZA Responder
=======================================================

This module provides the foundational components including:
- Configuration management
- Logging setup
- Exception handling
"""

from .config import Config, EngineConfig, UIConfig, load_config, save_config
from .exceptions import (
    ElizaError,
    ConfigError,
    RuleSetError,
    MissingFallbackError,
    EmptyPhraseListError,
    UnknownSynonymError,
    GroupReferenceError,
    InvalidRuleSetError,
    RuleLoadError,
    ConversationEndedError,
)
from .logging import setup_logging, get_logger

__all__ = [
    "Config",
    "EngineConfig",
    "UIConfig",
    "load_config",
    "save_config",
    "ElizaError",
    "ConfigError",
    "RuleSetError",
    "MissingFallbackError",
    "EmptyPhraseListError",
    "UnknownSynonymError",
    "GroupReferenceError",
    "InvalidRuleSetError",
    "RuleLoadError",
    "ConversationEndedError",
    "setup_logging",
    "get_logger",
]
