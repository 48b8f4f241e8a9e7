"""
Services Module - Conversation services for ELIZA Responder
===========================================================

This module provides the main services:
- Conversation: per-session active/ended state
- ElizaResponder: engine holder, rule reloading and chat commands
"""

from .conversation import Conversation, ConversationState
from .responder import ElizaResponder, ResponderResult

__all__ = [
    "Conversation",
    "ConversationState",
    "ElizaResponder",
    "ResponderResult",
]
