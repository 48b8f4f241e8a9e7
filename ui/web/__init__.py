"""
Web UI Module - FastAPI-based HTTP interface
============================================

This module exposes the responder over HTTP:
- Greeting and chat endpoints
- Rule set reloading from a URL
- Status reporting
"""

from .app import create_app, run_app
from .routes import router

__all__ = [
    "create_app",
    "run_app",
    "router",
]
