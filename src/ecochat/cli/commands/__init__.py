"""
CLI command implementations for EcoChat.

Commands:
    analyze - Score a query and select a provider
    chat    - Answer a query with sustainability information
    serve   - Start the REST API server
"""

from __future__ import annotations

from ecochat.cli.commands import analyze, chat, serve

__all__ = [
    "analyze",
    "chat",
    "serve",
]
