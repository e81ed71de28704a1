"""
Command-line interface for EcoChat.

Usage:
    ecochat analyze "Explain how quantum computers work"
    ecochat chat "Write a function that reverses a list"
    ecochat providers
    ecochat serve
"""

from ecochat.cli.main import app, cli

__all__ = ["app", "cli"]
