"""
Integration tests for EcoChat.

This package contains end-to-end tests that drive the API and CLI surfaces
against the real pipeline with a mock completion provider.

Test Modules:
    - test_api_integration: API endpoints with mock completion tests
    - test_cli: CLI commands through typer's CliRunner
"""

__all__ = [
    "test_api_integration",
    "test_cli",
]
