"""Utility modules for EcoChat."""

from ecochat.utils.errors import (
    CarbonEstimationError,
    ConfigurationError,
    EcoChatError,
    EmptyCatalogError,
    EmptyInputError,
    MissingAPIKeyError,
    ProviderError,
    ValidationError,
)
from ecochat.utils.logging import get_logger, setup_logging
from ecochat.utils.tokens import estimate_tokens, token_units

__all__ = [
    # Tokens
    "estimate_tokens",
    "token_units",
    # Errors
    "EcoChatError",
    "ProviderError",
    "ConfigurationError",
    "MissingAPIKeyError",
    "EmptyCatalogError",
    "ValidationError",
    "EmptyInputError",
    "CarbonEstimationError",
    # Logging
    "get_logger",
    "setup_logging",
]
