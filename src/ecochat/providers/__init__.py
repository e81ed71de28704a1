"""
Chat-completion providers for EcoChat.

The completion call is independent of the sustainability estimate; any
``BaseProvider`` can be plugged into the pipeline.
"""

from ecochat.providers.base import BaseProvider
from ecochat.providers.factory import get_provider, list_providers, register_provider
from ecochat.providers.openai_provider import OpenAIProvider

__all__ = [
    "BaseProvider",
    "OpenAIProvider",
    "get_provider",
    "list_providers",
    "register_provider",
]
