"""
Provider factory for creating chat-completion provider instances.

Supports registration of custom providers and automatic
configuration from ``EcoChatConfig``.
"""

from __future__ import annotations

from ecochat.core.config import EcoChatConfig, get_config
from ecochat.providers.base import BaseProvider
from ecochat.utils.errors import ConfigurationError, MissingAPIKeyError

# Provider registry
_PROVIDER_REGISTRY: dict[str, type[BaseProvider]] = {}


def _register_builtin_providers() -> None:
    """Register built-in providers."""
    from ecochat.providers.openai_provider import OpenAIProvider

    _PROVIDER_REGISTRY.setdefault("openai", OpenAIProvider)


def register_provider(name: str, provider_class: type[BaseProvider]) -> None:
    """
    Register a custom provider.

    Args:
        name: Provider identifier
        provider_class: Provider class (must inherit from BaseProvider)
    """
    if not issubclass(provider_class, BaseProvider):
        raise TypeError(f"{provider_class} must inherit from BaseProvider")
    _PROVIDER_REGISTRY[name] = provider_class


def list_providers() -> list[str]:
    """Names of all registered providers."""
    _register_builtin_providers()
    return sorted(_PROVIDER_REGISTRY)


def get_provider(
    name: str | None = None,
    config: EcoChatConfig | None = None,
    **kwargs: object,
) -> BaseProvider:
    """
    Get a provider instance.

    Args:
        name: Provider name (defaults to ``config.completion.name``)
        config: EcoChatConfig (optional, uses global config)
        **kwargs: Overrides for the provider constructor

    Returns:
        Configured provider instance

    Raises:
        ConfigurationError: If the provider is not registered
        MissingAPIKeyError: If no API key is configured
    """
    _register_builtin_providers()
    config = config or get_config()
    provider_config = config.completion
    name = name or provider_config.name

    provider_class = _PROVIDER_REGISTRY.get(name)
    if provider_class is None:
        raise ConfigurationError(
            f"Unknown provider: {name}. Available: {', '.join(list_providers())}",
            config_key="completion.name",
        )

    api_key = kwargs.pop("api_key", None) or provider_config.api_key
    if not api_key:
        raise MissingAPIKeyError(name, env_var="DEEPSEEK_API_KEY")

    params: dict[str, object] = {
        "model": provider_config.model,
        "api_key": api_key,
        "base_url": provider_config.base_url,
        "timeout": provider_config.timeout,
        "max_retries": provider_config.max_retries,
    }
    params.update(kwargs)
    return provider_class(**params)
