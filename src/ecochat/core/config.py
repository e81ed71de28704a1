"""
EcoChat Configuration System.

Supports loading from environment variables, YAML files, and programmatic configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from ecochat.core.catalog import ProviderCatalog

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant. Do not use LaTeX in your response"


@dataclass
class ProviderConfig:
    """Configuration for the chat-completion endpoint."""

    name: str = "openai"
    api_key: str | None = None
    model: str = "deepseek-chat"
    base_url: str | None = "https://api.deepseek.com"
    timeout: int = 120
    max_retries: int = 3


@dataclass
class ClimatiqConfig:
    """Configuration for the Climatiq footprint lookup."""

    api_key: str | None = None
    base_url: str = "https://beta3.api.climatiq.io"
    timeout: float = 10.0

    @property
    def enabled(self) -> bool:
        """Lookups are only attempted with an API key."""
        return bool(self.api_key)


@dataclass
class APIConfig:
    """Configuration for API server."""

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    enable_docs: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    json_format: bool = False
    log_file: str | None = None


@dataclass
class EcoChatConfig:
    """
    Master configuration for EcoChat.

    Can be created from:
    - Environment variables (load with from_env())
    - YAML file (load with from_file())
    - Programmatically (direct instantiation)

    Example:
        # From environment
        config = EcoChatConfig.from_env()

        # From file
        config = EcoChatConfig.from_file("ecochat.yaml")

        # Programmatic
        config = EcoChatConfig(disabled_providers=["OpenAI"])
    """

    completion: ProviderConfig = field(default_factory=ProviderConfig)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # Catalog
    catalog_file: str | None = None
    disabled_providers: list[str] = field(default_factory=list)

    # Component configurations
    climatiq: ClimatiqConfig = field(default_factory=ClimatiqConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> EcoChatConfig:
        """
        Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file

        Returns:
            EcoChatConfig instance
        """
        if dotenv_path:
            load_dotenv(dotenv_path)
        else:
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            return os.getenv(key, default)

        def get_env_int(key: str, default: int) -> int:
            val = os.getenv(key)
            return int(val) if val else default

        def get_env_bool(key: str, default: bool) -> bool:
            val = os.getenv(key, "").lower()
            if val in ("true", "1", "yes"):
                return True
            if val in ("false", "0", "no"):
                return False
            return default

        def get_env_list(key: str, default: str = "") -> list[str]:
            return [item.strip() for item in get_env(key, default).split(",") if item.strip()]

        return cls(
            completion=ProviderConfig(
                name=get_env("ECOCHAT_PROVIDER", "openai"),
                api_key=get_env("DEEPSEEK_API_KEY") or get_env("OPENAI_API_KEY"),
                model=get_env("ECOCHAT_MODEL", "deepseek-chat"),
                base_url=get_env("ECOCHAT_BASE_URL", "https://api.deepseek.com"),
                timeout=get_env_int("ECOCHAT_TIMEOUT", 120),
                max_retries=get_env_int("ECOCHAT_MAX_RETRIES", 3),
            ),
            system_prompt=get_env("ECOCHAT_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT),
            catalog_file=get_env("ECOCHAT_CATALOG_FILE"),
            disabled_providers=get_env_list("ECOCHAT_DISABLED_PROVIDERS"),
            climatiq=ClimatiqConfig(
                api_key=get_env("CLIMATIQ_API_KEY"),
                base_url=get_env("CLIMATIQ_BASE_URL", "https://beta3.api.climatiq.io"),
            ),
            api=APIConfig(
                host=get_env("ECOCHAT_API_HOST", "0.0.0.0"),
                port=get_env_int("ECOCHAT_API_PORT", 8000),
                cors_origins=get_env_list("ECOCHAT_CORS_ORIGINS", "*"),
            ),
            logging=LoggingConfig(
                level=get_env("LOG_LEVEL", "INFO"),
                json_format=get_env_bool("LOG_JSON", False),
                log_file=get_env("LOG_FILE"),
            ),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> EcoChatConfig:
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            EcoChatConfig instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> EcoChatConfig:
        """Create config from dictionary."""
        completion_data = data.get("completion", {})
        climatiq_data = data.get("climatiq", {})
        api_data = data.get("api", {})
        logging_data = data.get("logging", {})

        return cls(
            completion=ProviderConfig(**completion_data) if completion_data else ProviderConfig(),
            system_prompt=data.get("system_prompt", DEFAULT_SYSTEM_PROMPT),
            catalog_file=data.get("catalog_file"),
            disabled_providers=list(data.get("disabled_providers", [])),
            climatiq=ClimatiqConfig(**climatiq_data) if climatiq_data else ClimatiqConfig(),
            api=APIConfig(**api_data) if api_data else APIConfig(),
            logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
        )

    def build_catalog(self) -> ProviderCatalog:
        """Build the provider catalog described by this configuration."""
        catalog = (
            ProviderCatalog.from_file(self.catalog_file)
            if self.catalog_file
            else ProviderCatalog.default()
        )
        if self.disabled_providers:
            catalog = catalog.without(self.disabled_providers)
        return catalog

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary (secrets omitted)."""
        return {
            "completion": {
                "name": self.completion.name,
                "model": self.completion.model,
                "base_url": self.completion.base_url,
                "timeout": self.completion.timeout,
                "max_retries": self.completion.max_retries,
            },
            "system_prompt": self.system_prompt,
            "catalog_file": self.catalog_file,
            "disabled_providers": list(self.disabled_providers),
            "climatiq": {
                "enabled": self.climatiq.enabled,
                "base_url": self.climatiq.base_url,
            },
            "api": {
                "host": self.api.host,
                "port": self.api.port,
            },
            "logging": {
                "level": self.logging.level,
                "json_format": self.logging.json_format,
            },
        }


# Global config instance (can be overridden)
_global_config: EcoChatConfig | None = None


def get_config() -> EcoChatConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = EcoChatConfig.from_env()
    return _global_config


def set_config(config: EcoChatConfig | None) -> None:
    """Set (or with None, reset) the global configuration instance."""
    global _global_config
    _global_config = config
