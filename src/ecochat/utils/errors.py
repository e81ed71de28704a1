"""
Exception hierarchy for EcoChat.

Every exception carries a stable ``code`` that the REST API returns as
``error_code``, so clients can branch without parsing messages.

    EcoChatError
    ├── ProviderError
    │   ├── ProviderAuthenticationError
    │   ├── ProviderRateLimitError
    │   └── ProviderTimeoutError
    ├── ConfigurationError
    │   ├── MissingAPIKeyError
    │   └── EmptyCatalogError
    ├── ValidationError
    │   └── EmptyInputError
    └── CarbonEstimationError
"""

from __future__ import annotations

from typing import Any


class EcoChatError(Exception):
    """Base exception for all EcoChat errors."""

    code = "ECOCHAT_001"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({extra})"

    def to_dict(self) -> dict[str, Any]:
        """Serializable form used in logs and API error bodies."""
        return {
            "error": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Completion Provider
# =============================================================================


class ProviderError(EcoChatError):
    """The chat-completion endpoint failed."""

    code = "PROVIDER_001"

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(f"[{provider}] {message}", details, cause)
        self.provider = provider
        self.status_code = status_code


class ProviderAuthenticationError(ProviderError):
    code = "PROVIDER_002"

    def __init__(self, provider: str):
        super().__init__(provider, "Authentication failed, check the API key.", status_code=401)


class ProviderRateLimitError(ProviderError):
    code = "RATE_LIMIT_001"

    def __init__(self, provider: str, retry_after: int | None = None):
        details = {"retry_after": retry_after} if retry_after else None
        super().__init__(provider, "Rate limit exceeded.", status_code=429, details=details)
        self.retry_after = retry_after


class ProviderTimeoutError(ProviderError):
    code = "PROVIDER_003"

    def __init__(self, provider: str, timeout: float):
        super().__init__(provider, f"No response within {timeout}s.", status_code=408)
        self.timeout = timeout


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(EcoChatError):
    """Invalid or incomplete configuration (catalog, keys, files)."""

    code = "CONFIG_001"

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.config_key = config_key


class MissingAPIKeyError(ConfigurationError):
    code = "CONFIG_002"

    def __init__(self, provider: str, env_var: str | None = None):
        env_var = env_var or f"{provider.upper()}_API_KEY"
        super().__init__(f"No API key for provider '{provider}'; set {env_var}.", config_key=env_var)
        self.provider = provider


class EmptyCatalogError(ConfigurationError):
    """No catalog entry is available to score."""

    code = "CONFIG_003"

    def __init__(self, total_providers: int = 0):
        super().__init__(
            f"Provider catalog has no available providers ({total_providers} configured).",
            config_key="catalog",
        )
        self.total_providers = total_providers


# =============================================================================
# Input Validation
# =============================================================================


class ValidationError(EcoChatError):
    code = "VALIDATION_001"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.field = field


class EmptyInputError(ValidationError):
    def __init__(self, field: str = "input"):
        super().__init__(f"{field} cannot be empty.", field=field)


# =============================================================================
# Carbon Estimation
# =============================================================================


class CarbonEstimationError(EcoChatError):
    """Remote footprint lookup failed and no fallback was allowed."""

    code = "CARBON_001"

    def __init__(
        self,
        service: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(f"[{service}] {message}", details, cause)
        self.service = service
