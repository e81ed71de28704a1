"""
Completion provider interface.

The pipeline only needs ``complete`` and ``close``; everything about the
sustainability estimate happens before a provider is ever called, so any
implementation (or a mock) can be dropped in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ecochat.core.types import CompletionResponse, Message
from ecochat.utils.tokens import estimate_tokens


class BaseProvider(ABC):
    """
    A chat-completion backend.

    Subclasses implement ``name`` and ``complete``:

        class EchoProvider(BaseProvider):
            name = "echo"

            async def complete(self, messages, system=None, **kwargs):
                text = messages[-1].content
                return CompletionResponse(text, 0, 0, 0, self.model, "stop", 0.0)
    """

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: int = 120,
        max_retries: int = 3,
    ):
        self.model = model
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name, e.g. "openai"."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: object,
    ) -> CompletionResponse:
        """
        Send one conversation and return the reply.

        ``model`` overrides the provider's default model for this call;
        ``max_tokens`` and ``temperature`` are left to the backend when None.

        Raises:
            ProviderError: Or one of its subclasses for auth, rate-limit
                and timeout failures
        """

    def count_tokens(self, text: str) -> int:
        return estimate_tokens(text)

    async def close(self) -> None:
        """Release network resources held by the provider."""

    def _convert_messages(
        self,
        messages: list[Message],
        system: str | None = None,
    ) -> list[dict[str, str]]:
        """Wire-format messages with the system prompt, if any, in front."""
        converted = [{"role": "system", "content": system}] if system else []
        converted.extend(msg.to_dict() for msg in messages)
        return converted

    def get_model_info(self) -> dict[str, object]:
        return {
            "provider": self.name,
            "model": self.model,
            "base_url": self.base_url,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"
