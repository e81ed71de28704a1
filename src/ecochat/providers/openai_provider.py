"""
OpenAI-compatible chat-completion provider.

Talks to any endpoint implementing the OpenAI chat-completions API
(OpenAI itself, DeepSeek, local gateways) through the official SDK.
"""

from __future__ import annotations

import time
from typing import Any

from openai import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    RateLimitError,
)
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ecochat.core.types import CompletionResponse, Message
from ecochat.providers.base import BaseProvider
from ecochat.utils.errors import (
    MissingAPIKeyError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from ecochat.utils.logging import ServiceLogger

# Transient failures worth another attempt
RETRYABLE_ERRORS = (APIConnectionError, APITimeoutError, RateLimitError)


def _translate_error(error: APIError, provider: str, timeout: float) -> ProviderError:
    """Map an SDK exception onto the EcoChat provider errors."""
    if isinstance(error, AuthenticationError):
        return ProviderAuthenticationError(provider)
    if isinstance(error, RateLimitError):
        retry_after = error.response.headers.get("retry-after", "")
        return ProviderRateLimitError(provider, int(retry_after) if retry_after.isdigit() else None)
    if isinstance(error, APITimeoutError):
        return ProviderTimeoutError(provider, timeout)
    status_code = getattr(error, "status_code", None)
    return ProviderError(provider, str(error), status_code=status_code, cause=error)


def _to_completion(response: Any, requested_model: str, latency_ms: float) -> CompletionResponse:
    choice = response.choices[0]
    usage = response.usage
    input_tokens = usage.prompt_tokens if usage else 0
    output_tokens = usage.completion_tokens if usage else 0
    return CompletionResponse(
        content=choice.message.content or "",
        tokens_used=input_tokens + output_tokens,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        model=response.model or requested_model,
        finish_reason=choice.finish_reason or "stop",
        latency_ms=latency_ms,
        raw_response=response.model_dump(),
    )


class OpenAIProvider(BaseProvider):
    """
    Provider for any OpenAI-compatible chat-completions endpoint.

    DeepSeek is the default target; point ``base_url`` elsewhere (or at
    None for api.openai.com) to use another backend.

    Example:
        provider = OpenAIProvider(api_key="sk-...", base_url="https://api.deepseek.com")
        response = await provider.complete(
            [Message(role="user", content="Explain how quantum computers work")],
            system=DEFAULT_SYSTEM_PROMPT,
        )
    """

    def __init__(
        self,
        model: str = "deepseek-chat",
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: int = 120,
        max_retries: int = 3,
        **kwargs: object,
    ):
        # Keys are resolved by EcoChatConfig only
        if not api_key:
            raise MissingAPIKeyError(self.name, env_var="DEEPSEEK_API_KEY")
        super().__init__(
            model=model,
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )
        # tenacity owns retries, so the SDK's own are off
        self.client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
        )
        self.logger = ServiceLogger("openai")

    @property
    def name(self) -> str:
        return "openai"

    async def _create(self, **request: Any) -> Any:
        """Call the completions endpoint, retrying transient failures."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(1, self.max_retries)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
        ):
            with attempt:
                return await self.client.chat.completions.create(**request)

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: object,
    ) -> CompletionResponse:
        model = model or self.model
        request: dict[str, Any] = {
            "model": model,
            "messages": self._convert_messages(messages, system),
        }
        if max_tokens is not None:
            request["max_tokens"] = max_tokens
        if temperature is not None:
            request["temperature"] = temperature

        prompt = "".join(m["content"] for m in request["messages"])
        self.logger.log_request(model, self.count_tokens(prompt))

        started = time.perf_counter()
        try:
            response = await self._create(**request)
        except APIError as e:
            self.logger.log_error(e, model=model)
            raise _translate_error(e, self.name, self.timeout) from e

        latency_ms = (time.perf_counter() - started) * 1000
        completion = _to_completion(response, model, latency_ms)
        self.logger.log_response(model, completion.output_tokens, latency_ms)
        return completion

    async def close(self) -> None:
        await self.client.close()
