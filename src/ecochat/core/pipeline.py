"""
EcoChat pipeline - main entry point.

Wires the query analyzer, the provider selector, the chat-completion
provider and the optional Climatiq footprint lookup into one async flow:

    query -> analyze -> select region/provider -> complete -> ChatResult

The sustainability estimate never depends on the completion outcome.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable, Coroutine
from typing import Any

from ecochat.carbon.climatiq import ClimatiqClient
from ecochat.core.analyzer import QueryAnalyzer
from ecochat.core.catalog import ProviderCatalog
from ecochat.core.config import EcoChatConfig, get_config
from ecochat.core.selector import ProviderSelector
from ecochat.core.types import (
    CarbonFootprint,
    ChatResult,
    Message,
    QueryAnalysis,
    ResourceEstimate,
)
from ecochat.providers.base import BaseProvider
from ecochat.providers.factory import get_provider
from ecochat.utils.errors import EmptyInputError
from ecochat.utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Type Aliases
# =============================================================================

ProgressCallback = Callable[[str, float], Coroutine[Any, Any, None]]

# (stage_id, label) in processing order
PROCESSING_STAGES: tuple[tuple[str, str], ...] = (
    ("analyze", "Analyzing query complexity..."),
    ("region", "Finding optimal region..."),
    ("model", "Selecting efficient model..."),
)


class EcoChat:
    """
    Sustainability-aware chat pipeline.

    Usage:
        # Estimate only, no API key needed
        eco = EcoChat()
        analysis, estimate = eco.estimate("Explain how quantum computers work")

        # Full chat
        async with EcoChat() as eco:
            result = await eco.chat("Explain how quantum computers work")
            print(result.answer, result.estimate.co2_saved)
    """

    def __init__(
        self,
        config: EcoChatConfig | None = None,
        provider: str | BaseProvider | None = None,
        catalog: ProviderCatalog | None = None,
        climatiq: ClimatiqClient | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            config: EcoChat configuration (loads from env if None)
            provider: Provider name or BaseProvider instance. Named providers
                are created on first chat, so estimation works without a key.
            catalog: Provider catalog (built from config if None)
            climatiq: Climatiq client (created from config when a key is set)
            **kwargs: Additional provider initialization arguments
        """
        self.config = config or get_config()
        self._catalog = catalog if catalog is not None else self.config.build_catalog()
        self._analyzer = QueryAnalyzer()
        self._selector = ProviderSelector(self._catalog)

        self._provider: BaseProvider | None = None
        self._provider_name: str | None = None
        if isinstance(provider, BaseProvider):
            self._provider = provider
        else:
            self._provider_name = provider
        self._provider_kwargs = kwargs

        if climatiq is None and self.config.climatiq.enabled:
            climatiq = ClimatiqClient(self.config.climatiq)
        self._climatiq = climatiq

        self._chat_count = 0

        logger.info(
            "EcoChat initialized",
            providers=len(self._catalog),
            available=len(self._catalog.available),
            footprint=self._climatiq is not None,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def catalog(self) -> ProviderCatalog:
        return self._catalog

    @property
    def analyzer(self) -> QueryAnalyzer:
        return self._analyzer

    @property
    def selector(self) -> ProviderSelector:
        return self._selector

    @property
    def provider(self) -> BaseProvider:
        """Completion provider, created from config on first access."""
        if self._provider is None:
            self._provider = get_provider(
                name=self._provider_name,
                config=self.config,
                **self._provider_kwargs,
            )
        return self._provider

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "chat_count": self._chat_count,
            "providers": len(self._catalog),
            "available_providers": len(self._catalog.available),
            "footprint_enabled": self._climatiq is not None,
        }

    # =========================================================================
    # Estimation
    # =========================================================================

    def estimate(self, query: str) -> tuple[QueryAnalysis, ResourceEstimate]:
        """
        Analyze a query and estimate the savings of the best provider.

        Raises:
            EmptyCatalogError: If no provider is available
        """
        analysis = self._analyzer.analyze(query)
        return analysis, self._selector.evaluate(query, analysis)

    async def footprint(self, estimate: ResourceEstimate) -> CarbonFootprint | None:
        """Data-center footprint of the chosen provider, if Climatiq is configured."""
        if self._climatiq is None:
            return None
        energy_kwh = estimate.actual.energy_wh / 1000
        return await self._climatiq.estimate_datacenter_impact(
            estimate.provider.region,
            energy_kwh,
        )

    # =========================================================================
    # Chat
    # =========================================================================

    async def chat(
        self,
        query: str,
        progress_callback: ProgressCallback | None = None,
        **kwargs: Any,
    ) -> ChatResult:
        """
        Answer a query and attach its sustainability estimate.

        Args:
            query: User query
            progress_callback: Optional async callback ``(stage_id, fraction)``
            **kwargs: Passed to the provider's ``complete``

        Returns:
            ChatResult with the answer, analysis, estimate and footprint

        Raises:
            EmptyInputError: If the query is blank
            ProviderError: If the completion fails
        """
        if not query or not query.strip():
            raise EmptyInputError("query")

        start_time = time.time()
        total = len(PROCESSING_STAGES)

        async def report(index: int) -> None:
            if progress_callback:
                await progress_callback(PROCESSING_STAGES[index][0], (index + 1) / total)

        analysis = self._analyzer.analyze(query)
        await report(0)

        estimate = self._selector.evaluate(query, analysis)
        await report(1)

        await report(2)

        response = await self.provider.complete(
            messages=[Message(role="user", content=query)],
            system=self.config.system_prompt,
            **kwargs,
        )

        footprint = await self.footprint(estimate)

        self._chat_count += 1
        execution_time = time.time() - start_time

        logger.info(
            "Chat complete",
            category=analysis.category.value,
            provider=estimate.provider.name,
            tokens_used=response.tokens_used,
            execution_time=round(execution_time, 3),
        )

        return ChatResult(
            id=str(uuid.uuid4()),
            query=query,
            answer=response.content,
            analysis=analysis,
            estimate=estimate,
            model=response.model,
            execution_time=execution_time,
            footprint=footprint,
        )

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def close(self) -> None:
        """Close provider and Climatiq HTTP clients."""
        if self._provider is not None:
            await self._provider.close()
        if self._climatiq is not None:
            await self._climatiq.close()

    async def __aenter__(self) -> EcoChat:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return (
            f"EcoChat(providers={len(self._catalog)}, "
            f"chats={self._chat_count})"
        )
