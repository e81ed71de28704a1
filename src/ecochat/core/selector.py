"""
Provider Selector - resource-aware provider scoring and savings estimation.

Scores every available provider in a ``ProviderCatalog`` against the
catalog's worst-case baseline, picks the best one, and reports how much
energy, CO2 and water it saves compared to the baseline.

Unit convention:
    All comparisons use per-1000-token figures. CO2 is always grid-adjusted
    (base CO2 x region intensity) and compared against a baseline adjusted
    the same way. Absolute usage is the per-1000-token figure scaled by
    ``token_count / 1000``.

Score:
    efficiency = 1 - energy / worst_energy
    carbon     = 1 - adjusted_co2 / worst_adjusted_co2
    water      = 1 - water / worst_water
    total      = (0.4 * efficiency + 0.4 * carbon + 0.2 * water)
                 * (1 + 0.2 * complexity)
"""

from __future__ import annotations

from dataclasses import dataclass

from ecochat.core.analyzer import QueryAnalyzer
from ecochat.core.catalog import ProviderCatalog
from ecochat.core.types import (
    ProviderProfile,
    ProviderScore,
    QueryAnalysis,
    ResourceEstimate,
    ResourceUsage,
)
from ecochat.utils.errors import EmptyCatalogError
from ecochat.utils.logging import get_logger
from ecochat.utils.tokens import estimate_tokens, token_units

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScoringWeights:
    """Weights for the composite provider score."""

    efficiency: float = 0.4
    carbon: float = 0.4
    water: float = 0.2
    complexity_bonus: float = 0.2


def _clamp(value: float) -> float:
    return max(0.0, min(value, 1.0))


class ProviderSelector:
    """
    Select the most resource-efficient provider for a query.

    The selector owns its catalog for its whole lifetime and keeps no
    per-request state, so one instance can serve concurrent callers.

    Example:
        selector = ProviderSelector()
        analysis = QueryAnalyzer().analyze(query)
        estimate = selector.evaluate(query, analysis)
        print(estimate.provider.name, estimate.co2_saved)
    """

    def __init__(
        self,
        catalog: ProviderCatalog | None = None,
        weights: ScoringWeights | None = None,
    ):
        self._catalog = catalog if catalog is not None else ProviderCatalog.default()
        self._weights = weights or ScoringWeights()

    @property
    def catalog(self) -> ProviderCatalog:
        """The catalog this selector scores against."""
        return self._catalog

    @property
    def weights(self) -> ScoringWeights:
        """Composite score weights."""
        return self._weights

    # =========================================================================
    # Scoring
    # =========================================================================

    def score_provider(self, profile: ProviderProfile, complexity: float) -> ProviderScore:
        """
        Score a single provider.

        Each sub-score is clamped to [0, 1] so the complexity bonus can never
        lower a provider's total.
        """
        baseline = self._catalog.baseline
        adjusted_co2 = profile.base_co2_per_k_tokens * self._catalog.intensity_for(profile.region)

        efficiency = _clamp(1 - profile.base_energy_per_k_tokens / baseline.energy_per_k_tokens)
        carbon = _clamp(1 - adjusted_co2 / baseline.adjusted_co2_per_k_tokens)
        water = _clamp(1 - profile.water_usage_per_k_tokens / baseline.water_per_k_tokens)

        w = self._weights
        base_score = efficiency * w.efficiency + carbon * w.carbon + water * w.water
        total_score = base_score * (1 + complexity * w.complexity_bonus)

        return ProviderScore(
            provider=profile,
            efficiency_score=efficiency,
            carbon_score=carbon,
            water_score=water,
            base_score=base_score,
            total_score=total_score,
        )

    def rank(self, analysis: QueryAnalysis) -> list[ProviderScore]:
        """
        Score all available providers, best first.

        Raises:
            EmptyCatalogError: If no provider is available
        """
        available = self._catalog.available
        if not available:
            raise EmptyCatalogError(total_providers=len(self._catalog))

        scores = [self.score_provider(p, analysis.complexity) for p in available]
        # sorted() is stable, so equal scores keep catalog order
        return sorted(scores, key=lambda s: s.total_score, reverse=True)

    def select(self, analysis: QueryAnalysis) -> ProviderScore:
        """Return the best-scoring provider; ties go to the earliest catalog entry."""
        return self.rank(analysis)[0]

    # =========================================================================
    # Usage
    # =========================================================================

    def usage_for(self, profile: ProviderProfile, token_count: int) -> ResourceUsage:
        """Absolute resource usage of a provider for a token count."""
        units = token_units(token_count)
        intensity = self._catalog.intensity_for(profile.region)
        return ResourceUsage(
            energy_wh=profile.base_energy_per_k_tokens * units,
            co2_g=profile.base_co2_per_k_tokens * intensity * units,
            water_ml=profile.water_usage_per_k_tokens * units,
        )

    def worst_case_usage(self, token_count: int) -> ResourceUsage:
        """Baseline resource usage for a token count."""
        units = token_units(token_count)
        baseline = self._catalog.baseline
        return ResourceUsage(
            energy_wh=baseline.energy_per_k_tokens * units,
            co2_g=baseline.adjusted_co2_per_k_tokens * units,
            water_ml=baseline.water_per_k_tokens * units,
        )

    # =========================================================================
    # Evaluation
    # =========================================================================

    def evaluate(self, query: str, analysis: QueryAnalysis) -> ResourceEstimate:
        """
        Select a provider and estimate savings for a query.

        Args:
            query: The query text (only its length is used)
            analysis: Analysis of the same query

        Returns:
            ResourceEstimate for the winning provider. Savings are
            ``worst - actual`` and are negative when the winner uses more
            than the baseline.

        Raises:
            EmptyCatalogError: If no provider is available
        """
        token_count = estimate_tokens(query)
        best = self.select(analysis)

        actual = self.usage_for(best.provider, token_count)
        worst = self.worst_case_usage(token_count)

        estimate = ResourceEstimate(
            provider=best.provider,
            token_count=token_count,
            energy_saved=worst.energy_wh - actual.energy_wh,
            co2_saved=worst.co2_g - actual.co2_g,
            water_saved=worst.water_ml - actual.water_ml,
            actual=actual,
            worst_case=worst,
            score=best,
        )

        logger.debug(
            "Provider selected",
            provider=best.provider.name,
            region=best.provider.region,
            total_score=round(best.total_score, 4),
            token_count=token_count,
            impact_increased=estimate.impact_increased,
        )

        return estimate

    def __repr__(self) -> str:
        return (
            f"ProviderSelector(providers={len(self._catalog)}, "
            f"available={len(self._catalog.available)})"
        )


# =============================================================================
# Convenience Functions
# =============================================================================


def evaluate_query(
    query: str,
    catalog: ProviderCatalog | None = None,
) -> tuple[QueryAnalysis, ResourceEstimate]:
    """Analyze a query and evaluate it against a catalog (defaults if omitted)."""
    analysis = QueryAnalyzer().analyze(query)
    return analysis, ProviderSelector(catalog).evaluate(query, analysis)
