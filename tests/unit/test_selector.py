"""
Unit tests for ProviderSelector.

Tests provider selection including:
- Sub-score computation against the worst-case baseline
- Ranking, tie-breaking and the complexity bonus
- Savings estimates and negative savings
- Empty catalog handling
"""

import pytest

from ecochat.core.analyzer import QueryAnalyzer
from ecochat.core.catalog import DEFAULT_REGION_INTENSITY, ProviderCatalog
from ecochat.core.selector import ProviderSelector, ScoringWeights, evaluate_query
from ecochat.core.types import ProviderProfile, QueryAnalysis, QueryCategory
from ecochat.utils.errors import ConfigurationError, EmptyCatalogError

QUERY = "Explain how quantum computers work"

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def selector(default_catalog: ProviderCatalog) -> ProviderSelector:
    return ProviderSelector(default_catalog)


@pytest.fixture
def simple_analysis() -> QueryAnalysis:
    return QueryAnalysis(complexity=0.0, category=QueryCategory.GENERAL)


# =============================================================================
# Scoring Tests
# =============================================================================


class TestScoreProvider:
    """Test single-provider scoring."""

    @pytest.mark.parametrize(
        "name,base_score",
        [
            ("Claude", 0.591342),
            ("OpenAI", 0.193333),
            ("Anthropic", 0.398571),
            ("Mistral", 0.606533),
        ],
    )
    def test_default_base_scores(
        self, selector: ProviderSelector, name: str, base_score: float
    ) -> None:
        score = selector.score_provider(selector.catalog.get(name), 0.0)

        assert score.base_score == pytest.approx(base_score, abs=1e-6)
        assert score.total_score == pytest.approx(base_score, abs=1e-6)

    def test_sub_scores(self, selector: ProviderSelector) -> None:
        score = selector.score_provider(selector.catalog.get("Mistral"), 0.0)

        assert score.efficiency_score == pytest.approx(0.5)
        assert score.carbon_score == pytest.approx(1 - 18.48 / 96.25)
        assert score.water_score == pytest.approx(1 - 700 / 1200)

    def test_complexity_bonus(self, selector: ProviderSelector) -> None:
        profile = selector.catalog.get("Claude")
        score = selector.score_provider(profile, 1.0)

        assert score.total_score == pytest.approx(score.base_score * 1.2)

    def test_total_non_decreasing_in_complexity(self, selector: ProviderSelector) -> None:
        for profile in selector.catalog.providers:
            totals = [selector.score_provider(profile, c / 10).total_score for c in range(11)]
            assert totals == sorted(totals)

    def test_sub_scores_clamped(self) -> None:
        # Uses more than the baseline on every axis
        heavy = ProviderProfile("Heavy", "h-1", "usa-east", 900, 600, 2000)
        selector = ProviderSelector(ProviderCatalog(providers=(heavy,)))

        score = selector.score_provider(heavy, 1.0)
        assert score.efficiency_score == 0.0
        assert score.carbon_score == 0.0
        assert score.water_score == 0.0
        assert score.total_score == 0.0

    def test_custom_weights(self, default_catalog: ProviderCatalog) -> None:
        selector = ProviderSelector(
            default_catalog,
            ScoringWeights(efficiency=1.0, carbon=0.0, water=0.0, complexity_bonus=0.0),
        )
        score = selector.score_provider(default_catalog.get("Mistral"), 1.0)
        assert score.total_score == pytest.approx(0.5)


# =============================================================================
# Ranking Tests
# =============================================================================


class TestRanking:
    """Test ranking and selection."""

    def test_default_ranking(self, selector: ProviderSelector, simple_analysis: QueryAnalysis) -> None:
        ranking = selector.rank(simple_analysis)
        assert [s.provider.name for s in ranking] == ["Mistral", "Claude", "Anthropic", "OpenAI"]

    def test_mistral_selected_by_default(
        self, selector: ProviderSelector, simple_analysis: QueryAnalysis
    ) -> None:
        assert selector.select(simple_analysis).provider.name == "Mistral"

    def test_ranking_same_for_any_complexity(self, selector: ProviderSelector) -> None:
        low = selector.rank(QueryAnalysis(0.0, QueryCategory.GENERAL))
        high = selector.rank(QueryAnalysis(1.0, QueryCategory.MATHEMATICAL))
        assert [s.provider.name for s in low] == [s.provider.name for s in high]

    def test_unavailable_provider_never_selected(
        self, default_catalog: ProviderCatalog, simple_analysis: QueryAnalysis
    ) -> None:
        selector = ProviderSelector(default_catalog.with_availability("Mistral", False))

        assert selector.select(simple_analysis).provider.name == "Claude"
        assert "Mistral" not in [s.provider.name for s in selector.rank(simple_analysis)]

    def test_tie_goes_to_first_catalog_entry(self, simple_analysis: QueryAnalysis) -> None:
        first = ProviderProfile("First", "m", "france", 300, 100, 800)
        second = ProviderProfile("Second", "m", "france", 300, 100, 800)
        selector = ProviderSelector(ProviderCatalog(providers=(first, second)))

        assert selector.select(simple_analysis).provider.name == "First"

    def test_empty_catalog(self, simple_analysis: QueryAnalysis) -> None:
        selector = ProviderSelector(ProviderCatalog(providers=()))

        with pytest.raises(EmptyCatalogError):
            selector.select(simple_analysis)

    def test_empty_catalog_is_kept(self, simple_analysis: QueryAnalysis) -> None:
        empty = ProviderCatalog(providers=())
        selector = ProviderSelector(empty)

        assert selector.catalog is empty
        with pytest.raises(EmptyCatalogError) as exc_info:
            selector.evaluate("hello", simple_analysis)
        assert exc_info.value.total_providers == 0

    def test_all_unavailable(self, default_catalog: ProviderCatalog) -> None:
        catalog = default_catalog.without([p.name for p in default_catalog.providers])
        selector = ProviderSelector(catalog)

        with pytest.raises(EmptyCatalogError) as exc_info:
            selector.evaluate(QUERY, QueryAnalyzer().analyze(QUERY))

        assert exc_info.value.total_providers == 4
        assert isinstance(exc_info.value, ConfigurationError)


# =============================================================================
# Estimate Tests
# =============================================================================


class TestEvaluate:
    """Test savings estimates."""

    def test_quantum_query_estimate(self, selector: ProviderSelector) -> None:
        analysis = QueryAnalyzer().analyze(QUERY)
        estimate = selector.evaluate(QUERY, analysis)

        assert estimate.provider.name == "Mistral"
        assert estimate.token_count == 9
        assert estimate.energy_saved == pytest.approx((500 - 250) * 9 / 1000)
        assert estimate.co2_saved == pytest.approx((96.25 - 80 * 0.231) * 9 / 1000)
        assert estimate.water_saved == pytest.approx((1200 - 700) * 9 / 1000)
        assert estimate.impact_increased is False

    def test_savings_are_worst_minus_actual(self, selector: ProviderSelector) -> None:
        estimate = selector.evaluate(QUERY, QueryAnalyzer().analyze(QUERY))

        assert estimate.energy_saved == pytest.approx(
            estimate.worst_case.energy_wh - estimate.actual.energy_wh
        )
        assert estimate.co2_saved == pytest.approx(estimate.worst_case.co2_g - estimate.actual.co2_g)
        assert estimate.water_saved == pytest.approx(
            estimate.worst_case.water_ml - estimate.actual.water_ml
        )

    def test_savings_scale_with_length(self, selector: ProviderSelector) -> None:
        analysis = QueryAnalysis(0.0, QueryCategory.GENERAL)
        short = selector.evaluate("a" * 400, analysis)
        long = selector.evaluate("a" * 4000, analysis)

        assert short.token_count == 100
        assert long.energy_saved == pytest.approx(short.energy_saved * 10)

    @pytest.mark.parametrize("query,tokens", [("abcd", 1), ("abcde", 2), ("a" * 400, 100)])
    def test_token_count_from_query_length(
        self, selector: ProviderSelector, simple_analysis: QueryAnalysis, query: str, tokens: int
    ) -> None:
        assert selector.evaluate(query, simple_analysis).token_count == tokens

    def test_evaluate_is_deterministic(self, selector: ProviderSelector) -> None:
        analysis = QueryAnalyzer().analyze(QUERY)

        first = selector.evaluate(QUERY, analysis)
        second = selector.evaluate(QUERY, analysis)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_empty_query_has_zero_savings(self, selector: ProviderSelector) -> None:
        estimate = selector.evaluate("", QueryAnalyzer().analyze(""))

        assert estimate.token_count == 0
        assert estimate.energy_saved == 0
        assert estimate.co2_saved == 0
        assert estimate.water_saved == 0
        assert estimate.impact_increased is False

    def test_negative_savings_reported(self, simple_analysis: QueryAnalysis) -> None:
        heavy = ProviderProfile("Heavy", "h-1", "usa-east", 900, 600, 2000)
        selector = ProviderSelector(ProviderCatalog(providers=(heavy,)))

        estimate = selector.evaluate("a" * 400, simple_analysis)

        assert estimate.energy_saved < 0
        assert estimate.co2_saved < 0
        assert estimate.water_saved < 0
        assert estimate.impact_increased is True

    def test_co2_uses_region_intensity(self, selector: ProviderSelector) -> None:
        usage = selector.usage_for(selector.catalog.get("Claude"), 1000)

        assert usage.energy_wh == pytest.approx(300)
        assert usage.co2_g == pytest.approx(100 * DEFAULT_REGION_INTENSITY["france"])
        assert usage.water_ml == pytest.approx(800)

    def test_to_dict(self, selector: ProviderSelector) -> None:
        data = selector.evaluate(QUERY, QueryAnalyzer().analyze(QUERY)).to_dict()

        assert data["provider"] == "Mistral"
        assert data["model"] == "mistral-large"
        assert data["location"] == "europe"
        assert data["token_count"] == 9
        assert set(data["actual"]) == {"energy_wh", "co2_g", "water_ml"}
        assert data["score"]["provider"] == "Mistral"

    def test_evaluate_query_helper(self) -> None:
        analysis, estimate = evaluate_query(QUERY)

        assert analysis.category == QueryCategory.EXPLANATORY
        assert estimate.provider.name == "Mistral"

    def test_selector_repr(self, selector: ProviderSelector) -> None:
        assert repr(selector) == "ProviderSelector(providers=4, available=4)"
