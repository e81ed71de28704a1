"""
Unit tests for ProviderCatalog.

Tests catalog functionality including:
- Default providers, regions and baseline
- Validation of loaded catalogs
- Availability changes producing new catalogs
- Loading from dicts and YAML files
"""

from pathlib import Path

import pytest
import yaml

from ecochat.core.catalog import (
    DEFAULT_PROVIDERS,
    DEFAULT_REGION_INTENSITY,
    ProviderCatalog,
)
from ecochat.core.types import ProviderProfile, WorstCaseBaseline
from ecochat.utils.errors import ConfigurationError

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def two_provider_data() -> dict:
    """A small catalog definition."""
    return {
        "providers": [
            {
                "name": "Green",
                "model": "green-1",
                "region": "nordics",
                "base_energy_per_k_tokens": 100,
                "base_co2_per_k_tokens": 20,
                "water_usage_per_k_tokens": 300,
            },
            {
                "name": "Grey",
                "model": "grey-1",
                "region": "coal",
                "base_energy_per_k_tokens": 450,
                "base_co2_per_k_tokens": 240,
                "water_usage_per_k_tokens": 1100,
                "available": False,
            },
        ],
        "regions": {"nordics": 0.03, "coal": 0.9},
    }


# =============================================================================
# Default Catalog Tests
# =============================================================================


class TestDefaultCatalog:
    """Test the built-in catalog."""

    def test_default_providers(self, default_catalog: ProviderCatalog) -> None:
        names = [p.name for p in default_catalog.providers]
        assert names == ["Claude", "OpenAI", "Anthropic", "Mistral"]
        assert len(default_catalog) == 4

    def test_default_profile_values(self, default_catalog: ProviderCatalog) -> None:
        mistral = default_catalog.get("Mistral")

        assert mistral.model == "mistral-large"
        assert mistral.region == "europe"
        assert mistral.base_energy_per_k_tokens == 250
        assert mistral.base_co2_per_k_tokens == 80
        assert mistral.water_usage_per_k_tokens == 700
        assert mistral.available is True

    def test_default_region_intensity(self, default_catalog: ProviderCatalog) -> None:
        assert default_catalog.intensity_for("france") == 0.085
        assert default_catalog.intensity_for("usa-east") == 0.385
        assert default_catalog.intensity_for("usa-west") == 0.275
        assert default_catalog.intensity_for("europe") == 0.231

    def test_default_baseline(self, default_catalog: ProviderCatalog) -> None:
        baseline = default_catalog.baseline

        assert baseline.energy_per_k_tokens == 500
        assert baseline.co2_per_k_tokens == 250
        assert baseline.water_per_k_tokens == 1200
        assert baseline.adjusted_co2_per_k_tokens == pytest.approx(96.25)

    def test_all_available_by_default(self, default_catalog: ProviderCatalog) -> None:
        assert default_catalog.available == DEFAULT_PROVIDERS

    def test_region_table_is_read_only(self, default_catalog: ProviderCatalog) -> None:
        with pytest.raises(TypeError):
            default_catalog.region_intensity["france"] = 1.0  # type: ignore[index]

    def test_get_unknown_provider(self, default_catalog: ProviderCatalog) -> None:
        with pytest.raises(KeyError):
            default_catalog.get("Nope")


# =============================================================================
# Availability Tests
# =============================================================================


class TestAvailability:
    """Test availability changes."""

    def test_with_availability_returns_new_catalog(self, default_catalog: ProviderCatalog) -> None:
        updated = default_catalog.with_availability("Mistral", False)

        assert updated is not default_catalog
        assert updated.get("Mistral").available is False
        assert default_catalog.get("Mistral").available is True
        assert [p.name for p in updated.available] == ["Claude", "OpenAI", "Anthropic"]

    def test_with_availability_unknown_name(self, default_catalog: ProviderCatalog) -> None:
        with pytest.raises(KeyError):
            default_catalog.with_availability("Nope", False)

    def test_without_disables_several(self, default_catalog: ProviderCatalog) -> None:
        updated = default_catalog.without(["Mistral", "Claude"])
        assert [p.name for p in updated.available] == ["OpenAI", "Anthropic"]

    def test_without_ignores_unknown(self, default_catalog: ProviderCatalog) -> None:
        updated = default_catalog.without(["Nope"])
        assert updated.available == default_catalog.available


# =============================================================================
# Validation Tests
# =============================================================================


class TestValidation:
    """Test catalog validation."""

    def test_unknown_region(self) -> None:
        profile = ProviderProfile("X", "x-1", "mars", 100, 50, 200)

        with pytest.raises(ConfigurationError, match="unknown region"):
            ProviderCatalog(providers=(profile,))

    def test_duplicate_names(self) -> None:
        profile = ProviderProfile("X", "x-1", "france", 100, 50, 200)

        with pytest.raises(ConfigurationError, match="Duplicate"):
            ProviderCatalog(providers=(profile, profile))

    def test_non_positive_resource(self) -> None:
        profile = ProviderProfile("X", "x-1", "france", 0, 50, 200)

        with pytest.raises(ConfigurationError):
            ProviderCatalog(providers=(profile,))

    def test_non_positive_region_intensity(self) -> None:
        with pytest.raises(ConfigurationError):
            ProviderCatalog(region_intensity={**DEFAULT_REGION_INTENSITY, "france": 0.0})

    def test_non_positive_baseline(self) -> None:
        with pytest.raises(ConfigurationError, match="baseline"):
            ProviderCatalog(baseline=WorstCaseBaseline(energy_per_k_tokens=0))

    def test_empty_provider_list_is_valid(self) -> None:
        catalog = ProviderCatalog(providers=())
        assert len(catalog) == 0
        assert catalog.available == ()


# =============================================================================
# Construction Tests
# =============================================================================


class TestConstruction:
    """Test building catalogs from dicts and files."""

    def test_from_dict(self, two_provider_data: dict) -> None:
        catalog = ProviderCatalog.from_dict(two_provider_data)

        assert [p.name for p in catalog.providers] == ["Green", "Grey"]
        assert [p.name for p in catalog.available] == ["Green"]
        assert catalog.intensity_for("nordics") == 0.03
        assert catalog.baseline == WorstCaseBaseline()

    def test_from_empty_dict_uses_defaults(self) -> None:
        assert ProviderCatalog.from_dict({}) == ProviderCatalog.default()

    def test_from_dict_empty_providers_stays_empty(self) -> None:
        catalog = ProviderCatalog.from_dict({"providers": []})

        assert len(catalog) == 0
        assert catalog.region_intensity == DEFAULT_REGION_INTENSITY

    def test_from_dict_invalid_fields(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid catalog"):
            ProviderCatalog.from_dict({"providers": [{"name": "X"}]})

    def test_from_dict_empty_regions_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown region") as exc_info:
            ProviderCatalog.from_dict({"regions": {}})
        assert exc_info.value.config_key == "regions"

    def test_from_dict_regions_not_a_mapping(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderCatalog.from_dict({"regions": ["france", "europe"]})
        assert exc_info.value.config_key == "regions"

    def test_from_dict_non_numeric_region_intensity(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderCatalog.from_dict({"regions": {**DEFAULT_REGION_INTENSITY, "france": "low"}})
        assert exc_info.value.config_key == "catalog"

    def test_from_dict_non_numeric_resource(self, two_provider_data: dict) -> None:
        two_provider_data["providers"][0]["base_energy_per_k_tokens"] = "300"

        with pytest.raises(ConfigurationError, match="positive number") as exc_info:
            ProviderCatalog.from_dict(two_provider_data)
        assert exc_info.value.config_key == "providers"

    def test_from_dict_non_numeric_baseline(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderCatalog.from_dict({"baseline": {"energy_per_k_tokens": "high"}})
        assert exc_info.value.config_key == "baseline"

    def test_from_dict_not_a_mapping(self) -> None:
        with pytest.raises(ConfigurationError):
            ProviderCatalog.from_dict(["Claude"])  # type: ignore[arg-type]

    def test_to_dict_round_trip(self, two_provider_data: dict) -> None:
        catalog = ProviderCatalog.from_dict(two_provider_data)
        assert ProviderCatalog.from_dict(catalog.to_dict()) == catalog

    def test_from_file(self, tmp_path: Path, two_provider_data: dict) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump(two_provider_data))

        catalog = ProviderCatalog.from_file(path)
        assert catalog.get("Grey").available is False

    def test_from_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            ProviderCatalog.from_file(tmp_path / "missing.yaml")

    def test_from_file_empty_provider_list(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text("providers: []\n")

        assert len(ProviderCatalog.from_file(path)) == 0

    def test_from_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text("providers: [unclosed\n")

        with pytest.raises(ConfigurationError, match="not valid YAML"):
            ProviderCatalog.from_file(path)
