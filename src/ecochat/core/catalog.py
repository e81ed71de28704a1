"""
Provider catalog - the read-only inputs to provider scoring.

A ``ProviderCatalog`` bundles the fixed-size sequence of provider profiles,
the region carbon-intensity table and the worst-case baseline. It is built
once (from defaults, a dict or a YAML file) and never mutated; changing
availability produces a new catalog.

All resource constants are illustrative figures per 1000 tokens.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from ecochat.core.types import ProviderProfile, WorstCaseBaseline
from ecochat.utils.errors import ConfigurationError
from ecochat.utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_PROVIDERS: tuple[ProviderProfile, ...] = (
    ProviderProfile(
        name="Claude",
        model="claude-2.1",
        region="france",
        base_energy_per_k_tokens=300.0,
        base_co2_per_k_tokens=100.0,
        water_usage_per_k_tokens=800.0,
    ),
    ProviderProfile(
        name="OpenAI",
        model="gpt-4",
        region="usa-east",
        base_energy_per_k_tokens=400.0,
        base_co2_per_k_tokens=200.0,
        water_usage_per_k_tokens=1000.0,
    ),
    ProviderProfile(
        name="Anthropic",
        model="claude-3-opus",
        region="usa-west",
        base_energy_per_k_tokens=350.0,
        base_co2_per_k_tokens=150.0,
        water_usage_per_k_tokens=900.0,
    ),
    ProviderProfile(
        name="Mistral",
        model="mistral-large",
        region="europe",
        base_energy_per_k_tokens=250.0,
        base_co2_per_k_tokens=80.0,
        water_usage_per_k_tokens=700.0,
    ),
)

# Grid carbon intensity, kg CO2e per kWh
DEFAULT_REGION_INTENSITY: dict[str, float] = {
    "france": 0.085,  # nuclear-heavy grid
    "usa-east": 0.385,  # mixed grid
    "usa-west": 0.275,  # more renewables
    "europe": 0.231,  # EU average
}


def _freeze_regions(regions: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(regions))


def _is_positive(value: Any) -> bool:
    # bool is an int subclass but never a valid quantity
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


# =============================================================================
# Catalog
# =============================================================================


@dataclass(frozen=True)
class ProviderCatalog:
    """
    Immutable provider catalog.

    Example:
        catalog = ProviderCatalog.default().with_availability("OpenAI", False)
        selector = ProviderSelector(catalog)
    """

    providers: tuple[ProviderProfile, ...] = DEFAULT_PROVIDERS
    region_intensity: Mapping[str, float] = field(
        default_factory=lambda: _freeze_regions(DEFAULT_REGION_INTENSITY)
    )
    baseline: WorstCaseBaseline = field(default_factory=WorstCaseBaseline)

    def __post_init__(self) -> None:
        object.__setattr__(self, "providers", tuple(self.providers))
        if not isinstance(self.region_intensity, MappingProxyType):
            object.__setattr__(self, "region_intensity", _freeze_regions(self.region_intensity))
        self._validate()

    def _validate(self) -> None:
        for region, factor in self.region_intensity.items():
            if not _is_positive(factor):
                raise ConfigurationError(
                    f"Region intensity must be a positive number: {region}={factor!r}",
                    config_key="regions",
                )

        baseline = self.baseline
        for name in ("energy_per_k_tokens", "co2_per_k_tokens", "water_per_k_tokens", "region_intensity"):
            if not _is_positive(getattr(baseline, name)):
                raise ConfigurationError(
                    f"Worst-case baseline {name} must be a positive number",
                    config_key="baseline",
                )

        seen: set[str] = set()
        for profile in self.providers:
            if profile.name in seen:
                raise ConfigurationError(
                    f"Duplicate provider name in catalog: {profile.name}",
                    config_key="providers",
                )
            seen.add(profile.name)

            if profile.region not in self.region_intensity:
                raise ConfigurationError(
                    f"Provider {profile.name} references unknown region: {profile.region}",
                    config_key="regions",
                    details={"known_regions": sorted(self.region_intensity)},
                )

            for attr in (
                "base_energy_per_k_tokens",
                "base_co2_per_k_tokens",
                "water_usage_per_k_tokens",
            ):
                if not _is_positive(getattr(profile, attr)):
                    raise ConfigurationError(
                        f"Provider {profile.name} {attr} must be a positive number",
                        config_key="providers",
                    )

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def available(self) -> tuple[ProviderProfile, ...]:
        """Available providers in catalog order."""
        return tuple(p for p in self.providers if p.available)

    def get(self, name: str) -> ProviderProfile:
        """Look up a provider by name."""
        for profile in self.providers:
            if profile.name == name:
                return profile
        raise KeyError(name)

    def intensity_for(self, region: str) -> float:
        """Carbon-intensity factor for a region."""
        return self.region_intensity[region]

    def __len__(self) -> int:
        return len(self.providers)

    # =========================================================================
    # Derivation
    # =========================================================================

    def with_availability(self, name: str, available: bool) -> ProviderCatalog:
        """Return a copy with one provider's availability changed."""
        self.get(name)
        providers = tuple(
            replace(p, available=available) if p.name == name else p for p in self.providers
        )
        return replace(self, providers=providers)

    def without(self, names: list[str] | tuple[str, ...]) -> ProviderCatalog:
        """Return a copy with the named providers marked unavailable."""
        unknown = [n for n in names if n not in {p.name for p in self.providers}]
        if unknown:
            logger.warning("Ignoring unknown providers", providers=unknown)
        disabled = set(names)
        providers = tuple(
            replace(p, available=False) if p.name in disabled else p for p in self.providers
        )
        return replace(self, providers=providers)

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def default(cls) -> ProviderCatalog:
        """The built-in four-provider catalog."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProviderCatalog:
        """
        Build a catalog from a plain dictionary.

        Expected shape::

            providers:
              - {name, model, region, base_energy_per_k_tokens,
                 base_co2_per_k_tokens, water_usage_per_k_tokens, available}
            regions: {region: intensity}
            baseline: {energy_per_k_tokens, co2_per_k_tokens,
                       water_per_k_tokens, region_intensity}

        Absent sections fall back to the defaults; a present but empty
        ``providers`` list yields an empty catalog.
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError("Catalog definition must be a mapping", config_key="catalog")

        regions = data.get("regions", DEFAULT_REGION_INTENSITY)
        if not isinstance(regions, Mapping):
            raise ConfigurationError(
                "Catalog regions must map region names to intensities",
                config_key="regions",
            )

        try:
            providers = (
                tuple(ProviderProfile(**p) for p in data["providers"])
                if "providers" in data
                else DEFAULT_PROVIDERS
            )
            baseline_data = data.get("baseline")
            baseline = WorstCaseBaseline(**baseline_data) if baseline_data else WorstCaseBaseline()
            region_intensity = {k: float(v) for k, v in regions.items()}
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid catalog definition: {e}",
                config_key="catalog",
            ) from e

        return cls(providers=providers, region_intensity=region_intensity, baseline=baseline)

    @classmethod
    def from_file(cls, path: str | Path) -> ProviderCatalog:
        """Load a catalog from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Catalog file not found: {path}", config_key="catalog_file")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Catalog file is not valid YAML: {path}", config_key="catalog_file"
            ) from e

        catalog = cls.from_dict(data)
        logger.info("Catalog loaded", path=str(path), providers=len(catalog))
        return catalog

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary that ``from_dict`` accepts."""
        return {
            "providers": [p.to_dict() for p in self.providers],
            "regions": dict(self.region_intensity),
            "baseline": {
                "energy_per_k_tokens": self.baseline.energy_per_k_tokens,
                "co2_per_k_tokens": self.baseline.co2_per_k_tokens,
                "water_per_k_tokens": self.baseline.water_per_k_tokens,
                "region_intensity": self.baseline.region_intensity,
            },
        }
