"""
Core type definitions for EcoChat.

This module contains the Enums and Dataclasses shared by the analyzer,
the provider selector, the completion providers and the outer surfaces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

# =============================================================================
# Enums
# =============================================================================


class QueryCategory(str, Enum):
    """Coarse query categories, in categorisation priority order."""

    MATHEMATICAL = "mathematical"
    PROGRAMMING = "programming"
    EXPLANATORY = "explanatory"
    ANALYTICAL = "analytical"
    GENERAL = "general"


# Higher multiplier means the category tends to need more resources
CATEGORY_IMPACT_MULTIPLIERS: dict[QueryCategory, float] = {
    QueryCategory.MATHEMATICAL: 1.2,
    QueryCategory.PROGRAMMING: 1.1,
    QueryCategory.ANALYTICAL: 1.0,
    QueryCategory.EXPLANATORY: 0.8,
    QueryCategory.GENERAL: 0.7,
}


# =============================================================================
# Message Types
# =============================================================================


@dataclass
class Message:
    """Standardized message format for LLM communication."""

    role: str  # "user" | "assistant" | "system"
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary format."""
        return {"role": self.role, "content": self.content}


@dataclass
class CompletionResponse:
    """Standardized completion response from any provider."""

    content: str
    tokens_used: int
    input_tokens: int
    output_tokens: int
    model: str
    finish_reason: str  # "stop" | "length" | "error"
    latency_ms: float
    created_at: datetime = field(default_factory=datetime.utcnow)
    raw_response: dict[str, Any] | None = None


# =============================================================================
# Analysis Types
# =============================================================================


@dataclass(frozen=True)
class QueryAnalysis:
    """Complexity and category descriptor for a single query."""

    complexity: float  # 0.0 - 1.0
    category: QueryCategory

    @property
    def sustainability_impact(self) -> float:
        """Relative resource demand: complexity weighted by category."""
        return self.complexity * CATEGORY_IMPACT_MULTIPLIERS.get(self.category, 1.0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "complexity": round(self.complexity, 4),
            "category": self.category.value,
            "sustainability_impact": round(self.sustainability_impact, 4),
        }


# =============================================================================
# Catalog Types
# =============================================================================


@dataclass(frozen=True)
class ProviderProfile:
    """
    A hypothetical model-serving configuration with illustrative costs.

    Attributes:
        name: Provider display name
        model: Model identifier
        region: Region key into the carbon-intensity table
        base_energy_per_k_tokens: Wh per 1000 tokens
        base_co2_per_k_tokens: g CO2 per 1000 tokens before grid adjustment
        water_usage_per_k_tokens: ml of cooling water per 1000 tokens
        available: Unavailable providers are never scored
    """

    name: str
    model: str
    region: str
    base_energy_per_k_tokens: float
    base_co2_per_k_tokens: float
    water_usage_per_k_tokens: float
    available: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "model": self.model,
            "region": self.region,
            "base_energy_per_k_tokens": self.base_energy_per_k_tokens,
            "base_co2_per_k_tokens": self.base_co2_per_k_tokens,
            "water_usage_per_k_tokens": self.water_usage_per_k_tokens,
            "available": self.available,
        }


@dataclass(frozen=True)
class WorstCaseBaseline:
    """Fixed per-1000-token reference used as the subtraction base for savings."""

    energy_per_k_tokens: float = 500.0
    co2_per_k_tokens: float = 250.0
    water_per_k_tokens: float = 1200.0
    region_intensity: float = 0.385  # dirtiest default grid (usa-east)

    @property
    def adjusted_co2_per_k_tokens(self) -> float:
        """Worst-case CO2 per 1000 tokens after grid adjustment."""
        return self.co2_per_k_tokens * self.region_intensity


# =============================================================================
# Estimate Types
# =============================================================================


@dataclass(frozen=True)
class ResourceUsage:
    """Absolute resource usage for a token count."""

    energy_wh: float
    co2_g: float
    water_ml: float

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for JSON serialization."""
        return {
            "energy_wh": self.energy_wh,
            "co2_g": self.co2_g,
            "water_ml": self.water_ml,
        }


@dataclass(frozen=True)
class ProviderScore:
    """Scoring breakdown for one provider."""

    provider: ProviderProfile
    efficiency_score: float
    carbon_score: float
    water_score: float
    base_score: float
    total_score: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "provider": self.provider.name,
            "model": self.provider.model,
            "region": self.provider.region,
            "efficiency_score": round(self.efficiency_score, 4),
            "carbon_score": round(self.carbon_score, 4),
            "water_score": round(self.water_score, 4),
            "total_score": round(self.total_score, 4),
        }


@dataclass(frozen=True)
class ResourceEstimate:
    """Chosen provider and estimated savings against the worst-case baseline."""

    provider: ProviderProfile
    token_count: int
    energy_saved: float
    co2_saved: float
    water_saved: float
    actual: ResourceUsage
    worst_case: ResourceUsage
    score: ProviderScore

    @property
    def impact_increased(self) -> bool:
        """True when the chosen provider uses more than the baseline on any axis."""
        return min(self.energy_saved, self.co2_saved, self.water_saved) < 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "provider": self.provider.name,
            "model": self.provider.model,
            "location": self.provider.region,
            "token_count": self.token_count,
            "energy_saved": self.energy_saved,
            "co2_saved": self.co2_saved,
            "water_saved": self.water_saved,
            "impact_increased": self.impact_increased,
            "actual": self.actual.to_dict(),
            "worst_case": self.worst_case.to_dict(),
            "score": self.score.to_dict(),
        }


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class CarbonFootprint:
    """Data-center footprint for the energy of one answer."""

    co2e_kg: float
    region: str
    energy_kwh: float
    source: str  # "climatiq" | "fallback"


@dataclass
class ChatResult:
    """Final result of a chat interaction."""

    id: str
    query: str
    answer: str
    analysis: QueryAnalysis
    estimate: ResourceEstimate
    model: str
    execution_time: float  # seconds
    footprint: CarbonFootprint | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "query": self.query,
            "answer": self.answer,
            "analysis": self.analysis.to_dict(),
            "sustainability": self.estimate.to_dict(),
            "model": self.model,
            "execution_time": self.execution_time,
            "footprint": (
                {
                    "co2e_kg": self.footprint.co2e_kg,
                    "region": self.footprint.region,
                    "energy_kwh": self.footprint.energy_kwh,
                    "source": self.footprint.source,
                }
                if self.footprint
                else None
            ),
            "created_at": self.created_at.isoformat(),
        }
