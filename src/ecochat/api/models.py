"""
Pydantic models for the EcoChat REST API.

This module defines request/response models with validation,
OpenAPI documentation, and JSON serialization support.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ecochat.core.types import (
    CarbonFootprint,
    ProviderProfile,
    QueryAnalysis,
    QueryCategory,
    ResourceEstimate,
)

# =============================================================================
# Enums for API
# =============================================================================


class HealthStatus(str, Enum):
    """Service health status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ErrorType(str, Enum):
    """API error types for categorization."""

    VALIDATION_ERROR = "validation_error"
    PROVIDER_ERROR = "provider_error"
    RATE_LIMIT_ERROR = "rate_limit_error"
    CONFIGURATION_ERROR = "configuration_error"
    INTERNAL_ERROR = "internal_error"
    NOT_FOUND_ERROR = "not_found_error"
    AUTHENTICATION_ERROR = "authentication_error"


# =============================================================================
# Supporting Models
# =============================================================================


class QueryAnalysisModel(BaseModel):
    """Complexity and category of a query."""

    complexity: float = Field(..., ge=0.0, le=1.0, description="Complexity score")
    category: QueryCategory = Field(..., description="Query category")
    sustainability_impact: float = Field(
        ...,
        ge=0.0,
        description="Complexity weighted by category multiplier",
    )

    @classmethod
    def from_analysis(cls, analysis: QueryAnalysis) -> QueryAnalysisModel:
        return cls.model_validate(analysis.to_dict())


class ResourceUsageModel(BaseModel):
    """Absolute resource usage for a token count."""

    energy_wh: float = Field(..., description="Energy in Wh")
    co2_g: float = Field(..., description="CO2 in grams")
    water_ml: float = Field(..., description="Cooling water in ml")


class ProviderScoreModel(BaseModel):
    """Scoring breakdown for one provider."""

    provider: str
    model: str
    region: str
    efficiency_score: float = Field(..., ge=0.0, le=1.0)
    carbon_score: float = Field(..., ge=0.0, le=1.0)
    water_score: float = Field(..., ge=0.0, le=1.0)
    total_score: float = Field(..., ge=0.0)


class SustainabilityInfo(BaseModel):
    """Chosen provider and estimated savings against the worst case."""

    provider: str = Field(..., description="Selected provider name")
    model: str = Field(..., description="Selected provider model")
    location: str = Field(..., description="Selected provider region")
    token_count: int = Field(..., ge=0, description="Estimated query tokens")
    energy_saved: float = Field(..., description="Wh saved vs. worst case")
    co2_saved: float = Field(..., description="g CO2 saved vs. worst case")
    water_saved: float = Field(..., description="ml water saved vs. worst case")
    impact_increased: bool = Field(
        default=False,
        description="True when any saving is negative",
    )
    actual: ResourceUsageModel
    worst_case: ResourceUsageModel
    score: ProviderScoreModel

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "provider": "Mistral",
                "model": "mistral-large",
                "location": "europe",
                "token_count": 9,
                "energy_saved": 2.25,
                "co2_saved": 0.6999,
                "water_saved": 4.5,
                "impact_increased": False,
            }
        }
    )

    @classmethod
    def from_estimate(cls, estimate: ResourceEstimate) -> SustainabilityInfo:
        return cls.model_validate(estimate.to_dict())


class FootprintModel(BaseModel):
    """Data-center CO2e footprint."""

    co2e_kg: float = Field(..., ge=0.0)
    region: str
    energy_kwh: float = Field(..., ge=0.0)
    source: str = Field(..., description="'climatiq' or 'fallback'")

    @classmethod
    def from_footprint(cls, footprint: CarbonFootprint | None) -> FootprintModel | None:
        if footprint is None:
            return None
        return cls(
            co2e_kg=footprint.co2e_kg,
            region=footprint.region,
            energy_kwh=footprint.energy_kwh,
            source=footprint.source,
        )


class ProviderInfo(BaseModel):
    """Catalog entry for one provider."""

    name: str
    model: str
    region: str
    carbon_intensity: float = Field(..., description="Grid intensity, kg CO2/kWh")
    base_energy_per_k_tokens: float
    base_co2_per_k_tokens: float
    water_usage_per_k_tokens: float
    available: bool = True

    @classmethod
    def from_profile(cls, profile: ProviderProfile, intensity: float) -> ProviderInfo:
        return cls(carbon_intensity=intensity, **profile.to_dict())


# =============================================================================
# Request Models
# =============================================================================


class AnalyzeRequest(BaseModel):
    """Request to analyze a query without calling the completion API."""

    query: str = Field(
        ...,
        min_length=1,
        max_length=100_000,
        description="Query text to analyze",
    )
    include_ranking: bool = Field(
        default=True,
        description="Whether to include the full provider ranking",
    )
    include_footprint: bool = Field(
        default=False,
        description="Whether to look up the data-center footprint",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "query": "Explain how quantum computers work",
                "include_ranking": True,
            }
        }
    )


class ChatRequest(BaseModel):
    """Request to answer a query with sustainability information."""

    query: str = Field(
        ...,
        min_length=1,
        max_length=100_000,
        description="User query",
    )
    max_tokens: int | None = Field(
        default=None,
        ge=1,
        description="Maximum tokens to generate",
    )
    temperature: float | None = Field(
        default=None,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )

    @field_validator("query")
    @classmethod
    def strip_query(cls, v: str) -> str:
        return v.strip()


# =============================================================================
# Response Models
# =============================================================================


class AnalysisResponse(BaseModel):
    """Analysis and provider selection for a query."""

    query: str
    analysis: QueryAnalysisModel
    sustainability: SustainabilityInfo
    ranking: list[ProviderScoreModel] | None = Field(
        default=None,
        description="All available providers, best first",
    )
    footprint: FootprintModel | None = None


class ChatResponse(BaseModel):
    """Completion answer with sustainability information."""

    success: bool = True
    id: str
    answer: str
    model: str
    analysis: QueryAnalysisModel
    sustainability: SustainabilityInfo
    footprint: FootprintModel | None = None
    execution_time: float = Field(..., ge=0.0, description="Seconds")


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = Field(
        default=False,
        description="Always false for errors",
    )
    error: str = Field(
        ...,
        description="Human-readable error message",
    )
    error_type: ErrorType = Field(
        ...,
        description="Error classification",
    )
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details",
    )
    request_id: str | None = Field(
        default=None,
        description="Request identifier for support",
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="Error timestamp",
    )


class HealthResponse(BaseModel):
    """API health check response."""

    status: HealthStatus = Field(..., description="Overall service health status")
    version: str = Field(..., description="API version string")
    providers_total: int = Field(..., ge=0)
    providers_available: int = Field(..., ge=0)
    footprint_enabled: bool = False
    uptime_seconds: float = Field(..., ge=0.0, description="Service uptime in seconds")
    memory_usage_mb: float | None = Field(
        default=None,
        description="Current memory usage in MB",
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="Health check timestamp",
    )


def create_error_response(
    error: str,
    error_type: ErrorType,
    error_code: str | None = None,
    details: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    """Factory function to create error responses."""
    return ErrorResponse(
        success=False,
        error=error,
        error_type=error_type,
        error_code=error_code,
        details=details,
        request_id=request_id,
    )


__all__ = [
    "HealthStatus",
    "ErrorType",
    "QueryAnalysisModel",
    "ResourceUsageModel",
    "ProviderScoreModel",
    "SustainabilityInfo",
    "FootprintModel",
    "ProviderInfo",
    "AnalyzeRequest",
    "ChatRequest",
    "AnalysisResponse",
    "ChatResponse",
    "ErrorResponse",
    "HealthResponse",
    "create_error_response",
]
