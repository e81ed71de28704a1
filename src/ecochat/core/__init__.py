"""Core estimation module.

This module provides the main entry points and core components for EcoChat:
- QueryAnalyzer: Complexity scoring and categorisation
- ProviderCatalog: Provider profiles and regional carbon intensities
- ProviderSelector: Provider ranking and savings estimate
- EcoChat: Async pipeline around a chat-completion provider
"""

from ecochat.core.analyzer import AnalyzerConfig, QueryAnalyzer, analyze_query
from ecochat.core.catalog import (
    DEFAULT_PROVIDERS,
    DEFAULT_REGION_INTENSITY,
    ProviderCatalog,
)
from ecochat.core.config import EcoChatConfig, get_config, set_config
from ecochat.core.pipeline import PROCESSING_STAGES, EcoChat, ProgressCallback
from ecochat.core.selector import ProviderSelector, ScoringWeights, evaluate_query
from ecochat.core.types import (
    CarbonFootprint,
    ChatResult,
    CompletionResponse,
    Message,
    ProviderProfile,
    ProviderScore,
    QueryAnalysis,
    QueryCategory,
    ResourceEstimate,
    ResourceUsage,
    WorstCaseBaseline,
)

__all__ = [
    # Types
    "QueryCategory",
    "QueryAnalysis",
    "ProviderProfile",
    "WorstCaseBaseline",
    "ResourceUsage",
    "ProviderScore",
    "ResourceEstimate",
    "CarbonFootprint",
    "ChatResult",
    "Message",
    "CompletionResponse",
    # Config
    "EcoChatConfig",
    "get_config",
    "set_config",
    # Analyzer
    "QueryAnalyzer",
    "AnalyzerConfig",
    "analyze_query",
    # Catalog
    "ProviderCatalog",
    "DEFAULT_PROVIDERS",
    "DEFAULT_REGION_INTENSITY",
    # Selector
    "ProviderSelector",
    "ScoringWeights",
    "evaluate_query",
    # Pipeline (Main Entry Point)
    "EcoChat",
    "ProgressCallback",
    "PROCESSING_STAGES",
]
