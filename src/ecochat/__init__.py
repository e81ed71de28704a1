"""
EcoChat - Sustainability-aware chat estimation

Scores each query's complexity and category, picks the provider/region with
the lowest environmental cost from a fixed catalog, and reports estimated
energy, CO2 and water savings against a worst-case baseline.

Basic Usage:
    from ecochat import EcoChat

    eco = EcoChat()
    analysis, estimate = eco.estimate("Explain how quantum computers work")
    print(estimate.provider.name, estimate.co2_saved)

    async with EcoChat() as eco:
        result = await eco.chat("Explain how quantum computers work")
        print(result.answer)
"""

from ecochat.core.config import EcoChatConfig
from ecochat.core.pipeline import EcoChat
from ecochat.core.types import (
    ChatResult,
    QueryAnalysis,
    QueryCategory,
    ResourceEstimate,
)

__version__ = "0.1.0"
__all__ = [
    # Main class
    "EcoChat",
    # Config
    "EcoChatConfig",
    # Types
    "QueryCategory",
    "QueryAnalysis",
    "ResourceEstimate",
    "ChatResult",
    # Version
    "__version__",
]
