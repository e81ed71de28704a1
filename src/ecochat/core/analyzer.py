"""
Query Analyzer - heuristic complexity scoring and categorisation.

Turns raw query text into a ``QueryAnalysis``:

Signal              | Normaliser | Weight
Character length    | 200        | 0.3
Word count          | 50         | 0.3
Special characters  | 10         | 0.2
Technical terms     | 5          | 0.2

Each signal is clamped to [0, 1] before weighting, so the total complexity
is always within [0, 1]. Categories are tested in a fixed priority order
and the first matching pattern wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ecochat.core.types import QueryAnalysis, QueryCategory
from ecochat.utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================

TECHNICAL_TERMS: tuple[str, ...] = (
    "algorithm",
    "function",
    "database",
    "api",
    "server",
    "quantum",
    "neural",
    "blockchain",
    "compiler",
    "framework",
)

# Priority order matters: first match wins
CATEGORY_PATTERNS: tuple[tuple[QueryCategory, re.Pattern[str]], ...] = (
    (
        QueryCategory.MATHEMATICAL,
        re.compile(
            r"\b(?:math\w*|calculat\w*|compute[sd]?|solv(?:e|es|ed|ing)|equations?)\b"
        ),
    ),
    (
        QueryCategory.PROGRAMMING,
        re.compile(r"\b(?:code[sd]?|coding|program\w*|functions?|algorithms?)\b"),
    ),
    (
        QueryCategory.EXPLANATORY,
        re.compile(r"\b(?:explain\w*|what|how|why)\b"),
    ),
    (
        QueryCategory.ANALYTICAL,
        re.compile(r"\b(?:analy[sz]\w*|compar\w*|evaluat\w*)\b"),
    ),
)

SPECIAL_CHAR_PATTERN = re.compile(r"[^A-Za-z0-9\s]")


@dataclass(frozen=True)
class AnalyzerConfig:
    """Normalisers and weights for the complexity score."""

    length_normalizer: int = 200
    word_normalizer: int = 50
    special_normalizer: int = 10
    technical_normalizer: int = 5

    length_weight: float = 0.3
    word_weight: float = 0.3
    special_weight: float = 0.2
    technical_weight: float = 0.2


# =============================================================================
# Analyzer
# =============================================================================


class QueryAnalyzer:
    """
    Pure, stateless query analyzer.

    Any string is accepted; the empty string yields complexity 0.0 and
    category ``general``.

    Example:
        analyzer = QueryAnalyzer()
        analysis = analyzer.analyze("Explain how quantum computers work")
        print(analysis.category, analysis.complexity)
    """

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        technical_terms: tuple[str, ...] = TECHNICAL_TERMS,
    ):
        self._config = config or AnalyzerConfig()
        self._technical_terms = tuple(term.lower() for term in technical_terms)

    @property
    def config(self) -> AnalyzerConfig:
        """Analyzer configuration."""
        return self._config

    def analyze(self, query: str) -> QueryAnalysis:
        """
        Analyze a query.

        Args:
            query: Raw query text

        Returns:
            QueryAnalysis with complexity in [0, 1] and a category
        """
        complexity = self.score_complexity(query)
        category = self.categorize(query)

        logger.debug(
            "Query analyzed",
            query_length=len(query),
            complexity=round(complexity, 4),
            category=category.value,
        )

        return QueryAnalysis(complexity=complexity, category=category)

    def score_complexity(self, query: str) -> float:
        """Weighted sum of the four clamped signals."""
        cfg = self._config

        length_score = min(len(query) / cfg.length_normalizer, 1.0) * cfg.length_weight
        word_score = min(self.count_words(query) / cfg.word_normalizer, 1.0) * cfg.word_weight
        special_score = (
            min(self.count_special_chars(query) / cfg.special_normalizer, 1.0)
            * cfg.special_weight
        )
        technical_score = (
            min(self.count_technical_terms(query) / cfg.technical_normalizer, 1.0)
            * cfg.technical_weight
        )

        total = length_score + word_score + special_score + technical_score
        return max(0.0, min(total, 1.0))

    def categorize(self, query: str) -> QueryCategory:
        """Return the first category whose pattern matches."""
        query_lower = query.lower()
        for category, pattern in CATEGORY_PATTERNS:
            if pattern.search(query_lower):
                return category
        return QueryCategory.GENERAL

    @staticmethod
    def count_words(query: str) -> int:
        """Whitespace-separated word count."""
        return len(query.split())

    @staticmethod
    def count_special_chars(query: str) -> int:
        """Characters outside ASCII letters, digits and whitespace."""
        return len(SPECIAL_CHAR_PATTERN.findall(query))

    def count_technical_terms(self, query: str) -> int:
        """Number of distinct vocabulary terms present (substring match)."""
        query_lower = query.lower()
        return sum(1 for term in self._technical_terms if term in query_lower)

    def __repr__(self) -> str:
        return f"QueryAnalyzer(terms={len(self._technical_terms)})"


# =============================================================================
# Convenience Functions
# =============================================================================

_default_analyzer = QueryAnalyzer()


def analyze_query(query: str) -> QueryAnalysis:
    """Analyze a query with the default analyzer."""
    return _default_analyzer.analyze(query)
