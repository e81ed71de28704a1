"""
Token estimation utilities.

Token counts in EcoChat are a length heuristic used to scale resource
estimates, not a model tokenizer.
"""

from __future__ import annotations

import math

# Average characters per token for English text
CHARS_PER_TOKEN = 4

# Resource constants are expressed per this many tokens
TOKENS_PER_UNIT = 1000


def estimate_tokens(text: str) -> int:
    """
    Estimate the token count of a piece of text.

    Args:
        text: Text to estimate

    Returns:
        ``ceil(len(text) / 4)``; 0 for empty text

    Example:
        >>> estimate_tokens("abcd")
        1
        >>> estimate_tokens("a" * 400)
        100
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def token_units(token_count: int) -> float:
    """Express a token count in units of 1000 tokens."""
    return token_count / TOKENS_PER_UNIT
