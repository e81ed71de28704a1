#!/usr/bin/env python
"""
Basic EcoChat Usage Example.

This example demonstrates the fundamental usage patterns of EcoChat:
- Estimating savings without an API key
- Inspecting the provider ranking
- Chatting with progress updates
- Using the context manager pattern

Prerequisites:
    - Install ecochat: pip install -e .
    - Set DEEPSEEK_API_KEY for the chat example (estimation needs no key)
    - Optionally set CLIMATIQ_API_KEY for data-center footprints

Run:
    python examples/01_basic_usage.py
"""

import asyncio
import os

from ecochat import EcoChat

SAMPLE_QUERIES = [
    "Explain how quantum computers work",
    "Write a Python function that merges two sorted lists",
    "Solve the equation 3x + 7 = 22",
    "Compare solar and wind power for a small town",
    "Hello!",
]


# =============================================================================
# Example Functions
# =============================================================================


def estimation_example() -> None:
    """Score sample queries and print the chosen provider and savings."""
    print("\n" + "=" * 60)
    print("Estimation Example")
    print("=" * 60)

    eco = EcoChat()

    for query in SAMPLE_QUERIES:
        analysis, estimate = eco.estimate(query)
        print(f"\nQuery: {query}")
        print(f"  Category:   {analysis.category.value}")
        print(f"  Complexity: {analysis.complexity:.3f}")
        print(f"  Provider:   {estimate.provider.name} ({estimate.provider.region})")
        print(f"  Saved:      {estimate.energy_saved:.3f} Wh, "
              f"{estimate.co2_saved:.3f} g CO2, {estimate.water_saved:.3f} ml water")


def ranking_example() -> None:
    """Show the full provider ranking for one query."""
    print("\n" + "=" * 60)
    print("Ranking Example")
    print("=" * 60)

    eco = EcoChat()
    analysis = eco.analyzer.analyze(SAMPLE_QUERIES[0])

    for position, score in enumerate(eco.selector.rank(analysis), 1):
        print(
            f"  {position}. {score.provider.name:<10} total={score.total_score:.4f} "
            f"(efficiency={score.efficiency_score:.2f}, carbon={score.carbon_score:.2f}, "
            f"water={score.water_score:.2f})"
        )


async def chat_example() -> None:
    """Answer a query and report progress stages."""
    print("\n" + "=" * 60)
    print("Chat Example")
    print("=" * 60)

    async def on_progress(stage: str, fraction: float) -> None:
        print(f"  [{fraction:>4.0%}] {stage}")

    async with EcoChat() as eco:
        result = await eco.chat(SAMPLE_QUERIES[0], progress_callback=on_progress)

    print(f"\nAnswer ({result.model}):\n{result.answer[:300]}")
    print(f"\nProvider: {result.estimate.provider.name}")
    print(f"CO2 saved: {result.estimate.co2_saved:.4f} g")
    if result.footprint:
        print(f"Data-center footprint: {result.footprint.co2e_kg:.6f} kg CO2e "
              f"({result.footprint.source})")
    print(f"Completed in {result.execution_time:.2f}s")


# =============================================================================
# Main
# =============================================================================


async def main() -> None:
    estimation_example()
    ranking_example()

    if os.getenv("DEEPSEEK_API_KEY") or os.getenv("OPENAI_API_KEY"):
        await chat_example()
    else:
        print("\nSet DEEPSEEK_API_KEY to run the chat example.")


if __name__ == "__main__":
    asyncio.run(main())
