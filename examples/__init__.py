"""
EcoChat Examples.

Examples:
    01_basic_usage.py      - Estimation, ranking and chat

Running Examples:
    python examples/01_basic_usage.py
"""
