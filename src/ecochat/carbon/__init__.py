"""Data-center carbon footprint lookups."""

from ecochat.carbon.climatiq import (
    CLIMATIQ_REGIONS,
    FALLBACK_INTENSITY,
    ClimatiqClient,
    fallback_footprint,
    to_climatiq_region,
)

__all__ = [
    "CLIMATIQ_REGIONS",
    "FALLBACK_INTENSITY",
    "ClimatiqClient",
    "fallback_footprint",
    "to_climatiq_region",
]
