"""
Climatiq data-center footprint lookup.

Converts the energy of an answer into CO2e for the serving region using the
Climatiq estimate endpoint, with fixed grid factors when the service cannot
be reached.
"""

from __future__ import annotations

from typing import Any

import httpx

from ecochat.core.config import ClimatiqConfig
from ecochat.core.types import CarbonFootprint
from ecochat.utils.errors import CarbonEstimationError
from ecochat.utils.logging import ServiceLogger

logger = ServiceLogger("climatiq")

ACTIVITY_ID = "cloud_computing-processing-avg_cpu"

# Catalog region -> Climatiq region code
CLIMATIQ_REGIONS: dict[str, str] = {
    "france": "fr",
    "usa-east": "us",
    "usa-west": "us-west",
    "europe": "eu",
}

# kg CO2e per kWh
FALLBACK_INTENSITY: dict[str, float] = {
    "fr": 0.085,
    "us": 0.385,
    "us-west": 0.275,
    "eu": 0.231,
}
DEFAULT_FALLBACK_INTENSITY = 0.275


def to_climatiq_region(region: str) -> str:
    """Map a catalog region name to a Climatiq region code."""
    key = region.lower()
    return CLIMATIQ_REGIONS.get(key, key)


def fallback_footprint(region: str, energy_kwh: float) -> CarbonFootprint:
    """Estimate CO2e from fixed grid factors."""
    code = to_climatiq_region(region)
    intensity = FALLBACK_INTENSITY.get(code, DEFAULT_FALLBACK_INTENSITY)
    return CarbonFootprint(
        co2e_kg=energy_kwh * intensity,
        region=code,
        energy_kwh=energy_kwh,
        source="fallback",
    )


class ClimatiqClient:
    """
    Async client for the Climatiq estimate API.

    Example:
        async with ClimatiqClient(ClimatiqConfig(api_key="...")) as client:
            footprint = await client.estimate_datacenter_impact("france", 0.002)
            print(footprint.co2e_kg)
    """

    def __init__(
        self,
        config: ClimatiqConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        fallback: bool = True,
    ):
        """
        Initialize the client.

        Args:
            config: Climatiq configuration (API key, base URL, timeout)
            transport: Optional httpx transport, mainly for tests
            fallback: Use fixed grid factors when the API call fails
        """
        self.config = config or ClimatiqConfig()
        self.fallback = fallback
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=httpx.Timeout(self.config.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> ClimatiqClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _build_payload(self, code: str, energy_kwh: float) -> dict[str, Any]:
        return {
            "emission_factor": {
                "activity_id": ACTIVITY_ID,
                "source": "climatiq",
                "region": code,
            },
            "parameters": {
                "energy": energy_kwh,
                "energy_unit": "kWh",
            },
        }

    async def estimate_datacenter_impact(
        self,
        region: str,
        energy_kwh: float,
    ) -> CarbonFootprint:
        """
        Estimate the data-center CO2e for an amount of energy.

        Args:
            region: Catalog region ("france") or Climatiq code ("fr")
            energy_kwh: Energy in kWh

        Returns:
            CarbonFootprint, sourced from Climatiq or from fallback factors

        Raises:
            CarbonEstimationError: If the lookup fails and fallback is disabled
        """
        code = to_climatiq_region(region)

        if not self.config.enabled:
            if not self.fallback:
                raise CarbonEstimationError("climatiq", "No Climatiq API key configured")
            return fallback_footprint(code, energy_kwh)

        client = await self._get_client()
        try:
            response = await client.post(
                "/estimate",
                json=self._build_payload(code, energy_kwh),
                headers={"Authorization": f"Bearer {self.config.api_key}"},
            )
            response.raise_for_status()
            co2e = float(response.json()["co2e"])

        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            if not self.fallback:
                raise CarbonEstimationError(
                    "climatiq",
                    f"Footprint lookup failed: {e}",
                    details={"region": code},
                    cause=e,
                ) from e
            logger.warning(
                "Climatiq lookup failed, using fallback intensity",
                region=code,
                error=str(e),
            )
            return fallback_footprint(code, energy_kwh)

        logger.debug("Climatiq estimate", region=code, energy_kwh=energy_kwh, co2e_kg=co2e)
        return CarbonFootprint(
            co2e_kg=co2e,
            region=code,
            energy_kwh=energy_kwh,
            source="climatiq",
        )
