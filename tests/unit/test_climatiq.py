"""
Unit tests for the Climatiq footprint client.

Requests go through ``httpx.MockTransport`` so no network access is needed.
"""

import json

import httpx
import pytest

from ecochat.carbon.climatiq import (
    ACTIVITY_ID,
    DEFAULT_FALLBACK_INTENSITY,
    ClimatiqClient,
    fallback_footprint,
    to_climatiq_region,
)
from ecochat.core.config import ClimatiqConfig
from ecochat.utils.errors import CarbonEstimationError

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def climatiq_config() -> ClimatiqConfig:
    return ClimatiqConfig(api_key="cq-test-key", base_url="https://climatiq.test")


def json_transport(status: int, payload: dict, seen: list | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=payload)

    return httpx.MockTransport(handler)


# =============================================================================
# Region Mapping
# =============================================================================


class TestRegions:
    """Test catalog region to Climatiq code mapping."""

    @pytest.mark.parametrize(
        "region,code",
        [
            ("france", "fr"),
            ("usa-east", "us"),
            ("usa-west", "us-west"),
            ("europe", "eu"),
            ("Europe", "eu"),
            ("fr", "fr"),
        ],
    )
    def test_to_climatiq_region(self, region: str, code: str) -> None:
        assert to_climatiq_region(region) == code

    def test_fallback_footprint(self) -> None:
        footprint = fallback_footprint("france", 2.0)

        assert footprint.co2e_kg == pytest.approx(0.17)
        assert footprint.region == "fr"
        assert footprint.energy_kwh == 2.0
        assert footprint.source == "fallback"

    def test_fallback_unknown_region(self) -> None:
        footprint = fallback_footprint("mars", 1.0)
        assert footprint.co2e_kg == pytest.approx(DEFAULT_FALLBACK_INTENSITY)


# =============================================================================
# Client Tests
# =============================================================================


class TestClimatiqClient:
    """Test the estimate lookup."""

    @pytest.mark.asyncio
    async def test_successful_lookup(self, climatiq_config: ClimatiqConfig) -> None:
        seen: list[httpx.Request] = []
        transport = json_transport(200, {"co2e": 0.0042, "co2e_unit": "kg"}, seen)

        async with ClimatiqClient(climatiq_config, transport=transport) as client:
            footprint = await client.estimate_datacenter_impact("europe", 0.25)

        assert footprint.co2e_kg == pytest.approx(0.0042)
        assert footprint.region == "eu"
        assert footprint.source == "climatiq"

        request = seen[0]
        assert request.url == "https://climatiq.test/estimate"
        assert request.headers["Authorization"] == "Bearer cq-test-key"
        body = json.loads(request.content)
        assert body["emission_factor"]["activity_id"] == ACTIVITY_ID
        assert body["emission_factor"]["region"] == "eu"
        assert body["parameters"] == {"energy": 0.25, "energy_unit": "kWh"}

    @pytest.mark.asyncio
    async def test_http_error_falls_back(self, climatiq_config: ClimatiqConfig) -> None:
        client = ClimatiqClient(climatiq_config, transport=json_transport(500, {"error": "boom"}))

        footprint = await client.estimate_datacenter_impact("usa-east", 1.0)
        await client.close()

        assert footprint.source == "fallback"
        assert footprint.co2e_kg == pytest.approx(0.385)

    @pytest.mark.asyncio
    async def test_malformed_body_falls_back(self, climatiq_config: ClimatiqConfig) -> None:
        client = ClimatiqClient(climatiq_config, transport=json_transport(200, {"unexpected": 1}))

        footprint = await client.estimate_datacenter_impact("france", 1.0)
        await client.close()

        assert footprint.source == "fallback"

    @pytest.mark.asyncio
    async def test_http_error_without_fallback(self, climatiq_config: ClimatiqConfig) -> None:
        client = ClimatiqClient(
            climatiq_config,
            transport=json_transport(503, {}),
            fallback=False,
        )

        with pytest.raises(CarbonEstimationError) as exc_info:
            await client.estimate_datacenter_impact("france", 1.0)
        await client.close()

        assert exc_info.value.service == "climatiq"
        assert exc_info.value.details == {"region": "fr"}

    @pytest.mark.asyncio
    async def test_no_key_uses_fallback_without_request(self) -> None:
        seen: list[httpx.Request] = []
        client = ClimatiqClient(ClimatiqConfig(), transport=json_transport(200, {"co2e": 9}, seen))

        footprint = await client.estimate_datacenter_impact("france", 1.0)

        assert footprint.source == "fallback"
        assert seen == []

    @pytest.mark.asyncio
    async def test_no_key_without_fallback(self) -> None:
        client = ClimatiqClient(ClimatiqConfig(), fallback=False)

        with pytest.raises(CarbonEstimationError, match="No Climatiq API key"):
            await client.estimate_datacenter_impact("france", 1.0)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, climatiq_config: ClimatiqConfig) -> None:
        client = ClimatiqClient(climatiq_config, transport=json_transport(200, {"co2e": 1}))
        await client.estimate_datacenter_impact("france", 1.0)

        await client.close()
        await client.close()
