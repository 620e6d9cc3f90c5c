"""Tests for provider reachability checks."""

from __future__ import annotations

from dataclasses import replace

import httpx
import pytest

from routerbot.config.settings import Settings
from routerbot.integrations import ZERO_ADDRESS, ProviderStatus, check_providers


def by_name(statuses: list[ProviderStatus]) -> dict[str, ProviderStatus]:
    return {status.provider: status for status in statuses}


@pytest.mark.asyncio
async def test_unconfigured_providers_are_skipped(settings: Settings) -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        return httpx.Response(200, json={"gecko_says": "(V3) To the Moon!"})

    statuses = by_name(await check_providers(settings, transport=httpx.MockTransport(handler)))

    assert statuses["CoinGecko"].reachable
    assert not statuses["Etherscan"].configured
    assert "ETHERSCAN_API_KEY" in statuses["Etherscan"].detail
    assert not statuses["Moralis"].configured
    assert all(status.ok for status in statuses.values())
    assert requested == ["/api/v3/ping"]


@pytest.mark.asyncio
async def test_failures_carry_status_and_retryability(settings: Settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "api.etherscan.io":
            return httpx.Response(503)
        if request.url.path.endswith(f"/{ZERO_ADDRESS}/balance"):
            assert request.headers["X-API-Key"] == "moralis-key"
            return httpx.Response(401)
        return httpx.Response(200, json={"gecko_says": "ok"})

    configured = replace(settings, etherscan_api_key="etherscan-key", moralis_api_key="moralis-key")
    statuses = by_name(await check_providers(configured, transport=httpx.MockTransport(handler)))

    etherscan = statuses["Etherscan"]
    assert (etherscan.reachable, etherscan.status_code, etherscan.retryable) == (False, 503, True)
    moralis = statuses["Moralis"]
    assert (moralis.reachable, moralis.status_code, moralis.retryable) == (False, 401, False)
    assert "credentials" in moralis.detail
    assert not moralis.ok
    assert statuses["CoinGecko"].ok


@pytest.mark.asyncio
async def test_empty_ping_is_unreachable(settings: Settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))

    statuses = await check_providers(settings, transport=transport)

    coingecko = by_name(statuses)["CoinGecko"]
    assert not coingecko.reachable
    assert coingecko.status_code is None
