"""Reachability report for the CoinGecko, Etherscan and Moralis providers."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

from routerbot.api import Web3Client, Web3RequestError
from routerbot.config.settings import Settings, get_settings

# Any well-formed address works; the balance itself is ignored.
ZERO_ADDRESS = "0x" + "0" * 40


@dataclass(slots=True)
class ProviderStatus:
    """Outcome of one provider check.

    Providers without an API key are reported as not configured and do not
    count as failures.
    """

    provider: str
    configured: bool
    reachable: bool
    detail: str
    status_code: int | None = None
    retryable: bool = False

    @property
    def ok(self) -> bool:
        return self.reachable or not self.configured


async def _check(provider: str, call: Callable[[], Awaitable[Any]]) -> ProviderStatus:
    try:
        result = await call()
    except Web3RequestError as exc:
        return ProviderStatus(
            provider=provider,
            configured=True,
            reachable=False,
            detail=str(exc),
            status_code=exc.status_code,
            retryable=exc.retryable,
        )
    if result is False:
        return ProviderStatus(provider=provider, configured=True, reachable=False, detail="Empty response.")
    return ProviderStatus(provider=provider, configured=True, reachable=True, detail="Reachable.")


def _not_configured(provider: str, variable: str, effect: str) -> ProviderStatus:
    return ProviderStatus(
        provider=provider,
        configured=False,
        reachable=False,
        detail=f"{variable} is not set; {effect}.",
    )


async def check_providers(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[ProviderStatus]:
    """Check every provider once, concurrently, with a fresh client."""

    settings = settings or get_settings()
    client = Web3Client(settings, transport=transport)
    pending = [_check("CoinGecko", client.ping)]
    skipped: list[ProviderStatus] = []
    if settings.etherscan_api_key:
        pending.append(_check("Etherscan", client.get_gas_prices))
    else:
        skipped.append(_not_configured("Etherscan", "ETHERSCAN_API_KEY", "gas prices are estimated"))
    if settings.moralis_api_key:
        pending.append(_check("Moralis", lambda: client.get_wallet_balance(ZERO_ADDRESS)))
    else:
        skipped.append(_not_configured("Moralis", "MORALIS_API_KEY", "wallet queries are disabled"))
    try:
        return [*await asyncio.gather(*pending), *skipped]
    finally:
        await client.close()
