"""Async wrapper around the CoinGecko, Etherscan and Moralis endpoints."""

from __future__ import annotations

import logging
import re
import time
from collections import OrderedDict
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, Field, ValidationError

from routerbot.config.settings import Settings

logger = logging.getLogger(__name__)

TOKEN_IDS = {
    "eth": "ethereum",
    "btc": "bitcoin",
    "usdc": "usd-coin",
    "usdt": "tether",
    "aave": "aave",
    "uni": "uniswap",
    "sushi": "sushi",
    "matic": "matic-network",
    "link": "chainlink",
    "dai": "dai",
    "sol": "solana",
    "ada": "cardano",
    "dot": "polkadot",
    "doge": "dogecoin",
    "xrp": "ripple",
    "bnb": "binancecoin",
    "avax": "avalanche-2",
    "ltc": "litecoin",
    "arb": "arbitrum",
    "op": "optimism",
}

# Shown when no Etherscan key is configured.
ESTIMATED_GAS = {"safe": 20, "standard": 25, "fast": 30, "fastest": 35}

_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
_WEI_PER_ETH = 10**18


def resolve_coin_id(symbol: str) -> str:
    """Map a ticker to its CoinGecko id; unknown symbols pass through."""

    key = symbol.strip().lower()
    return TOKEN_IDS.get(key, key)


def is_valid_address(address: str) -> bool:
    return bool(_ADDRESS_RE.match(address or ""))


class Web3RequestError(RuntimeError):
    """Raised when a data provider cannot answer; the message is user-facing."""

    def __init__(self, message: str, status_code: int | None = None, *, retryable: bool = False) -> None:
        self.status_code = status_code
        self.retryable = retryable
        super().__init__(message)


class PriceQuote(BaseModel):
    symbol: str
    coin_id: str
    price: float
    change_24h: float | None = None
    market_cap: float | None = None
    volume_24h: float | None = None


class TrendingToken(BaseModel):
    name: str
    symbol: str
    market_cap_rank: int | None = None


class GasPrices(BaseModel):
    safe: float
    standard: float
    fast: float
    fastest: float
    estimated: bool = False


class WalletBalance(BaseModel):
    address: str
    balance_wei: int
    balance_eth: float


class NFTItem(BaseModel):
    name: str
    token_id: str
    contract_address: str


class NFTHoldings(BaseModel):
    address: str
    nfts: list[NFTItem] = Field(default_factory=list)
    demo: bool = False

    @property
    def count(self) -> int:
        return len(self.nfts)


class TokenBalance(BaseModel):
    token_address: str
    name: str
    symbol: str
    balance: float


class _TTLCache:
    """Expiring LRU map for provider responses, bounded to ``maxsize`` keys."""

    def __init__(self, ttl: float, maxsize: int = 1000) -> None:
        self._ttl = ttl
        self._maxsize = maxsize
        self._items: OrderedDict[str, tuple[float, Any]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._items)

    def get(self, key: str) -> Any | None:
        item = self._items.get(key)
        if item is None:
            return None
        expires_at, value = item
        if time.monotonic() >= expires_at:
            del self._items[key]
            return None
        self._items.move_to_end(key)
        return value

    def set(self, key: str, value: Any) -> None:
        if self._ttl <= 0 or self._maxsize <= 0:
            return
        now = time.monotonic()
        self._items.pop(key, None)
        self._purge_expired(now)
        while len(self._items) >= self._maxsize:
            self._items.popitem(last=False)
        self._items[key] = (now + self._ttl, value)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._items.items() if expires_at <= now]
        for key in expired:
            del self._items[key]


class Web3Client:
    """Fetches price, trending, gas, wallet and NFT data with short-lived caching."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._client = httpx.AsyncClient(timeout=settings.request_timeout, transport=transport)
        self._cache = _TTLCache(settings.cache_ttl, settings.cache_max_entries)

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def _get_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as exc:
            raise Web3RequestError(
                "The data provider took too long to respond. Please try again.",
                retryable=True,
            ) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("Provider %s returned %s: %s", url, status, exc.response.text[:200])
            if status == 429:
                message = "Rate limit exceeded. Please try again later."
            elif status in (401, 403):
                message = "The data provider rejected our credentials."
            else:
                message = "The data provider returned an error. Please try again later."
            raise Web3RequestError(message, status_code=status, retryable=status == 429 or status >= 500) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise Web3RequestError("Unable to reach the data provider right now.", retryable=True) from exc

    async def get_price(self, symbol: str) -> PriceQuote:
        """Return the USD price and 24h stats for ``symbol``."""

        coin_id = resolve_coin_id(symbol)
        cache_key = f"price_{coin_id}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        payload = await self._get_json(
            f"{self._settings.coingecko_base_url.rstrip('/')}/simple/price",
            params={
                "ids": coin_id,
                "vs_currencies": "usd",
                "include_24hr_change": "true",
                "include_market_cap": "true",
                "include_24hr_vol": "true",
            },
        )
        data = payload.get(coin_id) if isinstance(payload, Mapping) else None
        if not data or "usd" not in data:
            raise Web3RequestError(
                f"Token {symbol.upper()} not found. Try common symbols like ETH, BTC, USDC.",
                status_code=404,
            )

        try:
            quote = PriceQuote(
                symbol=symbol.upper(),
                coin_id=coin_id,
                price=data["usd"],
                change_24h=data.get("usd_24h_change"),
                market_cap=data.get("usd_market_cap"),
                volume_24h=data.get("usd_24h_vol"),
            )
        except ValidationError as exc:
            raise Web3RequestError(f"No usable price data for {symbol.upper()} right now.") from exc
        self._cache.set(cache_key, quote)
        logger.info("Crypto price fetched: %s - $%s", quote.symbol, quote.price)
        return quote

    async def get_trending(self, limit: int = 5) -> list[TrendingToken]:
        """Return the top trending coins on CoinGecko."""

        cached = self._cache.get("trending")
        if cached is not None:
            return cached[:limit]

        payload = await self._get_json(f"{self._settings.coingecko_base_url.rstrip('/')}/search/trending")
        tokens: list[TrendingToken] = []
        for coin in (payload or {}).get("coins", []):
            item = coin.get("item") or {}
            try:
                tokens.append(
                    TrendingToken(
                        name=item["name"],
                        symbol=str(item["symbol"]).upper(),
                        market_cap_rank=item.get("market_cap_rank"),
                    ),
                )
            except (KeyError, ValidationError):
                logger.warning("Skipping malformed trending entry: %s", item)
        self._cache.set("trending", tokens)
        return tokens[:limit]

    async def get_gas_prices(self) -> GasPrices:
        """Return Ethereum gas prices in gwei, estimated if Etherscan is not configured."""

        if not self._settings.etherscan_api_key:
            logger.info("Using estimated gas prices (Etherscan key not configured)")
            return GasPrices(**ESTIMATED_GAS, estimated=True)

        cached = self._cache.get("gas")
        if cached is not None:
            return cached

        payload = await self._get_json(
            f"{self._settings.etherscan_base_url.rstrip('/')}/api",
            params={"module": "gastracker", "action": "gasoracle", "apikey": self._settings.etherscan_api_key},
        )
        if not isinstance(payload, Mapping) or payload.get("status") != "1":
            raise Web3RequestError("Unable to fetch gas prices. Please try again later.")
        result = payload.get("result") or {}
        try:
            gas = GasPrices(
                safe=float(result["SafeGasPrice"]),
                standard=float(result["ProposeGasPrice"]),
                fast=float(result["FastGasPrice"]),
                fastest=float(result.get("suggestBaseFee") or result["FastGasPrice"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise Web3RequestError("Unable to fetch gas prices. Please try again later.") from exc
        self._cache.set("gas", gas)
        return gas

    async def get_wallet_balance(self, address: str) -> WalletBalance:
        """Return the native ETH balance of ``address``."""

        address = (address or "").strip()
        if not is_valid_address(address):
            raise Web3RequestError("Invalid wallet address format.", status_code=400)
        if not self._settings.moralis_api_key:
            raise Web3RequestError("Wallet queries are disabled on this bot.")

        cache_key = f"balance_{address.lower()}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        payload = await self._get_json(
            f"{self._settings.moralis_base_url.rstrip('/')}/{address}/balance",
            params={"chain": "eth"},
            headers={"X-API-Key": self._settings.moralis_api_key},
        )
        try:
            wei = int((payload or {})["balance"])
        except (KeyError, TypeError, ValueError) as exc:
            raise Web3RequestError("Unable to fetch wallet balance at the moment.") from exc

        balance = WalletBalance(address=address, balance_wei=wei, balance_eth=wei / _WEI_PER_ETH)
        self._cache.set(cache_key, balance)
        return balance

    async def get_nfts(self, address: str, limit: int = 10) -> NFTHoldings:
        """Return up to ``limit`` NFTs held by ``address``; an empty demo result without a Moralis key."""

        address = (address or "").strip()
        if not is_valid_address(address):
            raise Web3RequestError("Invalid wallet address format.", status_code=400)
        if not self._settings.moralis_api_key:
            logger.info("Using demo NFT data for %s (Moralis key not configured)", address)
            return NFTHoldings(address=address, demo=True)

        cache_key = f"nfts_{address.lower()}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        payload = await self._get_json(
            f"{self._settings.moralis_base_url.rstrip('/')}/{address}/nft",
            params={"chain": "eth", "limit": limit},
            headers={"X-API-Key": self._settings.moralis_api_key},
        )
        items = payload.get("result") if isinstance(payload, Mapping) else None
        if not isinstance(items, list):
            raise Web3RequestError("Unable to fetch NFT holdings. Please check the address and try again.")
        holdings = NFTHoldings(
            address=address,
            nfts=[
                NFTItem(
                    name=item.get("name") or "Unnamed NFT",
                    token_id=str(item.get("token_id", "")),
                    contract_address=str(item.get("token_address", "")),
                )
                for item in items
                if isinstance(item, Mapping)
            ],
        )
        self._cache.set(cache_key, holdings)
        logger.info("NFTs fetched: %s - %d NFTs", address, holdings.count)
        return holdings

    async def get_token_balances(self, address: str) -> list[TokenBalance]:
        """Return the non-zero ERC-20 balances of ``address``."""

        address = (address or "").strip()
        if not is_valid_address(address):
            raise Web3RequestError("Invalid wallet address format.", status_code=400)
        if not self._settings.moralis_api_key:
            raise Web3RequestError("Wallet queries are disabled on this bot.")

        cache_key = f"tokens_{address.lower()}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        payload = await self._get_json(
            f"{self._settings.moralis_base_url.rstrip('/')}/{address}/erc20",
            params={"chain": "eth"},
            headers={"X-API-Key": self._settings.moralis_api_key},
        )
        if not isinstance(payload, list):
            raise Web3RequestError("Unable to fetch token balances at the moment.")

        tokens: list[TokenBalance] = []
        for item in payload:
            try:
                amount = int(item["balance"]) / 10 ** int(item.get("decimals") or 0)
                token = TokenBalance(
                    token_address=item["token_address"],
                    name=item.get("name") or "Unknown",
                    symbol=str(item.get("symbol") or "?").upper(),
                    balance=amount,
                )
            except (KeyError, TypeError, ValueError, ValidationError):
                logger.warning("Skipping malformed token balance: %s", item)
                continue
            if token.balance > 0:
                tokens.append(token)
        self._cache.set(cache_key, tokens)
        return tokens

    async def ping(self) -> bool:
        """Return ``True`` if CoinGecko answers its ping endpoint."""

        payload = await self._get_json(f"{self._settings.coingecko_base_url.rstrip('/')}/ping")
        return bool(payload)
