"""Clients for third-party Web3 data providers."""

from .web3_client import (
    GasPrices,
    NFTHoldings,
    NFTItem,
    PriceQuote,
    TokenBalance,
    TrendingToken,
    WalletBalance,
    Web3Client,
    Web3RequestError,
    resolve_coin_id,
)

__all__ = [
    "GasPrices",
    "NFTHoldings",
    "NFTItem",
    "PriceQuote",
    "TokenBalance",
    "TrendingToken",
    "WalletBalance",
    "Web3Client",
    "Web3RequestError",
    "resolve_coin_id",
]
