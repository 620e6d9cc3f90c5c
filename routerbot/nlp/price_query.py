"""Detection of "<symbol> price" style questions and ticker extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

DEFAULT_TICKERS = (
    "btc", "eth", "usdc", "usdt", "dai", "aave", "uni", "sushi", "matic", "link",
    "sol", "ada", "dot", "doge", "xrp", "bnb", "avax", "ltc", "arb", "op",
)

_WORD = r"(?!price\b)[a-z0-9]+"
_PRICE_FIRST_RE = re.compile(rf"^price\s+({_WORD})$", re.IGNORECASE)
_PRICE_LAST_RE = re.compile(rf"^({_WORD})\s+price$", re.IGNORECASE)
_DOLLAR_RE = re.compile(rf"^\$({_WORD})$", re.IGNORECASE)


@dataclass(slots=True)
class PriceQuery:
    raw_text: str
    extracted_symbol: str
    is_valid: bool


class PriceQueryDetector:
    """Recognises price questions by their textual shape.

    Unknown tickers are accepted by the ``price X``, ``X price`` and ``$X``
    shapes; only a bare ticker must be one of ``known_tickers``.
    """

    def __init__(self, known_tickers: Iterable[str] = DEFAULT_TICKERS) -> None:
        tickers = sorted({ticker.lower() for ticker in known_tickers if ticker})
        alternatives = "|".join(re.escape(ticker) for ticker in tickers) or r"(?!)"
        self._bare_re = re.compile(rf"^({alternatives})(?:\s+price)?$", re.IGNORECASE)

    def is_price_query(self, text: str) -> bool:
        candidate = (text or "").strip()
        if not candidate:
            return False
        return any(
            pattern.match(candidate)
            for pattern in (self._bare_re, _PRICE_FIRST_RE, _PRICE_LAST_RE, _DOLLAR_RE)
        )

    def extract_symbol(self, text: str) -> str:
        """Strip a confirmed price query down to its lower-cased ticker."""

        candidate = (text or "").strip()
        words = candidate.split()
        if not words:
            return ""
        if len(words) >= 2 and words[0].lower() == "price":
            return words[1].lower()
        if len(words) >= 2 and words[-1].lower() == "price":
            return words[0].lower()
        if candidate.startswith("$"):
            return words[0][1:].lower()
        return words[0].lower()

    def parse(self, text: str) -> PriceQuery:
        if not self.is_price_query(text):
            return PriceQuery(raw_text=text, extracted_symbol="", is_valid=False)
        return PriceQuery(raw_text=text, extracted_symbol=self.extract_symbol(text), is_valid=True)
