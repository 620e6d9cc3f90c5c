"""Routing decision for a single inbound text message."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from routerbot.nlp.categories import CategoryAnalysis, CategoryClassifier, Priority
from routerbot.nlp.knowledge import KnowledgeStore, MatchResult
from routerbot.nlp.price_query import PriceQueryDetector


class Action(str, Enum):
    PRICE = "price"
    FORWARD = "forward"
    ANSWER = "answer"
    FALLBACK = "fallback"


@dataclass(slots=True)
class Decision:
    """Represents how a message should be handled.

    ``response`` is filled for answers (the FAQ answer) and fallbacks (a
    canned reply). A fallback may still carry ``should_forward`` when the text
    reads like a problem report.
    """

    action: Action
    text: str
    symbol: str | None = None
    match: MatchResult | None = None
    analysis: CategoryAnalysis | None = None
    response: str | None = None

    @property
    def should_forward(self) -> bool:
        if self.action not in (Action.FORWARD, Action.FALLBACK):
            return False
        return bool(self.analysis and self.analysis.should_forward)

    @property
    def priority(self) -> Priority:
        if not self.should_forward:
            return Priority.NORMAL
        return self.analysis.priority


class IntentClassifier:
    """Combines price detection, escalation categories and FAQ matching."""

    def __init__(
        self,
        store: KnowledgeStore,
        categories: CategoryClassifier,
        prices: PriceQueryDetector | None = None,
    ) -> None:
        self._store = store
        self._categories = categories
        self._prices = prices or PriceQueryDetector()

    def classify(self, text: str) -> Decision:
        """Route ``text``: price, then escalation, then FAQ, then fallback."""

        text = text or ""
        if self._prices.is_price_query(text):
            return Decision(action=Action.PRICE, text=text, symbol=self._prices.extract_symbol(text))

        analysis = self._categories.analyze(text)
        if analysis.matches and analysis.should_forward:
            return Decision(action=Action.FORWARD, text=text, analysis=analysis)

        match = self._store.find_best_match(text)
        if match.entry is not None:
            return Decision(
                action=Action.ANSWER,
                text=text,
                match=match,
                analysis=analysis,
                response=match.entry.answer,
            )

        return Decision(
            action=Action.FALLBACK,
            text=text,
            match=match,
            analysis=analysis,
            response=self._store.fallback_response(),
        )
