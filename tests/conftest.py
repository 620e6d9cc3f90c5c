"""Shared fixtures for the test suite."""

from __future__ import annotations

import random

import pytest

from routerbot.config.settings import Settings
from routerbot.nlp import CategoryClassifier, FAQEntry, IntentClassifier, KnowledgeStore, PriceQueryDetector


@pytest.fixture
def settings() -> Settings:
    return Settings(cache_ttl=300.0, request_timeout=5.0)


@pytest.fixture
def defi_entry() -> FAQEntry:
    return FAQEntry(
        id="defi_explanation",
        question="What is DeFi?",
        answer="DeFi is decentralized finance built on Aave and Uniswap.",
        keywords=["defi", "decentralized finance"],
    )


@pytest.fixture
def store(defi_entry: FAQEntry) -> KnowledgeStore:
    return KnowledgeStore(
        [
            defi_entry,
            FAQEntry(
                id="wallet_security",
                question="How do I secure my crypto wallet?",
                answer="Use a hardware wallet and never share your seed phrase.",
                keywords=["seed phrase", "hardware"],
            ),
        ],
        ["Sorry, I did not get that.", "Could you rephrase?"],
        {"dex": ["Uniswap", "Sushi"], "lending": ["Aave"]},
        rng=random.Random(7),
    )


@pytest.fixture
def classifier(store: KnowledgeStore, settings: Settings) -> IntentClassifier:
    return IntentClassifier(store, CategoryClassifier.from_settings(settings), PriceQueryDetector())
