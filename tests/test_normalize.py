"""Tests for text normalisation and keyword extraction."""

import pytest

from routerbot.nlp.normalize import STOP_WORDS, derive_keywords, extract_keywords, normalize_text
from routerbot.nlp.similarity import jaro_winkler


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("What is DeFi?", "what is defi"),
        ("  Hello,   WORLD!!  ", "hello world"),
        ("snake_case-and.dots", "snake case and dots"),
        ("tabs\tand\nnewlines", "tabs and newlines"),
        ("?!...", ""),
        ("", ""),
        ("   ", ""),
    ],
)
def test_normalize_text(raw: str, expected: str) -> None:
    assert normalize_text(raw) == expected


@pytest.mark.parametrize("raw", ["What is DeFi?", "$BTC price!!", "  a  b  ", "Ünïcode — text", "x_y_z", ""])
def test_normalize_is_idempotent(raw: str) -> None:
    once = normalize_text(raw)

    assert normalize_text(once) == once


def test_extract_keywords_drops_stop_words_and_short_words() -> None:
    keywords = extract_keywords("How do I revoke token approvals on my wallet?")

    assert keywords == ["revoke", "token", "approvals", "wallet"]
    assert not STOP_WORDS.intersection(keywords)


def test_extract_keywords_keeps_first_five_unique() -> None:
    keywords = extract_keywords("alpha beta alpha gamma delta epsilon zeta eta")

    assert keywords == ["alpha", "beta", "gamma", "delta", "epsilon"]


def test_jaro_winkler_bounds() -> None:
    assert jaro_winkler("what is defi", "what is defi") == 1.0
    assert jaro_winkler("", "") == 1.0
    assert jaro_winkler("", "defi") == 0.0
    assert 0.9 < jaro_winkler("what are gas fees", "what are gas feez") < 1.0


@pytest.mark.parametrize(
    ("question", "expected"),
    [
        ("How do I revoke token approvals?", ["revoke", "token", "approvals"]),
        ("Q?", ["q"]),
        ("Is it ok?", ["it", "ok"]),
        ("Is it?", ["it"]),
        ("Who is?", ["who", "is"]),
        ("??", ["??"]),
        ("", []),
    ],
)
def test_derive_keywords_never_empty_for_real_questions(question: str, expected: list[str]) -> None:
    assert derive_keywords(question) == expected
