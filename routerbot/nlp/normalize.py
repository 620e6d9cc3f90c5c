"""Canonical comparison form for free-form user text."""

from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^\w\s]|_")
_WHITESPACE_RE = re.compile(r"\s+")

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but",
        "in", "on", "at", "to", "for", "of", "with", "by", "from", "about", "into",
        "is", "are", "was", "were", "be", "been", "being", "am",
        "have", "has", "had", "do", "does", "did",
        "will", "would", "could", "should", "may", "might", "can", "must", "shall",
        "what", "how", "why", "when", "where", "who", "whom", "which",
        "that", "this", "these", "those",
    }
)


def normalize_text(text: str) -> str:
    """Lower-case, replace punctuation with spaces and collapse whitespace."""

    if not text:
        return ""
    cleaned = _NON_WORD_RE.sub(" ", text.lower())
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def is_stop_word(word: str) -> bool:
    return word in STOP_WORDS


def extract_keywords(text: str, limit: int = 5) -> list[str]:
    """Return up to ``limit`` unique content words of ``text`` in original order."""

    keywords: list[str] = []
    for word in normalize_text(text).split():
        if len(word) <= 2 or is_stop_word(word) or word in keywords:
            continue
        keywords.append(word)
        if len(keywords) >= limit:
            break
    return keywords


def derive_keywords(text: str, limit: int = 5) -> list[str]:
    """Keywords for a new FAQ entry; never empty for non-blank ``text``.

    Short questions such as "Q?" have no word longer than two characters, so
    the short non-stop words are used instead, then the raw words, then the
    stripped text itself.
    """

    keywords = extract_keywords(text, limit)
    if keywords:
        return keywords
    words = list(dict.fromkeys(normalize_text(text).split()))
    content = [word for word in words if not is_stop_word(word)]
    if words:
        return (content or words)[:limit]
    stripped = (text or "").strip().lower()
    return [stripped] if stripped else []
