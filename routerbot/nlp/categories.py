"""Keyword-based escalation categories (urgent, media, audit)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence

from routerbot.config.settings import Settings


class Category(str, Enum):
    """Operator-defined escalation categories."""

    URGENT = "urgent"
    MEDIA = "media"
    AUDIT = "audit"
    NONE = "none"


class Priority(str, Enum):
    NORMAL = "normal"
    MEDIUM = "medium"
    HIGH = "high"


DEFAULT_WEIGHTS: dict[Category, float] = {
    Category.URGENT: 0.3,
    Category.MEDIA: 0.25,
    Category.AUDIT: 0.25,
}

DISTRESS_WORDS = (
    "help",
    "problem",
    "error",
    "issue",
    "trouble",
    "broken",
    "down",
    "not working",
    "failed",
    "crash",
    "bug",
    "outage",
)
DISTRESS_WEIGHT = 0.1
DISTRESS_FORWARD_THRESHOLD = 0.5

_PHONE_RE = re.compile(r"\+\d{1,3}\s?\d{6,14}")
_EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_HANDLE_RE = re.compile(r"(?<![\w.])@[a-zA-Z0-9_]+")


@dataclass(slots=True)
class CategoryMatch:
    """Keywords of one category found in a message."""

    category: Category
    matched_keywords: list[str]
    confidence_score: float


@dataclass(slots=True)
class CategoryAnalysis:
    """Aggregate escalation verdict for a message.

    ``confidence`` is the additive sum of every category and distress hit and
    is intentionally not capped at 1.0; only threshold crossings matter.
    """

    matches: list[CategoryMatch] = field(default_factory=list)
    distress_words: list[str] = field(default_factory=list)
    confidence: float = 0.0
    priority: Priority = Priority.NORMAL
    should_forward: bool = False

    @property
    def categories(self) -> list[Category]:
        return [match.category for match in self.matches]

    @property
    def primary(self) -> Category:
        """Category used to label a forward; urgent wins over media and audit."""

        return self.matches[0].category if self.matches else Category.NONE

    def has(self, category: Category) -> bool:
        return category in self.categories


@dataclass(slots=True)
class ContactInfo:
    phone_numbers: list[str]
    emails: list[str]
    handles: list[str]

    def __bool__(self) -> bool:
        return bool(self.phone_numbers or self.emails or self.handles)


class CategoryClassifier:
    """Flags messages that belong to the urgent, media or audit categories."""

    def __init__(
        self,
        keywords: Mapping[Category, Sequence[str]],
        weights: Mapping[Category, float] | None = None,
    ) -> None:
        self._keywords = {
            category: [keyword.lower() for keyword in words if keyword]
            for category, words in keywords.items()
            if category is not Category.NONE
        }
        self._weights = dict(weights or DEFAULT_WEIGHTS)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CategoryClassifier":
        return cls(
            {
                Category.URGENT: settings.urgent_keywords,
                Category.MEDIA: settings.media_keywords,
                Category.AUDIT: settings.audit_keywords,
            },
        )

    def classify(self, text: str) -> list[CategoryMatch]:
        """Return one match per category with at least one keyword present."""

        lower = (text or "").lower()
        matches: list[CategoryMatch] = []
        for category, keywords in self._keywords.items():
            found = [keyword for keyword in keywords if keyword in lower]
            if found:
                weight = self._weights.get(category, 0.25)
                matches.append(
                    CategoryMatch(
                        category=category,
                        matched_keywords=found,
                        confidence_score=len(found) * weight,
                    ),
                )
        return matches

    def analyze(self, text: str) -> CategoryAnalysis:
        """Classify ``text`` and decide priority and whether to forward it."""

        matches = self.classify(text)
        lower = (text or "").lower()
        distress = [word for word in DISTRESS_WORDS if word in lower]
        distress_score = len(distress) * DISTRESS_WEIGHT
        confidence = sum(match.confidence_score for match in matches) + distress_score

        if matches:
            priority, forward = Priority.HIGH, True
        elif distress_score > DISTRESS_FORWARD_THRESHOLD:
            priority, forward = Priority.MEDIUM, True
        else:
            priority, forward = Priority.NORMAL, False

        return CategoryAnalysis(
            matches=matches,
            distress_words=distress,
            confidence=confidence,
            priority=priority,
            should_forward=forward,
        )


def extract_contacts(text: str) -> ContactInfo:
    """Pull phone numbers, emails and @handles out of a message."""

    text = text or ""
    emails = _EMAIL_RE.findall(text)
    return ContactInfo(
        phone_numbers=_PHONE_RE.findall(text),
        emails=emails,
        handles=_HANDLE_RE.findall(text),
    )
