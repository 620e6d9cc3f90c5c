"""FAQ knowledge store and staged question matching."""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Sequence

from routerbot.nlp.normalize import derive_keywords, normalize_text
from routerbot.nlp.similarity import jaro_winkler
from routerbot.storage import FAQDocument, FAQRecord, FAQRepository, PersistenceError

logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.9
PARTIAL_THRESHOLD = 0.5
SIMILARITY_WEIGHT = 0.7
KEYWORD_WEIGHT = 0.3
DEFAULT_FALLBACK = (
    "Sorry, I couldn't understand your question. Try rephrasing it or use /help to see what I can do."
)


class ValidationError(ValueError):
    """Raised when an FAQ entry is missing its question or answer."""


class MatchType(str, Enum):
    DIRECT = "direct"
    KEYWORD = "keyword"
    FUZZY = "fuzzy"
    PARTIAL = "partial"
    FALLBACK = "fallback"


@dataclass(slots=True)
class FAQEntry:
    """Question/answer pair with the keywords used for matching."""

    id: str
    question: str
    answer: str
    keywords: list[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: FAQRecord) -> "FAQEntry":
        return cls(id=record.id, question=record.question, answer=record.answer, keywords=list(record.keywords))

    def to_record(self) -> FAQRecord:
        return FAQRecord(id=self.id, question=self.question, answer=self.answer, keywords=list(self.keywords))


@dataclass(slots=True)
class MatchResult:
    entry: FAQEntry | None
    confidence: float
    match_type: MatchType

    @property
    def matched(self) -> bool:
        return self.entry is not None


_NO_MATCH = MatchResult(entry=None, confidence=0.0, match_type=MatchType.FALLBACK)


@dataclass(slots=True)
class _Indexed:
    entry: FAQEntry
    question: str
    keywords: list[str]


class KnowledgeStore:
    """Owns the FAQ entries and answers free-text questions against them.

    Matching runs in stages and stops at the first one that clears its
    threshold: direct question equality, keyword overlap, a Jaro-Winkler blend
    and finally a loose word-overlap check. Ties keep the earliest entry.
    """

    def __init__(
        self,
        entries: Iterable[FAQEntry] = (),
        fallback_responses: Sequence[str] = (),
        project_references: Mapping[str, Sequence[str]] | None = None,
        *,
        repository: FAQRepository | None = None,
        rng: random.Random | None = None,
        confidence_threshold: float = CONFIDENCE_THRESHOLD,
        partial_threshold: float = PARTIAL_THRESHOLD,
    ) -> None:
        self._index: list[_Indexed] = []
        self._fallback_responses = list(fallback_responses)
        self._project_references = {
            category: list(names) for category, names in (project_references or {}).items()
        }
        self._repository = repository
        self._rng = rng or random.Random()
        self._confidence_threshold = confidence_threshold
        self._partial_threshold = partial_threshold
        for entry in entries:
            self._index.append(self._build_index(entry))

    @classmethod
    def from_document(
        cls,
        document: FAQDocument,
        *,
        repository: FAQRepository | None = None,
        rng: random.Random | None = None,
    ) -> "KnowledgeStore":
        return cls(
            [FAQEntry.from_record(record) for record in document.faqs],
            document.fallback_responses,
            document.project_references,
            repository=repository,
            rng=rng,
        )

    def to_document(self) -> FAQDocument:
        return FAQDocument(
            faqs=[item.entry.to_record() for item in self._index],
            fallback_responses=list(self._fallback_responses),
            project_references={key: list(value) for key, value in self._project_references.items()},
        )

    @property
    def entries(self) -> list[FAQEntry]:
        return [item.entry for item in self._index]

    def __len__(self) -> int:
        return len(self._index)

    @staticmethod
    def _build_index(entry: FAQEntry) -> _Indexed:
        return _Indexed(
            entry=entry,
            question=normalize_text(entry.question),
            keywords=[normalize_text(keyword) for keyword in entry.keywords],
        )

    @staticmethod
    def _keyword_score(question: str, keywords: Sequence[str]) -> float:
        if not keywords:
            return 0.0
        matched = sum(1 for keyword in keywords if keyword and keyword in question)
        return matched / len(keywords)

    def find_best_match(self, question: str) -> MatchResult:
        """Return the best FAQ match for ``question`` or a fallback result."""

        normalized = normalize_text(question)
        if not normalized:
            return _NO_MATCH

        for item in self._index:
            if item.question == normalized:
                return MatchResult(entry=item.entry, confidence=1.0, match_type=MatchType.DIRECT)

        best: FAQEntry | None = None
        best_score = 0.0
        for item in self._index:
            score = self._keyword_score(normalized, item.keywords)
            if score > best_score:
                best, best_score = item.entry, score
        if best is not None and best_score >= self._confidence_threshold:
            return MatchResult(entry=best, confidence=best_score, match_type=MatchType.KEYWORD)

        best, best_score = None, 0.0
        for item in self._index:
            similarity = jaro_winkler(normalized, item.question)
            score = SIMILARITY_WEIGHT * similarity + KEYWORD_WEIGHT * self._keyword_score(normalized, item.keywords)
            if score > best_score:
                best, best_score = item.entry, score
        if best is not None and best_score >= self._confidence_threshold:
            return MatchResult(entry=best, confidence=best_score, match_type=MatchType.FUZZY)

        words = [word for word in normalized.split() if len(word) > 2]
        if words:
            best, best_score = None, 0.0
            for item in self._index:
                matched = sum(1 for word in words if word in item.question)
                score = matched / len(words)
                if score > best_score:
                    best, best_score = item.entry, score
            if best is not None and best_score >= self._partial_threshold:
                return MatchResult(entry=best, confidence=best_score, match_type=MatchType.PARTIAL)

        return _NO_MATCH

    def fallback_response(self) -> str:
        if not self._fallback_responses:
            return DEFAULT_FALLBACK
        return self._rng.choice(self._fallback_responses)

    async def add_entry(
        self,
        question: str,
        answer: str,
        keywords: Sequence[str] | None = None,
    ) -> FAQEntry:
        """Append a new FAQ entry and persist the knowledge base.

        Raises ``ValidationError`` for a blank question or answer. If writing
        the backing file fails, ``PersistenceError`` propagates but the entry
        stays in memory until the next successful save.
        """

        question = (question or "").strip()
        answer = (answer or "").strip()
        if not question:
            raise ValidationError("Question cannot be empty.")
        if not answer:
            raise ValidationError("Answer cannot be empty.")

        cleaned = [keyword.strip() for keyword in keywords or () if keyword and keyword.strip()]
        entry = FAQEntry(
            id=self._new_id(),
            question=question,
            answer=answer,
            keywords=cleaned or derive_keywords(question),
        )
        self._index.append(self._build_index(entry))
        logger.info("New FAQ added: %s", question[:50])

        if self._repository is not None:
            try:
                await self._repository.save(self.to_document())
            except PersistenceError:
                logger.exception("FAQ %s kept in memory but could not be persisted", entry.id)
                raise
        return entry

    def _new_id(self) -> str:
        existing = {item.entry.id for item in self._index}
        while True:
            candidate = f"faq_{uuid.uuid4().hex[:8]}"
            if candidate not in existing:
                return candidate

    def search(self, term: str) -> list[FAQEntry]:
        """Case-insensitive substring search over questions, answers and keywords."""

        needle = (term or "").strip().lower()
        if not needle:
            return []
        return [
            item.entry
            for item in self._index
            if needle in item.entry.question.lower()
            or needle in item.entry.answer.lower()
            or any(needle in keyword.lower() for keyword in item.entry.keywords)
        ]

    def list_all(self) -> list[str]:
        return [item.entry.question for item in self._index]

    def project_reference(self, entry: FAQEntry) -> str | None:
        """Names of known projects mentioned in the entry's answer, comma-joined."""

        answer = entry.answer.lower()
        found: list[str] = []
        for names in self._project_references.values():
            for name in names:
                if name.lower() in answer and name not in found:
                    found.append(name)
        return ", ".join(found) if found else None
