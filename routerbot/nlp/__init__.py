"""Message classification: FAQ matching, escalation categories and price queries."""

from .categories import Category, CategoryAnalysis, CategoryClassifier, CategoryMatch, Priority
from .intent import Action, Decision, IntentClassifier
from .knowledge import FAQEntry, KnowledgeStore, MatchResult, MatchType, ValidationError
from .normalize import derive_keywords, extract_keywords, normalize_text
from .price_query import PriceQuery, PriceQueryDetector

__all__ = [
    "Action",
    "Category",
    "CategoryAnalysis",
    "CategoryClassifier",
    "CategoryMatch",
    "Decision",
    "FAQEntry",
    "IntentClassifier",
    "KnowledgeStore",
    "MatchResult",
    "MatchType",
    "PriceQuery",
    "PriceQueryDetector",
    "Priority",
    "ValidationError",
    "derive_keywords",
    "extract_keywords",
    "normalize_text",
]
