"""FAQ definition storage."""

from .repository import BUNDLED_FAQ_PATH, FAQDocument, FAQRecord, FAQRepository, PersistenceError

__all__ = ["BUNDLED_FAQ_PATH", "FAQDocument", "FAQRecord", "FAQRepository", "PersistenceError"]
