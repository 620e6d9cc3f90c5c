"""JSON-backed storage for the FAQ definition document."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

BUNDLED_FAQ_PATH = Path(__file__).resolve().parent.parent / "data" / "faq.json"


class PersistenceError(RuntimeError):
    """Raised when the FAQ document cannot be read or written."""


class FAQRecord(BaseModel):
    """Serialized form of a single FAQ entry."""

    id: str
    question: str
    answer: str
    keywords: list[str] = Field(default_factory=list)


class FAQDocument(BaseModel):
    """Everything stored in the FAQ definition file."""

    faqs: list[FAQRecord] = Field(default_factory=list)
    fallback_responses: list[str] = Field(default_factory=list)
    project_references: dict[str, list[str]] = Field(default_factory=dict)


class FAQRepository:
    """Reads and writes the FAQ document as a JSON file.

    On first use the file is seeded from ``seed`` (the bundled defaults unless
    overridden). Concurrent ``save`` calls are not serialised, so two writers
    racing can lose an update.
    """

    def __init__(self, path: Path, seed: Path | None = BUNDLED_FAQ_PATH) -> None:
        self._path = path
        self._seed = seed

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> FAQDocument:
        """Load the document, seeding the file from defaults if it is missing."""

        source = self._path
        if not source.exists():
            if self._seed is None or not self._seed.exists():
                logger.warning("FAQ file %s not found; starting with an empty knowledge base.", source)
                return FAQDocument()
            source = self._seed

        try:
            data = await asyncio.to_thread(source.read_text, encoding="utf-8")
            document = FAQDocument.model_validate(json.loads(data))
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            raise PersistenceError(f"Failed to load FAQ data from {source}") from exc

        if source != self._path:
            await self.save(document)
        logger.info("FAQ data loaded: %d FAQs available", len(document.faqs))
        return document

    async def save(self, document: FAQDocument) -> None:
        """Persist the document, replacing the file atomically."""

        body = json.dumps(document.model_dump(), ensure_ascii=False, indent=2)
        try:
            await asyncio.to_thread(self._write_file, self._path, body)
        except OSError as exc:
            raise PersistenceError(f"Failed to save FAQ data to {self._path}") from exc
        logger.info("FAQ data saved to %s", self._path)

    @staticmethod
    def _write_file(path: Path, body: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(body)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
