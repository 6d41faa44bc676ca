from __future__ import annotations

import asyncio
import enum
import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ValidationError

from app.config import settings
from app.models.feedback import AnalyticsSnapshot, FeedbackLog

logger = logging.getLogger(__name__)

Document = FeedbackLog | AnalyticsSnapshot


class StorageError(RuntimeError):
    """Raised when a document cannot be read, parsed or written."""


class DocumentKind(str, enum.Enum):
    FEEDBACK_LOG = "feedback"
    ANALYTICS = "analytics"


_DOCUMENT_TYPES: dict[DocumentKind, type[BaseModel]] = {
    DocumentKind.FEEDBACK_LOG: FeedbackLog,
    DocumentKind.ANALYTICS: AnalyticsSnapshot,
}


class DocumentStore:
    """JSON-file storage for the feedback log and the analytics snapshot.

    Every ``load`` parses the file afresh, so callers always get their own
    copy. Every ``save`` rewrites the whole file through a temp file and an
    atomic rename, so readers only ever see complete documents.

    Mutations must run inside ``async with store.lock(kind)``. There is one
    lock per document kind and per store instance; nothing guards against
    other processes writing the same files.
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        self.data_dir = data_dir or settings.data_dir
        self._locks: dict[DocumentKind, asyncio.Lock] = {
            kind: asyncio.Lock() for kind in DocumentKind
        }

    def _document_path(self, kind: DocumentKind) -> Path:
        return self.data_dir / f"{kind.value}.json"

    def lock(self, kind: DocumentKind) -> asyncio.Lock:
        return self._locks[kind]

    async def initialize(self) -> None:
        """Create the data directory and any missing document with its defaults."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create data directory {self.data_dir}: {exc}") from exc
        for kind in DocumentKind:
            if not self._document_path(kind).exists():
                await self.save(kind, _DOCUMENT_TYPES[kind]())
                logger.info("Initialized empty %s document at %s", kind.value, self._document_path(kind))
        logger.info("Storage initialized in %s", self.data_dir)

    async def load(self, kind: DocumentKind) -> Document:
        path = self._document_path(kind)
        model = _DOCUMENT_TYPES[kind]
        if not path.exists():
            document = model()
            await self.save(kind, document)
            return document
        try:
            return model.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Error reading {path}: {exc}") from exc
        except ValidationError as exc:
            raise StorageError(f"Corrupt {kind.value} document at {path}: {exc}") from exc

    async def save(self, kind: DocumentKind, document: Document) -> None:
        expected = _DOCUMENT_TYPES[kind]
        if not isinstance(document, expected):
            raise TypeError(
                f"{kind.value} document must be {expected.__name__}, got {type(document).__name__}"
            )
        path = self._document_path(kind)
        data = document.model_dump_json(by_alias=True, indent=2)
        # Atomic write: write to temp file then rename
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
        except OSError as exc:
            raise StorageError(f"Error writing {path}: {exc}") from exc
        try:
            with open(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as exc:
            Path(tmp_path).unlink(missing_ok=True)
            raise StorageError(f"Error writing {path}: {exc}") from exc
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
