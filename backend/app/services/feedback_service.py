from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from app.models.feedback import (
    AnalyticsSnapshot,
    ClientMeta,
    FeedbackLog,
    FeedbackRecord,
    FeedbackSubmission,
)
from app.services.analytics import recompute_analytics
from app.services.auth import TokenVerifier, UnauthorizedError
from app.services.export.base import ExporterBase
from app.services.export.registry import get_exporter
from app.services.validation import validate_submission
from app.storage.document_store import DocumentKind, DocumentStore

logger = logging.getLogger(__name__)


class FeedbackService:
    """Validate -> append -> persist -> re-aggregate.

    Holds no state of its own: every call reads the documents from the
    store, so the files stay the single source of truth.
    """

    def __init__(self, store: DocumentStore, verifier: TokenVerifier) -> None:
        self.store = store
        self.verifier = verifier

    async def submit(
        self,
        submission: FeedbackSubmission,
        client_meta: ClientMeta | None = None,
    ) -> FeedbackRecord:
        """Accept a submission. Raises FeedbackValidationError or StorageError.

        Once the log write succeeds the submission counts as accepted; an
        analytics failure afterwards is logged and otherwise ignored.
        """
        draft = validate_submission(submission)
        record = FeedbackRecord(
            id=uuid4().hex,
            name=draft.name,
            email=draft.email,
            experience=draft.experience,
            feedback_text=draft.feedback_text,
            improvements=draft.improvements,
            resilience_score=draft.resilience_score,
            submitted_at=datetime.now(timezone.utc),
            client_meta=client_meta or ClientMeta(),
        )

        async with self.store.lock(DocumentKind.FEEDBACK_LOG):
            log: FeedbackLog = await self.store.load(DocumentKind.FEEDBACK_LOG)
            log.feedback.append(record)
            await self.store.save(DocumentKind.FEEDBACK_LOG, log)

        await self._update_analytics(record)

        logger.info(
            "New feedback received from %s (score: %s)", record.name, record.resilience_score
        )
        return record

    async def _update_analytics(self, record: FeedbackRecord) -> None:
        try:
            async with self.store.lock(DocumentKind.ANALYTICS):
                log: FeedbackLog = await self.store.load(DocumentKind.FEEDBACK_LOG)
                prior: AnalyticsSnapshot = await self.store.load(DocumentKind.ANALYTICS)
                snapshot = recompute_analytics(log, record, prior)
                await self.store.save(DocumentKind.ANALYTICS, snapshot)
        except Exception:
            logger.exception("Failed to update analytics for feedback %s", record.id)

    def _authorize(self, token: str | None) -> None:
        if not self.verifier.verify(token):
            logger.warning("Rejected request with missing or invalid token")
            raise UnauthorizedError("Unauthorized")

    async def list_all(self, token: str | None) -> list[FeedbackRecord]:
        """All records, newest first."""
        self._authorize(token)
        log: FeedbackLog = await self.store.load(DocumentKind.FEEDBACK_LOG)
        return sorted(log.feedback, key=lambda r: r.submitted_at, reverse=True)

    async def get_analytics(self) -> AnalyticsSnapshot:
        return await self.store.load(DocumentKind.ANALYTICS)

    async def export(self, token: str | None, format_name: str) -> tuple[ExporterBase, str]:
        """Render the log in append order with the named exporter.

        Returns the exporter alongside the content so callers can label the
        download. Raises ValueError for an unknown format.
        """
        self._authorize(token)
        exporter = get_exporter(format_name)
        log: FeedbackLog = await self.store.load(DocumentKind.FEEDBACK_LOG)
        return exporter, exporter.export(log)
