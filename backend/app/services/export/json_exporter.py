from __future__ import annotations

import json

from app.models.feedback import FeedbackLog
from app.services.export.base import ExporterBase


class JSONExporter(ExporterBase):
    @property
    def format_name(self) -> str:
        return "json"

    @property
    def content_type(self) -> str:
        return "application/json"

    def export(self, log: FeedbackLog) -> str:
        records = [r.model_dump(mode="json", by_alias=True) for r in log.feedback]
        return json.dumps(records, indent=2, ensure_ascii=False)
