from __future__ import annotations

from app.models.feedback import FeedbackLog
from app.services.export.base import ExporterBase

COLUMNS = (
    "id", "name", "email", "experience",
    "resilienceScore", "feedbackText", "improvements", "submittedAt",
)

# Free-text columns are always quoted and the others never are; csv.writer's
# quoting modes cannot mix the two. The unquoted columns hold no separators.
QUOTED_COLUMNS = frozenset({"name", "email", "feedbackText", "improvements"})


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _cell(column: str, value) -> str:
    text = "" if value is None else str(value)
    return _quote(text) if column in QUOTED_COLUMNS else text


class CSVExporter(ExporterBase):
    @property
    def format_name(self) -> str:
        return "csv"

    @property
    def content_type(self) -> str:
        return "text/csv"

    def export(self, log: FeedbackLog) -> str:
        lines = [",".join(COLUMNS)]
        for record in log.feedback:
            row = record.model_dump(mode="json", by_alias=True)
            lines.append(",".join(_cell(column, row.get(column)) for column in COLUMNS))
        return "\n".join(lines) + "\n"
