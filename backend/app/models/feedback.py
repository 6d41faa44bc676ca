from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

SCHEMA_VERSION = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base for every document and payload: camelCase on disk and on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Experience(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


class ClientMeta(CamelModel):
    model_config = ConfigDict(frozen=True)

    ip_address: str = "unknown"
    user_agent: str = "unknown"


class FeedbackSubmission(CamelModel):
    """Raw request body. Deliberately loose; validation.py does the checking."""

    name: str | None = None
    email: str | None = None
    experience: str | None = None
    feedback: str | None = None
    improvements: str | None = None
    resilience_score: Any = None


class FeedbackRecord(CamelModel):
    """An accepted submission. Never modified or removed once appended to the log."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = "Anonymous"
    email: str | None = None
    experience: Experience
    feedback_text: str
    improvements: str = ""
    resilience_score: int | None = None
    submitted_at: datetime = Field(default_factory=_utcnow)
    client_meta: ClientMeta = Field(default_factory=ClientMeta)

    @model_validator(mode="before")
    @classmethod
    def _migrate_legacy_fields(cls, data):
        # Records written by the first version of the service used flat
        # client fields and "feedback"/"timestamp" keys.
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "feedback" in data and "feedbackText" not in data and "feedback_text" not in data:
            data["feedbackText"] = data.pop("feedback")
        if "timestamp" in data and "submittedAt" not in data and "submitted_at" not in data:
            data["submittedAt"] = data.pop("timestamp")
        if "clientMeta" not in data and "client_meta" not in data and (
            "ipAddress" in data or "userAgent" in data
        ):
            data["clientMeta"] = {
                "ipAddress": data.pop("ipAddress", None) or "unknown",
                "userAgent": data.pop("userAgent", None) or "unknown",
            }
        return data


class FeedbackLog(CamelModel):
    schema_version: int = SCHEMA_VERSION
    feedback: list[FeedbackRecord] = Field(default_factory=list)


class AnalyticsSnapshot(CamelModel):
    schema_version: int = SCHEMA_VERSION
    total_submissions: int = 0
    average_score: int = 0
    experience_counts: dict[str, int] = Field(default_factory=dict)
    # Insertion-ordered and duplicate-free; persisted as a JSON array
    top_improvement_words: list[str] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="before")
    @classmethod
    def _migrate_legacy_fields(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "experienceRatings" in data and "experienceCounts" not in data:
            data["experienceCounts"] = data.pop("experienceRatings")
        if "commonImprovements" in data and "topImprovementWords" not in data:
            data["topImprovementWords"] = data.pop("commonImprovements")
        return data
