from app.models.feedback import (
    AnalyticsSnapshot,
    ClientMeta,
    Experience,
    FeedbackLog,
    FeedbackRecord,
    FeedbackSubmission,
)

__all__ = [
    "AnalyticsSnapshot",
    "ClientMeta",
    "Experience",
    "FeedbackLog",
    "FeedbackRecord",
    "FeedbackSubmission",
]
