"""Incremental maintenance of the analytics snapshot.

Counters move by one per accepted record; the average score is recomputed
from the full log every time.

``top_improvement_words`` holds the first ``MAX_IMPROVEMENT_WORDS`` distinct
qualifying words ever seen, in arrival order. No frequencies are tracked, so
once the list is full new words are dropped no matter how often they occur.
"""

from __future__ import annotations

from datetime import datetime, timezone

from app.models.feedback import AnalyticsSnapshot, FeedbackLog, FeedbackRecord

MAX_IMPROVEMENT_WORDS = 50
MIN_WORD_LENGTH = 4

STOPWORDS: frozenset[str] = frozenset({
    "the", "and", "but", "for", "are", "this", "that", "with", "have", "will",
    "been", "from", "they", "know", "want", "good", "much", "some", "time",
    "very", "when", "come", "here", "just", "like", "long", "make", "many",
    "over", "such", "take", "than", "them", "well", "were",
})


def round_half_up(total: int, count: int) -> int:
    """``floor(total / count + 0.5)`` in exact integer arithmetic."""
    return (2 * total + count) // (2 * count)


def average_score(log: FeedbackLog) -> int:
    scores = [r.resilience_score for r in log.feedback if r.resilience_score is not None]
    if not scores:
        return 0
    return round_half_up(sum(scores), len(scores))


def extract_improvement_words(text: str) -> list[str]:
    return [
        word
        for word in text.lower().split()
        if len(word) >= MIN_WORD_LENGTH and word not in STOPWORDS
    ]


def merge_improvement_words(existing: list[str], text: str) -> list[str]:
    merged = list(dict.fromkeys([*existing, *extract_improvement_words(text)]))
    return merged[:MAX_IMPROVEMENT_WORDS]


def recompute_analytics(
    log: FeedbackLog,
    new_record: FeedbackRecord,
    prior: AnalyticsSnapshot,
    now: datetime | None = None,
) -> AnalyticsSnapshot:
    """Fold ``new_record`` (already appended to ``log``) into ``prior``.

    Returns a new snapshot; ``prior`` is left untouched.
    """
    experience_counts = dict(prior.experience_counts)
    key = new_record.experience.value
    experience_counts[key] = experience_counts.get(key, 0) + 1

    words = prior.top_improvement_words
    if new_record.improvements:
        words = merge_improvement_words(words, new_record.improvements)

    return prior.model_copy(update={
        "total_submissions": prior.total_submissions + 1,
        "average_score": average_score(log),
        "experience_counts": experience_counts,
        "top_improvement_words": list(words),
        "last_updated": now or datetime.now(timezone.utc),
    })
