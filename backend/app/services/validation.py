from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from app.models.feedback import Experience, FeedbackSubmission

MIN_FEEDBACK_LENGTH = 10
MAX_FEEDBACK_LENGTH = 2000
DEFAULT_NAME = "Anonymous"

# Leading integer, as a form field like "85.5" or "85%" carries it
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

VALID_EXPERIENCES = tuple(e.value for e in Experience)


class FeedbackValidationError(ValueError):
    """Submission rejected. ``str(exc)`` is the first violation."""

    def __init__(self, violations: list[str]) -> None:
        super().__init__(violations[0])
        self.violations = violations


@dataclass(frozen=True)
class FeedbackDraft:
    """Normalized, validated submission awaiting id/timestamp/client metadata."""

    name: str
    email: str | None
    experience: Experience
    feedback_text: str
    improvements: str
    resilience_score: int | None


def parse_score(value: Any) -> int | None:
    """Best-effort integer parse; anything unparseable means "no score"."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def validate_submission(submission: FeedbackSubmission) -> FeedbackDraft:
    name = (submission.name or "").strip() or DEFAULT_NAME
    email = (submission.email or "").strip() or None
    improvements = submission.improvements or ""
    score = parse_score(submission.resilience_score)
    feedback_text = submission.feedback

    violations: list[str] = []

    if not submission.experience:
        violations.append("Experience rating is required")
    elif submission.experience not in VALID_EXPERIENCES:
        violations.append("Invalid experience rating")

    if not feedback_text:
        violations.append("Feedback is required")
    elif not MIN_FEEDBACK_LENGTH <= len(feedback_text) <= MAX_FEEDBACK_LENGTH:
        violations.append(
            f"Feedback must be between {MIN_FEEDBACK_LENGTH} and {MAX_FEEDBACK_LENGTH} characters"
        )

    if violations:
        raise FeedbackValidationError(violations)

    return FeedbackDraft(
        name=name,
        email=email,
        experience=Experience(submission.experience),
        feedback_text=feedback_text,
        improvements=improvements,
        resilience_score=score,
    )
