from __future__ import annotations

from fastapi import Header, Request

from app.models.feedback import ClientMeta
from app.services.auth import extract_bearer_token
from app.services.feedback_service import FeedbackService


def get_feedback_service(request: Request) -> FeedbackService:
    return request.app.state.feedback_service


def get_bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    return extract_bearer_token(authorization)


def get_client_meta(request: Request) -> ClientMeta:
    """Best-effort origin address and user agent; never validated."""
    return ClientMeta(
        ip_address=request.client.host if request.client else "unknown",
        user_agent=request.headers.get("user-agent") or "unknown",
    )
