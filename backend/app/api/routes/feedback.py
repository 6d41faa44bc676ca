from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_bearer_token, get_client_meta, get_feedback_service
from app.models.feedback import ClientMeta, FeedbackSubmission
from app.services.feedback_service import FeedbackService

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


@router.post("")
async def submit_feedback(
    submission: FeedbackSubmission,
    client_meta: ClientMeta = Depends(get_client_meta),
    service: FeedbackService = Depends(get_feedback_service),
) -> dict:
    record = await service.submit(submission, client_meta)
    return {
        "success": True,
        "message": "Feedback submitted successfully",
        "feedbackId": record.id,
    }


@router.get("/all")
async def list_feedback(
    token: str | None = Depends(get_bearer_token),
    service: FeedbackService = Depends(get_feedback_service),
) -> dict:
    records = await service.list_all(token)
    return {
        "success": True,
        "data": {
            "total": len(records),
            "feedback": [r.model_dump(mode="json", by_alias=True) for r in records],
        },
    }
