from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_feedback_service
from app.services.feedback_service import FeedbackService

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("")
async def get_analytics(service: FeedbackService = Depends(get_feedback_service)) -> dict:
    snapshot = await service.get_analytics()
    return {"success": True, "data": snapshot.model_dump(mode="json", by_alias=True)}
