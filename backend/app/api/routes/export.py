from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from app.api.deps import get_bearer_token, get_feedback_service
from app.services.feedback_service import FeedbackService

router = APIRouter(prefix="/api/export", tags=["export"])

EXPORT_FILENAME = "life-strings-feedback"


@router.get("/{format_name}")
async def export_feedback(
    format_name: str,
    token: str | None = Depends(get_bearer_token),
    service: FeedbackService = Depends(get_feedback_service),
) -> Response:
    try:
        exporter, content = await service.export(token, format_name)
    except ValueError:
        raise HTTPException(status_code=404, detail="Endpoint not found")

    return Response(
        content=content.encode(),
        media_type=exporter.content_type,
        headers={
            "Content-Disposition": f"attachment; filename={EXPORT_FILENAME}.{exporter.file_extension}"
        },
    )
