from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects POST/PUT bodies whose declared length exceeds ``max_body_size``."""

    def __init__(self, app, max_body_size: int) -> None:
        super().__init__(app)
        self.max_body_size = max_body_size

    async def dispatch(self, request: Request, call_next):
        if request.method in ("POST", "PUT"):
            content_length = request.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > self.max_body_size:
                return JSONResponse(
                    status_code=413,
                    content={
                        "success": False,
                        "error": f"Request body too large. Maximum size: {self.max_body_size} bytes.",
                    },
                )

        return await call_next(request)
