import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import analytics, export, feedback, health
from app.config import Settings, settings as app_settings
from app.middleware.error_handler import register_error_handlers
from app.middleware.security import BodySizeLimitMiddleware
from app.services.auth import StaticTokenVerifier, TokenVerifier
from app.services.feedback_service import FeedbackService
from app.storage.document_store import DocumentStore

# Configure logging
logging.basicConfig(
    level=app_settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    store: DocumentStore | None = None,
    verifier: TokenVerifier | None = None,
) -> FastAPI:
    """Build the API around one document store, shared by every request."""
    settings = settings or app_settings
    store = store or DocumentStore(settings.data_dir)
    verifier = verifier or StaticTokenVerifier(settings.admin_token)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await store.initialize()
        if not settings.admin_token:
            logger.warning("No admin token configured; protected endpoints will reject every request")
        logger.info("%s ready, data in %s", settings.app_name, store.data_dir)
        yield

    app = FastAPI(title=settings.app_name, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.feedback_service = FeedbackService(store, verifier)

    # Middleware (last added runs outermost)
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handlers
    register_error_handlers(app, debug=settings.debug)

    # Routes
    app.include_router(health.router)
    app.include_router(feedback.router)
    app.include_router(analytics.router)
    app.include_router(export.router)

    return app


app = create_app()


def serve() -> None:
    import uvicorn

    uvicorn.run("app.main:app", host=app_settings.host, port=app_settings.port)


if __name__ == "__main__":
    serve()
