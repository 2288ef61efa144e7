from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.router import api_router, root_router
from .config import get_settings
from .core.database import SessionLocal, create_tables, dispose_engine
from .core.firebase import FirebaseTokenVerifier
from .core.scheduler import NewsSyncScheduler
from .logging_config import configure_logging
from .services.mail_relay import SmtpMailRelay
from .services.news_source import NewsApiClient
from .services.news_sync_service import NewsSyncService

settings = get_settings()

configure_logging(settings)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting News Backend", version=__version__)
    try:
        create_tables()
        logger.info("Database tables created/verified")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    app.state.sync_service = NewsSyncService(NewsApiClient(settings), SessionLocal)
    app.state.token_verifier = FirebaseTokenVerifier(settings)
    app.state.mail_relay = SmtpMailRelay(settings)

    scheduler = NewsSyncScheduler(app.state.sync_service, settings)
    if settings.sync_schedule_enabled:
        scheduler.start()

    yield

    logger.info("Shutting down News Backend")
    scheduler.shutdown()
    dispose_engine()


def create_application() -> FastAPI:
    app = FastAPI(
        title="News Backend",
        description="Aggregates news articles from NewsAPI and relays volunteer contact messages",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(
            "Unhandled exception occurred",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
            }
        )

    app.include_router(root_router)
    app.include_router(api_router)

    return app


app = create_application()


def run():
    import uvicorn

    uvicorn.run(
        "news_backend.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info",
        access_log=False,
    )


if __name__ == "__main__":
    run()
