from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from newslens.api.routes.articles import router as articles_router
from newslens.api.routes.news import router as news_router
from newslens.api.routes.system import router as system_router
from newslens.core.config import get_settings
from newslens.core.logging import configure_logging, get_logger

logger = get_logger("newslens.main")


@asynccontextmanager
async def app_lifespan(_: FastAPI):
    try:
        settings = get_settings()
        missing: list[str] = []
        if not settings.GUARDIAN_API_KEY:
            missing.append("GUARDIAN_API_KEY")
        if not settings.CURRENTS_API_KEY:
            missing.append("CURRENTS_API_KEY")
        if not settings.OPENAI_API_KEY:
            missing.append("OPENAI_API_KEY")

        if missing:
            logger.warning("Missing environment variables at startup: %s", ", ".join(missing))
    except Exception:
        logger.warning("Startup environment check failed; continuing without strict validation", exc_info=True)

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    application = FastAPI(
        title="NewsLens",
        version="1.0",
        lifespan=app_lifespan,
    )

    allowed_origins_set = {
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    }
    if settings.CORS_ORIGINS:
        allowed_origins_set.update(str(origin).rstrip("/") for origin in settings.CORS_ORIGINS)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(allowed_origins_set),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(news_router)
    application.include_router(articles_router)
    application.include_router(system_router)

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception at %s", request.url.path, exc_info=True, extra={"path": request.url.path}
        )
        return JSONResponse(
            status_code=500,
            content={"error": "An internal system error occurred. Please check server logs.", "groups": []},
        )

    @application.get("/")
    def read_root() -> dict[str, str]:
        return {"status": "System Operational", "message": "NewsLens Backend is Running"}

    return application


app = create_app()
