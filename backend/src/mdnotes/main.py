# Main application entry point
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import health_router, history_router, notes_router, register_exception_handlers
from .config import get_settings
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .database import create_tables, ensure_special_groups
from .middleware import TrailingSlashRedirectMiddleware

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting mdnotes",
        extra={
            "version": settings.app_version,
            "environment": settings.environment,
            "debug": settings.debug,
            "guest_access": settings.guest_access.value,
        },
    )

    # Redis only holds revoked tokens; run without it rather than refuse to start
    redis_client = get_redis_client()
    try:
        await redis_client.connect()
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without Redis...")

    try:
        await create_tables()
        await ensure_special_groups()
        logger.info("Database tables and special groups created/verified")
    except Exception as e:
        logger.error("Failed to prepare the database", exc_info=e)
        raise

    yield

    logger.info("Shutting down mdnotes")
    try:
        await redis_client.disconnect()
    except Exception as e:
        logger.warning(f"Redis disconnect failed: {e}")


app = FastAPI(
    title=settings.app_name,
    description="Collaborative markdown notes with revisions and access lists",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)
app.add_middleware(TrailingSlashRedirectMiddleware, exempt=("/api/", "/api/health/"))
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(notes_router, prefix="/api")
app.include_router(history_router, prefix="/api")
app.include_router(health_router, prefix="/api")


@app.get("/api/")
async def api_root():
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "documentation": {"swagger_ui": "/docs", "redoc": "/redoc", "openapi_json": "/openapi.json"},
        "endpoints": {"notes": "/api/notes", "history": "/api/me/history", "health": "/api/health/"},
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mdnotes.main:app", host=settings.host, port=settings.port, reload=settings.reload)
