# bloomhub/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from bloomhub.core.config import get_settings
from bloomhub.core.errors import AuthRecordNotFound
from bloomhub.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from bloomhub.models import user as _user_models  # noqa: F401
from bloomhub.models import florist as _florist_models  # noqa: F401

# Routers
from bloomhub.routers.auth import router as auth_router
from bloomhub.routers.florist import router as florist_router
from bloomhub.routers.admin import router as admin_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(AuthRecordNotFound)
async def auth_record_not_found_handler(request: Request, exc: AuthRecordNotFound):
    """
    A profile or token points at a florist auth row that does not exist.

    This is corrupted state, not a client mistake: log it and answer
    with a generic 500 so internals do not leak.
    """
    logger.error(
        "Inconsistent florist identity on %s %s: %s",
        request.method,
        request.url.path,
        exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api
app.include_router(auth_router, prefix=settings.API_V1_STR)
app.include_router(florist_router, prefix=settings.API_V1_STR)
app.include_router(admin_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "bloomhub-backend"}
