import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from src.api.deps import get_settings
from src.rules.loader import load_field_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Validate field settings on startup (fail-fast)
    if settings.field_settings_path.exists():
        try:
            load_field_settings(settings.field_settings_path)
            logger.info("Field settings loaded from %s", settings.field_settings_path)
        except (OSError, ValueError) as e:
            logger.critical("Field settings load failed: %s", e)
            sys.exit(1)

    yield


app = FastAPI(
    title="Rich Text Field API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from src.api.routes import richtext  # noqa: E402

app.include_router(richtext.router, prefix="/api/richtext", tags=["Rich Text"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
