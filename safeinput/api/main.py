import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from safeinput.api.deps import FormValidationError, InvalidPayloadError, get_rules, get_settings
from safeinput.api.middleware import SecurityHeadersMiddleware

# Logging setup
logging.basicConfig(
    level=os.environ.get("SAFEINPUT_LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        get_rules(settings)
        logger.info("Rules loaded from %s", settings.rules_path)
    except (FileNotFoundError, ValueError) as e:
        logger.critical("Rules load failed: %s", e)
        sys.exit(1)

    yield


app = FastAPI(
    title="SafeInput API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(FormValidationError)
async def form_validation_handler(request: Request, exc: FormValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": exc.errors})


@app.exception_handler(InvalidPayloadError)
async def invalid_payload_handler(request: Request, exc: InvalidPayloadError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# --- Routers ---
from safeinput.api.routes import forms, validation  # noqa: E402

app.include_router(validation.router, prefix="/api/validate", tags=["Validation"])
app.include_router(forms.router, prefix="/api/forms", tags=["Forms"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "safeinput"}
