"""
MediaRelay Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
Why:   One place for middleware order, exception handlers, shared state and
       route mounting.
How:   create_app() builds the app, freezes the upload limits, creates the
       shared remote store handle and stores both on app.state; routes get
       them through dependencies.
Who:   uvicorn (`mediarelay.main:app`), the `mediarelay` console script, tests.
When:  Once at server startup; tests build a fresh app per test.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐ ┌────────┐  │
    │  │  Req ID  │→│ Logging  │→│ Security │→│  CORS  │  │
    │  └──────────┘ └──────────┘ └──────────┘ └────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  GET /api/health   POST /api/upload                 │
    │  POST /api/uploads DELETE /api/delete/{public_id}   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400 │ RequestValidation→400 │ →500 │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mediarelay import __version__
from mediarelay.config import Settings, settings as default_settings
from mediarelay.exceptions import RemoteStoreError, ValidationError
from mediarelay.middleware.logging import RequestLoggingMiddleware
from mediarelay.middleware.request_id import RequestIDMiddleware, request_id_var
from mediarelay.middleware.security_headers import SecurityHeadersMiddleware
from mediarelay.routes import assets, health, upload
from mediarelay.services.normalizer import render_rejection, render_unexpected
from mediarelay.services.remote_store import CloudinaryStore, RemoteStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure process-wide logging to stdout.

    What:    One format for every module logger, level from LOG_LEVEL.
    Why:     Containers collect stdout; a single line format keeps upload,
             remote store and access logs greppable by request ID.
    When:    Startup (lifespan) and the console entry point, before uvicorn
             starts serving.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Why: uvicorn.access duplicates our access log; urllib3 and the
    # Cloudinary SDK log every HTTP exchange with the store
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("cloudinary").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, report configuration problems, log limits.
    Shutdown: log only; the remote store holds no resources to release.

    Why log the limits: MAX_UPLOAD_* values that failed to parse fall back
    silently, so the effective values are printed once here.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("%s starting up...", app_settings.service_name)

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving so health checks still answer
        logger.error("Configuration error: %s", str(e))

    limits = app.state.upload_limits
    logger.info(
        "Upload limits: %gMB per file, %d files per request, types=%s",
        limits.max_file_size_mb,
        limits.max_files,
        ", ".join(sorted(limits.allowed_mime_types)),
    )
    logger.info("Upload folder: %s", app.state.upload_folder or "<remote default>")
    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)
    logger.info("=" * 60)

    yield

    logger.info("%s shutting down...", app_settings.service_name)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the external error contract.

    Handler hierarchy:
        ValidationError         → 400 {message, reason}
        RequestValidationError  → 400 (malformed multipart / wrong field type)
        RemoteStoreError        → 500 {message: "Upload failed", error}
        Exception (fallback)    → 500 with a short generic message

    Responses never carry stack traces; those are logged server-side.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error (%s): %s", rid, exc.reason.value, exc.message)
        status_code, body = render_rejection(exc.reason, exc.message)
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        details = jsonable_errors(exc)
        logger.warning("[%s] Malformed request: %s", rid, details)
        body = {"message": "Invalid request", "details": details}
        return JSONResponse(status_code=400, content=body)

    @app.exception_handler(RemoteStoreError)
    async def handle_remote_store_error(request: Request, exc: RemoteStoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Remote store error: %s | Context: %s", rid, exc.message, exc.context)
        status_code, body = render_unexpected("Upload failed", exc.message)
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        status_code, body = render_unexpected("Internal server error", "Unexpected error")
        return JSONResponse(status_code=status_code, content=body)


def jsonable_errors(exc: RequestValidationError) -> list:
    """Field locations and messages only; raw input values are dropped."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    remote_store: Optional[RemoteStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Why factory (not module-level setup): tests pass their own Settings and
    an in-memory RemoteStore without touching environment variables or the
    network.

    Args:
        app_settings: Settings to build from; defaults to the environment.
        remote_store: Store handle shared by all requests; defaults to a
                      CloudinaryStore built from the settings.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="MediaRelay API",
        description=(
            "Upload images to Cloudinary through a small validating façade, "
            "and delete them again by public id."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/docs.json",
        lifespan=lifespan,
    )

    # ── Process-wide state, fixed after startup ───────────────────────────
    app.state.settings = app_settings
    app.state.service_name = app_settings.service_name
    app.state.upload_limits = app_settings.upload_limits()
    app.state.upload_folder = app_settings.cloudinary_folder
    app.state.remote_store = remote_store or CloudinaryStore(
        cloud_name=app_settings.cloudinary_cloud_name,
        api_key=app_settings.cloudinary_api_key,
        api_secret=app_settings.cloudinary_api_secret,
        timeout=app_settings.cloudinary_timeout,
    )

    # ── Middleware (last added runs first) ────────────────────────────────
    origins = app_settings.allowed_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(upload.router)
    app.include_router(assets.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    setup_logging(default_settings.log_level)
    uvicorn.run(
        "mediarelay.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )
