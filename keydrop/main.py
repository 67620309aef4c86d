"""
FastAPI application factory.
Loads and checks configuration, wires the gatekeepers and upload pipeline,
and mounts the page and upload routers.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .config import Settings, get_settings
from .deps import Gateway, client_address, respond
from .errors import ErrorKind
from .routers import page, upload
from .services.audit import OutcomeLog
from .services.files import FileValidator
from .services.keys import KeyRegistry
from .services.ratelimit import RateGatekeeper
from .services.upload import UploadPipeline

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def build_gateway(settings: Settings) -> Gateway:
    """Assemble the request-time components. Raises ConfigError on bad keys."""
    registry = KeyRegistry.load(settings)
    pipeline = UploadPipeline(
        registry,
        FileValidator(settings.allowed_mime_types, settings.allowed_extensions),
        max_file_size=settings.max_file_size,
        max_files=settings.max_files,
    )

    def gate(name, limit):
        return RateGatekeeper(
            name,
            window_seconds=limit.window_seconds,
            max_requests=limit.max_requests,
            enabled=settings.enable_rate_limiter,
            storage_uri=settings.rate_limit_storage_uri,
        )

    return Gateway(
        settings=settings,
        registry=registry,
        pipeline=pipeline,
        upload_gate=gate("upload", settings.upload_rate_limit),
        page_gate=gate("page", settings.page_rate_limit),
        log=OutcomeLog(settings.logging_enabled),
    )


def create_app(settings: Settings | None = None, *,
               enable_rate_limiter: bool | None = None,
               file_size_limit: int | None = None) -> FastAPI:
    settings = settings or get_settings()
    overrides = {}
    if enable_rate_limiter is not None:
        overrides["enable_rate_limiter"] = enable_rate_limiter
    if file_size_limit is not None:
        overrides["max_file_size"] = file_size_limit
    if overrides:
        settings = settings.model_copy(update=overrides)

    gateway = build_gateway(settings)

    # generated docs would otherwise answer paths that must be rejected
    app = FastAPI(title="keydrop", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.gateway = gateway

    app.include_router(page.router)
    app.include_router(upload.router)

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    def unsupported(request: Request, path: str):
        return respond(gateway.log, client_address(request), ErrorKind.UNSUPPORTED_REQUEST, f"{request.method} /{path}")

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception) -> PlainTextResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return respond(gateway.log, client_address(request), ErrorKind.INTERNAL)

    return app
