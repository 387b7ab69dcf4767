from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from BundleUpload.backend.app.api.routes import router as api_router
from BundleUpload.backend.app.core.config import get_settings
from BundleUpload.backend.app.core.exporter import EmptyExportError, ExportError
from BundleUpload.backend.app.core.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Application factory so tests can instantiate the API easily."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, version="0.1.0")

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix=settings.api_prefix.rstrip("/"))

    @app.exception_handler(EmptyExportError)
    async def empty_export_handler(request: Request, exc: EmptyExportError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ExportError)
    async def export_error_handler(request: Request, exc: ExportError):
        logger.error("Export request failed: path=%s error=%s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
