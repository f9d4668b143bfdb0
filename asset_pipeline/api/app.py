"""
FastAPI application for the asset import pipeline.

Builds the pipeline services on startup and cancels running imports on
shutdown. Pipeline errors map onto HTTP statuses: NotFoundError -> 404,
ConflictError -> 409, other pipeline errors -> 422.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from asset_pipeline import __version__
from asset_pipeline.core.config import PipelineSettings
from asset_pipeline.core.errors import ConflictError, NotFoundError, PipelineError
from asset_pipeline.observability.logger import setup_logger
from asset_pipeline.observability.metrics import generate_metrics, get_content_type
from asset_pipeline.pipeline import build_services
from asset_pipeline.utils.validation import InputValidationError

from .routes import router
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(detail=str(exc)).model_dump())


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(404, exc)


async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
    return _error(409, exc)


async def _invalid_input(request: Request, exc: InputValidationError) -> JSONResponse:
    return _error(400, exc)


async def _pipeline_error(request: Request, exc: PipelineError) -> JSONResponse:
    logger.warning("Pipeline request failed", extra={"path": request.url.path, "error_message": str(exc)})
    return _error(422, exc)


def create_app(settings: PipelineSettings | None = None) -> FastAPI:
    """
    Create the API application.

    Args:
        settings: Runtime configuration (read from the environment if None)
    """
    settings = settings or PipelineSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logger(level=settings.log_level, format_type=settings.log_format)
        app.state.services = build_services(settings)
        logger.info("Asset pipeline API ready", extra={"storage_backend": settings.storage_backend})
        yield
        await app.state.services.close()
        logger.info("Asset pipeline API stopped")

    app = FastAPI(
        title="Asset Import Pipeline",
        version=__version__,
        description="Staged CSV asset import: extract, clean, transform, then load on approval.",
        lifespan=lifespan,
    )
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(ConflictError, _conflict)
    app.add_exception_handler(InputValidationError, _invalid_input)
    app.add_exception_handler(PipelineError, _pipeline_error)
    app.include_router(router)

    @app.get("/health", tags=["health"])
    async def health_check():
        return {"status": "ok", "version": __version__}

    @app.get("/metrics", tags=["health"])
    async def metrics_endpoint():
        return Response(content=generate_metrics(), media_type=get_content_type())

    return app
