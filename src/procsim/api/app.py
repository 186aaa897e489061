from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from procsim import __version__
from procsim.config import Settings, get_settings
from procsim.errors import InvalidParameterError, UnknownProcessError
from procsim.logging_config import setup_logging

from .routers import router

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "detail": detail})


async def unknown_process_handler(request: Request, exc: UnknownProcessError) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return _error(status.HTTP_404_NOT_FOUND, "UnknownProcess", str(exc))


async def invalid_parameter_handler(request: Request, exc: InvalidParameterError) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return _error(status.HTTP_400_BAD_REQUEST, "InvalidParameter", str(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("%s %s: malformed request body", request.method, request.url.path)
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return _error(status.HTTP_400_BAD_REQUEST, "InvalidParameter", details)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.api_title, version=__version__)
    app.add_exception_handler(UnknownProcessError, unknown_process_handler)
    app.add_exception_handler(InvalidParameterError, invalid_parameter_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(router)
    return app


app = create_app()
