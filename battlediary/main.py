import logging
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from battlediary.api import export_router, health_router
from battlediary.config import settings
from battlediary.models.failure import (
    KnownError,
    create_known_failure,
    create_unknown_failure,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version=pkg_version("battlediary"),
    debug=settings.debug,
)

app.include_router(export_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Classified failures keep their status code and explanation."""
    response = create_known_failure(exc)
    return JSONResponse(status_code=exc.status_code, content=response.model_dump(mode="json"))


@app.exception_handler(Exception)
async def unknown_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Anything unclassified becomes a fixed unknown_failure envelope."""
    logger.exception("Unhandled error: %s", type(exc).__name__)
    response = create_unknown_failure(exc)
    return JSONResponse(status_code=500, content=response.model_dump(mode="json"))
