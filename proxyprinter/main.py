import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from proxyprinter.api import decks_router, health_router
from proxyprinter.config import settings
from proxyprinter.models.failure import ApiResponse, KnownError

logger = logging.getLogger(__name__)


def _app_version() -> str:
    try:
        return pkg_version("proxyprinter")
    except PackageNotFoundError:
        return "0.0.0"


app = FastAPI(
    title=settings.app_name,
    version=_app_version(),
)

app.include_router(decks_router)
app.include_router(health_router)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render known failures (usage errors included) through the response envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def unknown_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected is a 500 with the fixed unknown-failure message."""
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content=ApiResponse.unknown_failure(detail=type(exc).__name__).model_dump(mode="json"),
    )
