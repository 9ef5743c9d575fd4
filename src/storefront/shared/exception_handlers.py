"""Map domain failures onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from storefront.shared.errors import OutOfStock, StorefrontError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    content = {"error": exc.message}
    if isinstance(exc, OutOfStock):
        content["available"] = exc.available

    if exc.status_code >= 500:
        logger.error("Upstream failure", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=content)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


def register_exception_handlers(app: FastAPI) -> None:
    """Install protean's handlers (ValidationError 400, ObjectNotFoundError 404) plus ours."""
    register_protean_handlers(app)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
