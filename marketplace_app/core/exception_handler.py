import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .exceptions import MarketplaceError

logger = logging.getLogger(__name__)


class ValidationErrorHandler:
    async def __call__(self, request: Request, exc: RequestValidationError):

        errors = []

        for err in exc.errors():
            errors.append({
                "loc": err.get("loc"),
                "msg": str(err.get("msg")),
                "type": err.get("type"),
            })

        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": "Validation failed",
                "details": errors,
            },
        )


class MarketplaceErrorHandler:
    async def __call__(self, request: Request, exc: MarketplaceError):
        logger.warning(
            "[%s] %s %s: %s", exc.kind, request.method, request.url.path, exc.message
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": exc.kind,
                "detail": exc.message,
            },
            headers=getattr(exc, "headers", None),
        )
