# quickplace/errors.py
import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarHTTP

from .engine.errors import PlacementError
from .logging_config import log_failure

logger = logging.getLogger("quickplace")


def install_error_handlers(app):
    @app.exception_handler(PlacementError)
    async def placement_exc(_: Request, exc: PlacementError):
        log_failure(exc.code, exc.to_context())
        return JSONResponse({"success": False, "error": exc.code, "detail": str(exc)}, status_code=400)

    @app.exception_handler(RequestValidationError)
    async def validation_exc(_: Request, exc: RequestValidationError):
        errors = jsonable_encoder(exc.errors())
        log_failure("VALIDATION_ERROR", {"errors": errors})
        return JSONResponse(
            {"success": False, "error": "VALIDATION_ERROR", "detail": errors},
            status_code=422,
        )

    @app.exception_handler(StarHTTP)
    async def http_exc(_: Request, exc: StarHTTP):
        return JSONResponse(
            {"success": False, "error": f"HTTP_{exc.status_code}", "detail": exc.detail},
            status_code=exc.status_code,
        )

    @app.exception_handler(Exception)
    async def unhandled(_: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse({"success": False, "error": "INTERNAL_ERROR", "detail": "Unexpected error"}, status_code=500)
