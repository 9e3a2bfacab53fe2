# inventra/api/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from inventra.core.errors import InventraError
from inventra.core.logging_config import get_logger

logger = get_logger("api")


async def inventra_error_handler(request: Request, exc: InventraError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", exc_info=exc, extra={"path": request.url.path})
    else:
        logger.info("request_rejected", extra={"path": request.url.path, "code": exc.code})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("storage_failure", exc_info=exc, extra={"path": request.url.path})
    return JSONResponse(status_code=500, content={"error": "Internal error", "code": "internal_error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventraError, inventra_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
