from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from shared.core import get_logger
from inventory_service.domain.errors import InventoryError, InsufficientStockError

logger = get_logger(__name__)

async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    content = {"detail": exc.message}
    if isinstance(exc, InsufficientStockError):
        content["productId"] = exc.product_id
    return JSONResponse(status_code=exc.status_code, content=content)

async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies are client errors like any other validation failure.
    # The offending input is not echoed back; NaN and Infinity cannot be rendered as JSON
    errors = [{k: v for k, v in error.items() if k != "input"} for error in exc.errors()]
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(errors)})

async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Data store failure: {request.method} {request.url.path}",
        exc_info=exc,
        extra={'extra_fields': {'error_type': type(exc).__name__}}
    )
    return JSONResponse(status_code=500, content={"detail": "Data store unavailable"})

def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
