from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.exceptions.errors import ApplicationException
from app.core.logger import get_logger

logger = get_logger("exception_handlers")

async def application_exception_handler(request: Request, exc: ApplicationException):
    logger.warning(f"Application error on {request.url.path}: {exc.message}")
    return exc.to_response()

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail}
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")

    # Inputs may hold non-JSON values, stringify them
    errors = []
    for error in exc.errors():
        errors.append({
            "type": error.get("type"),
            "loc": error.get("loc"),
            "msg": error.get("msg"),
            "input": str(error.get("input")) if error.get("input") is not None else None
        })

    return JSONResponse(
        status_code=422,
        content={"detail": errors, "url": str(request.url), "method": request.method}
    )

async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {repr(exc)}")
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred"}
    )


def register_exception_handlers(app):
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
