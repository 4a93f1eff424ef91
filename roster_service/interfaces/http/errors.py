import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...domain.errors import NotFoundError, RosterError, UpstreamError, ValidationError

logger = structlog.get_logger(__name__)

HTTP_CODES = {
    400: ValidationError.code,
    404: NotFoundError.code,
    405: "METHOD_NOT_ALLOWED",
}


def error_body(code: str, message: str) -> dict:
    return {"error": message, "code": code}


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    err = errors[0]
    loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    return f"{loc}: {err.get('msg')}" if loc else err.get("msg", "Invalid request")


def add_error_handlers(app: FastAPI):
    @app.exception_handler(RosterError)
    async def roster_error_handler(request: Request, exc: RosterError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log("request_failed", method=request.method, path=request.url.path,
            code=exc.code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
        logger.warning("request_failed", method=request.method, path=request.url.path,
                       code=code, error=exc.detail)
        return JSONResponse(status_code=exc.status_code, content=error_body(code, str(exc.detail)),
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _first_validation_message(exc)
        logger.warning("request_failed", method=request.method, path=request.url.path,
                       code=ValidationError.code, error=message)
        return JSONResponse(status_code=400, content=error_body(ValidationError.code, message))

    @app.exception_handler(OperationalError)
    @app.exception_handler(InterfaceError)
    async def database_unavailable_handler(request: Request, exc: Exception):
        logger.error("database_unavailable", method=request.method, path=request.url.path,
                     error=str(exc))
        return JSONResponse(
            status_code=UpstreamError.status_code,
            content=error_body(UpstreamError.code, "Database is unavailable"),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("unhandled_error", method=request.method, path=request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=error_body("UNHANDLED", "Internal server error"))
