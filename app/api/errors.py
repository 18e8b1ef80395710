from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

logger = structlog.get_logger()

NO_EVENTS = "No events provided"
INVALID_BATCH = "Invalid event batch"
INTERNAL_ERROR = "Internal server error"


def _is_envelope_error(error: dict) -> bool:
    loc = tuple(error.get("loc", ()))
    return loc in (("body",), ("body", "events"))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = NO_EVENTS if any(_is_envelope_error(e) for e in errors) else INVALID_BATCH

    logger.info(
        "request_rejected",
        path=request.url.path,
        reason=message,
        error_count=len(errors)
    )

    return JSONResponse({"error": message}, status_code=status.HTTP_400_BAD_REQUEST)


def setup_error_handlers(app: FastAPI):
    app.exception_handler(StarletteHTTPException)(http_error_handler)
    app.exception_handler(RequestValidationError)(validation_error_handler)
