import structlog
from fastapi import Request
import time

logger = structlog.get_logger()


async def logging_middleware(request: Request, call_next):
    start_time = time.time()

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            "request_failed",
            method=request.method,
            path=request.url.path,
            error_type=type(e).__name__
        )
        raise

    duration_ms = (time.time() - start_time) * 1000

    logger.info(
        "request_completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(duration_ms, 2),
        client=request.client.host if request.client else None
    )

    return response
