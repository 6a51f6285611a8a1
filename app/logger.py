import sys
import time
import uuid

from fastapi import Request
from loguru import logger

from app.config import Settings


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.configure(extra={"request_id": "-"})
    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[request_id]} | {message}",
    )
    if settings.LOG_FILE:
        logger.add(settings.LOG_FILE, rotation=settings.LOG_ROTATION, level="DEBUG")


async def request_logging_middleware(request: Request, call_next):
    request_id = uuid.uuid4().hex[:12]
    started = time.perf_counter()
    with logger.contextualize(request_id=request_id):
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
    response.headers["X-Request-ID"] = request_id
    return response
