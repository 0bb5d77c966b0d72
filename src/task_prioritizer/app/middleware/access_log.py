import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from task_prioritizer.observability.logging import request_id_var

logger = logging.getLogger("tasks.access")

REQUEST_ID_HEADER = "X-Request-ID"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _level_for(status_code: int) -> int:
    # rejected task payloads and bad filters show up as warnings
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    One `request.start` and one `request.end` record per request.

    The request id (client supplied or generated) is bound to
    `request_id_var`, so every record logged while the request runs, task
    events included, carries it. It is echoed back in the response header.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        request.state.request_id = request_id
        start = time.perf_counter()
        route = {"method": request.method, "path": request.url.path}

        logger.info(
            "request.start",
            extra={
                "category": "http",
                "event": "request.start",
                **route,
                "query": str(request.url.query),
                "client": request.client.host if request.client else None,
            },
        )

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.log(
                _level_for(response.status_code),
                "request.end",
                extra={
                    "category": "http",
                    "event": "request.end",
                    **route,
                    "status_code": response.status_code,
                    "duration_ms": _elapsed_ms(start),
                },
            )
            return response
        except Exception:
            logger.exception(
                "request.error",
                extra={"category": "http", "event": "request.error", **route, "duration_ms": _elapsed_ms(start)},
            )
            raise
        finally:
            request_id_var.reset(token)
