# expense_tracker/observability.py
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware

from expense_tracker.security import get_user_id_from_request

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Root handler once; our named loggers (et.*, db) propagate to it."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("et").setLevel(level.upper())


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        user_id = get_user_id_from_request(request)

        response = await call_next(request)
        ms = (time.perf_counter() - start) * 1000
        logging.getLogger("et.req").info(
            "%s %s -> %s in %.1fms user=%s",
            request.method,
            request.url.path,
            response.status_code,
            ms,
            user_id,
        )
        return response
