import logging
import time

logger = logging.getLogger(__name__)


class RequestLogMiddleware:
    """Log method, path, status and duration of every request."""
    QUIET_PREFIXES = ('/static/', '/metrics')

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        response = self.get_response(request)
        path = request.path or ''
        if any(path.startswith(p) for p in self.QUIET_PREFIXES):
            return response
        elapsed_ms = (time.monotonic() - started) * 1000
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(level, '%s %s -> %s (%.1f ms)', request.method, path, response.status_code, elapsed_ms)
        return response
