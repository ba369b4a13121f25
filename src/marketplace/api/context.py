"""Per-request logging context bound through structlog's contextvars."""

import uuid
from contextlib import contextmanager

from marketplace.utils.logging import add_context, clear_context

REQUEST_ID_HEADER = "X-Request-Id"


@contextmanager
def request_log_context(request):
    """Bind request id, method, path and caller to every log line of the request."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    clear_context()
    add_context(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        user_id=request.headers.get("X-User-Id"),
    )
    try:
        yield request_id
    finally:
        clear_context()
