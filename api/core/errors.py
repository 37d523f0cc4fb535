"""
Server-side failure handling shared by all routers.

Routers wrap their work in `server_errors("Error doing X")`. Anything that is
not already an HTTP error (database, mail transport, bugs) is logged and
re-raised as `ServerError`, which `main.py` renders as a 500 envelope carrying
the operation message and the raw error text.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServerError(RuntimeError):
    def __init__(self, message: str, *, error: str) -> None:
        super().__init__(message)
        self.message = message
        self.error = error


@contextmanager
def server_errors(message: str) -> Iterator[None]:
    try:
        yield
    except (StarletteHTTPException, ServerError):
        raise
    except Exception as exc:
        logger.exception("request_failed message=%r", message)
        raise ServerError(message, error=str(exc)) from exc
