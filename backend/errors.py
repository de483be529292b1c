"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

USAGE = "Usage: /field?num=1&channel=3195161&key=YOUR_API_KEY"


class ProxyError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class InvalidRequestError(ProxyError):
    def __init__(self, message: str):
        super().__init__(f"ERROR: {message}", status_code=400)


class MissingParameterError(InvalidRequestError):
    def __init__(self, what: str):
        super().__init__(f"Missing {what} parameter\n{USAGE}")


class UpstreamError(ProxyError):
    """A failed ThingSpeak fetch.

    ``reason`` is one of ``network_error``, ``timeout``, ``http_status``,
    ``parse_error`` or ``invalid_url``. Only the first two are retried by the
    fetcher.
    """

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    PARSE_ERROR = "parse_error"
    INVALID_URL = "invalid_url"

    RETRIABLE = frozenset({NETWORK_ERROR, TIMEOUT})

    def __init__(self, reason: str, message: str, upstream_status: int | None = None):
        super().__init__(message, status_code=502)
        self.reason = reason
        self.upstream_status = upstream_status

    @property
    def retriable(self) -> bool:
        return self.reason in self.RETRIABLE


class ResolutionError(ProxyError):
    """No upstream data and nothing cached for the key."""

    def __init__(self, channel: str):
        super().__init__("ERROR: Failed to fetch data from ThingSpeak", status_code=503)
        self.channel = channel


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(ProxyError)
    async def handle_proxy_error(_request: Request, exc: ProxyError):
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return PlainTextResponse("ERROR: Internal server error", status_code=500)
