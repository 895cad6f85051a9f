"""Interceptor that logs the start and end of each request."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from shorturl.rpc.context import REQUEST_TIME, Code, RequestContext, StatusError, append_metadata

Handler = Callable[[RequestContext, Any], Any]


class InfoLogger(Protocol):
    def info(self, msg: str, *args: Any) -> None: ...


class RequestLogger:
    """Logs requests and how long they took."""

    def __init__(self, logger: InfoLogger) -> None:
        self._logger = logger

    def log_start(self, ctx: RequestContext, request: Any, method: str, handler: Handler) -> Any:
        """Record the start time in the metadata, log the request and call the handler."""
        ctx = append_metadata(ctx, REQUEST_TIME, datetime.now(timezone.utc).isoformat())
        self._logger.info("Request: %s", method)
        self._logger.info("Req: %r", request)
        self._logger.info("Ctx: %r", ctx)
        return handler(ctx, request)

    def log_end(self, ctx: RequestContext, request: Any, method: str, handler: Handler) -> Any:
        """Log completion and the elapsed time, then call the handler."""
        self._logger.info("Request processing: %s completed", method)
        values = ctx.get(REQUEST_TIME)
        if not values:
            raise StatusError(Code.INTERNAL, "missing " + REQUEST_TIME)
        try:
            start = datetime.fromisoformat(values[0])
        except ValueError:
            start = datetime.min.replace(tzinfo=timezone.utc)
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        elapsed = datetime.now(timezone.utc) - start
        self._logger.info("Elapsed: %s", elapsed)
        return handler(ctx, request)