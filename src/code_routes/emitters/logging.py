"""Logging sink for Code Routes.

Wraps another sink and logs every registration with its timing.

Configuration
-------------
Constructor keywords:
    - ``enabled``: Gate logging entirely (default True)
    - ``log``: Use logger.info() when the logger has handlers (default True)
    - ``print``: Always use print() (default False)

Example::

    sink = LoggingSink(FrameworkSink(app))
    map_code_routes(ApiController, sink=sink)
"""

from __future__ import annotations

import logging
import time

from .sink_interface import RouteEntry, RouteSink

__all__ = ["LoggingSink"]


class LoggingSink(RouteSink):
    """Sink decorator logging each route as it is registered."""

    __slots__ = ("_inner", "_logger", "enabled", "log", "print")

    def __init__(
        self,
        inner: RouteSink,
        *,
        logger: logging.Logger | None = None,
        enabled: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ) -> None:
        self._inner = inner
        self._logger = logger or logging.getLogger("code_routes")
        self.enabled = enabled
        self.log = log
        self.print = print

    def _emit(self, message: str) -> None:
        """Emit a log message via the configured sink."""
        if self.print:
            print(message)
            return
        if self.log:
            logger = self._logger
            has_handlers = getattr(logger, "hasHandlers", None) or getattr(logger, "has_handlers", None)
            if callable(has_handlers) and has_handlers():
                logger.info(message)
            else:
                print(message)

    def add_route(self, entry: RouteEntry) -> None:
        if not self.enabled:
            self._inner.add_route(entry)
            return
        t0 = time.perf_counter()
        self._inner.add_route(entry)
        elapsed = (time.perf_counter() - t0) * 1000
        verbs = ",".join(sorted(entry.verbs)) if entry.verbs else "*"
        self._emit(f"route {entry.order} {verbs} /{entry.template} -> {entry.name} ({elapsed:.2f} ms)")
