"""Route table emitters.

Public exports:
    - ``RouteSink`` / ``RouteEntry``: registration seam to host frameworks
    - ``ListSink``: in-memory sink
    - ``LoggingSink``: sink decorator logging each registration
    - ``OpenAPITranslator``: OpenAPI ``paths`` rendering
"""

from .list_sink import ListSink
from .logging import LoggingSink
from .openapi import OpenAPITranslator
from .sink_interface import RouteEntry, RouteSink

__all__ = ["ListSink", "LoggingSink", "OpenAPITranslator", "RouteEntry", "RouteSink"]
