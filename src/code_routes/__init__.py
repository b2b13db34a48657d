"""Code Routes - Convention-driven route generation for controller classes.

Derives ordered URL route templates from controller classes, their
namespaces, method names and parameter signatures, so routes never have to
be written by hand.

Public exports:
    - ``Controller``: base class; subclasses named ``*Controller`` are routable
    - ``action`` / ``non_action``: customize or exclude action methods
    - ``FromRoute`` / ``FromQuery`` / ``FromBody``: parameter source markers
    - ``CodeRoutingSettings``: base route, formatter, binders, default action
    - ``map_code_routes``: build (and cache) the ``RouteTable`` of a root
    - ``RouteTable``: ordered templates with ``match``, ``url_for``, ``emit``
    - ``RouteSink`` / ``ListSink`` / ``LoggingSink``: registration targets

Example::

    from code_routes import Controller, FromRoute, action, map_code_routes

    class ApiController(Controller, namespace="shop"):
        def index(self):
            ...

    class UserController(Controller, namespace="shop.admin"):
        def details(self, id: int):
            ...

        @action(route="~/me", verbs=["GET"])
        def current(self):
            ...

    table = map_code_routes(ApiController, controllers=[UserController])
    [t.template for t in table.templates]
    # ["me", "admin/user/details/{id}", ""]
"""

__version__ = "0.1.0"

from .binding import DEFAULT_BINDERS, INVARIANT, BinderRegistry, NumberFormat, ParameterBinder
from .core import (
    CodeRoutingSettings,
    Controller,
    FromBody,
    FromQuery,
    FromRoute,
    RouteMatch,
    RouteSegmentType,
    RouteTable,
    RouteTemplate,
    action,
    clear_route_cache,
    hyphenate,
    lowercase,
    map_code_routes,
    non_action,
)
from .emitters import ListSink, LoggingSink, OpenAPITranslator, RouteEntry, RouteSink
from .exceptions import (
    AmbiguousOverloadError,
    CustomRouteConflictError,
    IncompatibleOverloadError,
    ModelError,
    RouteConfigurationError,
)

__all__ = [
    "AmbiguousOverloadError",
    "BinderRegistry",
    "CodeRoutingSettings",
    "Controller",
    "CustomRouteConflictError",
    "DEFAULT_BINDERS",
    "FromBody",
    "FromQuery",
    "FromRoute",
    "INVARIANT",
    "IncompatibleOverloadError",
    "ListSink",
    "LoggingSink",
    "ModelError",
    "NumberFormat",
    "OpenAPITranslator",
    "ParameterBinder",
    "RouteConfigurationError",
    "RouteEntry",
    "RouteMatch",
    "RouteSegmentType",
    "RouteSink",
    "RouteTable",
    "RouteTemplate",
    "action",
    "clear_route_cache",
    "hyphenate",
    "lowercase",
    "map_code_routes",
    "non_action",
]
