# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Route table: the built, ordered result of route generation.

``map_code_routes`` runs the whole pipeline (reflect, validate, build) and
returns a ``RouteTable``. The build is atomic: every configuration error is
raised before a table exists and before anything reaches a sink.

Tables are cached per ``(root, settings, controllers)``; ``clear_route_cache``
drops the cache (useful in tests that define controllers on the fly).

Example::

    table = map_code_routes(ApiController, base_route="api")

    match = table.match("/api/admin/user/42", verb="GET")
    match.method_name                     # "details"
    match.values                          # {"id": 42}

    table.url_for(UserController, "details", id=42)   # "/api/admin/user/42"
    table.emit(ListSink())
    table.nodes(mode="openapi")

Matching
--------
``match`` walks templates top-down. A template matches when its compiled
regex matches the whole path, its verb set allows the request verb and
every token binds through its binder. A failed bind falls through to the
next template, as a host router with typed constraints would.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from typing import Any

from genro_toolbox.typeutils import safe_is_instance

from .builder import RouteTemplate, RouteTemplateBuilder, compile_template
from .model import ActionNode, ControllerNode, RouteParameter, name_equals
from .reflector import ModelReflector
from .route_match import RouteMatch
from .settings import CodeRoutingSettings
from .validation import validate_actions

__all__ = ["RouteTable", "clear_route_cache", "map_code_routes"]

logger = logging.getLogger("code_routes")

_ROUTE_TABLE_CACHE: dict[tuple[Any, ...], RouteTable] = {}


class RouteTable:
    """Immutable ordered set of route templates for one root controller.

    Attributes:
        root: The root controller type.
        settings: Settings used for the build.
        controllers: Reflected controller nodes, root first.
        templates: Route templates in registration order.
    """

    __slots__ = ("root", "settings", "controllers", "templates", "_compiled")

    def __init__(
        self,
        root: type,
        settings: CodeRoutingSettings,
        controllers: Sequence[ControllerNode],
        templates: Sequence[RouteTemplate],
    ) -> None:
        self.root = root
        self.settings = settings
        self.controllers = tuple(controllers)
        self.templates = tuple(templates)
        self._compiled = tuple(compile_template(t) for t in self.templates)

    def __len__(self) -> int:
        return len(self.templates)

    def __iter__(self):
        return iter(self.templates)

    def __repr__(self) -> str:
        return f"RouteTable({self.root.__name__}, {len(self.templates)} routes)"

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------
    def match(self, path: str, verb: str | None = None) -> RouteMatch | None:
        """Return the first template matching ``path`` and ``verb``, or None."""
        path = path.strip("/")
        provider = self.settings.format_provider
        for template, (pattern, groups) in zip(self.templates, self._compiled):
            if not template.allows(verb):
                continue
            found = pattern.fullmatch(path)
            if found is None:
                continue
            bound = self._bind(template, found, groups, provider)
            if bound is not None:
                return bound
        return None

    def _bind(
        self,
        template: RouteTemplate,
        found: re.Match,
        groups: dict[str, RouteParameter],
        provider: Any,
    ) -> RouteMatch | None:
        properties_by_name = {p.name.casefold() for p in template.controller.route_properties}
        values: dict[str, Any] = {}
        properties: dict[str, Any] = {}
        for group, token in groups.items():
            result, ok = token.binder.try_bind(found.group(group), provider)
            if not ok:
                return None
            if token.name.casefold() in properties_by_name:
                properties[token.parameter_name] = result
            else:
                values[token.parameter_name] = result
        for param in template.action.route_parameters:
            if param.optional and param.parameter_name not in values:
                values[param.parameter_name] = param.default
        return RouteMatch(template, values, properties)

    # ------------------------------------------------------------------
    # Reverse routing
    # ------------------------------------------------------------------
    def _action_templates(self, controller: type | ControllerNode, action: str) -> list[RouteTemplate]:
        controller_type = controller.type if isinstance(controller, ControllerNode) else controller
        found = [
            t
            for t in self.templates
            if t.controller.type is controller_type
            and (name_equals(t.action.name, action) or t.action.method_name == action)
        ]
        if not found:
            raise LookupError(f"No route for action '{action}' of {getattr(controller_type, '__name__', controller_type)}")
        return found

    def url_for(self, controller: type | ControllerNode, action: str, **values: Any) -> str:
        """Build the path of ``action`` on ``controller`` from ``values``.

        ``values`` are keyed by Python parameter (or route property) name.
        Templates using exactly the supplied route values are preferred;
        otherwise the first template whose missing tokens all have defaults
        is used.

        Raises:
            LookupError: when the action is unknown or no template fits.
        """
        templates = self._action_templates(controller, action)
        for allow_defaults in (False, True):
            for template in templates:
                segments = self._format_tokens(template, values, allow_defaults)
                if segments is not None:
                    return "/" + template.path_for(segments)
        raise LookupError(
            f"No route of action '{action}' can be built from values {sorted(values)}"
        )

    def _format_tokens(
        self, template: RouteTemplate, values: dict[str, Any], allow_defaults: bool
    ) -> dict[str, str] | None:
        provider = self.settings.format_provider
        route_names = {p.parameter_name for p in template.action.route_parameters}
        used = {t.parameter_name for t in template.tokens}
        if any(name in route_names and name not in used for name in values):
            return None
        segments: dict[str, str] = {}
        for token in template.tokens:
            if token.parameter_name in values:
                value = values[token.parameter_name]
            elif allow_defaults and token.optional:
                value = token.default
            else:
                return None
            if value is None:
                return None
            segments[token.name] = token.binder.format(value, provider)
        return segments

    # ------------------------------------------------------------------
    # Emission and introspection
    # ------------------------------------------------------------------
    def emit(self, sink: Any) -> Any:
        """Push every template to ``sink`` in registration order."""
        if not safe_is_instance(sink, "code_routes.emitters.sink_interface.RouteSink"):
            raise TypeError(f"Expected a RouteSink, got {type(sink).__name__}")
        from code_routes.emitters.sink_interface import RouteEntry

        for template in self.templates:
            sink.add_route(RouteEntry.from_template(template))
        return sink

    def nodes(self, mode: str | None = None) -> dict[str, Any]:
        """Return an introspection tree of controllers, actions and templates.

        Args:
            mode: ``None`` for the standard format, ``"openapi"`` for an
                OpenAPI ``paths`` object.
        """
        if mode == "openapi":
            from code_routes.emitters.openapi import OpenAPITranslator

            return OpenAPITranslator.translate(self)
        if mode is not None:
            raise ValueError(f"Unknown nodes mode: {mode!r}")

        by_action: dict[int, list[str]] = {}
        for template in self.templates:
            by_action.setdefault(id(template.action), []).append(template.template)

        controllers: dict[str, Any] = {}
        for node in self.controllers:
            controllers[f"{node.type.__module__}.{node.type.__qualname__}"] = {
                "name": node.name,
                "namespace": node.namespace,
                "is_root": node.is_root,
                "url_template": node.url_template,
                "controller_url": node.controller_url,
                "route_properties": [p.name for p in node.route_properties],
                "doc": node.type.__doc__ or "",
                "actions": [self._action_info(a, by_action.get(id(a), [])) for a in node.actions],
            }
        return {
            "root": self.root.__name__,
            "base_route": self.settings.base_route,
            "controllers": controllers,
            "templates": [t.template for t in self.templates],
        }

    def _action_info(self, action: ActionNode, templates: list[str]) -> dict[str, Any]:
        info: dict[str, Any] = {
            "name": action.name,
            "method": action.method_name,
            "segment": action.action_segment,
            "parameters": [p.name for p in action.route_parameters],
            "verbs": sorted(action.verbs) if action.verbs else None,
            "templates": templates,
        }
        if action.custom_route is not None:
            info["custom_route"] = action.custom_route
        if action.meta:
            info["meta"] = dict(action.meta)
        return info


def map_code_routes(
    root: type,
    base_route: str | None = None,
    settings: CodeRoutingSettings | None = None,
    *,
    controllers: Iterable[type] | None = None,
    sink: Any = None,
) -> RouteTable:
    """Build (or fetch from cache) the route table of ``root``.

    Args:
        root: Root controller type.
        base_route: Shortcut overriding ``settings.base_route``.
        settings: Route settings, defaults to ``CodeRoutingSettings()``.
        controllers: Explicit controller types; None to discover them.
        sink: Optional ``RouteSink`` receiving the routes once built.

    Raises:
        RouteConfigurationError: any model, overload or custom route error.
    """
    settings = settings or CodeRoutingSettings()
    if base_route is not None:
        settings = settings.replace(base_route=base_route)
    explicit = None if controllers is None else tuple(controllers)
    key = (root, settings, explicit)

    table = _ROUTE_TABLE_CACHE.get(key)
    if table is not None:
        logger.debug("Route table cache hit for %s", root.__name__)
    else:
        nodes = ModelReflector(root, settings, explicit).reflect()
        validate_actions([action for node in nodes for action in node.actions])
        table = RouteTable(root, settings, nodes, RouteTemplateBuilder(nodes).build())
        _ROUTE_TABLE_CACHE[key] = table
        logger.info("%d routes for %s", len(table), root.__name__)

    if sink is not None:
        table.emit(sink)
    return table


def clear_route_cache() -> None:
    """Drop every cached route table."""
    _ROUTE_TABLE_CACHE.clear()
