"""Core aggregator for Code Routes.

Exposes the route generation pipeline from a single module.

Public API:
    - ``Controller``: base class for routable controllers
    - ``action`` / ``non_action``: method decorators
    - ``FromRoute`` / ``FromQuery`` / ``FromBody``: parameter source markers
    - ``CodeRoutingSettings``: immutable build settings
    - ``ModelReflector``: controller tree to descriptive model
    - ``RouteTemplateBuilder`` / ``RouteTemplate``: ordered templates
    - ``RouteTable`` / ``map_code_routes``: built, cached result
    - ``RouteMatch``: result of ``RouteTable.match``

Importing this module performs only imports; no controller is reflected
until ``map_code_routes`` runs.
"""

from .builder import RouteTemplate, RouteTemplateBuilder, compile_template
from .controller import Controller
from .decorators import action, non_action
from .formatting import RouteFormatterArgs, RouteSegmentType, hyphenate, lowercase
from .markers import FromBody, FromQuery, FromRoute
from .model import ActionNode, ControllerNode, RouteParameter
from .reflector import ModelReflector
from .route_match import RouteMatch
from .settings import CodeRoutingSettings
from .table import RouteTable, clear_route_cache, map_code_routes
from .validation import validate_actions

__all__ = [
    "ActionNode",
    "CodeRoutingSettings",
    "Controller",
    "ControllerNode",
    "FromBody",
    "FromQuery",
    "FromRoute",
    "ModelReflector",
    "RouteFormatterArgs",
    "RouteMatch",
    "RouteParameter",
    "RouteSegmentType",
    "RouteTable",
    "RouteTemplate",
    "RouteTemplateBuilder",
    "action",
    "clear_route_cache",
    "compile_template",
    "hyphenate",
    "lowercase",
    "map_code_routes",
    "non_action",
    "validate_actions",
]
