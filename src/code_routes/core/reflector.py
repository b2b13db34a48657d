"""Model reflector for Code Routes.

Walks a root controller type and the controllers nested under its
namespace, producing the immutable ``ControllerNode``/``ActionNode`` model.

Discovery
---------
``ModelReflector(root, settings, controllers=None)``

- With ``controllers=None`` every loaded ``Controller`` subclass is a
  candidate. When ``settings.scan_packages`` is on and the root namespace
  is an imported package, its submodules are imported first so that
  controllers living in them exist.
- With an explicit iterable only those types (plus the root) are used,
  in the given order; a type outside the root subtree is a ModelError.

Namespaces
----------
The root namespace is ``settings.root_namespace`` or the root namespace
path with a trailing segment equal to the root name removed. A
controller's namespace path is its namespace relative to the root one,
again dropping a trailing segment equal to its own name (one module or
package per controller). The root controller has no namespace path and
no controller segment.

Actions
-------
``_iter_action_functions`` walks the MRO of the controller (derived first
wins) down to, but excluding, ``Controller``. Public plain functions not
marked with ``non_action`` are actions.

Route properties
----------------
Class annotations carrying ``FromRoute`` are collected from base to
derived, keeping the first declaration of each token name.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
import sys
import types
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Union, get_args, get_origin, get_type_hints

from code_routes.binding import ParameterBinder
from code_routes.exceptions import ModelError

from .controller import Controller, controller_namespace, is_controller_type, iter_controller_types
from .formatting import RouteFormatterArgs, RouteSegmentType, format_route_segment
from .markers import FromRoute, find_marker, strip_annotated
from .model import TOKEN_PATTERN, ActionNode, ControllerNode, RouteParameter, name_equals
from .settings import CodeRoutingSettings

__all__ = ["ModelReflector"]

logger = logging.getLogger("code_routes")


def _identifier_equals(segment: str, name: str) -> bool:
    return segment.replace("_", "").casefold() == name.replace("_", "").casefold()


def _unwrap_optional(hint: Any) -> tuple[Any, bool]:
    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1 and len(args) != len(get_args(hint)):
            return args[0], True
    return hint, False


class ModelReflector:
    """Builds the controller model for one root controller."""

    def __init__(
        self,
        root: type,
        settings: CodeRoutingSettings | None = None,
        controllers: Iterable[type] | None = None,
    ) -> None:
        self.settings = settings or CodeRoutingSettings()
        if not is_controller_type(root, self.settings.controller_suffix):
            raise ModelError(
                f"{root!r} is not a controller: expected a non-abstract Controller subclass "
                f"named '*{self.settings.controller_suffix}'"
            )
        self.root = root
        self.controllers = None if controllers is None else list(controllers)
        self.root_namespace = self._resolve_root_namespace()

    # ------------------------------------------------------------------
    # Namespaces
    # ------------------------------------------------------------------
    def _resolve_root_namespace(self) -> str:
        if self.settings.root_namespace:
            return self.settings.root_namespace
        namespace = controller_namespace(self.root)
        head, _, last = namespace.rpartition(".")
        if head and _identifier_equals(last, self._controller_name(self.root)):
            return head
        return namespace

    def _controller_name(self, cls: type) -> str:
        return cls.__name__[: -len(self.settings.controller_suffix)]

    def _in_subtree(self, cls: type) -> bool:
        namespace = controller_namespace(cls)
        return namespace == self.root_namespace or namespace.startswith(self.root_namespace + ".")

    def _namespace_path(self, cls: type, name: str) -> list[str]:
        namespace = controller_namespace(cls)
        if cls is self.root or not namespace.startswith(self.root_namespace + "."):
            return []
        path = namespace[len(self.root_namespace) + 1 :].split(".")
        if path and _identifier_equals(path[-1], name):
            path.pop()
        return path

    def _format(self, segment: str, role: RouteSegmentType, cls: type) -> str:
        return format_route_segment(self.settings, RouteFormatterArgs(segment, role, cls))

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------
    def _scan_root_package(self) -> None:
        module = sys.modules.get(self.root_namespace)
        package_path = getattr(module, "__path__", None)
        if package_path is None:
            return
        for info in pkgutil.walk_packages(package_path, prefix=self.root_namespace + "."):
            if info.name not in sys.modules:
                logger.debug("Importing %s for controller discovery", info.name)
                importlib.import_module(info.name)

    def _candidate_types(self) -> list[type]:
        suffix = self.settings.controller_suffix
        if self.controllers is not None:
            result = [self.root]
            for cls in self.controllers:
                if cls in result:
                    continue
                if not is_controller_type(cls, suffix):
                    raise ModelError(f"{cls!r} is not a controller type")
                if not self._in_subtree(cls):
                    raise ModelError(
                        f"Controller {cls.__qualname__} (namespace '{controller_namespace(cls)}') "
                        f"is outside the root namespace '{self.root_namespace}'"
                    )
                result.append(cls)
            return result

        if self.settings.scan_packages:
            self._scan_root_package()
        found = [
            cls
            for cls in iter_controller_types(Controller)
            if cls is not self.root and is_controller_type(cls, suffix) and self._in_subtree(cls)
        ]
        found.sort(key=lambda cls: (controller_namespace(cls), cls.__qualname__))
        logger.debug(
            "Discovered %d controllers under '%s' for %s", len(found) + 1, self.root_namespace, self.root.__name__
        )
        return [self.root, *found]

    # ------------------------------------------------------------------
    # Reflection
    # ------------------------------------------------------------------
    def reflect(self) -> tuple[ControllerNode, ...]:
        """Return the ordered controller nodes, root first.

        Raises:
            ModelError: on name collisions, missing binders, controllers
                without actions or invalid parameter declarations.
        """
        nodes: list[ControllerNode] = []
        seen: dict[tuple[tuple[str, ...], str], type] = {}
        for cls in self._candidate_types():
            node = self._create_controller(cls)
            key = (tuple(s.casefold() for s in node.namespace_path), node.name.casefold())
            if not node.is_root and key in seen:
                raise ModelError(
                    f"Controller name collision in namespace '{'.'.join(node.namespace_path)}': "
                    f"{seen[key].__module__}.{seen[key].__qualname__} and {cls.__module__}.{cls.__qualname__}"
                )
            seen[key] = cls
            node._actions = tuple(self._create_actions(node))
            if not node._actions:
                raise ModelError(f"Controller {cls.__module__}.{cls.__qualname__} has no actions")
            nodes.append(node)
        return tuple(nodes)

    def _create_controller(self, cls: type) -> ControllerNode:
        name = self._controller_name(cls)
        namespace_path = self._namespace_path(cls, name)
        return ControllerNode(
            cls,
            name=name,
            namespace=controller_namespace(cls),
            root_namespace=self.root_namespace,
            is_root=cls is self.root,
            namespace_path=namespace_path,
            namespace_segments=[self._format(s, RouteSegmentType.NAMESPACE, cls) for s in namespace_path],
            base_route_segments=self.settings.base_route_segments,
            controller_segment=self._format(name, RouteSegmentType.CONTROLLER, cls),
            route_properties=self._route_properties(cls),
        )

    def _route_properties(self, cls: type) -> list[RouteParameter]:
        properties: list[RouteParameter] = []
        for klass in reversed(cls.__mro__):
            if not issubclass(klass, Controller) or klass is Controller:
                continue
            try:
                annotations = inspect.get_annotations(klass, eval_str=True)
            except NameError as err:
                raise ModelError(f"Cannot resolve annotations of {klass.__qualname__}: {err}") from err
            for attr_name, hint in annotations.items():
                marker = find_marker(hint)
                if not isinstance(marker, FromRoute):
                    continue
                prop = self._create_token(cls, attr_name, hint, marker, has_default=False, default=None)
                if any(name_equals(p.name, prop.name) for p in properties):
                    continue
                properties.append(prop)
        return properties

    def _iter_action_functions(self, cls: type) -> Iterator[tuple[type, Callable]]:
        seen_names: set[str] = set()
        for base in cls.__mro__:
            if base is Controller or not issubclass(base, Controller):
                continue
            for attr_name, value in vars(base).items():
                if attr_name.startswith("_") or attr_name in seen_names:
                    continue
                seen_names.add(attr_name)
                if not inspect.isfunction(value) or getattr(value, "_non_action", False):
                    continue
                yield base, value

    def _create_actions(self, node: ControllerNode) -> list[ActionNode]:
        return [self._create_action(node, declaring, func) for declaring, func in self._iter_action_functions(node.type)]

    def _create_action(self, node: ControllerNode, declaring: type, func: Callable) -> ActionNode:
        marker: dict[str, Any] = getattr(func, "_action_marker", None) or {}
        name = marker.get("name") or func.__name__
        try:
            hints = get_type_hints(func, include_extras=True)
        except NameError as err:
            raise ModelError(f"Cannot resolve annotations of {func.__qualname__}: {err}") from err
        hints.pop("return", None)

        parameter_types: list[Any] = []
        route_parameters: list[RouteParameter] = []
        params = list(inspect.signature(func).parameters.values())[1:]
        for param in params:
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue
            hint = hints.get(param.name, str)
            parameter_types.append(_unwrap_optional(strip_annotated(hint))[0])
            source = find_marker(hint)
            if source is not None and not isinstance(source, FromRoute):
                continue
            if param.kind is inspect.Parameter.KEYWORD_ONLY and source is None:
                continue
            route_parameters.append(
                self._create_token(
                    node.type,
                    param.name,
                    hint,
                    source or FromRoute(),
                    has_default=param.default is not inspect.Parameter.empty,
                    default=None if param.default is inspect.Parameter.empty else param.default,
                )
            )

        action = ActionNode(
            node,
            func,
            declaring_type=declaring,
            name=name,
            action_segment=self._format(name, RouteSegmentType.ACTION, node.type),
            parameter_types=parameter_types,
            route_parameters=route_parameters,
            custom_route=marker.get("route"),
            verbs=marker.get("verbs"),
            disambiguated=bool(marker.get("disambiguated")),
            is_default_action=name_equals(name, self.settings.default_action),
            meta=marker.get("meta"),
        )
        self._check_route_parameters(node, action)
        return action

    def _create_token(
        self,
        cls: type,
        attr_name: str,
        hint: Any,
        marker: FromRoute,
        *,
        has_default: bool,
        default: Any,
    ) -> RouteParameter:
        value_type, nullable = _unwrap_optional(strip_annotated(hint))
        binder = self._resolve_binder(marker.binder, value_type)
        if binder is None:
            raise ModelError(
                f"No parameter binder registered for type {getattr(value_type, '__name__', value_type)!r} "
                f"of '{attr_name}' in {cls.__module__}.{cls.__qualname__}"
            )
        return RouteParameter(
            name=self._format(marker.name or attr_name, RouteSegmentType.TOKEN, cls),
            parameter_name=attr_name,
            parameter_type=value_type,
            binder=binder,
            constraint=(
                binder.constraint_for(self.settings.format_provider)
                if marker.constraint is None
                else marker.constraint
            ),
            optional=has_default,
            default=default,
            nullable=nullable,
            catch_all=marker.catch_all,
        )

    def _resolve_binder(self, requested: Any, value_type: Any) -> ParameterBinder | None:
        if isinstance(requested, ParameterBinder):
            return requested
        return self.settings.binders.get(requested if requested is not None else value_type)

    def _check_route_parameters(self, node: ControllerNode, action: ActionNode) -> None:
        params = action.route_parameters
        where = action.signature()
        seen_optional = False
        for index, param in enumerate(params):
            if param.optional:
                seen_optional = True
            elif seen_optional:
                raise ModelError(f"Optional route parameters must be trailing: '{param.parameter_name}' in {where}")
            if param.catch_all and index != len(params) - 1:
                raise ModelError(f"Catch-all route parameter '{param.parameter_name}' must be last in {where}")
        tokens = [*node.route_properties, *params]
        names = [t.name.casefold() for t in tokens]
        for token in tokens:
            if names.count(token.name.casefold()) > 1:
                raise ModelError(f"Duplicate route token '{token.name}' in {where}")
            if name_equals(token.name, "action") or name_equals(token.name, "controller"):
                raise ModelError(f"Reserved route token name '{token.name}' in {where}")
        if action.custom_route is not None:
            self._check_custom_route(node, action)

    def _check_custom_route(self, node: ControllerNode, action: ActionNode) -> None:
        custom = action.custom_route or ""
        where = action.signature()
        literal = custom[2:] if action.custom_route_is_absolute else custom
        if not literal.strip("/") and not action.custom_route_is_absolute:
            raise ModelError(f"Empty custom route in {where}")
        known = {p.name.casefold(): p for p in action.route_parameters}
        if action.custom_route_is_absolute:
            known.update({p.name.casefold(): p for p in node.route_properties})
        used: set[str] = set()
        for _star, token in TOKEN_PATTERN.findall(literal):
            key = token.casefold()
            if key == "action":
                continue
            if key not in known:
                raise ModelError(f"Custom route '{custom}' references unknown token '{token}' in {where}")
            used.add(key)
        required = [p for p in action.route_parameters if not p.optional]
        if action.custom_route_is_absolute:
            required.extend(node.route_properties)
        missing = [p.name for p in required if p.name.casefold() not in used]
        if missing:
            raise ModelError(f"Custom route '{custom}' does not bind required parameters {missing} in {where}")
