"""Descriptive model produced by the reflector.

No route strings are matched here; the model only records what the
controller tree looks like once names have been normalized and formatted.

Objects
-------
``RouteParameter``
    A route token: an action parameter or a controller route property.

``ActionNode``
    One routable method of a controller.

``ControllerNode``
    One controller type with its namespace position, route properties and
    actions. ``url_template`` is the descriptive pattern
    (``admin/{controller}``), ``controller_url`` the concrete prefix
    (``admin/user``) under which action templates are rooted.

All three are immutable once the reflector hands them out.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from code_routes.binding import ParameterBinder

__all__ = ["ActionNode", "ControllerNode", "RouteParameter", "name_equals", "TOKEN_PATTERN"]

TOKEN_PATTERN = re.compile(r"\{(\*?)([^{}/*]+)\}")


def name_equals(first: str, second: str) -> bool:
    """Case-insensitive identifier comparison."""
    return first.casefold() == second.casefold()


@dataclass(frozen=True)
class RouteParameter:
    """A named, typed value extracted from a URL segment.

    Attributes:
        name: Token name as it appears in templates.
        parameter_name: Python parameter (or attribute) name receiving the value.
        parameter_type: Declared value type, with ``Optional`` unwrapped.
        binder: Binder converting segment text to ``parameter_type``.
        constraint: Regex for the segment, ``""`` for any non-empty segment.
        optional: True when the parameter has a default value.
        default: The default value (meaningful only when optional).
        nullable: True when declared ``Optional``.
        catch_all: True when the token swallows the rest of the path.
    """

    name: str
    parameter_name: str
    parameter_type: Any
    binder: ParameterBinder = field(compare=False)
    constraint: str = ""
    optional: bool = False
    default: Any = field(default=None, compare=False)
    nullable: bool = False
    catch_all: bool = False

    @property
    def route_segment(self) -> str:
        return f"{{*{self.name}}}" if self.catch_all else f"{{{self.name}}}"

    def signature_key(self) -> tuple[str, str]:
        """Key used to compare overloads: name and constraint."""
        return self.name.casefold(), self.constraint


class ActionNode:
    """A controller method eligible to handle requests."""

    __slots__ = (
        "controller",
        "func",
        "declaring_type",
        "method_name",
        "name",
        "action_segment",
        "parameter_types",
        "route_parameters",
        "custom_route",
        "verbs",
        "disambiguated",
        "is_default_action",
        "meta",
    )

    def __init__(
        self,
        controller: ControllerNode,
        func: Callable,
        *,
        declaring_type: type,
        name: str,
        action_segment: str,
        parameter_types: Sequence[Any],
        route_parameters: Sequence[RouteParameter],
        custom_route: str | None = None,
        verbs: frozenset[str] | None = None,
        disambiguated: bool = False,
        is_default_action: bool = False,
        meta: dict[str, Any] | None = None,
    ) -> None:
        self.controller = controller
        self.func = func
        self.declaring_type = declaring_type
        self.method_name = func.__name__
        self.name = name
        self.action_segment = action_segment
        self.parameter_types = tuple(parameter_types)
        self.route_parameters = tuple(route_parameters)
        self.custom_route = custom_route
        self.verbs = verbs
        self.disambiguated = disambiguated
        self.is_default_action = is_default_action
        self.meta = dict(meta or {})

    @property
    def required_count(self) -> int:
        return sum(1 for p in self.route_parameters if not p.optional)

    @property
    def optional_count(self) -> int:
        return len(self.route_parameters) - self.required_count

    @property
    def custom_route_is_absolute(self) -> bool:
        return bool(self.custom_route) and self.custom_route.startswith("~/")  # type: ignore[union-attr]

    @property
    def custom_route_has_action_token(self) -> bool:
        if not self.custom_route:
            return False
        return any(
            not star and name_equals(name, "action") for star, name in TOKEN_PATTERN.findall(self.custom_route)
        )

    def custom_template(self) -> str | None:
        """Resolve the custom route against the controller URL.

        Absolute routes (``~/...``) bypass the controller prefix; ``{action}``
        expands to the action segment.
        """
        if self.custom_route is None:
            return None
        if self.custom_route_is_absolute:
            template = self.custom_route[2:]
        else:
            template = "/".join(s for s in (self.controller.controller_url, self.custom_route.strip("/")) if s)

        def expand(match: re.Match) -> str:
            star, token = match.groups()
            if not star and name_equals(token, "action"):
                return self.action_segment
            return match.group(0)

        return TOKEN_PATTERN.sub(expand, template).strip("/")

    def signature(self) -> str:
        """Display form used in error messages: ``module.Type.method(int, str)``."""
        owner = f"{self.declaring_type.__module__}.{self.declaring_type.__qualname__}"
        params = ", ".join(getattr(t, "__name__", str(t)) for t in self.parameter_types)
        return f"{owner}.{self.method_name}({params})"

    def __repr__(self) -> str:
        return f"ActionNode({self.controller.type.__name__}.{self.method_name} as {self.name!r})"


class ControllerNode:
    """A reflected controller type and its position in the URL space."""

    __slots__ = (
        "type",
        "name",
        "namespace",
        "root_namespace",
        "is_root",
        "namespace_path",
        "namespace_segments",
        "base_route_segments",
        "controller_segment",
        "route_properties",
        "_actions",
    )

    def __init__(
        self,
        controller_type: type,
        *,
        name: str,
        namespace: str,
        root_namespace: str,
        is_root: bool,
        namespace_path: Sequence[str],
        namespace_segments: Sequence[str],
        base_route_segments: Sequence[str],
        controller_segment: str,
        route_properties: Sequence[RouteParameter],
    ) -> None:
        self.type = controller_type
        self.name = name
        self.namespace = namespace
        self.root_namespace = root_namespace
        self.is_root = is_root
        self.namespace_path = tuple(namespace_path)
        self.namespace_segments = tuple(namespace_segments)
        self.base_route_segments = tuple(base_route_segments)
        self.controller_segment = controller_segment
        self.route_properties = tuple(route_properties)
        self._actions: tuple[ActionNode, ...] = ()

    @property
    def actions(self) -> tuple[ActionNode, ...]:
        return self._actions

    @property
    def is_in_sub_namespace(self) -> bool:
        return len(self.namespace) > len(self.root_namespace) and self.namespace.startswith(
            self.root_namespace + "."
        )

    @property
    def is_in_root_namespace(self) -> bool:
        return self.namespace == self.root_namespace or self.is_in_sub_namespace

    @property
    def depth(self) -> int:
        return len(self.namespace_path)

    def _prefix_segments(self, controller_part: str) -> list[str]:
        segments = [*self.base_route_segments, *self.namespace_segments]
        if not self.is_root:
            segments.append(controller_part)
        segments.extend(p.route_segment for p in self.route_properties)
        return segments

    @property
    def url_template(self) -> str:
        return "/".join(self._prefix_segments("{controller}"))

    @property
    def controller_url(self) -> str:
        return "/".join(self._prefix_segments(self.controller_segment))

    @property
    def controller_url_segments(self) -> list[str]:
        return self._prefix_segments(self.controller_segment)

    def find_actions(self, name: str) -> list[ActionNode]:
        """Return actions whose action name or method name equals ``name``."""
        by_name = [a for a in self._actions if name_equals(a.name, name)]
        return by_name or [a for a in self._actions if a.method_name == name]

    def __repr__(self) -> str:
        return f"ControllerNode({self.type.__name__}, url={self.controller_url!r})"
