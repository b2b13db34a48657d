"""RouteMatch - result of matching a path against a route table.

Carries what a dispatch adapter needs to activate the controller and call
the action; nothing is invoked here.

Example::

    match = table.match("admin/user/42")
    if match:
        controller = match.controller_type()
        getattr(controller, match.method_name)(**match.values)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from .builder import RouteTemplate

__all__ = ["RouteMatch"]


class RouteMatch:
    """A matched route with bound token values.

    Attributes:
        template: The ``RouteTemplate`` that matched.
        values: Action parameter name to bound value, defaults included.
        properties: Route property attribute name to bound value.
    """

    __slots__ = ("template", "values", "properties")

    def __init__(
        self,
        template: RouteTemplate,
        values: dict[str, Any],
        properties: dict[str, Any],
    ) -> None:
        self.template = template
        self.values = values
        self.properties = properties

    @property
    def controller_type(self) -> type:
        return self.template.controller.type

    @property
    def action_name(self) -> str:
        return self.template.action.name

    @property
    def method_name(self) -> str:
        return self.template.action.method_name

    def to_dict(self) -> dict[str, Any]:
        """Return match data as dict."""
        return {
            "template": self.template.template,
            "controller": self.controller_type,
            "action": self.action_name,
            "values": dict(self.values),
            "properties": dict(self.properties),
        }

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RouteMatch):
            return self.to_dict() == other.to_dict()
        return NotImplemented

    def __repr__(self) -> str:
        return f"RouteMatch({self.template.template!r} -> {self.controller_type.__name__}.{self.method_name})"
