# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""RouteSink - Abstract registration target for route tables.

A sink is the seam to the host framework: ``RouteTable.emit(sink)`` calls
``add_route`` once per template, in registration order. Implement this to
feed any router (a Werkzeug map, a Starlette app, a test double).

Required methods:
    - add_route(entry) -> None
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from code_routes.core.builder import RouteTemplate

__all__ = ["RouteEntry", "RouteSink"]


@dataclass(frozen=True)
class RouteEntry:
    """Flat route record handed to sinks.

    Attributes:
        name: Unique route name.
        template: Template string.
        constraints: Token name to regex.
        defaults: Token name to default value.
        verbs: Allowed verbs, None for any.
        order: Registration position.
        controller: Controller type.
        action: Method name on the controller.
    """

    name: str
    template: str
    constraints: Mapping[str, str]
    defaults: Mapping[str, Any]
    verbs: frozenset[str] | None
    order: int
    controller: type
    action: str

    @classmethod
    def from_template(cls, template: RouteTemplate) -> RouteEntry:
        return cls(
            name=template.name,
            template=template.template,
            constraints=dict(template.constraints),
            defaults=dict(template.defaults),
            verbs=template.verbs,
            order=template.order,
            controller=template.controller.type,
            action=template.action.method_name,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "template": self.template,
            "constraints": dict(self.constraints),
            "defaults": dict(self.defaults),
            "verbs": sorted(self.verbs) if self.verbs else None,
            "order": self.order,
            "controller": self.controller,
            "action": self.action,
        }


class RouteSink(ABC):
    """Minimal interface for route registration targets."""

    @abstractmethod
    def add_route(self, entry: RouteEntry) -> None:
        """Register one route.

        Args:
            entry: The route record; entries arrive in match order.
        """
        ...
