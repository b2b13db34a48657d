"""Disambiguation and validation pass.

Runs once the whole action set is known and fails fast, before any route
is produced.

Overload compatibility
    Actions are grouped by controller and action segment. In a group with
    more than one member and at least one route parameter:

    - different route parameter counts require every member to be declared
      ``action(disambiguated=True)``, else ``AmbiguousOverloadError``;
    - equal counts require equal token names, order and constraints,
      else ``IncompatibleOverloadError``.

Custom route consistency
    Actions with a custom route (other than ones using ``{action}``) are
    grouped by their resolved template; a group naming more than one action
    raises ``CustomRouteConflictError``.

Groups are visited in declaration order, so the reported group is stable
across runs.
"""

from __future__ import annotations

from collections.abc import Sequence

from code_routes.exceptions import (
    AmbiguousOverloadError,
    CustomRouteConflictError,
    IncompatibleOverloadError,
)

from .model import ActionNode

__all__ = ["check_custom_routes", "check_overloads", "validate_actions"]


def _overload_groups(actions: Sequence[ActionNode]) -> list[list[ActionNode]]:
    groups: dict[tuple[int, str], list[ActionNode]] = {}
    for action in actions:
        groups.setdefault((id(action.controller), action.action_segment.casefold()), []).append(action)
    return [
        group
        for group in groups.values()
        if len(group) > 1 and any(a.route_parameters for a in group)
    ]


def check_overloads(actions: Sequence[ActionNode]) -> None:
    """Enforce overload compatibility over ``actions``."""
    overloaded = _overload_groups(actions)

    for group in overloaded:
        if len({len(a.route_parameters) for a in group}) > 1:
            undeclared = [a for a in group if not a.disambiguated]
            if undeclared:
                raise AmbiguousOverloadError([a.signature() for a in undeclared])

    for group in overloaded:
        if len({len(a.route_parameters) for a in group}) > 1:
            continue
        first = group[0]
        expected = [p.signature_key() for p in first.route_parameters]
        if any([p.signature_key() for p in other.route_parameters] != expected for other in group[1:]):
            owner = first.controller.type
            raise IncompatibleOverloadError(f"{owner.__module__}.{owner.__qualname__}.{first.name}")


def check_custom_routes(actions: Sequence[ActionNode]) -> None:
    """Enforce that one custom route resolves to one action name."""
    groups: dict[str, list[ActionNode]] = {}
    for action in actions:
        if action.custom_route is None or action.custom_route_has_action_token:
            continue
        groups.setdefault(action.custom_template() or "", []).append(action)
    for route, group in groups.items():
        if len({a.name.casefold() for a in group}) > 1:
            raise CustomRouteConflictError(route, [a.signature() for a in group])


def validate_actions(actions: Sequence[ActionNode]) -> None:
    """Run every check of the disambiguation pass."""
    check_overloads(actions)
    check_custom_routes(actions)
