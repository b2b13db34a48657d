"""Route template builder.

Turns the validated model into the ordered list of ``RouteTemplate``
values handed to the host framework. The host matches top-down and the
first match wins, so order is part of the result.

Ordering
--------
- Controllers: deepest namespace first, the root controller last (its
  templates have no controller literal and are the least specific).
  Discovery order breaks ties.
- Inside a controller: custom templates first, so explicit routes win
  ties; then generated templates in declaration order, except that the
  default action (whose action segment is elided) goes last.
- Inside an action with K trailing optional parameters: K+1 templates,
  from all parameters down to none.

A custom route yields exactly one template.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .model import TOKEN_PATTERN, ActionNode, ControllerNode, RouteParameter, name_equals

__all__ = ["RouteTemplate", "RouteTemplateBuilder", "compile_template"]

logger = logging.getLogger("code_routes")


@dataclass(frozen=True)
class RouteTemplate:
    """One resolved route.

    Attributes:
        name: Unique route name.
        template: Template string, e.g. ``admin/user/{id}``.
        tokens: Route tokens in template order (route properties first).
        constraints: Read-only map of token name to regex, only for
            constrained tokens.
        defaults: Read-only map of token name to default value for optional
            parameters.
        verbs: Allowed verbs, None for any.
        order: Registration position.
        controller: Controller node producing the route.
        action: Action node producing the route.
        is_custom: True for custom route templates.
    """

    name: str
    template: str
    tokens: tuple[RouteParameter, ...]
    constraints: Mapping[str, str] = field(hash=False)
    defaults: Mapping[str, Any] = field(hash=False)
    verbs: frozenset[str] | None
    order: int
    controller: ControllerNode = field(compare=False, repr=False)
    action: ActionNode = field(compare=False, repr=False)
    is_custom: bool = False

    def path_for(self, values: Mapping[str, str]) -> str:
        """Substitute formatted token ``values`` (keyed by token name)."""
        by_name = {name.casefold(): text for name, text in values.items()}

        def replace(match: re.Match) -> str:
            return by_name[match.group(2).casefold()]

        return TOKEN_PATTERN.sub(replace, self.template)

    def allows(self, verb: str | None) -> bool:
        return verb is None or self.verbs is None or verb.upper() in self.verbs


def compile_template(template: RouteTemplate) -> tuple[re.Pattern, dict[str, RouteParameter]]:
    """Compile ``template`` to an anchored regex.

    Returns the pattern and a map from regex group name to token.
    """
    by_name = {t.name.casefold(): t for t in template.tokens}
    groups: dict[str, RouteParameter] = {}
    parts: list[str] = []
    position = 0
    for match in TOKEN_PATTERN.finditer(template.template):
        parts.append(re.escape(template.template[position : match.start()]))
        token = by_name[match.group(2).casefold()]
        group = f"t{len(groups)}"
        groups[group] = token
        if token.constraint:
            body = f"(?:{token.constraint})"
        else:
            body = ".+" if token.catch_all else "[^/]+"
        parts.append(f"(?P<{group}>{body})")
        position = match.end()
    parts.append(re.escape(template.template[position:]))
    return re.compile("".join(parts)), groups


class RouteTemplateBuilder:
    """Builds ordered route templates from controller nodes."""

    def __init__(self, controllers: Sequence[ControllerNode]) -> None:
        self.controllers = controllers

    def _ordered_controllers(self) -> list[ControllerNode]:
        indexed = list(enumerate(self.controllers))
        indexed.sort(key=lambda item: (item[1].is_root, -item[1].depth, item[0]))
        return [node for _, node in indexed]

    def build(self) -> list[RouteTemplate]:
        templates: list[RouteTemplate] = []
        for controller in self._ordered_controllers():
            custom = [a for a in controller.actions if a.custom_route is not None]
            generated = [a for a in controller.actions if a.custom_route is None]
            generated.sort(key=lambda a: a.is_default_action)
            for action in custom:
                templates.append(self._custom_template(action, len(templates)))
            for action in generated:
                for variant in self._generated_templates(action, len(templates)):
                    templates.append(variant)
        for template in templates:
            logger.debug("Route %d: %s -> %s", template.order, template.template or "/", template.name)
        return templates

    def _route_name(self, action: ActionNode, suffix: str) -> str:
        owner = action.controller.type
        return f"{owner.__module__}.{owner.__qualname__}.{action.method_name}:{suffix}"

    def _defaults(self, action: ActionNode) -> Mapping[str, Any]:
        return MappingProxyType({p.name: p.default for p in action.route_parameters if p.optional})

    def _constraints(self, tokens: Sequence[RouteParameter]) -> Mapping[str, str]:
        return MappingProxyType({t.name: t.constraint for t in tokens if t.constraint})

    def _custom_template(self, action: ActionNode, order: int) -> RouteTemplate:
        template = action.custom_template() or ""
        controller = action.controller
        candidates = [*controller.route_properties, *action.route_parameters]
        tokens: list[RouteParameter] = []
        for _star, name in TOKEN_PATTERN.findall(template):
            token = next(t for t in candidates if name_equals(t.name, name))
            tokens.append(token)
        return RouteTemplate(
            name=self._route_name(action, "custom"),
            template=template,
            tokens=tuple(tokens),
            constraints=self._constraints(tokens),
            defaults=self._defaults(action),
            verbs=action.verbs,
            order=order,
            controller=controller,
            action=action,
            is_custom=True,
        )

    def _generated_templates(self, action: ActionNode, start: int) -> list[RouteTemplate]:
        controller = action.controller
        prefix = controller.controller_url_segments
        if not action.is_default_action:
            prefix = [*prefix, action.action_segment]
        required = action.required_count
        result: list[RouteTemplate] = []
        for extra in range(action.optional_count, -1, -1):
            params = action.route_parameters[: required + extra]
            segments = [*prefix, *(p.route_segment for p in params)]
            tokens = (*controller.route_properties, *params)
            result.append(
                RouteTemplate(
                    name=self._route_name(action, str(len(params))),
                    template="/".join(segments),
                    tokens=tokens,
                    constraints=self._constraints(tokens),
                    defaults=self._defaults(action),
                    verbs=action.verbs,
                    order=start + len(result),
                    controller=controller,
                    action=action,
                )
            )
        return result
