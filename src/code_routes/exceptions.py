# Copyright 2025 Softwell S.r.l. - All Rights Reserved
# SPDX-License-Identifier: Apache-2.0
"""Exceptions for Code Routes.

Every error defined here is a configuration error: it is raised while the
route table is being built, before any route reaches the host framework.
Binding a URL segment never raises; a rejected segment is simply a
non-matching route.
"""

from __future__ import annotations

__all__ = [
    "RouteConfigurationError",
    "ModelError",
    "AmbiguousOverloadError",
    "IncompatibleOverloadError",
    "CustomRouteConflictError",
]


class RouteConfigurationError(Exception):
    """Base class for errors detected while deriving routes."""


class ModelError(RouteConfigurationError):
    """Raised when the controller tree cannot be described.

    Typical causes: two controllers with the same name in one namespace,
    a route token whose type has no registered binder, a controller
    without actions, or misplaced optional parameters.
    """


class AmbiguousOverloadError(RouteConfigurationError):
    """Raised when overloads with different route parameter counts are not
    declared as disambiguated.

    Attributes:
        methods: Display signatures of the offending methods.
    """

    def __init__(self, methods: list[str]) -> None:
        self.methods = methods
        super().__init__(
            "The following action methods must be declared with "
            "action(disambiguated=True) for disambiguation: " + ", ".join(methods) + "."
        )


class IncompatibleOverloadError(RouteConfigurationError):
    """Raised when overloads with the same route parameter count differ in
    parameter name, position or constraint.

    Attributes:
        group: Qualified name of the overloaded action.
    """

    def __init__(self, group: str) -> None:
        self.group = group
        super().__init__(
            "Overloaded action methods must have parameters that are equal "
            f"in name, position and constraint ({group})."
        )


class CustomRouteConflictError(RouteConfigurationError):
    """Raised when one custom route resolves to more than one action name.

    Attributes:
        route: The conflicting custom route template.
        methods: Display signatures of the methods sharing it.
    """

    def __init__(self, route: str, methods: list[str]) -> None:
        self.route = route
        self.methods = methods
        super().__init__(
            f"Action methods sharing the custom route '{route}' must have the same name: "
            + ", ".join(methods)
            + "."
        )
