# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Configuration for Code Routes.

``CodeRoutingSettings`` is an immutable pydantic model passed explicitly to
the build call; there is no process-wide default object to mutate. Use
``replace()`` to derive a modified copy.

Fields
------
- ``base_route``: prefix prepended to every route (``"api/v1"``).
- ``root_namespace``: overrides the namespace derived from the root
  controller.
- ``route_formatter``: segment formatter (see ``core.formatting``).
- ``default_action``: action whose segment is elided (case-insensitive).
- ``controller_suffix``: suffix stripped from controller class names.
- ``binders``: the ``BinderRegistry`` used for route tokens.
- ``format_provider``: ``NumberFormat`` handed to binders when matching.
- ``scan_packages``: import the root package submodules before discovery.

Example::

    settings = CodeRoutingSettings(base_route="api", route_formatter=hyphenate)
    table = map_code_routes(ApiController, settings=settings)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from code_routes.binding import DEFAULT_BINDERS, INVARIANT, BinderRegistry, NumberFormat

__all__ = ["CodeRoutingSettings"]


class CodeRoutingSettings(BaseModel):
    """Immutable route generation settings."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    base_route: str | None = None
    root_namespace: str | None = None
    route_formatter: Callable[..., str] | None = None
    default_action: str = "index"
    controller_suffix: str = "Controller"
    binders: BinderRegistry = DEFAULT_BINDERS
    format_provider: NumberFormat = INVARIANT
    scan_packages: bool = True

    @field_validator("base_route")
    @classmethod
    def _normalize_base_route(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().strip("/")
        if "//" in value:
            raise ValueError("base_route cannot contain empty segments")
        return value or None

    @field_validator("root_namespace")
    @classmethod
    def _normalize_root_namespace(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().strip(".") or None

    @field_validator("controller_suffix")
    @classmethod
    def _check_suffix(cls, value: str) -> str:
        if not value:
            raise ValueError("controller_suffix cannot be empty")
        return value

    @property
    def base_route_segments(self) -> list[str]:
        return self.base_route.split("/") if self.base_route else []

    def replace(self, **changes: Any) -> CodeRoutingSettings:
        """Return a validated copy with ``changes`` applied."""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(changes)
        return type(self)(**values)
