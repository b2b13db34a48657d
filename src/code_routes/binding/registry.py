"""Immutable binder registry.

``BinderRegistry`` maps a parameter type, or a binder code string such as
``"uint16"``, to a :class:`ParameterBinder`. Registries are values: adding
a binder returns a new registry and never changes the one in use by an
existing route table.

Lookup order for ``get(key)``:
    1. exact key (type or code)
    2. ``Enum`` subclasses, bound by member value
    3. a pydantic ``TypeAdapter`` binder, when pydantic supports the type
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from genro_toolbox.typeutils import safe_is_instance
from pydantic import PydanticUserError

from ._base_binder import ParameterBinder
from .binders import EnumBinder, TypeAdapterBinder, builtin_binders

__all__ = ["BinderRegistry", "DEFAULT_BINDERS"]

_BINDER_CLASS = "code_routes.binding._base_binder.ParameterBinder"


class BinderRegistry(Mapping):
    """Read-only mapping of type or code to binder."""

    __slots__ = ("_binders",)

    def __init__(self, binders: Mapping[Any, ParameterBinder] | None = None) -> None:
        table = dict(binders or {})
        for key, binder in table.items():
            if not safe_is_instance(binder, _BINDER_CLASS):
                raise TypeError(f"Binder for {key!r} must be a ParameterBinder, got {type(binder).__name__}")
        self._binders = MappingProxyType(table)

    def __getitem__(self, key: Any) -> ParameterBinder:
        return self._binders[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._binders)

    def __len__(self) -> int:
        return len(self._binders)

    def __hash__(self) -> int:
        return id(self)

    def __eq__(self, other: object) -> bool:
        return self is other

    # copies are the registry itself; hashing is by identity
    def __copy__(self) -> BinderRegistry:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> BinderRegistry:
        return self

    def get(self, key: Any, default: Any = None) -> ParameterBinder | None:  # type: ignore[override]
        """Resolve the binder for ``key`` (see module docstring)."""
        binder = self._binders.get(key)
        if binder is not None:
            return binder
        if isinstance(key, str) or key is None:
            return default
        if isinstance(key, type) and issubclass(key, Enum):
            return EnumBinder(key)
        try:
            return TypeAdapterBinder(key)
        except (PydanticUserError, TypeError):
            return default

    def with_binder(self, key: Any, binder: ParameterBinder | None = None) -> BinderRegistry:
        """Return a new registry with ``binder`` registered under ``key``.

        Passing a binder as the only argument registers it under its
        ``parameter_type`` and, when set, its ``binder_code``.
        """
        table = dict(self._binders)
        if binder is None:
            binder = key
            if not safe_is_instance(binder, _BINDER_CLASS):
                raise TypeError("with_binder() requires a ParameterBinder")
            table[binder.parameter_type] = binder
            if binder.binder_code:
                table[binder.binder_code] = binder
        else:
            table[key] = binder
        return BinderRegistry(table)

    def __repr__(self) -> str:
        return f"BinderRegistry({len(self._binders)} binders)"


DEFAULT_BINDERS = BinderRegistry(builtin_binders())
