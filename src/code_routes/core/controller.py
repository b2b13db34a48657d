"""Controller base class for Code Routes.

A controller is a class grouping related actions. Its position in the URL
space comes from its namespace: by default the module it is defined in,
or the ``namespace`` given in the class statement.

Class keywords
--------------
- ``abstract=True``: the class is only a base for other controllers; it is
  never reflected itself, but its actions and route properties are
  inherited.
- ``namespace="app.controllers.admin"``: explicit namespace path.

Example::

    from code_routes import Controller, action

    class UserController(Controller, namespace="app.controllers.admin"):
        def index(self):
            ...

        @action(route="{id}")
        def edit(self, id: int):
            ...
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, ClassVar

__all__ = ["Controller", "controller_namespace", "is_controller_type", "iter_controller_types"]


class Controller:
    """Base class for every routable controller."""

    _abstract_controller: ClassVar[bool] = True
    _route_namespace: ClassVar[str | None] = None

    def __init_subclass__(cls, *, abstract: bool = False, namespace: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._abstract_controller = abstract
        cls._route_namespace = namespace.strip(".") if namespace else None


def controller_namespace(cls: type) -> str:
    """Return the namespace path of a controller type."""
    return getattr(cls, "_route_namespace", None) or cls.__module__ or ""


def is_controller_type(cls: Any, suffix: str = "Controller") -> bool:
    """Return True when ``cls`` can be reflected as a controller."""
    if not isinstance(cls, type) or not issubclass(cls, Controller) or cls is Controller:
        return False
    if cls.__dict__.get("_abstract_controller", False):
        return False
    name = cls.__name__
    return name.endswith(suffix) and len(name) > len(suffix)


def iter_controller_types(base: type = Controller) -> Iterator[type]:
    """Yield every loaded subclass of ``base``, depth first, once."""
    seen: set[type] = set()
    stack = list(reversed(base.__subclasses__()))
    while stack:
        cls = stack.pop()
        if cls in seen:
            continue
        seen.add(cls)
        yield cls
        stack.extend(reversed(cls.__subclasses__()))
