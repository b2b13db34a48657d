"""Parameter source markers.

Markers go inside ``typing.Annotated`` and tell the reflector where a value
comes from::

    from typing import Annotated

    class UserController(Controller):
        tenant: Annotated[str, FromRoute()]          # route property

        def edit(self, id: Annotated[int, FromRoute(binder="uint32")]): ...
        def save(self, id: int, form: Annotated[dict, FromBody()]): ...

A marker may be given as a class (``FromQuery``) or an instance
(``FromQuery()``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin

__all__ = ["FromBody", "FromQuery", "FromRoute", "find_marker", "strip_annotated"]


@dataclass(frozen=True)
class FromRoute:
    """Bind from a route token.

    Attributes:
        name: Token name override (defaults to the parameter name).
        constraint: Regex override (defaults to the binder constraint).
        binder: Binder code (e.g. ``"uint16"``) or ``ParameterBinder`` instance.
        catch_all: Render as ``{*name}`` and match the rest of the path.
    """

    name: str | None = None
    constraint: str | None = None
    binder: Any = None
    catch_all: bool = False


@dataclass(frozen=True)
class FromQuery:
    """Bind from the query string; never part of the route."""

    name: str | None = None


@dataclass(frozen=True)
class FromBody:
    """Bind from the request body; never part of the route."""


_MARKER_TYPES = (FromRoute, FromQuery, FromBody)


def find_marker(hint: Any) -> FromRoute | FromQuery | FromBody | None:
    """Return the first parameter source marker in an ``Annotated`` hint."""
    if get_origin(hint) is not Annotated:
        return None
    for extra in get_args(hint)[1:]:
        if isinstance(extra, _MARKER_TYPES):
            return extra
        if isinstance(extra, type) and issubclass(extra, _MARKER_TYPES):
            return extra()
    return None


def strip_annotated(hint: Any) -> Any:
    """Return the bare type of an ``Annotated`` hint."""
    if get_origin(hint) is Annotated:
        return get_args(hint)[0]
    return hint
