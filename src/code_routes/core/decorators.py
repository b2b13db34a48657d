"""Decorator helpers for marking controller actions.

This module contains only marker helpers; nothing is registered at
decoration time.

``action(name=None, *, route=None, verbs=None, disambiguated=False, **meta)``
    Stores a payload dict on the function under ``_action_marker``:

    - ``name``: action name override (defaults to the method name). Several
      methods sharing one name form an overload group.
    - ``route``: custom route literal, relative to the controller URL, or
      absolute when it starts with ``~/``. ``{action}`` inside it expands to
      the action segment.
    - ``verbs``: allowed HTTP verbs (string or iterable), stored uppercase.
    - ``disambiguated``: declares overloads with different route parameter
      counts as intentional.
    - ``meta_*`` keywords are collected under ``meta`` for adapters.

``non_action``
    Excludes a public method from action discovery.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from genro_toolbox import dictExtract
from pydantic import validate_call

__all__ = ["action", "non_action"]


@validate_call
def action(
    name: str | None = None,
    *,
    route: str | None = None,
    verbs: str | list[str] | tuple[str, ...] | set[str] | frozenset[str] | None = None,
    disambiguated: bool = False,
    **kwargs: Any,
) -> Callable[[Callable], Callable]:
    """Attach explicit action configuration to a controller method.

    Args:
        name: Action name override.
        route: Custom route literal (e.g. ``"{id}"`` or ``"~/about"``).
        verbs: Allowed verbs, e.g. ``"POST"`` or ``("GET", "HEAD")``.
        disambiguated: Mark the method as an intentionally disambiguated overload.
        **kwargs: ``meta_*`` entries, exposed as ``ActionNode.meta``.

    Returns:
        Decorator returning the original function with the marker attached.

    Raises:
        TypeError: on keywords other than ``meta_*``.

    Example::

        class UserController(Controller):
            @action(route="{id}")
            def edit(self, id: int): ...

            @action("edit", verbs="POST")
            def save(self, id: int, form: Annotated[dict, FromBody()]): ...
    """
    meta = dictExtract(kwargs, "meta_", pop=True, slice_prefix=True)
    if kwargs:
        raise TypeError(f"Unknown action options: {', '.join(sorted(kwargs))}")
    if isinstance(verbs, str):
        verbs = [chunk for chunk in verbs.replace(",", " ").split()]
    payload: dict[str, Any] = {
        "name": name,
        "route": route,
        "verbs": frozenset(verb.upper() for verb in verbs) if verbs else None,
        "disambiguated": disambiguated,
        "meta": dict(meta),
    }

    def decorator(func: Callable) -> Callable:
        setattr(func, "_action_marker", payload)  # noqa: B010
        return func

    return decorator


def non_action(func: Callable) -> Callable:
    """Exclude ``func`` from the controller actions."""
    setattr(func, "_non_action", True)  # noqa: B010
    return func
