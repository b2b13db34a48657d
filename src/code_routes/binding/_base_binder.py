"""Binder contract definitions for Code Routes.

A binder converts the text of one URL segment into a typed value and
describes, as a regular expression, which literal forms it accepts.

Objects
-------
``NumberFormat``
    Frozen dataclass playing the role of a culture/format provider for
    numeric binders. Fields: ``negative_sign``, ``positive_sign``,
    ``decimal_separator``. ``INVARIANT`` is the default provider.

``ParameterBinder``
    Base class every binder subclasses. Class attributes:
        - ``parameter_type``: the Python type produced by ``try_bind``
        - ``binder_code``: optional registry code (e.g. ``"uint16"``)
        - ``constraint``: regex for acceptable segments (``""`` = any), in
          the invariant format

    Key methods:
        - ``try_bind(value, provider=None) -> (result, ok)``
        - ``constraint_for(provider) -> str``: the constraint for the literal
          forms ``format`` produces under ``provider``
        - ``format(value, provider=None) -> str``

Binders hold no mutable state and are shared by every route and every
request thread.

Example::

    from code_routes.binding import ParameterBinder

    class SlugBinder(ParameterBinder):
        binder_code = "slug"
        parameter_type = str
        constraint = r"[a-z0-9]+(?:-[a-z0-9]+)*"

        def try_bind(self, value, provider=None):
            if re.fullmatch(self.constraint, value or ""):
                return value, True
            return None, False
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["INVARIANT", "NumberFormat", "ParameterBinder"]


@dataclass(frozen=True)
class NumberFormat:
    """Culture-like description of numeric literal forms."""

    negative_sign: str = "-"
    positive_sign: str = "+"
    decimal_separator: str = "."


INVARIANT = NumberFormat()


class ParameterBinder:
    """Stateless converter from URL segment text to a typed value.

    Subclasses override ``try_bind`` and, when ``str(value)`` is not the
    canonical spelling, ``format``.
    """

    __slots__ = ()

    parameter_type: Any = str
    binder_code: str = ""
    constraint: str = ""

    def try_bind(self, value: str, provider: NumberFormat | None = None) -> tuple[Any, bool]:
        """Attempt to bind ``value``.

        Args:
            value: The raw route segment.
            provider: Format provider; ``INVARIANT`` when None.

        Returns:
            ``(result, True)`` on success, ``(None, False)`` otherwise.
        """
        raise NotImplementedError

    def constraint_for(self, provider: NumberFormat | None = None) -> str:
        """Return the segment regex under ``provider``."""
        return self.constraint

    def format(self, value: Any, provider: NumberFormat | None = None) -> str:
        """Return the canonical segment text for ``value``."""
        return str(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
