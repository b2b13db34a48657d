"""Segment formatting for Code Routes.

Turns raw identifiers (namespace segments, controller names, action names,
token names) into URL segment text. The default is identity; a
``route_formatter`` in the settings, or the ``formatter`` argument of
:func:`format_route_segment`, replaces it. Custom route literals are never
formatted.

Formatters receive a :class:`RouteFormatterArgs` and must be pure: the
result is computed once per node and reused.

Built-in formatters
-------------------
- ``lowercase``: ``UserProfile`` -> ``userprofile``
- ``hyphenate``: ``UserProfile`` / ``user_profile`` -> ``user-profile``

Both leave token names untouched.

Example::

    settings = CodeRoutingSettings(route_formatter=hyphenate)
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from code_routes.exceptions import ModelError

if TYPE_CHECKING:  # pragma: no cover
    from .settings import CodeRoutingSettings

__all__ = [
    "RouteFormatterArgs",
    "RouteSegmentType",
    "format_route_segment",
    "hyphenate",
    "lowercase",
]

# a single leading capital stays with its word: OAuth2Client -> oauth2-client
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])|(?<=[A-Z])([A-Z])([A-Z][a-z])")


class RouteSegmentType(str, Enum):
    """Role of the segment being formatted."""

    NAMESPACE = "namespace"
    CONTROLLER = "controller"
    ACTION = "action"
    TOKEN = "token"


@dataclass(frozen=True)
class RouteFormatterArgs:
    """Input of a route formatter.

    Attributes:
        original_segment: The raw identifier.
        segment_type: The role of the segment.
        controller_type: The controller the segment belongs to.
    """

    original_segment: str
    segment_type: RouteSegmentType
    controller_type: Any = None


def lowercase(args: RouteFormatterArgs) -> str:
    if args.segment_type is RouteSegmentType.TOKEN:
        return args.original_segment
    return args.original_segment.lower()


def hyphenate(args: RouteFormatterArgs) -> str:
    if args.segment_type is RouteSegmentType.TOKEN:
        return args.original_segment
    text = _WORD_BOUNDARY.sub(lambda m: "-".join(g for g in m.groups() if g), args.original_segment)
    return text.replace("_", "-").strip("-").lower()


def format_route_segment(
    settings: CodeRoutingSettings,
    args: RouteFormatterArgs,
    formatter: Callable[[RouteFormatterArgs], str] | None = None,
) -> str:
    """Format one segment with ``formatter`` or the settings formatter.

    Raises:
        ModelError: if the formatter returns an empty string or a string
            containing ``/``.
    """
    formatter = formatter or settings.route_formatter
    if formatter is None:
        return args.original_segment
    result = formatter(args)
    if not isinstance(result, str) or not result or "/" in result:
        raise ModelError(
            f"Route formatter returned {result!r} for {args.segment_type.value} "
            f"segment {args.original_segment!r}"
        )
    return result
