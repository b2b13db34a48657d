"""In-memory sink collecting route entries in order."""

from __future__ import annotations

from typing import Any

from .sink_interface import RouteEntry, RouteSink

__all__ = ["ListSink"]


class ListSink(RouteSink):
    """Collects every emitted ``RouteEntry``."""

    __slots__ = ("entries",)

    def __init__(self) -> None:
        self.entries: list[RouteEntry] = []

    def add_route(self, entry: RouteEntry) -> None:
        self.entries.append(entry)

    @property
    def templates(self) -> list[str]:
        return [entry.template for entry in self.entries]

    def to_list(self) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in self.entries]
