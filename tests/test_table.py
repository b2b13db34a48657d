# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for discovery over a real package tree and for the route table."""

import logging
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated
from uuid import UUID

import pytest

from code_routes import (
    INVARIANT,
    CodeRoutingSettings,
    Controller,
    FromRoute,
    NumberFormat,
    RouteMatch,
    action,
    hyphenate,
    map_code_routes,
)
from code_routes.core import table as table_module
from code_routes.core.table import clear_route_cache
from sampleapp.controllers import ApiController
from sampleapp.controllers.admin.order_history import OrderHistoryController
from sampleapp.controllers.admin.user import UserController
from sampleapp.controllers.blog import BlogController

HYPHEN = CodeRoutingSettings(route_formatter=hyphenate)

SAMPLE_VALUES = {int: 7, str: "x"}

TILDE_COMMA = NumberFormat(negative_sign="~", decimal_separator=",")


class Shade(Enum):
    LIGHT = "light"
    DARK = "dark"


class Level(Enum):
    LOW = 1
    HIGH = 10


class TypedRootController(Controller, namespace="tbl_typed"):
    def integer(self, value: int):
        pass

    def short(self, value: Annotated[int, FromRoute(binder="uint16")]):
        pass

    def real(self, value: float):
        pass

    def amount(self, value: Decimal):
        pass

    def flag(self, value: bool):
        pass

    def text(self, value: str):
        pass

    def day(self, value: date):
        pass

    def ident(self, value: UUID):
        pass

    def shade(self, value: Shade):
        pass

    def level(self, value: Level):
        pass


@pytest.fixture
def table():
    return map_code_routes(ApiController, settings=HYPHEN)


def test_discovery_finds_package_controllers():
    table = map_code_routes(ApiController)
    assert [t.template for t in table.templates] == [
        "admin/OrderHistory/{year}",
        "admin/OrderHistory",
        "admin/User/{id}",
        "admin/User/edit/{id}",
        "admin/User",
        "Blog/{tenant}/search/{q}/{page}",
        "Blog/{tenant}/search/{q}",
        "Blog/{tenant}/search",
        "Blog/{tenant}/publish/{slug}",
        "Blog/{tenant}/list",
        "Blog/{tenant}",
        "about",
        "",
    ]


def test_discovery_skips_abstract_bases(table):
    types = {node.type.__name__ for node in table.controllers}
    assert types == {"ApiController", "BlogController", "UserController", "OrderHistoryController"}


def test_hyphenated_templates(table):
    templates = [t.template for t in table.templates]
    assert templates[0] == "admin/order-history/{year}"
    assert "blog/{tenant}/publish/{slug}" in templates


def test_every_template_round_trips(table):
    for template in table.templates:
        segments = {
            token.name: token.binder.format(SAMPLE_VALUES[token.parameter_type])
            for token in template.tokens
        }
        path = "/" + template.path_for(segments)
        verb = sorted(template.verbs)[0] if template.verbs else None
        match = table.match(path, verb=verb)
        assert match is not None, path
        assert match.controller_type is template.controller.type
        assert match.action_name == template.action.name


def test_match_binds_values_and_properties(table):
    match = table.match("/blog/acme/search/python/2")
    assert match.method_name == "search"
    assert match.values == {"q": "python", "page": 2}
    assert match.properties == {"tenant": "acme"}


def test_match_fills_defaults(table):
    match = table.match("blog/acme/search")
    assert match.values == {"q": None, "page": 1}


def test_match_prefers_custom_route(table):
    match = table.match("/admin/user/42")
    assert match.method_name == "edit_by_id"
    assert match.values == {"id": 42}
    assert table.match("/admin/user/edit/42").method_name == "edit"


@pytest.mark.parametrize("path", ["admin/user/01", "admin/user/+5", "admin/order-history/70000", "nowhere"])
def test_match_rejects_non_canonical_or_unknown(table, path):
    assert table.match(path) is None


def test_match_honours_verbs(table):
    assert table.match("blog/acme/publish/hello", verb="GET") is None
    match = table.match("blog/acme/publish/hello", verb="post")
    assert match.method_name == "publish"
    assert table.match("blog/acme/publish/hello").method_name == "publish"


def test_failed_bind_falls_through():
    class ItemRootController(Controller, namespace="tbl_item"):
        @action(route="item/{code}")
        def by_code(self, code: Annotated[int, FromRoute(binder="uint8")]):
            pass

        @action(route="item/{slug}")
        def by_slug(self, slug: str):
            pass

    table = map_code_routes(ItemRootController, controllers=[])
    assert table.match("item/200").values == {"code": 200}
    match = table.match("item/300")
    assert match.method_name == "by_slug"
    assert match.values == {"slug": "300"}


def test_route_match_to_dict(table):
    match = table.match("admin/user")
    assert isinstance(match, RouteMatch)
    assert match.to_dict() == {
        "template": "admin/user",
        "controller": UserController,
        "action": "index",
        "values": {},
        "properties": {},
    }
    assert match == table.match("/admin/user/")
    assert "UserController.index" in repr(match)


def test_url_for(table):
    assert table.url_for(UserController, "edit", id=5) == "/admin/user/5"
    assert table.url_for(UserController, "edit_by_id", id=5) == "/admin/user/5"
    assert table.url_for(BlogController, "search", tenant="acme", q="py") == "/blog/acme/search/py"
    assert table.url_for(BlogController, "search", tenant="acme", q="py", page=3) == "/blog/acme/search/py/3"
    assert table.url_for(BlogController, "search", tenant="acme") == "/blog/acme/search"
    assert table.url_for(OrderHistoryController, "index") == "/admin/order-history"
    assert table.url_for(OrderHistoryController, "index", year=2020) == "/admin/order-history/2020"
    assert table.url_for(ApiController, "index") == "/"


def test_url_for_accepts_controller_nodes(table):
    node = next(n for n in table.controllers if n.type is BlogController)
    assert table.url_for(node, "list", tenant="acme") == "/blog/acme/list"


@pytest.mark.parametrize(
    "controller, action, values",
    [
        (BlogController, "search", {"q": "py"}),
        (BlogController, "search", {"tenant": "acme", "page": 3}),
        (BlogController, "missing", {"tenant": "acme"}),
        (UserController, "edit", {}),
    ],
)
def test_url_for_failures(table, controller, action, values):
    with pytest.raises(LookupError):
        table.url_for(controller, action, **values)


def test_table_is_cached_per_settings():
    first = map_code_routes(ApiController, settings=HYPHEN)
    assert map_code_routes(ApiController, settings=CodeRoutingSettings(route_formatter=hyphenate)) is first
    assert map_code_routes(ApiController, settings=HYPHEN, base_route="api") is not first
    clear_route_cache()
    assert table_module._ROUTE_TABLE_CACHE == {}
    assert map_code_routes(ApiController, settings=HYPHEN) is not first


def test_build_logs_route_count(caplog):
    clear_route_cache()
    with caplog.at_level(logging.INFO, logger="code_routes"):
        table = map_code_routes(ApiController, base_route="api")
    assert f"{len(table)} routes for ApiController" in caplog.text
    assert table.templates[-1].template == "api"


def test_nodes_introspection(table):
    nodes = table.nodes()
    assert nodes["root"] == "ApiController"
    blog = nodes["controllers"]["sampleapp.controllers.blog.BlogController"]
    assert blog["url_template"] == "{controller}/{tenant}"
    assert blog["controller_url"] == "blog/{tenant}"
    assert blog["route_properties"] == ["tenant"]
    publish = next(a for a in blog["actions"] if a["name"] == "publish")
    assert publish["verbs"] == ["POST"]
    assert publish["meta"] == {"audit": True}
    assert publish["templates"] == ["blog/{tenant}/publish/{slug}"]
    assert nodes["templates"] == [t.template for t in table.templates]


def test_nodes_rejects_unknown_mode(table):
    with pytest.raises(ValueError):
        table.nodes(mode="graphql")


@pytest.mark.parametrize("provider", [INVARIANT, TILDE_COMMA], ids=["invariant", "tilde-comma"])
@pytest.mark.parametrize(
    "method, value",
    [
        ("integer", -5),
        ("integer", 0),
        ("short", 65535),
        ("real", -1.5),
        ("real", 1e20),
        ("amount", Decimal("-2.50")),
        ("flag", False),
        ("text", "hello"),
        ("day", date(2024, 2, 29)),
        ("ident", UUID("12345678-1234-5678-1234-567812345678")),
        ("shade", Shade.DARK),
        ("level", Level.HIGH),
    ],
)
def test_builtin_binders_round_trip_through_url_for(provider, method, value):
    settings = CodeRoutingSettings(format_provider=provider)
    table = map_code_routes(TypedRootController, settings=settings, controllers=[])
    path = table.url_for(TypedRootController, method, value=value)
    match = table.match(path)
    assert match is not None, path
    assert match.method_name == method
    assert match.values == {"value": value}


def test_numeric_constraints_follow_format_provider():
    settings = CodeRoutingSettings(format_provider=TILDE_COMMA)
    table = map_code_routes(TypedRootController, settings=settings, controllers=[])
    integer = next(t for t in table.templates if t.action.method_name == "integer")
    assert integer.constraints == {"value": "0|~?[1-9][0-9]*"}
    assert table.url_for(TypedRootController, "real", value=-0.25) == "/real/~0,25"
    assert table.match("/integer/~5").values == {"value": -5}
    assert table.match("/real/~0,25").values == {"value": -0.25}
    assert table.match("/integer/-5") is None
    assert table.match("/real/-0.25") is None
