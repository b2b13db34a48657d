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

"""Tests for the model reflector: namespaces, actions, tokens and errors."""

import types
from typing import Annotated, Optional

import pytest

from code_routes import (
    CodeRoutingSettings,
    Controller,
    FromBody,
    FromQuery,
    FromRoute,
    ModelError,
    action,
    non_action,
)
from code_routes.binding import IntegerBinder, StringBinder, UInt16Binder
from code_routes.core.reflector import ModelReflector


class Widget:
    pass


class ShopController(Controller, namespace="refl.shop"):
    def index(self):
        pass


class CartController(Controller, namespace="refl.shop.sales"):
    def show(self, id: int):
        pass


class CartLineController(Controller, namespace="refl.shop.sales.cart_line"):
    def show(self, id: int):
        pass


class TenantBase(Controller, abstract=True):
    tenant: Annotated[str, FromRoute()]

    def ping(self):
        pass


class ReportController(TenantBase, namespace="refl.shop"):
    tenant: Annotated[int, FromRoute()]
    lang: Annotated[str, FromRoute()]
    title: str = "reports"

    def index(self):
        pass

    def ping(self):
        pass

    def export(self, id: int, form: Annotated[dict, FromBody()], page: Annotated[int, FromQuery()] = 1):
        pass

    def archive(self, year: int, *, fmt: str = "pdf", limit: Annotated[int, FromRoute(binder="uint16")] = 10):
        pass

    @non_action
    def helper(self):
        pass

    def _private(self):
        pass


def _reflect(root, *controllers, **settings):
    return ModelReflector(root, CodeRoutingSettings(**settings), controllers=controllers).reflect()


def _node(nodes, cls):
    return next(n for n in nodes if n.type is cls)


def test_root_namespace_strips_trailing_root_name():
    nodes = _reflect(ShopController, CartController)
    root = _node(nodes, ShopController)
    assert root.root_namespace == "refl"
    assert root.is_root
    assert root.namespace_path == ()
    assert root.controller_url == ""
    cart = _node(nodes, CartController)
    assert cart.namespace_path == ("shop", "sales")
    assert cart.controller_url == "shop/sales/Cart"
    assert cart.url_template == "shop/sales/{controller}"


def test_root_namespace_override():
    nodes = _reflect(ShopController, CartController, root_namespace="refl.shop")
    cart = _node(nodes, CartController)
    assert cart.namespace_path == ("sales",)
    assert cart.is_in_sub_namespace


def test_folder_per_controller_segment_is_dropped():
    nodes = _reflect(ShopController, CartLineController)
    line = _node(nodes, CartLineController)
    assert line.namespace_path == ("shop", "sales")
    assert line.controller_segment == "CartLine"


def test_base_route_prefixes_controller_url():
    nodes = _reflect(ShopController, CartController, base_route="api")
    assert _node(nodes, ShopController).controller_url == "api"
    assert _node(nodes, CartController).controller_url == "api/shop/sales/Cart"


def test_route_properties_first_declaration_wins():
    nodes = _reflect(ShopController, ReportController)
    report = _node(nodes, ReportController)
    assert [p.name for p in report.route_properties] == ["tenant", "lang"]
    assert report.route_properties[0].parameter_type is str
    assert report.controller_url == "shop/Report/{tenant}/{lang}"


def test_action_discovery_rules():
    nodes = _reflect(ShopController, ReportController)
    report = _node(nodes, ReportController)
    names = [a.method_name for a in report.actions]
    assert names == ["index", "ping", "export", "archive"]
    ping = report.find_actions("ping")[0]
    assert ping.declaring_type is ReportController
    assert report.find_actions("index")[0].is_default_action


def test_only_route_bound_parameters_become_tokens():
    nodes = _reflect(ShopController, ReportController)
    report = _node(nodes, ReportController)
    export = report.find_actions("export")[0]
    assert [p.name for p in export.route_parameters] == ["id"]
    assert export.parameter_types == (int, dict, int)
    archive = report.find_actions("archive")[0]
    assert [p.name for p in archive.route_parameters] == ["year", "limit"]
    limit = archive.route_parameters[1]
    assert isinstance(limit.binder, UInt16Binder)
    assert limit.optional and limit.default == 10


def test_token_attributes():
    class TokRootController(Controller, namespace="refl_tok"):
        def index(self, q: Optional[str] = None, code: Annotated[str, FromRoute(name="key", constraint="[A-Z]+")] = "X"):
            pass

        def files(self, path: Annotated[str, FromRoute(catch_all=True)]):
            pass

        def count(self, n):
            pass

    root = _reflect(TokRootController)[0]
    q, code = root.find_actions("index")[0].route_parameters
    assert q.nullable and q.optional and q.default is None
    assert isinstance(q.binder, StringBinder)
    assert (code.name, code.parameter_name, code.constraint) == ("key", "code", "[A-Z]+")
    path = root.find_actions("files")[0].route_parameters[0]
    assert path.catch_all and path.route_segment == "{*path}"
    n = root.find_actions("count")[0].route_parameters[0]
    assert n.parameter_type is str


def test_custom_binder_instance_is_used():
    binder = IntegerBinder()

    class BindRootController(Controller, namespace="refl_bind"):
        def index(self, n: Annotated[int, FromRoute(binder=binder)]):
            pass

    token = _reflect(BindRootController)[0].actions[0].route_parameters[0]
    assert token.binder is binder
    assert token.constraint == binder.constraint


def test_discovery_without_explicit_list():
    class DiscRootController(Controller, namespace="refl_disc"):
        def index(self):
            pass

    class PageController(Controller, namespace="refl_disc.content"):
        def show(self, slug: str):
            pass

    class OutsideController(Controller, namespace="elsewhere"):
        def show(self):
            pass

    class HiddenController(Controller, namespace="refl_disc", abstract=True):
        def show(self):
            pass

    nodes = ModelReflector(DiscRootController).reflect()
    assert [n.type for n in nodes] == [DiscRootController, PageController]


def test_root_must_be_a_controller():
    class Plain:
        pass

    class Misnamed(Controller, namespace="refl_misnamed"):
        def index(self):
            pass

    with pytest.raises(ModelError):
        ModelReflector(Plain)
    with pytest.raises(ModelError):
        ModelReflector(Misnamed)


def test_explicit_controller_outside_root_namespace():
    class OutRootController(Controller, namespace="refl_out"):
        def index(self):
            pass

    class StrayController(Controller, namespace="other"):
        def index(self):
            pass

    with pytest.raises(ModelError, match="outside the root namespace"):
        _reflect(OutRootController, StrayController)


def test_controller_name_collision():
    def first():
        class UserController(Controller, namespace="refl_col.admin"):
            def index(self):
                pass

        return UserController

    def second():
        class UserController(Controller, namespace="refl_col.admin"):
            def index(self):
                pass

        return UserController

    class ColRootController(Controller, namespace="refl_col"):
        def index(self):
            pass

    with pytest.raises(ModelError, match="collision"):
        _reflect(ColRootController, first(), second())


def test_controller_without_actions():
    class EmptyRootController(Controller, namespace="refl_empty"):
        pass

    with pytest.raises(ModelError, match="no actions"):
        _reflect(EmptyRootController)


@pytest.mark.parametrize(
    "method_source",
    [
        "optional_first",
        "catch_all_first",
        "reserved_action",
        "reserved_controller",
        "no_binder",
    ],
)
def test_invalid_parameter_declarations(method_source):
    def optional_first(self, a: int = 1, *, b: Annotated[int, FromRoute()]):
        pass

    def catch_all_first(self, path: Annotated[str, FromRoute(catch_all=True)], name: str):
        pass

    def reserved_action(self, action: str):
        pass

    def reserved_controller(self, controller: str):
        pass

    def no_binder(self, item: Widget):
        pass

    show = locals()[method_source]
    root = types.new_class(
        "BadRootController",
        (Controller,),
        {"namespace": f"refl_bad_{method_source}"},
        lambda ns: ns.update(show=show),
    )
    with pytest.raises(ModelError):
        _reflect(root)


def test_duplicate_token_between_property_and_parameter():
    class DupRootController(Controller, namespace="refl_dup"):
        tenant: Annotated[str, FromRoute()]

        def show(self, tenant: str):
            pass

    with pytest.raises(ModelError, match="Duplicate route token"):
        _reflect(DupRootController)


def test_custom_route_checks():
    class UnknownTokenController(Controller, namespace="refl_cr1"):
        @action(route="{nope}")
        def show(self, id: int):
            pass

    class UnboundController(Controller, namespace="refl_cr2"):
        @action(route="show")
        def show(self, id: int):
            pass

    class AbsoluteController(Controller, namespace="refl_cr3"):
        tenant: Annotated[str, FromRoute()]

        @action(route="~/home")
        def home(self):
            pass

    for root in (UnknownTokenController, UnboundController, AbsoluteController):
        with pytest.raises(ModelError):
            _reflect(root)


def test_custom_route_model():
    class CustomRootController(Controller, namespace="refl_cr_ok"):
        tenant: Annotated[str, FromRoute()]

        @action(route="~/t/{tenant}/home")
        def home(self):
            pass

        @action(route="do/{action}/{id}")
        def run(self, id: int):
            pass

    root = _reflect(CustomRootController)[0]
    home = root.find_actions("home")[0]
    assert home.custom_route_is_absolute
    assert home.custom_template() == "t/{tenant}/home"
    run = root.find_actions("run")[0]
    assert run.custom_route_has_action_token
    assert run.custom_template() == "{tenant}/do/run/{id}"


def test_unresolvable_annotation_is_model_error():
    class LateRootController(Controller, namespace="refl_late"):
        def show(self, item: "Missing"):  # noqa: F821
            pass

    with pytest.raises(ModelError, match="Cannot resolve"):
        _reflect(LateRootController)
