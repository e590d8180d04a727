"""Tests for class model documents and model assembly."""

import json

import pytest
import yaml

from oometrics.model_loader import (
    build_model,
    decode_flow,
    discover_model_files,
    load_model_file,
    load_source_units,
    normalize_type_names,
)
from oometrics.models import AccessModifier, BoolChain, BoolOp, If, Loop, LoopKind


ORDERS_UNIT = {
    "namespace": "Shop.Orders",
    "file": "src/Orders/Order.cs",
    "classes": [
        {
            "name": "Order",
            "base": "Entity",
            "access": "public",
            "loc": 40,
            "sloc": 31,
            "coupled_types": ["Customer", "List<OrderLine>", "int", "Order"],
            "fields": [{"name": "_lines", "type": "List<OrderLine>"}],
            "properties": [{"name": "Id", "type": "int", "access": "public", "get": True, "set": True}],
            "methods": [
                {"name": "Order", "constructor": True, "access": "public"},
                {
                    "name": "Total",
                    "access": "public",
                    "accessed_fields": ["_lines"],
                    "external_calls": ["OrderLine.Amount", "OrderLine.Amount"],
                    "flow": [
                        {"kind": "foreach", "body": {"kind": "if", "condition": {"kind": "bool", "ops": ["&&"]}}},
                    ],
                },
            ],
        },
    ],
}

CORE_UNIT = {
    "namespace": "Shop.Core",
    "classes": [
        {
            "name": "Entity",
            "abstract": True,
            "fields": [
                {"name": "Key", "access": "protected"},
                {"name": "_secret"},
                {"name": "Count", "access": "public", "static": True},
            ],
            "methods": [
                {"name": "Validate", "access": "public", "virtual": True},
                {"name": "Hidden"},
            ],
        },
    ],
}


class TestTypeNames:
    @pytest.mark.parametrize("expr,expected", [
        ("Customer", ["Customer"]),
        ("int", []),
        ("String", []),
        ("System.DateTime", []),
        ("Customer[]", ["Customer"]),
        ("Customer?", ["Customer"]),
        ("List<OrderLine>", ["OrderLine"]),
        ("Dictionary<string, List<Order>>", ["Order"]),
        ("Repository<Order, Customer>", ["Repository", "Order", "Customer"]),
    ])
    def test_normalize(self, expr, expected):
        assert normalize_type_names(expr) == expected

    def test_primitives_any_case(self):
        assert normalize_type_names("Int") == []


class TestDecode:
    def test_class_record(self):
        order = build_model([ORDERS_UNIT])[0]
        assert order.full_name == "Shop.Orders.Order"
        assert order.file_path == "src/Orders/Order.cs"
        assert order.access is AccessModifier.PUBLIC
        assert order.coupled_types == {"Customer", "OrderLine"}
        assert order.constructor_count == 1
        assert order.method_declaration_count == 1
        assert order.property_accessor_count == 2
        assert order.nom == 4

    def test_method_complexity_from_flow(self):
        order = build_model([ORDERS_UNIT])[0]
        total = next(m for m in order.methods if m.name == "Total")
        assert total.cyclomatic_complexity == 4
        # foreach 1, nested if 1+1, && run 1
        assert total.cognitive_complexity == 4
        assert total.external_method_calls == {"OrderLine.Amount"}

    def test_explicit_complexity(self):
        unit = {"classes": [{"name": "A", "methods": [{"name": "M", "cyclomatic": 7, "cognitive": 3}]}]}
        method = build_model([unit])[0].methods[0]
        assert (method.cyclomatic_complexity, method.cognitive_complexity) == (7, 3)

    def test_counts_override(self):
        unit = {"classes": [{
            "name": "A",
            "counts": {"methods": 1, "constructors": 1, "property_accessors": 2, "event_accessors": 2},
        }]}
        assert build_model([unit])[0].nom == 6

    def test_interface_members_default_public(self):
        unit = {"classes": [{"name": "IRepo", "interface": True, "methods": [{"name": "Save"}]}]}
        method = build_model([unit])[0].methods[0]
        assert method.access is AccessModifier.PUBLIC
        assert method.is_abstract

    @pytest.mark.parametrize("unit,fragment", [
        ({"classes": [{"namespace": "X"}]}, "needs a 'name'"),
        ({"classes": [{"name": "A", "access": "friend"}]}, "unknown access modifier"),
        ({"classes": [{"name": "A", "loc": "many"}]}, "'loc' must be an integer"),
        ({"classes": [{"name": "A", "methods": [{"name": "M", "flow": {"kind": "spin"}}]}]},
         "unknown flow node kind"),
        ({"classes": "A"}, "expected a list"),
    ])
    def test_malformed_records(self, unit, fragment):
        with pytest.raises(ValueError, match=fragment):
            build_model([unit])


class TestFlowDecoding:
    def test_loop_aliases(self):
        node = decode_flow({"kind": "loop", "loop": "do"})
        assert isinstance(node, Loop) and node.kind is LoopKind.DO

    def test_bool_aliases(self):
        node = decode_flow({"kind": "bool", "ops": ["and", "||", "coalesce"]})
        assert node == BoolChain([BoolOp.AND, BoolOp.OR, BoolOp.COALESCE])

    def test_else_if(self):
        node = decode_flow({"kind": "if", "else": {"kind": "if"}})
        assert isinstance(node, If) and isinstance(node.orelse, If)

    def test_try_flattens_to_block(self):
        node = decode_flow({"kind": "try", "body": [{"kind": "call", "target": "Run"}],
                            "catches": [{"body": []}], "finally": []})
        assert len(node.children) == 2


class TestAssembly:
    def test_partial_classes_merge(self):
        units = [
            {"namespace": "N", "classes": [{"name": "A", "loc": 10, "methods": [{"name": "M1"}]}]},
            {"namespace": "N", "classes": [{"name": "A", "loc": 5, "interfaces": ["I"],
                                            "methods": [{"name": "M2"}]}]},
        ]
        classes = build_model(units)
        assert len(classes) == 1
        merged = classes[0]
        assert merged.loc == 15
        assert [m.name for m in merged.methods] == ["M1", "M2"]
        assert merged.interfaces == ["I"]
        assert merged.method_declaration_count == 2

    def test_inherited_members(self):
        classes = {c.name: c for c in build_model([CORE_UNIT, ORDERS_UNIT])}
        order = classes["Order"]
        inherited = {m.name for m in order.inherited_methods}
        assert inherited == {"Validate"}
        assert {f.name for f in order.inherited_fields} == {"Key"}
        assert len(order.defined_methods) == 2

    def test_inheritance_through_chain(self):
        unit = {"classes": [
            {"name": "C", "base": "B"},
            {"name": "B", "base": "A"},
            {"name": "A", "methods": [{"name": "Run", "access": "public"}]},
        ]}
        classes = {c.name: c for c in build_model([unit])}
        assert [m.name for m in classes["C"].inherited_methods] == ["Run"]

    def test_overrides_not_duplicated(self):
        unit = {"classes": [
            {"name": "A", "methods": [{"name": "Run", "access": "public", "virtual": True}]},
            {"name": "B", "base": "A",
             "methods": [{"name": "Run", "access": "public", "override": True}]},
        ]}
        b = build_model([unit])[1]
        assert [m.name for m in b.methods] == ["Run"]
        assert not b.inherited_methods

    def test_self_coupling_removed(self):
        order = build_model([ORDERS_UNIT])[0]
        assert "Order" not in order.coupled_types


class TestFiles:
    def test_yaml_and_json(self, tmp_path):
        (tmp_path / "orders.yaml").write_text(yaml.safe_dump(ORDERS_UNIT), encoding="utf-8")
        (tmp_path / "core.json").write_text(json.dumps({"units": [CORE_UNIT]}), encoding="utf-8")
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

        files = discover_model_files(str(tmp_path))
        assert [f.rsplit("/", 1)[-1] for f in files] == ["core.json", "orders.yaml"]

        units = load_source_units([str(tmp_path)])
        assert len(build_model(units)) == 2

    def test_file_defaults_to_document_path(self, tmp_path):
        path = tmp_path / "core.yaml"
        path.write_text(yaml.safe_dump(CORE_UNIT), encoding="utf-8")
        units = load_model_file(str(path))
        assert units[0]["file"] == str(path)

    def test_empty_document(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_model_file(str(path)) == []

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ValueError, match="invalid JSON"):
            load_model_file(str(path))

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            discover_model_files(str(tmp_path / "missing"))
