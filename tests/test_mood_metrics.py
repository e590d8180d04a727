"""Tests for MOOD system metrics."""

import pytest

from oometrics.metrics.mood_metrics import (
    calculate_ahf,
    calculate_aif,
    calculate_cf,
    calculate_mhf,
    calculate_mif,
    calculate_pf,
    compute_mood_metrics,
    count_descendants,
    _children_by_base,
)
from oometrics.models import AccessModifier, PropertyNode

from conftest import make_class, make_field, make_method


class TestHidingFactors:
    def test_mhf(self):
        cls = make_class("A", methods=[
            make_method("Pub"),
            make_method("Priv", access=AccessModifier.PRIVATE),
            make_method("Prot", access=AccessModifier.PROTECTED),
            make_method("Int", access=AccessModifier.INTERNAL),
        ])
        assert calculate_mhf([cls]) == pytest.approx(0.5)

    def test_mhf_ignores_interfaces(self):
        iface = make_class("IA", is_interface=True, methods=[make_method("Run")])
        cls = make_class("A", methods=[make_method("Priv", access=AccessModifier.PRIVATE)])
        assert calculate_mhf([iface, cls]) == 1.0

    def test_mhf_no_methods(self):
        assert calculate_mhf([make_class("A")]) == 0.0

    def test_ahf_counts_properties(self):
        cls = make_class(
            "A",
            fields=[make_field("_x")],
            properties=[PropertyNode(name="X", access=AccessModifier.PUBLIC)],
        )
        assert calculate_ahf([cls]) == pytest.approx(0.5)

    def test_ahf_no_attributes(self):
        assert calculate_ahf([make_class("A")]) == 1.0


class TestInheritanceFactors:
    def test_mif(self):
        cls = make_class("B", methods=[
            make_method("Own"),
            make_method("FromBase", is_inherited=True),
            make_method("Helper", is_static=True),
        ])
        assert calculate_mif([cls]) == pytest.approx(0.5)

    def test_aif(self):
        cls = make_class("B", fields=[
            make_field("own"),
            make_field("fromBase", is_inherited=True),
            make_field("fromBase2", is_inherited=True),
            make_field("counter", is_static=True),
        ])
        assert calculate_aif([cls]) == pytest.approx(2 / 3)

    def test_empty(self):
        assert calculate_mif([]) == 0.0
        assert calculate_aif([]) == 0.0


class TestPolymorphism:
    def test_all_overridden(self):
        base = make_class("Shape", methods=[make_method("Area", is_virtual=True)])
        children = [
            make_class(name, base="Shape", methods=[make_method("Area", is_override=True)])
            for name in ("Circle", "Square")
        ]
        assert calculate_pf([base] + children) == pytest.approx(1.0)

    def test_grandchildren_raise_potential(self):
        base = make_class("Shape", methods=[make_method("Area", is_virtual=True)])
        circle = make_class("Circle", base="Shape", methods=[make_method("Area", is_override=True)])
        square = make_class("Square", base="Shape", methods=[make_method("Area", is_override=True)])
        cube = make_class("Cube", base="Square")
        assert calculate_pf([base, circle, square, cube]) == pytest.approx(2 / 3)

    def test_no_potential(self):
        assert calculate_pf([make_class("A", methods=[make_method("M")])]) == 0.0

    def test_descendants_cycle_terminates(self):
        a = make_class("A", base="B")
        b = make_class("B", base="A")
        children = _children_by_base([a, b])
        assert count_descendants(a, children) == 1


class TestCoupling:
    def test_cf(self):
        classes = [
            make_class("A", coupled=["B"]),
            make_class("B"),
            make_class("C"),
        ]
        assert calculate_cf(classes) == pytest.approx(1 / 6)

    def test_cf_single_class(self):
        assert calculate_cf([make_class("A", coupled=["B"])]) == 0.0

    def test_cf_ignores_base_class(self):
        classes = [
            make_class("Base"),
            make_class("Child", base="Base", coupled=["Base"]),
        ]
        assert calculate_cf(classes) == 0.0

    def test_cf_counts_method_types_once(self):
        classes = [
            make_class("A", coupled=["B"], methods=[make_method("Run", used_types=["B"])]),
            make_class("B"),
        ]
        assert calculate_cf(classes) == pytest.approx(0.5)


class TestComputeMood:
    def test_keys(self):
        mood = compute_mood_metrics([make_class("A")])
        assert set(mood) == {"mhf", "ahf", "mif", "aif", "pf", "cf"}
