"""Shared builders for class-model tests."""

import pytest

from oometrics.models import AccessModifier, ClassNode, FieldNode, HalsteadData, MethodNode


def make_method(name, access=AccessModifier.PUBLIC, fields=(), calls=(), external=(),
                used_types=(), cyclo=1, cognitive=0, **kwargs):
    return MethodNode(
        name=name,
        access=access,
        accessed_fields=set(fields),
        called_methods=set(calls),
        external_method_calls=set(external),
        used_types=set(used_types),
        cyclomatic_complexity=cyclo,
        cognitive_complexity=cognitive,
        **kwargs,
    )


def make_field(name, access=AccessModifier.PRIVATE, **kwargs):
    return FieldNode(name=name, access=access, **kwargs)


def make_class(name, namespace="", methods=(), fields=(), base=None, coupled=(), **kwargs):
    methods = list(methods)
    kwargs.setdefault("method_declaration_count", sum(1 for m in methods if not m.is_inherited))
    return ClassNode(
        name=name,
        full_name=f"{namespace}.{name}" if namespace else name,
        namespace=namespace,
        base_class_name=base,
        methods=methods,
        fields=list(fields),
        coupled_types=set(coupled),
        **kwargs,
    )


@pytest.fixture
def chain_classes():
    """A <- B <- C <- D, each extending the previous one."""
    return [
        make_class("A"),
        make_class("B", base="A"),
        make_class("C", base="B"),
        make_class("D", base="C"),
    ]


@pytest.fixture
def two_package_classes():
    """P1.A references P2.B."""
    return [
        make_class("A", namespace="P1", coupled=["B"]),
        make_class("B", namespace="P2"),
    ]


@pytest.fixture
def sample_halstead():
    return HalsteadData(n1=10, n2=20, eta1=5, eta2=8)
