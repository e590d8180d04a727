"""System-level MOOD metrics: MHF, AHF, MIF, AIF, PF, CF.

All ratios are taken over non-interface classes. Zero denominators yield 0,
except AHF which is 1.0 when the project declares no attributes.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Set

from ..models import ClassNode


def compute_mood_metrics(classes: List[ClassNode]) -> Dict[str, float]:
    """All six MOOD values keyed by ProjectMetrics field name."""
    return {
        "mhf": calculate_mhf(classes),
        "ahf": calculate_ahf(classes),
        "mif": calculate_mif(classes),
        "aif": calculate_aif(classes),
        "pf": calculate_pf(classes),
        "cf": calculate_cf(classes),
    }


def _concrete(classes: List[ClassNode]) -> List[ClassNode]:
    return [c for c in classes if not c.is_interface]


# ---------------------------------------------------------------------------
# Hiding factors
# ---------------------------------------------------------------------------

def calculate_mhf(classes: List[ClassNode]) -> float:
    """Hidden defined methods / defined methods."""
    total = hidden = 0
    for cls in _concrete(classes):
        methods = cls.defined_methods
        total += len(methods)
        hidden += sum(1 for m in methods if m.is_hidden)
    return hidden / total if total else 0.0


def calculate_ahf(classes: List[ClassNode]) -> float:
    """Hidden defined attributes / defined attributes; properties are attributes."""
    total = hidden = 0
    for cls in _concrete(classes):
        fields = cls.defined_fields
        properties = cls.defined_properties
        total += len(fields) + len(properties)
        hidden += sum(1 for f in fields if f.is_hidden)
        hidden += sum(1 for p in properties if p.is_hidden)
    return hidden / total if total else 1.0


# ---------------------------------------------------------------------------
# Inheritance factors
# ---------------------------------------------------------------------------

def calculate_mif(classes: List[ClassNode]) -> float:
    """Inherited non-static methods / available non-static methods."""
    available = inherited = 0
    for cls in _concrete(classes):
        methods = [m for m in cls.methods if not m.is_static]
        available += len(methods)
        inherited += sum(1 for m in methods if m.is_inherited)
    return inherited / available if available else 0.0


def calculate_aif(classes: List[ClassNode]) -> float:
    """Inherited non-static fields / available non-static fields."""
    available = inherited = 0
    for cls in _concrete(classes):
        fields = [f for f in cls.fields if not f.is_static]
        available += len(fields)
        inherited += sum(1 for f in fields if f.is_inherited)
    return inherited / available if available else 0.0


# ---------------------------------------------------------------------------
# Polymorphism factor
# ---------------------------------------------------------------------------

def calculate_pf(classes: List[ClassNode]) -> float:
    """Overriding methods / sum of (new virtual methods x descendants)."""
    children = _children_by_base(classes)
    overriding = potential = 0
    for cls in _concrete(classes):
        methods = cls.defined_methods
        overriding += sum(1 for m in methods if m.is_override)
        new_virtual = sum(1 for m in methods if m.is_virtual and not m.is_override)
        if new_virtual:
            potential += new_virtual * count_descendants(cls, children)
    return overriding / potential if potential else 0.0


def _children_by_base(classes: List[ClassNode]) -> Dict[str, List[ClassNode]]:
    children: Dict[str, List[ClassNode]] = defaultdict(list)
    for cls in classes:
        if cls.base_class_name:
            children[cls.base_class_name].append(cls)
    return children


def count_descendants(
    cls: ClassNode,
    children: Dict[str, List[ClassNode]],
    _visiting: Set[str] = None,
) -> int:
    """Direct and transitive subclasses of *cls*; cyclic chains stop at the repeat."""
    visiting = set() if _visiting is None else _visiting
    if cls.full_name in visiting:
        return 0
    visiting.add(cls.full_name)

    direct = list(children.get(cls.name, []))
    if cls.full_name != cls.name:
        direct.extend(children.get(cls.full_name, []))

    count = 0
    for child in direct:
        if child.full_name in visiting:
            continue
        count += 1 + count_descendants(child, children, visiting)
    visiting.discard(cls.full_name)
    return count


# ---------------------------------------------------------------------------
# Coupling factor
# ---------------------------------------------------------------------------

def calculate_cf(classes: List[ClassNode]) -> float:
    """Client relations between project classes / TC * (TC - 1).

    A class is a client of another when its coupled or used types name it.
    Uses of the class's own base class are not counted.
    """
    concrete = _concrete(classes)
    tc = len(concrete)
    if tc <= 1:
        return 0.0

    names: Dict[str, str] = {}
    for cls in concrete:
        names.setdefault(cls.full_name, cls.full_name)
    for cls in concrete:
        names.setdefault(cls.name, cls.full_name)

    couplings = 0
    for cls in concrete:
        base = names.get(cls.base_class_name) if cls.base_class_name else None
        used = {
            names[t] for t in cls.referenced_type_names if t in names
        }
        used.discard(cls.full_name)
        used.discard(base)
        couplings += len(used)

    return couplings / (tc * (tc - 1))
