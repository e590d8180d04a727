"""Size rollups, Halstead combination and Maintainability Index."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional

from ..models import AccessModifier, ClassNode, HalsteadData


# ---------------------------------------------------------------------------
# Class size rollups
# ---------------------------------------------------------------------------

def compute_size_metrics(cls: ClassNode) -> dict:
    """Member counts and line facts for one class, keyed by ClassMetrics field."""
    methods = cls.defined_methods
    fields = cls.defined_fields
    return {
        "loc": cls.loc,
        "sloc": cls.sloc,
        "comment_lines": cls.comment_lines,
        "number_of_methods": len(methods),
        "nom": cls.nom,
        "number_of_fields": len(fields),
        "number_of_properties": len(cls.defined_properties),
        "public_method_count": sum(1 for m in methods if m.access is AccessModifier.PUBLIC),
        "private_method_count": sum(1 for m in methods if m.access is AccessModifier.PRIVATE),
        "public_field_count": sum(1 for f in fields if f.access is AccessModifier.PUBLIC),
        "private_field_count": sum(1 for f in fields if f.access is AccessModifier.PRIVATE),
        "overridden_method_count": sum(1 for m in methods if m.is_override),
        "inherited_method_count": len(cls.inherited_methods),
        "inherited_field_count": len(cls.inherited_fields),
    }


# ---------------------------------------------------------------------------
# Complexity rollups
# ---------------------------------------------------------------------------

def compute_complexity_metrics(cls: ClassNode) -> dict:
    """Cyclomatic/cognitive aggregates, Halstead and MI for one class.

    A class without defined methods keeps zero aggregates and MI 100.
    """
    methods = cls.defined_methods
    if not methods:
        return {
            "total_cyclomatic_complexity": 0,
            "average_cyclomatic_complexity": 0.0,
            "max_cyclomatic_complexity": 0,
            "total_cognitive_complexity": 0,
            "average_cognitive_complexity": 0.0,
            "max_cognitive_complexity": 0,
            "halstead": None,
            "maintainability_index": 100.0,
        }

    cyclo = [m.cyclomatic_complexity for m in methods]
    cognitive = [m.cognitive_complexity for m in methods]
    avg_cyclo = sum(cyclo) / len(cyclo)
    halstead = combine_method_halstead(m.halstead for m in methods)

    return {
        "total_cyclomatic_complexity": sum(cyclo),
        "average_cyclomatic_complexity": avg_cyclo,
        "max_cyclomatic_complexity": max(cyclo),
        "total_cognitive_complexity": sum(cognitive),
        "average_cognitive_complexity": sum(cognitive) / len(cognitive),
        "max_cognitive_complexity": max(cognitive),
        "halstead": halstead,
        "maintainability_index": compute_maintainability_index(
            halstead.volume if halstead else 0.0,
            avg_cyclo,
            cls.sloc,
            cls.comment_lines,
            cls.loc,
        ),
    }


# ---------------------------------------------------------------------------
# Halstead combination
# ---------------------------------------------------------------------------

def combine_method_halstead(items: Iterable[Optional[HalsteadData]]) -> Optional[HalsteadData]:
    """Class-level Halstead: summed totals, largest distinct counts of any method.

    The distinct counts approximate the class vocabulary; they are not a
    union of the methods' operator/operand sets.
    """
    present = [h for h in items if h is not None]
    if not present:
        return None
    return HalsteadData(
        n1=sum(h.n1 for h in present),
        n2=sum(h.n2 for h in present),
        eta1=max(1, max(h.eta1 for h in present)),
        eta2=max(1, max(h.eta2 for h in present)),
    )


def combine_class_halstead(items: Iterable[Optional[HalsteadData]]) -> Optional[HalsteadData]:
    """Project-level Halstead: summed totals, mean distinct counts across classes."""
    present = [h for h in items if h is not None]
    if not present:
        return None
    count = len(present)
    return HalsteadData(
        n1=sum(h.n1 for h in present),
        n2=sum(h.n2 for h in present),
        eta1=max(1, sum(h.eta1 for h in present) // count),
        eta2=max(1, sum(h.eta2 for h in present) // count),
    )


# ---------------------------------------------------------------------------
# Maintainability Index
# ---------------------------------------------------------------------------

def compute_maintainability_index(
    halstead_volume: float,
    avg_cyclo: float,
    sloc: int,
    comment_lines: int = 0,
    loc: int = 0,
) -> float:
    """MI = 100 * (171 - 5.2 ln V - 0.23 G - 16.2 ln L + 50 sin(sqrt(2.4 C))) / 171

    Returns 100 when there are no source lines. Otherwise V, G and L are
    floored at 1. C is the comment-line percentage of *loc*;
    the comment term is dropped when there are no comments. Clamped to 0-100.
    """
    if sloc <= 0:
        return 100.0

    volume = max(1.0, halstead_volume)
    cyclo = max(1.0, avg_cyclo)
    lines = max(1, sloc)
    comment_pct = comment_lines / loc * 100.0 if loc > 0 else 0.0

    raw = 171.0 - 5.2 * math.log(volume) - 0.23 * cyclo - 16.2 * math.log(lines)
    if comment_pct > 0:
        raw += 50.0 * math.sin(math.sqrt(2.4 * comment_pct))

    mi = 100.0 * raw / 171.0
    return max(0.0, min(100.0, mi))


# ---------------------------------------------------------------------------
# Project totals
# ---------------------------------------------------------------------------

def compute_project_size(classes: List[ClassNode]) -> dict:
    """Size totals over the whole class model, keyed by ProjectMetrics field."""
    return {
        "total_classes": sum(1 for c in classes if not c.is_interface),
        "total_interfaces": sum(1 for c in classes if c.is_interface),
        "total_methods": sum(c.nom for c in classes),
        "total_fields": sum(len(c.defined_fields) for c in classes),
        "total_loc": sum(c.loc for c in classes),
        "total_sloc": sum(c.sloc for c in classes),
        "total_comment_lines": sum(c.comment_lines for c in classes),
    }
