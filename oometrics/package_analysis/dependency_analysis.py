"""Class-to-class dependency extraction for package metrics.

Every class contributes a directed edge to each class it names through its
coupled types, its methods' used types, its base class or its interfaces.
Edges are deduplicated, so a pair is counted once however often it occurs.
"""

from __future__ import annotations

from typing import List, Optional, Set

from ..class_index import ClassIndex
from ..models import ClassNode
from .models import ClassDependency, package_of


def get_class_dependencies(
    classes: List[ClassNode],
    index: Optional[ClassIndex] = None,
) -> List[ClassDependency]:
    """Directed, deduplicated class dependencies sorted by (source, target).

    Args:
        classes: The class model.
        index: Optional prebuilt index; one is built when omitted.

    Returns:
        One ClassDependency per distinct (source, target) pair, self-edges
        excluded.
    """
    if index is None:
        index = ClassIndex(classes)

    seen: Set[tuple] = set()
    results: List[ClassDependency] = []

    for cls in classes:
        names = set(cls.referenced_type_names)
        if cls.base_class_name:
            names.add(cls.base_class_name)
        names.update(cls.interfaces)

        for name in sorted(names):
            target = index.resolve_for_package(name)
            if target is None or target.full_name == cls.full_name:
                continue
            pair = (cls.full_name, target.full_name)
            if pair in seen:
                continue
            seen.add(pair)
            results.append(ClassDependency(
                source=cls.full_name,
                target=target.full_name,
                source_package=package_of(cls.namespace),
                target_package=package_of(target.namespace),
            ))

    results.sort(key=lambda d: (d.source, d.target))
    return results


def get_cross_package_dependencies(dependencies: List[ClassDependency]) -> List[ClassDependency]:
    """Only the dependencies whose endpoints live in different packages."""
    return [d for d in dependencies if d.crosses_packages]
