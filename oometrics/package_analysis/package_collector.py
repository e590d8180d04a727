"""Package-level analysis orchestrator.

Groups classes by namespace and combines the class dependency set into
Martin metrics (Ca, Ce, I, A, D) and the class-level package architecture
counts (NCP, OutC, InC, HC, SPC, SCC) for each package.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Set

from ..class_index import ClassIndex
from ..config import DistanceThresholds
from ..metrics.rating import instability_level, zone_description
from ..models import ClassNode
from .dependency_analysis import get_class_dependencies, get_cross_package_dependencies
from .models import ClassDependency, PackageMetrics, package_of


def collect_package_metrics(
    classes: List[ClassNode],
    index: Optional[ClassIndex] = None,
    distance_thresholds: Optional[DistanceThresholds] = None,
) -> List[PackageMetrics]:
    """Compute metrics for every package, sorted by package name.

    Args:
        classes: The class model.
        index: Optional prebuilt class index.
        distance_thresholds: Bands used for the main-sequence zone label.

    Returns:
        One PackageMetrics per distinct package.
    """
    dependencies = get_class_dependencies(classes, index)
    return aggregate_packages(classes, dependencies, distance_thresholds)


def aggregate_packages(
    classes: List[ClassNode],
    dependencies: List[ClassDependency],
    distance_thresholds: Optional[DistanceThresholds] = None,
) -> List[PackageMetrics]:
    """Fold a complete dependency set into per-package metrics."""
    groups: Dict[str, List[ClassNode]] = defaultdict(list)
    for cls in classes:
        groups[package_of(cls.namespace)].append(cls)

    efferent: Dict[str, Set[str]] = defaultdict(set)
    afferent: Dict[str, Set[str]] = defaultdict(set)
    outgoing: Dict[str, Set[str]] = defaultdict(set)
    incoming: Dict[str, Set[str]] = defaultdict(set)
    spc: Dict[str, int] = defaultdict(int)
    scc: Dict[str, int] = defaultdict(int)

    for dep in dependencies:
        if not dep.crosses_packages:
            spc[dep.source_package] += 1

    for dep in get_cross_package_dependencies(dependencies):
        scc[dep.source_package] += 1
        efferent[dep.source_package].add(dep.target_package)
        afferent[dep.target_package].add(dep.source_package)
        outgoing[dep.source_package].add(dep.source)
        incoming[dep.target_package].add(dep.target)

    results: List[PackageMetrics] = []
    for name in sorted(groups):
        members = groups[name]
        ca = len(afferent[name])
        ce = len(efferent[name])
        instability = ce / (ca + ce) if (ca + ce) > 0 else 0.0
        abstract_count = sum(1 for c in members if c.is_abstract or c.is_interface)
        abstractness = abstract_count / len(members) if members else 0.0
        distance = abs(abstractness + instability - 1.0)

        results.append(PackageMetrics(
            package_name=name,
            class_count=len(members),
            abstract_class_count=abstract_count,
            afferent_coupling=ca,
            efferent_coupling=ce,
            instability=instability,
            abstractness=abstractness,
            distance=distance,
            out_c=len(outgoing[name]),
            in_c=len(incoming[name]),
            hc=len(outgoing[name] & incoming[name]),
            spc=spc[name],
            scc=scc[name],
            depends_on=sorted(efferent[name]),
            depended_on_by=sorted(afferent[name]),
            classes=[c.name for c in members],
            zone=zone_description(abstractness, instability, distance, distance_thresholds),
            instability_level=instability_level(instability),
        ))

    return results
