"""Project-level aggregation across all classes and packages."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from ..config import Thresholds
from ..metrics.size_metrics import combine_class_halstead, compute_project_size
from ..models import ClassMetrics, ClassNode, ProjectMetrics, ViolationCounts
from .stats import summarize_class_metrics


# ProjectMetrics average field -> ClassMetrics attribute
_AVERAGED = {
    "average_wmc": "wmc",
    "average_dit": "dit",
    "average_noc": "noc",
    "average_cbo": "cbo",
    "average_cbo_no_inheritance": "cbo_no_inheritance",
    "average_rfc": "rfc",
    "average_mpc": "mpc",
    "average_lcom": "lcom4",
    "average_tcc": "tcc",
    "average_lcc": "lcc",
    "average_nom": "nom",
}


def aggregate_project(
    classes: List[ClassNode],
    class_metrics: List[ClassMetrics],
    package_metrics: list,
    mood: Dict[str, float],
    thresholds: Thresholds,
    project_name: str = "",
) -> ProjectMetrics:
    """Combine class metrics, package metrics and MOOD values into a ProjectMetrics."""
    project = ProjectMetrics(
        project_name=project_name,
        class_metrics=list(class_metrics),
        package_metrics=list(package_metrics),
        **mood,
        **compute_project_size(classes),
    )

    if class_metrics:
        count = len(class_metrics)
        for target, attr in _AVERAGED.items():
            setattr(project, target, sum(getattr(cm, attr) for cm in class_metrics) / count)

    _aggregate_complexity(project, class_metrics)
    project.metrics_summary = summarize_class_metrics(class_metrics)
    project.violations = count_violations(classes, class_metrics, package_metrics, thresholds)
    return project


def _aggregate_complexity(project: ProjectMetrics, class_metrics: List[ClassMetrics]):
    """Complexity, MI and Halstead rollups over classes that have methods."""
    with_cyclo = [cm for cm in class_metrics if cm.total_cyclomatic_complexity > 0]
    if with_cyclo:
        project.average_cyclomatic_complexity = (
            sum(cm.average_cyclomatic_complexity for cm in with_cyclo) / len(with_cyclo)
        )
        project.max_cyclomatic_complexity = max(cm.max_cyclomatic_complexity for cm in class_metrics)

    with_cognitive = [cm for cm in class_metrics if cm.total_cognitive_complexity > 0]
    if with_cognitive:
        project.average_cognitive_complexity = (
            sum(cm.average_cognitive_complexity for cm in with_cognitive) / len(with_cognitive)
        )
        project.max_cognitive_complexity = max(cm.max_cognitive_complexity for cm in class_metrics)

    with_mi = [cm.maintainability_index for cm in class_metrics if cm.maintainability_index > 0]
    if with_mi:
        project.average_maintainability_index = sum(with_mi) / len(with_mi)

    project.halstead = combine_class_halstead(cm.halstead for cm in class_metrics)


def count_violations(
    classes: List[ClassNode],
    class_metrics: List[ClassMetrics],
    package_metrics: list,
    thresholds: Thresholds,
) -> ViolationCounts:
    """Threshold violations across methods, classes and packages."""
    v = ViolationCounts()

    for cls in classes:
        for method in cls.defined_methods:
            if method.cyclomatic_complexity > thresholds.cyclomatic_complexity.very_high:
                v.cyclo_very_high += 1
            elif method.cyclomatic_complexity > thresholds.cyclomatic_complexity.high:
                v.cyclo_high += 1

    for cm in class_metrics:
        if cm.is_interface:
            continue
        if cm.maintainability_index < thresholds.maintainability_index.poor:
            v.mi_poor += 1
        if cm.wmc > thresholds.weighted_methods_per_class.critical:
            v.god_classes += 1
        if cm.dit > thresholds.depth_of_inheritance.critical:
            v.deep_inheritance += 1
        if cm.noc > thresholds.number_of_children.warning:
            v.wide_hierarchy += 1
        if cm.cbo > thresholds.coupling_between_objects.critical:
            v.high_coupling += 1
        if cm.rfc > thresholds.response_for_class.critical:
            v.high_response += 1
        if cm.tcc < thresholds.tight_class_cohesion.warning and cm.number_of_methods >= 2:
            v.low_cohesion += 1
        if cm.lcom4 > thresholds.lack_of_cohesion.warning:
            v.split_candidates += 1

    for pm in package_metrics:
        if pm.distance > thresholds.distance_from_main_sequence.warning:
            v.off_main_sequence += 1

    return v


def top_classes(class_metrics: List[ClassMetrics], attr: str, n: int = 10,
                predicate: Optional[Callable[[ClassMetrics], bool]] = None) -> List[ClassMetrics]:
    """The *n* non-interface classes with the highest *attr*, ties by name."""
    pool = [cm for cm in class_metrics if not cm.is_interface]
    if predicate is not None:
        pool = [cm for cm in pool if predicate(cm)]
    return sorted(pool, key=lambda cm: (-getattr(cm, attr), cm.full_name))[:n]
