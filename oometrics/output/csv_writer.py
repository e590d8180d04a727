"""CSV output writer."""

from __future__ import annotations

import csv
import os
from typing import List

from ..models import ClassMetrics
from ..package_analysis.models import PackageMetrics


_CLASS_HEADERS = [
    "full_name", "class_name", "namespace", "path", "is_interface",
    "wmc", "dit", "noc", "cbo", "cbo_no_inheritance", "rfc", "mpc",
    "lcom4", "lcom_percent", "tcc", "lcc",
    "loc", "sloc", "comment_lines",
    "number_of_methods", "nom", "number_of_fields", "number_of_properties",
    "public_method_count", "private_method_count",
    "public_field_count", "private_field_count",
    "overridden_method_count", "inherited_method_count", "inherited_field_count",
    "total_cyclomatic_complexity", "average_cyclomatic_complexity", "max_cyclomatic_complexity",
    "total_cognitive_complexity", "average_cognitive_complexity", "max_cognitive_complexity",
    "halstead_volume", "maintainability_index",
]

_PACKAGE_HEADERS = [
    "package_name", "class_count", "abstract_class_count",
    "afferent_coupling", "efferent_coupling",
    "instability", "abstractness", "distance",
    "out_c", "in_c", "hc", "spc", "scc",
    "zone", "instability_level",
]


def write_class_metrics_csv(class_metrics: List[ClassMetrics], output_dir: str) -> str:
    """Write class-level metrics to CSV."""
    path = os.path.join(output_dir, "raw", "class_metrics.csv")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=_CLASS_HEADERS)
        writer.writeheader()
        for cm in class_metrics:
            d = cm.to_dict()
            halstead = d.get("halstead")
            d["halstead_volume"] = halstead["volume"] if halstead else ""
            writer.writerow({k: d.get(k, "") for k in _CLASS_HEADERS})

    return path


def write_package_metrics_csv(package_metrics: List[PackageMetrics], output_dir: str) -> str:
    """Write package-level metrics to CSV."""
    path = os.path.join(output_dir, "raw", "package_metrics.csv")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=_PACKAGE_HEADERS)
        writer.writeheader()
        for pm in package_metrics:
            d = pm.to_dict()
            writer.writerow({k: d.get(k, "") for k in _PACKAGE_HEADERS})

    return path
