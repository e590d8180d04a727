"""JSON output writer."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import List

from ..models import ClassMetrics, ProjectMetrics
from ..package_analysis.models import PackageMetrics


def write_class_metrics(class_metrics: List[ClassMetrics], output_dir: str) -> str:
    """Write class-level metrics to JSON."""
    path = os.path.join(output_dir, "raw", "class_metrics.json")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    data = {
        "generated_at": _now_iso(),
        "count": len(class_metrics),
        "classes": [cm.to_dict() for cm in class_metrics],
    }

    _write_json(path, data)
    return path


def write_package_metrics(package_metrics: List[PackageMetrics], output_dir: str) -> str:
    """Write package-level metrics to JSON."""
    path = os.path.join(output_dir, "raw", "package_metrics.json")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    data = {
        "generated_at": _now_iso(),
        "count": len(package_metrics),
        "packages": [pm.to_dict() for pm in package_metrics],
    }

    _write_json(path, data)
    return path


def write_project_summary(project_metrics: ProjectMetrics, output_dir: str) -> str:
    """Write project summary to JSON; per-class detail lives in class_metrics.json."""
    path = os.path.join(output_dir, "project_summary.json")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    summary = project_metrics.to_dict()
    summary.pop("classes", None)
    data = {
        "generated_at": _now_iso(),
        **summary,
    }

    _write_json(path, data)
    return path


def write_metadata(
    output_dir: str,
    config_version: str,
    model_files: List[str],
    duration_seconds: float,
    error_count: int = 0,
) -> str:
    """Write metadata about the analysis run."""
    path = os.path.join(output_dir, "metadata.json")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    data = {
        "generated_at": _now_iso(),
        "config_version": config_version,
        "model_files": model_files,
        "load_errors": error_count,
        "duration_seconds": round(duration_seconds, 2),
    }

    _write_json(path, data)
    return path


def _write_json(path: str, data: dict):
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2, ensure_ascii=False, default=str)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
