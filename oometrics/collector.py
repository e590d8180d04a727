"""Collector: orchestrates model loading, metric computation, and output generation."""

from __future__ import annotations

import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import yaml

from .aggregation.project_aggregator import aggregate_project
from .class_index import ClassIndex
from .config import MetricsConfig, Thresholds
from .metrics.class_metrics import ClassMetricsEngine
from .metrics.mood_metrics import compute_mood_metrics
from .model_loader import assemble_model, decode_unit, discover_model_files, load_model_file
from .models import ClassMetrics, ClassNode, ProjectMetrics
from .output import csv_writer, json_writer, markdown_writer
from .package_analysis.package_collector import collect_package_metrics


class CollectorResult:
    """Container for all collected metrics."""

    def __init__(self):
        self.classes: List[ClassNode] = []
        self.project_metrics: Optional[ProjectMetrics] = None
        self.model_files: List[str] = []
        self.error_count: int = 0
        self.duration_seconds: float = 0.0


# ---------------------------------------------------------------------------
# Core computation
# ---------------------------------------------------------------------------

def compute_project_metrics(
    classes: List[ClassNode],
    thresholds: Optional[Thresholds] = None,
    project_name: str = "",
    workers: int = 1,
) -> ProjectMetrics:
    """Compute every metric over a completed class model.

    The model is only read. With *workers* > 1 the per-class metrics are
    computed on a thread pool once all shared indices are built; results
    keep model order either way.
    """
    if thresholds is None:
        thresholds = Thresholds()

    index = ClassIndex(classes)
    engine = ClassMetricsEngine(classes, index)

    if workers > 1 and len(classes) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            class_metrics: List[ClassMetrics] = list(pool.map(engine.compute, classes))
    else:
        class_metrics = [engine.compute(cls) for cls in classes]

    mood = compute_mood_metrics(classes)
    package_metrics = collect_package_metrics(
        classes, index, thresholds.distance_from_main_sequence
    )

    return aggregate_project(
        classes,
        class_metrics,
        package_metrics,
        mood,
        thresholds,
        project_name=project_name,
    )


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

def collect_metrics(
    config: MetricsConfig,
    model_paths: List[str],
    verbose: bool = True,
) -> CollectorResult:
    """Main entry point: load model documents, build the class model, compute metrics."""

    start_time = time.time()
    result = CollectorResult()

    if verbose:
        print(f"[metrics] Project root: {config.root}")

    # 1. Discover model documents
    for path in model_paths:
        try:
            result.model_files.extend(discover_model_files(path))
        except FileNotFoundError as e:
            result.error_count += 1
            print(f"  [!] {e}", file=sys.stderr)

    if verbose:
        print(f"[metrics] Model files found: {len(result.model_files)}")

    # 2. Phase 1: Decode every file; a bad file is reported and skipped
    if verbose:
        print("\n[metrics] Phase 1: Loading class model...")

    fragments: List[ClassNode] = []
    for fpath in result.model_files:
        try:
            units = load_model_file(fpath)
            file_fragments = []
            for i, unit in enumerate(units):
                file_fragments.extend(decode_unit(unit, where=f"{fpath}#{i}"))
        except (OSError, ValueError, yaml.YAMLError) as e:
            result.error_count += 1
            print(f"  [!] Load error {fpath}: {e}", file=sys.stderr)
            continue
        fragments.extend(file_fragments)
        if verbose:
            print(f"  {os.path.relpath(fpath, config.root)}: {len(file_fragments)} classes")

    result.classes = assemble_model(fragments)

    if verbose:
        interfaces = sum(1 for c in result.classes if c.is_interface)
        print(f"  Total types: {len(result.classes)} ({interfaces} interfaces)")

    if not result.classes:
        print("[metrics] No classes found!")
        result.duration_seconds = time.time() - start_time
        return result

    # 3. Phase 2: Metrics
    if verbose:
        print("\n[metrics] Phase 2: Computing metrics...")
        if config.analysis.workers > 1:
            print(f"  Workers: {config.analysis.workers}")

    project_name = config.analysis.project_name or os.path.basename(os.path.normpath(config.root))
    result.project_metrics = compute_project_metrics(
        result.classes,
        config.thresholds,
        project_name=project_name,
        workers=config.analysis.workers,
    )

    result.duration_seconds = time.time() - start_time

    if verbose:
        pm = result.project_metrics
        print(f"\n[metrics] Summary:")
        print(f"  Classes: {pm.total_classes}")
        print(f"  Interfaces: {pm.total_interfaces}")
        print(f"  Packages: {len(pm.package_metrics)}")
        print(f"  Methods (NOM): {pm.total_methods}")
        print(f"  LOC: {pm.total_loc:,}")
        print(f"  MOOD: MHF={pm.mhf:.2f} AHF={pm.ahf:.2f} MIF={pm.mif:.2f} "
              f"AIF={pm.aif:.2f} PF={pm.pf:.2f} CF={pm.cf:.2f}")
        print(f"  Avg WMC: {pm.average_wmc:.1f}  Avg CBO: {pm.average_cbo:.1f}  "
              f"Avg LCOM4: {pm.average_lcom:.1f}")
        print(f"  Avg MI: {pm.average_maintainability_index:.1f}")
        if result.error_count:
            print(f"  Load errors: {result.error_count}")
        print(f"  Time: {result.duration_seconds:.1f}s")

    return result


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def write_output(
    result: CollectorResult,
    config: MetricsConfig,
    verbose: bool = True,
) -> List[str]:
    """Write all output files based on config."""

    if result.project_metrics is None:
        return []

    output_dir = config.output.directory
    if not os.path.isabs(output_dir):
        output_dir = os.path.join(config.root, output_dir)

    formats = config.output.formats
    pm = result.project_metrics
    written_files: List[str] = []

    if verbose:
        print(f"\n[metrics] Writing results to {output_dir}...")

    if "json" in formats:
        written_files.append(json_writer.write_class_metrics(pm.class_metrics, output_dir))
        written_files.append(json_writer.write_package_metrics(pm.package_metrics, output_dir))
        written_files.append(json_writer.write_project_summary(pm, output_dir))
        written_files.append(
            json_writer.write_metadata(
                output_dir,
                config.version,
                result.model_files,
                result.duration_seconds,
                result.error_count,
            )
        )

    if "csv" in formats:
        written_files.append(csv_writer.write_class_metrics_csv(pm.class_metrics, output_dir))
        written_files.append(csv_writer.write_package_metrics_csv(pm.package_metrics, output_dir))

    if "markdown" in formats:
        written_files.append(markdown_writer.write_project_summary_md(pm, config.thresholds, output_dir))

    if verbose:
        print(f"  Files written: {len(written_files)}")
        for f in written_files:
            rel = os.path.relpath(f, config.root) if os.path.isabs(f) else f
            print(f"    - {rel}")

    return written_files
