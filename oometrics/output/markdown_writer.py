"""Markdown report writer."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import List

from ..aggregation.project_aggregator import top_classes
from ..config import Thresholds
from ..metrics.rating import complexity_level, maintainability_level
from ..models import ClassMetrics, ProjectMetrics, StatsSummary


def write_project_summary_md(
    project_metrics: ProjectMetrics,
    thresholds: Thresholds,
    output_dir: str,
) -> str:
    """Write project-level summary as Markdown."""
    path = os.path.join(output_dir, "project_summary.md")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    pm = project_metrics
    lines: list = []

    title = f"# Project Metrics: {pm.project_name}\n" if pm.project_name else "# Project Metrics\n"
    lines.append(title)
    lines.append(f"_Generated: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}_\n")

    # Size
    lines.append("## Overview\n")
    lines.append("| Parameter | Value |")
    lines.append("|---|---|")
    lines.append(f"| Classes | {pm.total_classes} |")
    lines.append(f"| Interfaces | {pm.total_interfaces} |")
    lines.append(f"| Packages | {len(pm.package_metrics)} |")
    lines.append(f"| Methods (NOM) | {pm.total_methods} |")
    lines.append(f"| Fields | {pm.total_fields} |")
    lines.append(f"| LOC (total) | {pm.total_loc:,} |")
    lines.append(f"| SLOC (total) | {pm.total_sloc:,} |")
    lines.append(f"| Comment lines | {pm.total_comment_lines:,} |")
    lines.append("")

    # MOOD
    lines.append("## MOOD\n")
    lines.append("| Metric | Value |")
    lines.append("|---|---|")
    lines.append(f"| MHF (method hiding) | {pm.mhf:.3f} |")
    lines.append(f"| AHF (attribute hiding) | {pm.ahf:.3f} |")
    lines.append(f"| MIF (method inheritance) | {pm.mif:.3f} |")
    lines.append(f"| AIF (attribute inheritance) | {pm.aif:.3f} |")
    lines.append(f"| PF (polymorphism) | {pm.pf:.3f} |")
    lines.append(f"| CF (coupling) | {pm.cf:.3f} |")
    lines.append("")

    # Averages
    lines.append("## Class Averages\n")
    lines.append("| Metric | Average |")
    lines.append("|---|---|")
    lines.append(f"| WMC | {pm.average_wmc:.2f} |")
    lines.append(f"| DIT | {pm.average_dit:.2f} |")
    lines.append(f"| NOC | {pm.average_noc:.2f} |")
    lines.append(f"| CBO | {pm.average_cbo:.2f} |")
    lines.append(f"| CBO (no inheritance) | {pm.average_cbo_no_inheritance:.2f} |")
    lines.append(f"| RFC | {pm.average_rfc:.2f} |")
    lines.append(f"| MPC | {pm.average_mpc:.2f} |")
    lines.append(f"| LCOM4 | {pm.average_lcom:.2f} |")
    lines.append(f"| TCC | {pm.average_tcc:.2f} |")
    lines.append(f"| LCC | {pm.average_lcc:.2f} |")
    lines.append(f"| NOM | {pm.average_nom:.2f} |")
    lines.append("")

    # Complexity
    lines.append("## Complexity\n")
    lines.append("| Metric | Value | Level |")
    lines.append("|---|---|---|")
    lines.append(
        f"| Avg cyclomatic | {pm.average_cyclomatic_complexity:.2f} "
        f"| {complexity_level(pm.average_cyclomatic_complexity)} |"
    )
    lines.append(
        f"| Max cyclomatic | {pm.max_cyclomatic_complexity} "
        f"| {complexity_level(pm.max_cyclomatic_complexity)} |"
    )
    lines.append(f"| Avg cognitive | {pm.average_cognitive_complexity:.2f} | |")
    lines.append(f"| Max cognitive | {pm.max_cognitive_complexity} | |")
    lines.append(
        f"| Avg maintainability index | {pm.average_maintainability_index:.1f} "
        f"| {maintainability_level(pm.average_maintainability_index)} |"
    )
    if pm.halstead is not None:
        h = pm.halstead
        lines.append(f"| Halstead volume | {h.volume:,.1f} | |")
        lines.append(f"| Halstead effort | {h.effort:,.1f} | |")
        lines.append(f"| Estimated bugs | {h.estimated_bugs:.2f} | |")
    lines.append("")

    # Statistics
    lines.append("## Metrics (statistics)\n")
    lines.append("| Metric | Mean | Median | P90 | Min | Max | Std Dev |")
    lines.append("|---|---|---|---|---|---|---|")
    for name, stats in pm.metrics_summary.items():
        if not isinstance(stats, StatsSummary):
            continue
        s = stats
        lines.append(
            f"| {name.upper()} | {s.mean} | {s.median} | {s.p90} "
            f"| {s.min_val} | {s.max_val} | {s.std_dev} |"
        )
    lines.append("")

    # Violations
    t = thresholds
    v = pm.violations
    lines.append("## Violations\n")
    lines.append("| Violation | Count | Indicator |")
    lines.append("|---|---|---|")
    lines.append(f"| CC > {t.cyclomatic_complexity.high} | {v.cyclo_high} | {_indicator(v.cyclo_high, 0, 10)} |")
    lines.append(f"| CC > {t.cyclomatic_complexity.very_high} | {v.cyclo_very_high} | {_indicator(v.cyclo_very_high, 0, 5)} |")
    lines.append(f"| MI < {t.maintainability_index.poor} | {v.mi_poor} | {_indicator(v.mi_poor, 0, 10)} |")
    lines.append(f"| God classes (WMC > {t.weighted_methods_per_class.critical}) | {v.god_classes} | {_indicator(v.god_classes, 0, 3)} |")
    lines.append(f"| Deep inheritance (DIT > {t.depth_of_inheritance.critical}) | {v.deep_inheritance} | {_indicator(v.deep_inheritance, 0, 3)} |")
    lines.append(f"| Wide hierarchy (NOC > {t.number_of_children.warning}) | {v.wide_hierarchy} | {_indicator(v.wide_hierarchy, 0, 3)} |")
    lines.append(f"| High coupling (CBO > {t.coupling_between_objects.critical}) | {v.high_coupling} | {_indicator(v.high_coupling, 0, 5)} |")
    lines.append(f"| High response (RFC > {t.response_for_class.critical}) | {v.high_response} | {_indicator(v.high_response, 0, 5)} |")
    lines.append(f"| Low cohesion (TCC < {t.tight_class_cohesion.warning}) | {v.low_cohesion} | {_indicator(v.low_cohesion, 0, 10)} |")
    lines.append(f"| Split candidates (LCOM4 > {t.lack_of_cohesion.warning}) | {v.split_candidates} | {_indicator(v.split_candidates, 0, 5)} |")
    lines.append(f"| Packages off main sequence (D > {t.distance_from_main_sequence.warning}) | {v.off_main_sequence} | {_indicator(v.off_main_sequence, 0, 3)} |")
    lines.append("")

    # Packages
    lines.append("## Packages\n")
    if pm.package_metrics:
        lines.append("| Package | NCP | Ca | Ce | I | A | D | OutC | InC | HC | SPC | SCC | Zone |")
        lines.append("|---|---|---|---|---|---|---|---|---|---|---|---|---|")
        for p in pm.package_metrics:
            lines.append(
                f"| `{p.package_name}` | {p.class_count} | {p.afferent_coupling} "
                f"| {p.efferent_coupling} | {p.instability:.2f} | {p.abstractness:.2f} "
                f"| {p.distance:.2f} | {p.out_c} | {p.in_c} | {p.hc} | {p.spc} | {p.scc} "
                f"| {p.zone} |"
            )
    else:
        lines.append("_No packages._")
    lines.append("")

    # Top classes
    _class_table(lines, "Complex Classes (Top-10 by WMC)", top_classes(pm.class_metrics, "wmc"))
    _class_table(lines, "Coupled Classes (Top-10 by CBO)", top_classes(pm.class_metrics, "cbo"))
    _class_table(
        lines,
        "Split Candidates (Top-10 by LCOM4)",
        top_classes(pm.class_metrics, "lcom4", predicate=lambda c: c.lcom4 > 1),
    )

    with open(path, "w", encoding="utf-8") as fh:
        fh.write("\n".join(lines))

    return path


def _class_table(lines: list, title: str, classes: List[ClassMetrics]):
    lines.append(f"## {title}\n")
    if not classes:
        lines.append("_None._")
        lines.append("")
        return
    lines.append("| Class | WMC | DIT | CBO | RFC | LCOM4 | TCC | NOM | MI | File |")
    lines.append("|---|---|---|---|---|---|---|---|---|---|")
    for c in classes:
        lines.append(
            f"| `{c.full_name}` | {c.wmc} | {c.dit} | {c.cbo} | {c.rfc} "
            f"| {c.lcom4} | {c.tcc:.2f} | {c.nom} | {c.maintainability_index:.1f} "
            f"| `{_short_path(c.path)}` |"
        )
    lines.append("")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _indicator(value: int, good_max: int, bad_min: int) -> str:
    """Return a color indicator based on value."""
    if value <= good_max:
        return "\U0001F7E2"
    elif value < bad_min:
        return "\U0001F7E1"
    else:
        return "\U0001F534"


def _short_path(path: str, max_parts: int = 4) -> str:
    """Shorten a file path for display."""
    if not path:
        return "-"
    parts = path.replace("\\", "/").split("/")
    if len(parts) <= max_parts:
        return "/".join(parts)
    return ".../" + "/".join(parts[-max_parts:])
