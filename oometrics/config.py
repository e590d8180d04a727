"""Configuration loading and validation for metrics collection."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

import yaml


# ---------------------------------------------------------------------------
# Threshold config dataclasses
# ---------------------------------------------------------------------------

@dataclass
class CycloThresholds:
    low: int = 5
    moderate: int = 10
    high: int = 20
    very_high: int = 50


@dataclass
class MIThresholds:
    good: float = 80
    moderate: float = 60
    poor: float = 40


@dataclass
class WMCThresholds:
    warning: int = 20
    critical: int = 50


@dataclass
class DITThresholds:
    warning: int = 4
    critical: int = 6


@dataclass
class NOCThresholds:
    warning: int = 10


@dataclass
class CBOThresholds:
    warning: int = 10
    critical: int = 20


@dataclass
class RFCThresholds:
    warning: int = 50
    critical: int = 100


@dataclass
class LCOMThresholds:
    warning: int = 2  # LCOM4 components; above this the class is a split candidate


@dataclass
class TCCThresholds:
    warning: float = 0.33
    good: float = 0.66


@dataclass
class DistanceThresholds:
    main_sequence: float = 0.15
    warning: float = 0.3


@dataclass
class Thresholds:
    cyclomatic_complexity: CycloThresholds = field(default_factory=CycloThresholds)
    maintainability_index: MIThresholds = field(default_factory=MIThresholds)
    weighted_methods_per_class: WMCThresholds = field(default_factory=WMCThresholds)
    depth_of_inheritance: DITThresholds = field(default_factory=DITThresholds)
    number_of_children: NOCThresholds = field(default_factory=NOCThresholds)
    coupling_between_objects: CBOThresholds = field(default_factory=CBOThresholds)
    response_for_class: RFCThresholds = field(default_factory=RFCThresholds)
    lack_of_cohesion: LCOMThresholds = field(default_factory=LCOMThresholds)
    tight_class_cohesion: TCCThresholds = field(default_factory=TCCThresholds)
    distance_from_main_sequence: DistanceThresholds = field(default_factory=DistanceThresholds)


# ---------------------------------------------------------------------------
# Output config
# ---------------------------------------------------------------------------

@dataclass
class OutputConfig:
    directory: str = "analysis/metrics_output"
    formats: list = field(default_factory=lambda: ["json", "csv", "markdown"])


# ---------------------------------------------------------------------------
# Analysis config
# ---------------------------------------------------------------------------

@dataclass
class AnalysisConfig:
    workers: int = 1
    project_name: str = ""


# ---------------------------------------------------------------------------
# Top-level Config
# ---------------------------------------------------------------------------

@dataclass
class MetricsConfig:
    version: str = "1.0"
    root: str = "."
    thresholds: Thresholds = field(default_factory=Thresholds)
    output: OutputConfig = field(default_factory=OutputConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def _apply_dict(obj, data: dict):
    """Apply dictionary values to a dataclass instance, recursively."""
    if not isinstance(data, dict):
        return
    for key, value in data.items():
        if hasattr(obj, key):
            current = getattr(obj, key)
            if hasattr(current, '__dataclass_fields__') and isinstance(value, dict):
                _apply_dict(current, value)
            else:
                setattr(obj, key, value)


def load_config(config_path: Optional[str] = None, repo_root: Optional[str] = None) -> MetricsConfig:
    """Load metrics configuration from YAML file.

    Search order when *config_path* is None:
      1. ``metrics.yaml`` in *repo_root*
      2. ``analysis/metrics.yaml`` in *repo_root*

    *repo_root* defaults to cwd.
    """
    if repo_root is None:
        repo_root = os.getcwd()

    config = MetricsConfig()

    if config_path is None:
        candidates = [
            os.path.join(repo_root, "metrics.yaml"),
            os.path.join(repo_root, "analysis", "metrics.yaml"),
        ]
        for candidate in candidates:
            if os.path.isfile(candidate):
                config_path = candidate
                break

    if config_path and os.path.isfile(config_path):
        with open(config_path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if "version" in data:
            config.version = str(data["version"])
        if "root" in data:
            config.root = data["root"]
        for section in ("thresholds", "output", "analysis"):
            if section in data:
                _apply_dict(getattr(config, section), data[section])

    if not os.path.isabs(config.root):
        if config_path:
            config_dir = os.path.dirname(os.path.abspath(config_path))
            config.root = os.path.normpath(os.path.join(config_dir, config.root))
        else:
            config.root = os.path.abspath(os.path.join(repo_root, config.root))

    try:
        config.analysis.workers = max(1, int(config.analysis.workers))
    except (TypeError, ValueError):
        raise ValueError(f"analysis.workers must be an integer, got {config.analysis.workers!r}")

    validate_config(config)
    return config


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

OUTPUT_FORMATS = ("json", "csv", "markdown")

# (section, lower band, upper band): lower must not exceed upper
_ORDERED_BANDS = [
    ("cyclomatic_complexity", "low", "moderate"),
    ("cyclomatic_complexity", "moderate", "high"),
    ("cyclomatic_complexity", "high", "very_high"),
    ("maintainability_index", "poor", "moderate"),
    ("maintainability_index", "moderate", "good"),
    ("weighted_methods_per_class", "warning", "critical"),
    ("depth_of_inheritance", "warning", "critical"),
    ("coupling_between_objects", "warning", "critical"),
    ("response_for_class", "warning", "critical"),
    ("tight_class_cohesion", "warning", "good"),
    ("distance_from_main_sequence", "main_sequence", "warning"),
]


def validate_config(config: MetricsConfig):
    """Reject unknown output formats and inverted threshold bands.

    Raises:
        ValueError: naming the offending setting.
    """
    if isinstance(config.output.formats, str):
        config.output.formats = [config.output.formats]
    unknown = [f for f in config.output.formats if f not in OUTPUT_FORMATS]
    if unknown:
        raise ValueError(
            f"output.formats: unknown format(s) {', '.join(map(str, unknown))}; "
            f"expected {', '.join(OUTPUT_FORMATS)}"
        )

    for section, lower, upper in _ORDERED_BANDS:
        bands = getattr(config.thresholds, section)
        low_value, high_value = getattr(bands, lower), getattr(bands, upper)
        try:
            inverted = low_value > high_value
        except TypeError:
            raise ValueError(f"thresholds.{section}: {lower}/{upper} must be numbers")
        if inverted:
            raise ValueError(
                f"thresholds.{section}: {lower} ({low_value}) exceeds {upper} ({high_value})"
            )
