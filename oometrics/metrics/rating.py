"""Level labels for complexity, maintainability and package stability.

Complexity (cyclomatic):
    Simple (low risk)           <=10
    Moderate complexity         <=20
    Complex (high risk)         <=50
    Very complex (untestable)   > 50

Maintainability Index:
    High maintainability        >=80
    Moderate maintainability    >=60
    Low maintainability         >=40
    Very low maintainability    < 40

Instability:
    Very Stable    <=0.2
    Stable         <=0.4
    Moderate       <=0.6
    Unstable       <=0.8
    Very Unstable  > 0.8
"""

from __future__ import annotations

from typing import Optional

from ..config import DistanceThresholds


_COMPLEXITY_LEVELS = [
    (10, "Simple (low risk)"),
    (20, "Moderate complexity"),
    (50, "Complex (high risk)"),
]

_MAINTAINABILITY_LEVELS = [
    (80, "High maintainability"),
    (60, "Moderate maintainability"),
    (40, "Low maintainability"),
]

_INSTABILITY_LEVELS = [
    (0.2, "Very Stable"),
    (0.4, "Stable"),
    (0.6, "Moderate"),
    (0.8, "Unstable"),
]


def complexity_level(value: float) -> str:
    for threshold, label in _COMPLEXITY_LEVELS:
        if value <= threshold:
            return label
    return "Very complex (untestable)"


def maintainability_level(mi: float) -> str:
    for threshold, label in _MAINTAINABILITY_LEVELS:
        if mi >= threshold:
            return label
    return "Very low maintainability"


def instability_level(instability: float) -> str:
    for threshold, label in _INSTABILITY_LEVELS:
        if instability <= threshold:
            return label
    return "Very Unstable"


def zone_description(
    abstractness: float,
    instability: float,
    distance: float,
    cfg: Optional[DistanceThresholds] = None,
) -> str:
    """Describe where a package sits relative to the main sequence.

    Packages close to the line A + I = 1 are on the main sequence. Far from
    it, low abstractness with low instability is the zone of pain and high
    abstractness with high instability is the zone of uselessness.
    """
    if cfg is None:
        cfg = DistanceThresholds()
    if distance <= cfg.main_sequence:
        return "Main Sequence (good balance)"
    if abstractness < 0.5 and instability < 0.5:
        return "Zone of Pain (concrete & stable - hard to change)"
    if abstractness > 0.5 and instability > 0.5:
        return "Zone of Uselessness (abstract & unstable)"
    if distance <= cfg.warning:
        return "Near Main Sequence (acceptable)"
    return "Far from Main Sequence (needs attention)"
