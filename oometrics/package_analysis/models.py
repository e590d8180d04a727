"""Data models for package-level analysis."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import List


GLOBAL_PACKAGE = "(global)"


def package_of(namespace: str) -> str:
    """Package name for a namespace; classes without one share the global package."""
    return namespace if namespace else GLOBAL_PACKAGE


@dataclass(frozen=True)
class ClassDependency:
    """A directed dependency from one class to another (full names)."""
    source: str
    target: str
    source_package: str
    target_package: str

    @property
    def crosses_packages(self) -> bool:
        return self.source_package != self.target_package


@dataclass
class PackageMetrics:
    """Martin package metrics plus class-level package architecture counts."""
    package_name: str
    class_count: int = 0  # NCP
    abstract_class_count: int = 0
    afferent_coupling: int = 0  # Ca
    efferent_coupling: int = 0  # Ce
    instability: float = 0.0
    abstractness: float = 0.0
    distance: float = 0.0
    out_c: int = 0
    in_c: int = 0
    hc: int = 0
    spc: int = 0
    scc: int = 0
    depends_on: List[str] = field(default_factory=list)
    depended_on_by: List[str] = field(default_factory=list)
    classes: List[str] = field(default_factory=list)
    zone: str = ""
    instability_level: str = ""

    @property
    def ncp(self) -> int:
        return self.class_count

    def to_dict(self) -> dict:
        d = asdict(self)
        for key in ("instability", "abstractness", "distance"):
            d[key] = round(d[key], 3)
        return d
