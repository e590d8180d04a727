"""Data models for metrics collection."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Optional, Set, Union


# ---------------------------------------------------------------------------
# Access levels
# ---------------------------------------------------------------------------

class AccessModifier(Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PROTECTED_INTERNAL = "protected internal"
    PRIVATE_PROTECTED = "private protected"

    @classmethod
    def parse(cls, value: Optional[str], default: "AccessModifier") -> "AccessModifier":
        if value is None or value == "":
            return default
        if isinstance(value, AccessModifier):
            return value
        normalized = " ".join(str(value).lower().replace("_", " ").split())
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"unknown access modifier: {value!r}")


_HIDDEN_ACCESS = frozenset({AccessModifier.PRIVATE, AccessModifier.PROTECTED})


# ---------------------------------------------------------------------------
# Halstead data
# ---------------------------------------------------------------------------

@dataclass
class HalsteadData:
    """Halstead operator/operand counts with derived measures."""
    n1: int = 0  # total operators
    n2: int = 0  # total operands
    eta1: int = 0  # unique operators
    eta2: int = 0  # unique operands

    @property
    def program_length(self) -> int:
        return self.n1 + self.n2

    @property
    def vocabulary(self) -> int:
        return self.eta1 + self.eta2

    @property
    def calculated_length(self) -> float:
        if self.eta1 == 0 or self.eta2 == 0:
            return 0.0
        return self.eta1 * math.log2(self.eta1) + self.eta2 * math.log2(self.eta2)

    @property
    def volume(self) -> float:
        if self.vocabulary <= 0:
            return 0.0
        return self.program_length * math.log2(self.vocabulary)

    @property
    def difficulty(self) -> float:
        if self.eta2 == 0:
            return 0.0
        return (self.eta1 / 2.0) * (self.n2 / self.eta2)

    @property
    def effort(self) -> float:
        return self.difficulty * self.volume

    @property
    def time_to_program(self) -> float:
        """Seconds, E / 18."""
        return self.effort / 18.0

    @property
    def estimated_bugs(self) -> float:
        return self.volume / 3000.0

    def to_dict(self) -> dict:
        d = asdict(self)
        d.update({
            "vocabulary": self.vocabulary,
            "program_length": self.program_length,
            "calculated_length": round(self.calculated_length, 2),
            "volume": round(self.volume, 2),
            "difficulty": round(self.difficulty, 2),
            "effort": round(self.effort, 2),
            "time_to_program": round(self.time_to_program, 2),
            "estimated_bugs": round(self.estimated_bugs, 3),
        })
        return d


# ---------------------------------------------------------------------------
# Control-flow shape tree
#
# A closed set of node shapes describing a method body. ``If.orelse`` holding
# another ``If`` is an ``else if``; any other node there is a plain ``else``.
# ---------------------------------------------------------------------------

class BoolOp(Enum):
    AND = "&&"
    OR = "||"
    COALESCE = "??"


class LoopKind(Enum):
    FOR = "for"
    WHILE = "while"
    FOREACH = "foreach"
    DO = "do"


@dataclass
class Block:
    """Transparent container for statements and expressions."""
    children: List["FlowNode"] = field(default_factory=list)


@dataclass
class If:
    condition: Optional["FlowNode"] = None
    then: Optional["FlowNode"] = None
    orelse: Optional["FlowNode"] = None


@dataclass
class Loop:
    kind: LoopKind = LoopKind.WHILE
    condition: Optional["FlowNode"] = None
    body: Optional["FlowNode"] = None


@dataclass
class SwitchCase:
    is_default: bool = False
    body: Optional["FlowNode"] = None


@dataclass
class Switch:
    subject: Optional["FlowNode"] = None
    cases: List[SwitchCase] = field(default_factory=list)


@dataclass
class Catch:
    filter: Optional["FlowNode"] = None
    body: Optional["FlowNode"] = None


@dataclass
class Ternary:
    condition: Optional["FlowNode"] = None
    when_true: Optional["FlowNode"] = None
    when_false: Optional["FlowNode"] = None


@dataclass
class Jump:
    """goto or labeled break/continue."""
    label: Optional[str] = None


@dataclass
class Lambda:
    body: Optional["FlowNode"] = None


@dataclass
class BoolChain:
    """Boolean operators of one expression, in source order."""
    operators: List[BoolOp] = field(default_factory=list)


@dataclass
class Call:
    target: str = ""
    arguments: List["FlowNode"] = field(default_factory=list)


FlowNode = Union[Block, If, Loop, Switch, SwitchCase, Catch, Ternary, Jump, Lambda, BoolChain, Call]


# ---------------------------------------------------------------------------
# Class model
# ---------------------------------------------------------------------------

@dataclass
class FieldNode:
    name: str
    type_name: str = ""
    access: AccessModifier = AccessModifier.PRIVATE
    is_static: bool = False
    is_read_only: bool = False
    is_const: bool = False
    is_inherited: bool = False

    @property
    def is_hidden(self) -> bool:
        return self.access in _HIDDEN_ACCESS


@dataclass
class PropertyNode:
    name: str
    type_name: str = ""
    access: AccessModifier = AccessModifier.PRIVATE
    has_getter: bool = False
    has_setter: bool = False
    is_static: bool = False
    is_virtual: bool = False
    is_override: bool = False
    is_inherited: bool = False

    @property
    def is_hidden(self) -> bool:
        return self.access in _HIDDEN_ACCESS


@dataclass
class MethodNode:
    """A method, constructor or interface signature."""
    name: str
    signature: str = ""
    return_type: str = ""
    parameter_count: int = 0
    access: AccessModifier = AccessModifier.PRIVATE
    is_static: bool = False
    is_virtual: bool = False
    is_abstract: bool = False
    is_override: bool = False
    is_inherited: bool = False
    cyclomatic_complexity: int = 1
    cognitive_complexity: int = 0
    loc: int = 0
    accessed_fields: Set[str] = field(default_factory=set)
    called_methods: Set[str] = field(default_factory=set)  # same-class or inherited
    external_method_calls: Set[str] = field(default_factory=set)
    used_types: Set[str] = field(default_factory=set)
    halstead: Optional[HalsteadData] = None

    @property
    def is_hidden(self) -> bool:
        return self.access in _HIDDEN_ACCESS


@dataclass
class ClassNode:
    """A class or interface after split definitions have been merged."""
    name: str
    full_name: str
    namespace: str = ""
    file_path: str = ""
    base_class_name: Optional[str] = None
    interfaces: List[str] = field(default_factory=list)
    access: AccessModifier = AccessModifier.INTERNAL
    is_abstract: bool = False
    is_sealed: bool = False
    is_static: bool = False
    is_interface: bool = False
    methods: List[MethodNode] = field(default_factory=list)
    fields: List[FieldNode] = field(default_factory=list)
    properties: List[PropertyNode] = field(default_factory=list)
    coupled_types: Set[str] = field(default_factory=set)
    # member-counting convention for NOM
    method_declaration_count: int = 0
    constructor_count: int = 0
    property_accessor_count: int = 0
    indexer_accessor_count: int = 0
    event_accessor_count: int = 0
    # size
    loc: int = 0
    sloc: int = 0
    comment_lines: int = 0
    line_start: int = 0
    line_end: int = 0

    @property
    def defined_methods(self) -> List[MethodNode]:
        return [m for m in self.methods if not m.is_inherited]

    @property
    def inherited_methods(self) -> List[MethodNode]:
        return [m for m in self.methods if m.is_inherited]

    @property
    def defined_fields(self) -> List[FieldNode]:
        return [f for f in self.fields if not f.is_inherited]

    @property
    def inherited_fields(self) -> List[FieldNode]:
        return [f for f in self.fields if f.is_inherited]

    @property
    def defined_properties(self) -> List[PropertyNode]:
        return [p for p in self.properties if not p.is_inherited]

    @property
    def nom(self) -> int:
        """Methods, constructors and property/indexer/event accessors."""
        return (
            self.method_declaration_count
            + self.constructor_count
            + self.property_accessor_count
            + self.indexer_accessor_count
            + self.event_accessor_count
        )

    @property
    def referenced_type_names(self) -> Set[str]:
        """Coupled types plus every method's used types."""
        names = set(self.coupled_types)
        for method in self.methods:
            names.update(method.used_types)
        return names


# ---------------------------------------------------------------------------
# Class-level metrics
# ---------------------------------------------------------------------------

@dataclass
class ClassMetrics:
    class_name: str
    full_name: str
    namespace: str = ""
    path: str = ""
    is_interface: bool = False
    # CK
    wmc: int = 0
    dit: int = 0
    noc: int = 0
    cbo: int = 0
    cbo_no_inheritance: int = 0
    rfc: int = 0
    mpc: int = 0
    lcom4: int = 0
    lcom_percent: float = 0.0
    tcc: float = 1.0
    lcc: float = 1.0
    # size
    loc: int = 0
    sloc: int = 0
    comment_lines: int = 0
    number_of_methods: int = 0
    nom: int = 0
    number_of_fields: int = 0
    number_of_properties: int = 0
    public_method_count: int = 0
    private_method_count: int = 0
    public_field_count: int = 0
    private_field_count: int = 0
    overridden_method_count: int = 0
    inherited_method_count: int = 0
    inherited_field_count: int = 0
    # complexity
    total_cyclomatic_complexity: int = 0
    average_cyclomatic_complexity: float = 0.0
    max_cyclomatic_complexity: int = 0
    total_cognitive_complexity: int = 0
    average_cognitive_complexity: float = 0.0
    max_cognitive_complexity: int = 0
    halstead: Optional[HalsteadData] = None
    maintainability_index: float = 100.0

    def to_dict(self) -> dict:
        d = asdict(self)
        d["halstead"] = self.halstead.to_dict() if self.halstead else None
        for k, v in d.items():
            if isinstance(v, float):
                d[k] = round(v, 3)
        return {k: v for k, v in d.items() if v is not None}


# ---------------------------------------------------------------------------
# Aggregated project summary
# ---------------------------------------------------------------------------

@dataclass
class StatsSummary:
    mean: float = 0.0
    median: float = 0.0
    p90: float = 0.0
    min_val: float = 0.0
    max_val: float = 0.0
    std_dev: float = 0.0

    def to_dict(self) -> dict:
        d = asdict(self)
        return {k: round(v, 2) for k, v in d.items()}


@dataclass
class ViolationCounts:
    cyclo_high: int = 0
    cyclo_very_high: int = 0
    mi_poor: int = 0
    god_classes: int = 0
    deep_inheritance: int = 0
    wide_hierarchy: int = 0
    high_coupling: int = 0
    high_response: int = 0
    low_cohesion: int = 0
    split_candidates: int = 0
    off_main_sequence: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ProjectMetrics:
    project_name: str = ""
    # MOOD
    mhf: float = 0.0
    ahf: float = 0.0
    mif: float = 0.0
    aif: float = 0.0
    pf: float = 0.0
    cf: float = 0.0
    # size
    total_classes: int = 0
    total_interfaces: int = 0
    total_methods: int = 0
    total_fields: int = 0
    total_loc: int = 0
    total_sloc: int = 0
    total_comment_lines: int = 0
    # CK averages
    average_nom: float = 0.0
    average_wmc: float = 0.0
    average_dit: float = 0.0
    average_noc: float = 0.0
    average_cbo: float = 0.0
    average_cbo_no_inheritance: float = 0.0
    average_rfc: float = 0.0
    average_mpc: float = 0.0
    average_lcom: float = 0.0
    average_tcc: float = 0.0
    average_lcc: float = 0.0
    # complexity
    average_cyclomatic_complexity: float = 0.0
    max_cyclomatic_complexity: int = 0
    average_cognitive_complexity: float = 0.0
    max_cognitive_complexity: int = 0
    average_maintainability_index: float = 0.0
    halstead: Optional[HalsteadData] = None
    # detail
    class_metrics: list = field(default_factory=list)  # list of ClassMetrics
    package_metrics: list = field(default_factory=list)  # list of PackageMetrics
    metrics_summary: dict = field(default_factory=dict)  # metric_name -> StatsSummary
    violations: ViolationCounts = field(default_factory=ViolationCounts)

    def to_dict(self) -> dict:
        d = {}
        for name in self.__dataclass_fields__:
            if name in ("class_metrics", "package_metrics", "metrics_summary",
                        "violations", "halstead"):
                continue
            value = getattr(self, name)
            d[name] = round(value, 4) if isinstance(value, float) else value
        if self.halstead is not None:
            d["halstead"] = self.halstead.to_dict()
        d["metrics_summary"] = {
            k: v.to_dict() if isinstance(v, StatsSummary) else v
            for k, v in self.metrics_summary.items()
        }
        d["violations"] = self.violations.to_dict()
        d["packages"] = [p.to_dict() for p in self.package_metrics]
        d["classes"] = [c.to_dict() for c in self.class_metrics]
        return d
