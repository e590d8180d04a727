"""Class-level metrics: WMC, DIT, NOC, CBO, RFC, MPC, LCOM4, TCC, LCC."""

from __future__ import annotations

from collections import Counter
from itertools import combinations
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from ..class_index import ClassIndex
from ..models import ClassMetrics, ClassNode
from .size_metrics import compute_complexity_metrics, compute_size_metrics


# ---------------------------------------------------------------------------
# Universal root types (DIT 1 when named as base)
# ---------------------------------------------------------------------------

UNIVERSAL_ROOTS: frozenset[str] = frozenset({
    "object",
    "Object",
    "System.Object",
    "global::System.Object",
})


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class ClassMetricsEngine:
    """CK metrics over one class model.

    Everything shared between classes (name index, DIT memo, child counts,
    coupling edges) is built in the constructor; afterwards the engine is
    read-only and :meth:`compute` may be called from several threads.
    """

    def __init__(self, classes: List[ClassNode], index: Optional[ClassIndex] = None):
        self.classes = list(classes)
        self.index = index if index is not None else ClassIndex(self.classes)

        self._base_counts = Counter(c.base_class_name for c in self.classes if c.base_class_name)

        self._dit: Dict[str, int] = {}
        for cls in self.classes:
            self._dit_of(cls, set(), self._dit)

        self._partners: Dict[str, Set[str]] = {}
        self._usage_partners: Dict[str, Set[str]] = {}
        self._build_coupling()

    def compute(self, cls: ClassNode) -> ClassMetrics:
        """All class metrics for *cls*."""
        cbo, cbo_no_inheritance = self.calculate_cbo(cls)
        lcom4, lcom_percent = self.calculate_lcom(cls)
        tcc, lcc = self.calculate_tcc_lcc(cls)
        return ClassMetrics(
            class_name=cls.name,
            full_name=cls.full_name,
            namespace=cls.namespace,
            path=cls.file_path,
            is_interface=cls.is_interface,
            wmc=self.calculate_wmc(cls),
            dit=self.calculate_dit(cls),
            noc=self.calculate_noc(cls),
            cbo=cbo,
            cbo_no_inheritance=cbo_no_inheritance,
            rfc=self.calculate_rfc(cls),
            mpc=self.calculate_mpc(cls),
            lcom4=lcom4,
            lcom_percent=lcom_percent,
            tcc=tcc,
            lcc=lcc,
            **compute_size_metrics(cls),
            **compute_complexity_metrics(cls),
        )

    # -- WMC ---------------------------------------------------------------

    def calculate_wmc(self, cls: ClassNode) -> int:
        """Sum of cyclomatic complexity over defined methods."""
        return sum(m.cyclomatic_complexity for m in cls.defined_methods)

    # -- DIT ---------------------------------------------------------------

    def calculate_dit(self, cls: ClassNode) -> int:
        cached = self._dit.get(cls.full_name)
        if cached is not None:
            return cached
        # Class outside the model: compute against a scratch memo.
        return self._dit_of(cls, set(), dict(self._dit))

    def _dit_of(self, cls: ClassNode, in_progress: Set[str], memo: Dict[str, int]) -> int:
        key = cls.full_name
        if key in memo:
            return memo[key]
        if key in in_progress:
            return 1  # base-class cycle

        base = cls.base_class_name
        if not base or base in UNIVERSAL_ROOTS:
            dit = 1
        else:
            parent = self.index.resolve(base)
            if parent is None:
                dit = 2  # external base, one level below the root
            else:
                in_progress.add(key)
                dit = 1 + self._dit_of(parent, in_progress, memo)
                in_progress.discard(key)
        memo[key] = dit
        return dit

    # -- NOC ---------------------------------------------------------------

    def calculate_noc(self, cls: ClassNode) -> int:
        count = self._base_counts.get(cls.name, 0)
        if cls.full_name != cls.name:
            count += self._base_counts.get(cls.full_name, 0)
        return count

    # -- CBO ---------------------------------------------------------------

    def _build_coupling(self):
        usage_edges: Set[FrozenSet[str]] = set()
        inheritance_edges: Set[FrozenSet[str]] = set()

        for cls in self.classes:
            for name in cls.referenced_type_names:
                target = self.index.resolve(name)
                if target is not None and target.full_name != cls.full_name:
                    usage_edges.add(frozenset((cls.full_name, target.full_name)))
            for name in [cls.base_class_name, *cls.interfaces]:
                target = self.index.resolve(name)
                if target is not None and target.full_name != cls.full_name:
                    inheritance_edges.add(frozenset((cls.full_name, target.full_name)))

        for edge in usage_edges:
            a, b = tuple(edge)
            for x, y in ((a, b), (b, a)):
                self._partners.setdefault(x, set()).add(y)
                self._usage_partners.setdefault(x, set()).add(y)
        for edge in inheritance_edges:
            a, b = tuple(edge)
            self._partners.setdefault(a, set()).add(b)
            self._partners.setdefault(b, set()).add(a)

    def calculate_cbo(self, cls: ClassNode) -> Tuple[int, int]:
        """(CBO, CBO without inheritance) for *cls*.

        Each partner class is counted once however many references link the
        two, in either direction.
        """
        return (
            len(self._partners.get(cls.full_name, ())),
            len(self._usage_partners.get(cls.full_name, ())),
        )

    # -- RFC / MPC ---------------------------------------------------------

    def calculate_rfc(self, cls: ClassNode) -> int:
        methods = cls.defined_methods
        called: Set[str] = set()
        for method in methods:
            called |= method.called_methods
            called |= method.external_method_calls
        return len(methods) + len(called)

    def calculate_mpc(self, cls: ClassNode) -> int:
        external: Set[str] = set()
        for method in cls.defined_methods:
            external |= method.external_method_calls
        return len(external)

    # -- LCOM --------------------------------------------------------------

    def calculate_lcom(self, cls: ClassNode) -> Tuple[int, float]:
        """(LCOM4, Henderson-Sellers LCOM percentage)."""
        methods = cls.defined_methods
        if not methods:
            return 0, 0.0
        fields = cls.defined_fields
        if not fields and len(methods) <= 1:
            return len(methods), 0.0

        names = [m.name for m in methods]
        parent = {name: name for name in names}

        def find(x: str) -> str:
            while parent[x] != x:
                parent[x] = parent[parent[x]]
                x = parent[x]
            return x

        def union(x: str, y: str):
            rx, ry = find(x), find(y)
            if rx != ry:
                parent[rx] = ry

        # overloads share one node
        for i, j in combinations(range(len(methods)), 2):
            if methods[i].accessed_fields & methods[j].accessed_fields:
                union(names[i], names[j])

        for method in methods:
            for called in method.called_methods:
                if called in parent:
                    union(method.name, called)

        lcom4 = len({find(name) for name in parent})
        n = len(methods)

        percent = 0.0
        if fields and n > 1:
            accesses = sum(
                sum(1 for m in methods if f.name in m.accessed_fields)
                for f in fields
            )
            ratio = (n - accesses / len(fields)) / (n - 1)
            percent = max(0.0, min(1.0, ratio)) * 100.0

        return lcom4, percent

    # -- TCC / LCC ---------------------------------------------------------

    def calculate_tcc_lcc(self, cls: ClassNode) -> Tuple[float, float]:
        """(TCC, LCC); both 1.0 for classes with fewer than two methods."""
        methods = cls.defined_methods
        n = len(methods)
        if n <= 1:
            return 1.0, 1.0
        total_pairs = n * (n - 1) // 2

        # reach[i] is a bitmask of methods connected to method i
        reach = [0] * n
        direct_pairs = 0
        for i, j in combinations(range(n), 2):
            if methods[i].accessed_fields & methods[j].accessed_fields:
                direct_pairs += 1
                reach[i] |= 1 << j
                reach[j] |= 1 << i

        by_name = _indices_by_name(methods)
        for i, method in enumerate(methods):
            for called in method.called_methods:
                for j in by_name.get(called, ()):
                    if i != j:
                        reach[i] |= 1 << j
                        reach[j] |= 1 << i

        # Warshall transitive closure
        for k in range(n):
            bit = 1 << k
            for i in range(n):
                if reach[i] & bit:
                    reach[i] |= reach[k]

        indirect_pairs = sum(
            1 for i, j in combinations(range(n), 2) if reach[i] & (1 << j)
        )
        return direct_pairs / total_pairs, indirect_pairs / total_pairs


def _indices_by_name(methods) -> Dict[str, List[int]]:
    by_name: Dict[str, List[int]] = {}
    for i, method in enumerate(methods):
        by_name.setdefault(method.name, []).append(i)
    return by_name
