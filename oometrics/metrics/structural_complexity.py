"""Cyclomatic and cognitive complexity over control-flow shape trees.

Both measures walk the same closed set of node shapes (see ``models``):

* Cyclomatic complexity counts decision points: ``if``, ``else if``, loops,
  non-default ``case`` labels, ``catch`` clauses, ternaries and every
  ``&&`` / ``||`` / ``??`` operator, starting from 1.
* Cognitive complexity charges ``1 + nesting`` for each structural node,
  a flat ``+1`` for ``else`` / ``else if`` / jumps / recursion, and one
  point per run of same-kind boolean operators.
"""

from __future__ import annotations

from typing import List, Optional

from ..models import (
    Block, BoolChain, BoolOp, Call, Catch, FlowNode, If, Jump, Lambda, Loop,
    Switch, SwitchCase, Ternary,
)


# ---------------------------------------------------------------------------
# Cyclomatic Complexity
# ---------------------------------------------------------------------------

def compute_cyclomatic_complexity(tree: Optional[FlowNode]) -> int:
    """McCabe complexity of a method body; an absent body scores 1."""
    if tree is None:
        return 1
    return max(1, 1 + _decisions(tree))


def _decisions(node: Optional[FlowNode]) -> int:
    if node is None:
        return 0
    if isinstance(node, Block):
        return sum(_decisions(child) for child in node.children)
    if isinstance(node, If):
        count = 1 + _decisions(node.condition) + _decisions(node.then)
        if isinstance(node.orelse, If):
            count += 1  # the else-if clause itself
        return count + _decisions(node.orelse)
    if isinstance(node, Loop):
        return 1 + _decisions(node.condition) + _decisions(node.body)
    if isinstance(node, Switch):
        return _decisions(node.subject) + sum(_decisions(case) for case in node.cases)
    if isinstance(node, SwitchCase):
        return (0 if node.is_default else 1) + _decisions(node.body)
    if isinstance(node, Catch):
        return 1 + _decisions(node.filter) + _decisions(node.body)
    if isinstance(node, Ternary):
        return (1 + _decisions(node.condition) + _decisions(node.when_true)
                + _decisions(node.when_false))
    if isinstance(node, Jump):
        return 0
    if isinstance(node, Lambda):
        return _decisions(node.body)
    if isinstance(node, BoolChain):
        return len(node.operators)
    if isinstance(node, Call):
        return sum(_decisions(arg) for arg in node.arguments)
    raise TypeError(f"unknown control-flow node: {type(node).__name__}")


# ---------------------------------------------------------------------------
# Cognitive Complexity
# ---------------------------------------------------------------------------

def compute_cognitive_complexity(tree: Optional[FlowNode], method_name: str = "") -> int:
    """Nesting-aware complexity of a method body.

    *method_name* identifies calls to self, which cost a flat point each.
    """
    if tree is None:
        return 0
    return _cognitive(tree, 0, method_name)


def count_bool_runs(operators: List[BoolOp]) -> int:
    """Number of maximal same-kind runs of ``&&`` / ``||`` operators.

    ``??`` does not count and does not break a run.
    """
    runs = 0
    previous = None
    for op in operators:
        if op is BoolOp.COALESCE:
            continue
        if op is not previous:
            runs += 1
            previous = op
    return runs


def _cognitive(node: Optional[FlowNode], nesting: int, method_name: str) -> int:
    if node is None:
        return 0
    if isinstance(node, Block):
        return sum(_cognitive(child, nesting, method_name) for child in node.children)
    if isinstance(node, If):
        return 1 + nesting + _if_parts(node, nesting, method_name)
    if isinstance(node, Loop):
        return (1 + nesting
                + _cognitive(node.condition, nesting, method_name)
                + _cognitive(node.body, nesting + 1, method_name))
    if isinstance(node, Switch):
        total = 1 + nesting + _cognitive(node.subject, nesting, method_name)
        for case in node.cases:
            total += _cognitive(case.body, nesting + 1, method_name)
        return total
    if isinstance(node, SwitchCase):
        return _cognitive(node.body, nesting, method_name)
    if isinstance(node, Catch):
        return (1 + nesting
                + _cognitive(node.filter, nesting, method_name)
                + _cognitive(node.body, nesting + 1, method_name))
    if isinstance(node, Ternary):
        return (1 + nesting
                + _cognitive(node.condition, nesting, method_name)
                + _cognitive(node.when_true, nesting + 1, method_name)
                + _cognitive(node.when_false, nesting + 1, method_name))
    if isinstance(node, Jump):
        return 1
    if isinstance(node, Lambda):
        return _cognitive(node.body, nesting + 1, method_name)
    if isinstance(node, BoolChain):
        return count_bool_runs(node.operators)
    if isinstance(node, Call):
        if method_name and node.target == method_name:
            return 1
        return sum(_cognitive(arg, nesting, method_name) for arg in node.arguments)
    raise TypeError(f"unknown control-flow node: {type(node).__name__}")


def _if_parts(node: If, nesting: int, method_name: str) -> int:
    """Condition, body and else chain of an ``if``, excluding its own increment."""
    total = (_cognitive(node.condition, nesting, method_name)
             + _cognitive(node.then, nesting + 1, method_name))
    orelse = node.orelse
    if orelse is None:
        return total
    if isinstance(orelse, If):
        # else if: flat point, stays at the same nesting
        return total + 1 + _if_parts(orelse, nesting, method_name)
    return total + 1 + _cognitive(orelse, nesting + 1, method_name)
