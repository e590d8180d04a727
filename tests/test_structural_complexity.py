"""Tests for cyclomatic and cognitive complexity over flow trees."""

import pytest

from oometrics.metrics.structural_complexity import (
    compute_cognitive_complexity,
    compute_cyclomatic_complexity,
    count_bool_runs,
)
from oometrics.models import (
    Block, BoolChain, BoolOp, Call, Catch, If, Jump, Lambda, Loop, LoopKind,
    Switch, SwitchCase, Ternary,
)


class TestCyclomatic:
    def test_absent_body_is_one(self):
        assert compute_cyclomatic_complexity(None) == 1

    def test_empty_block_is_one(self):
        assert compute_cyclomatic_complexity(Block()) == 1

    def test_if_with_boolean_chain(self):
        tree = If(condition=BoolChain([BoolOp.AND, BoolOp.OR]))
        assert compute_cyclomatic_complexity(tree) == 4

    def test_else_if_counts_extra(self):
        assert compute_cyclomatic_complexity(If(orelse=If())) == 4

    def test_plain_else_adds_nothing(self):
        assert compute_cyclomatic_complexity(If(orelse=Block())) == 2

    def test_switch_counts_non_default_cases(self):
        tree = Switch(cases=[SwitchCase(), SwitchCase(), SwitchCase(is_default=True)])
        assert compute_cyclomatic_complexity(tree) == 3

    @pytest.mark.parametrize("node", [
        Loop(kind=LoopKind.FOR),
        Loop(kind=LoopKind.DO),
        Catch(),
        Ternary(),
    ])
    def test_single_decision_nodes(self, node):
        assert compute_cyclomatic_complexity(node) == 2

    def test_coalesce_counts_as_decision(self):
        assert compute_cyclomatic_complexity(BoolChain([BoolOp.COALESCE])) == 2

    def test_jumps_and_lambdas(self):
        tree = Block([Jump(), Lambda(body=If())])
        assert compute_cyclomatic_complexity(tree) == 2

    def test_call_arguments_are_walked(self):
        assert compute_cyclomatic_complexity(Call("f", [Ternary()])) == 2

    def test_unknown_node_raises(self):
        with pytest.raises(TypeError):
            compute_cyclomatic_complexity(object())


class TestBoolRuns:
    def test_runs_of_same_kind(self):
        assert count_bool_runs([BoolOp.AND, BoolOp.AND, BoolOp.OR, BoolOp.AND]) == 3

    def test_coalesce_does_not_break_run(self):
        assert count_bool_runs([BoolOp.AND, BoolOp.COALESCE, BoolOp.AND]) == 1

    def test_coalesce_alone_is_free(self):
        assert count_bool_runs([BoolOp.COALESCE]) == 0

    def test_empty(self):
        assert count_bool_runs([]) == 0


class TestCognitive:
    def test_absent_body_is_zero(self):
        assert compute_cognitive_complexity(None) == 0

    def test_documented_example(self):
        # if (a && b || c) {}; switch { case: goto case; default: }; try { throw } catch {}
        tree = Block([
            If(condition=BoolChain([BoolOp.AND, BoolOp.OR]), then=Block()),
            Switch(cases=[SwitchCase(body=Jump()), SwitchCase(is_default=True)]),
            Block([Catch(body=Block())]),
        ])
        assert compute_cognitive_complexity(tree) == 6

    def test_nesting_increments(self):
        tree = Loop(body=If(then=If()))
        # loop 1, if 1+1, inner if 1+2
        assert compute_cognitive_complexity(tree) == 6

    def test_else_if_is_flat(self):
        assert compute_cognitive_complexity(If(orelse=If())) == 2
        assert compute_cognitive_complexity(If(orelse=If(orelse=Block()))) == 3

    def test_else_body_is_nested(self):
        tree = If(orelse=Block([If()]))
        # if 1, else 1, nested if 1+1
        assert compute_cognitive_complexity(tree) == 4

    def test_recursion_costs_one(self):
        assert compute_cognitive_complexity(Call("Fact"), "Fact") == 1
        assert compute_cognitive_complexity(Call("Other"), "Fact") == 0

    def test_lambda_raises_nesting(self):
        assert compute_cognitive_complexity(Lambda(body=If())) == 2

    def test_ternary_nesting(self):
        tree = Ternary(when_true=Ternary())
        assert compute_cognitive_complexity(tree) == 3

    def test_unknown_node_raises(self):
        with pytest.raises(TypeError):
            compute_cognitive_complexity(Block(["not a node"]))
