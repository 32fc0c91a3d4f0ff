"""
Tests for the column generation loop.

The master runs on a scripted adapter (see conftest.ScriptedMaster), so
every iteration sees known duals and objectives. This module tests:
- Termination exactly at the first non-improving pricing result
- The iteration budget as a reported outcome
- Callbacks, duplicate detection and error propagation
- The integer restriction after convergence
"""

import pytest

from colgen.core import Column
from colgen.master import CoveringMaster, SolutionStatus, SolverError
from colgen.pricing import KnapsackPricing, PricingProblem, PricingSolution
from colgen.solver import CGConfig, CGStatus, ColumnGeneration, generate


class ScriptedOracle(PricingProblem):
    """
    Oracle replaying scripted reduced costs.

    Call n returns the pattern (n + 2, 0, ..., 0), which is never an
    initial pattern, with the n-th reduced cost (the last one repeats).
    """

    def __init__(self, num_items, reduced_costs, pattern=None):
        super().__init__(num_items)
        self.reduced_costs = list(reduced_costs)
        self.pattern = pattern
        self.received = []

    def _price_impl(self, duals):
        call = len(self.received)
        self.received.append(duals)
        rc = self.reduced_costs[min(call, len(self.reduced_costs) - 1)]
        counts = self.pattern or (call + 2,) + (0,) * (self.num_items - 1)
        return PricingSolution(column=Column(counts=counts), reduced_cost=rc)


def create_loop(adapter, example_items, reduced_costs, config=None, pattern=None):
    master = CoveringMaster(example_items, adapter=adapter)
    oracle = ScriptedOracle(len(example_items), reduced_costs, pattern)
    return ColumnGeneration(master, oracle, config or CGConfig(optimality_tolerance=1e-6))


# =============================================================================
# Configuration
# =============================================================================

class TestCGConfig:
    """Tests for CGConfig."""

    def test_defaults_from_global_config(self):
        cfg = CGConfig()
        assert cfg.max_iterations == 100
        assert cfg.optimality_tolerance == 1e-6

    def test_invalid_budget(self):
        with pytest.raises(ValueError):
            CGConfig(max_iterations=0)

    def test_invalid_tolerance(self):
        with pytest.raises(ValueError):
            CGConfig(optimality_tolerance=-1e-3)

    def test_item_count_mismatch(self, scripted_master, example_items):
        master = CoveringMaster(example_items, adapter=scripted_master((90.0, [1.0] * 3)))
        with pytest.raises(ValueError, match="items"):
            ColumnGeneration(master, KnapsackPricing([20, 35], 100))


# =============================================================================
# Loop Tests
# =============================================================================

class TestColumnGenerationLoop:
    """Tests for termination and bookkeeping of the loop."""

    def test_stops_at_first_non_improving_iteration(self, scripted_master, example_items):
        adapter = scripted_master(
            (90.0, [1.0, 1.0, 1.0]),
            (70.0, [0.5, 1.0, 1.0]),
            (60.0, [0.3, 1.0, 1.0]),
        )
        cg = create_loop(adapter, example_items, [-0.5, -0.2, -1e-7])
        solution = cg.solve()

        assert solution.status == CGStatus.OPTIMAL
        assert solution.converged
        assert solution.iterations == 3
        assert solution.total_columns == 5
        assert solution.objective_value == 60.0
        assert [it.num_columns_added for it in solution.iteration_history] == [1, 1, 0]
        assert adapter.solve_calls == 3

    def test_tolerance_boundary(self, scripted_master, example_items):
        """-2e-6 is below -1e-6 and improves; -1e-6 itself does not."""
        cg = create_loop(scripted_master((90.0, [1.0] * 3)), example_items, [-2e-6, -1e-6])
        solution = cg.solve()

        assert solution.converged
        assert solution.iterations == 2
        assert solution.total_columns == 4

    def test_iteration_limit(self, scripted_master, example_items):
        adapter = scripted_master((90.0, [1.0] * 3), (80.0, [0.9] * 3), (75.0, [0.8] * 3))
        cg = create_loop(
            adapter, example_items, [-1.0],
            config=CGConfig(max_iterations=4, optimality_tolerance=1e-6),
        )
        solution = cg.solve()

        assert solution.status == CGStatus.ITERATION_LIMIT
        assert not solution.converged
        assert solution.iterations == 4
        assert solution.total_columns == 3 + 4
        assert solution.objective_value == 75.0

    def test_single_iteration_budget(self, scripted_master, example_items):
        cg = create_loop(
            scripted_master((90.0, [1.0] * 3)), example_items, [-1.0],
            config=CGConfig(max_iterations=1),
        )
        solution = cg.solve()
        assert solution.iterations == 1
        assert solution.status == CGStatus.ITERATION_LIMIT

    def test_oracle_receives_master_duals(self, scripted_master, example_items):
        adapter = scripted_master((90.0, [1.0, 1.0, 1.0]), (58.0, [0.2, 1.0, 1.0]))
        cg = create_loop(adapter, example_items, [-0.5, 0.0])
        cg.solve()

        assert cg.pricing.received == [(1.0, 1.0, 1.0), (0.2, 1.0, 1.0)]

    def test_columns_only_grow(self, scripted_master, example_items):
        seen = []

        def record(cg, iteration):
            seen.append([col.column_id for col in cg.master.columns])
            return True

        cg = create_loop(scripted_master((90.0, [1.0] * 3)), example_items, [-1.0, -1.0, -1.0, 0.5])
        cg.add_callback(record)
        cg.solve()

        assert len(seen) == 3
        for before, after in zip(seen, seen[1:]):
            assert after[:len(before)] == before
            assert len(after) == len(before) + 1

    def test_convergence_history(self, scripted_master, example_items):
        adapter = scripted_master((90.0, [1.0] * 3), (70.0, [1.0] * 3), (65.0, [1.0] * 3))
        cg = create_loop(adapter, example_items, [-1.0, -1.0, 0.0])
        solution = cg.solve()

        assert solution.get_convergence_history() == [90.0, 70.0, 65.0]
        assert cg.get_iteration_history() == solution.iteration_history

    def test_duplicate_column_raises(self, scripted_master, example_items):
        cg = create_loop(
            scripted_master((90.0, [1.0] * 3)), example_items, [-1.0], pattern=(1, 0, 0)
        )
        with pytest.raises(RuntimeError, match="already in the master"):
            cg.solve()

    def test_master_failure_propagates(self, scripted_master, example_items):
        adapter = scripted_master((SolutionStatus.INFEASIBLE, 0.0, []))
        cg = create_loop(adapter, example_items, [-1.0])
        with pytest.raises(SolverError) as exc_info:
            cg.solve()
        assert exc_info.value.status == SolutionStatus.INFEASIBLE


class TestCallbacks:
    """Tests for iteration callbacks."""

    def test_callback_stops_loop(self, scripted_master, example_items):
        cg = create_loop(scripted_master((90.0, [1.0] * 3)), example_items, [-1.0])
        cg.add_callback(lambda cg, iteration: iteration.iteration < 2)
        solution = cg.solve()

        assert solution.status == CGStatus.FEASIBLE
        assert not solution.converged
        assert solution.iterations == 2

    def test_callback_skipped_on_converged_iteration(self, scripted_master, example_items):
        calls = []
        cg = create_loop(scripted_master((90.0, [1.0] * 3)), example_items, [-1.0, 0.0])
        cg.add_callback(lambda cg, iteration: calls.append(iteration.iteration) or True)
        cg.solve()

        assert calls == [1]


class TestIntegerRestriction:
    """Tests for solve_ip after the loop."""

    def test_solve_ip(self, scripted_master, example_items):
        adapter = scripted_master((90.0, [1.0] * 3), (88.0, [1.0] * 3))
        cg = create_loop(
            adapter, example_items, [0.0],
            config=CGConfig(solve_ip=True),
        )
        solution = cg.solve()

        assert solution.converged
        assert solution.ip_objective == 88.0
        assert [col.column_id for col in solution.ip_columns] == [0]
        assert adapter.integer == [False, False, False]


class TestGenerate:
    """Tests for generate() with the knapsack oracle."""

    def test_generate_with_knapsack(self, scripted_master, example_items):
        adapter = scripted_master(
            (90.0, [0.0, 0.0, 0.6]),
            (80.0, [0.3, 0.0, 0.0]),
            (70.0, [0.2, 0.0, 0.5]),
        )
        master = CoveringMaster(example_items, adapter=adapter)
        solution = generate(master, KnapsackPricing([20, 35, 50], 100), tolerance=1e-6)

        assert solution.converged
        assert solution.iterations == 3
        assert [col.as_dict() for col in master.columns[3:]] == [{2: 2}, {0: 5}]
        assert solution.iteration_history[0].reduced_cost == pytest.approx(-0.2)
        assert solution.iteration_history[1].reduced_cost == pytest.approx(-0.5)

    def test_generate_budget(self, scripted_master, example_items):
        master = CoveringMaster(example_items, adapter=scripted_master((90.0, [1.0] * 3)))
        oracle = ScriptedOracle(3, [-1.0])
        solution = generate(master, oracle, max_iterations=2)

        assert not solution.converged
        assert solution.iterations == 2
