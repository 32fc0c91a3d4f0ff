"""
Tests for the master problem layer.

This module tests:
- MasterProblem validation (handles, modifiable rows, solution queries)
- CoveringMaster rows, initial patterns and column management
- HiGHSMasterProblem on small LPs (skipped without highspy)
"""

import math

import pytest

from colgen.config import config
from colgen.core import Column
from colgen.master import (
    HIGHS_AVAILABLE,
    CoveringMaster,
    ObjectiveSense,
    SolutionStatus,
    SolverError,
)
from colgen.master.base import ConstraintHandle, VariableHandle

requires_highs = pytest.mark.skipif(not HIGHS_AVAILABLE, reason="HiGHS not installed")


# =============================================================================
# MasterProblem API Tests
# =============================================================================

class TestMasterProblemAPI:
    """Validation in the MasterProblem base class."""

    def test_create_twice(self, scripted_master):
        master = scripted_master((0.0, []))
        master.create_problem("p")
        with pytest.raises(ValueError, match="already created"):
            master.create_problem("p")

    def test_requires_create(self, scripted_master):
        master = scripted_master((0.0, []))
        with pytest.raises(ValueError):
            master.add_variable("x")

    def test_bad_bounds(self, scripted_master):
        master = scripted_master((0.0, []))
        master.create_problem("p")
        with pytest.raises(ValueError):
            master.add_variable("x", lb=2.0, ub=1.0)

    def test_empty_constraint_must_be_modifiable(self, scripted_master):
        master = scripted_master((0.0, []))
        master.create_problem("p")
        with pytest.raises(ValueError, match="no terms"):
            master.add_constraint("c", [], lhs=1.0)
        row = master.add_constraint("c", [], lhs=1.0, modifiable=True)
        assert master.is_modifiable(row)

    def test_add_coefficient_requires_modifiable(self, scripted_master):
        master = scripted_master((0.0, []))
        master.create_problem("p")
        x = master.add_variable("x")
        row = master.add_constraint("c", [(x, 1.0)], lhs=1.0)
        with pytest.raises(ValueError, match="not modifiable"):
            master.add_coefficient(row, x, 2.0)

        master.set_modifiable(row)
        master.add_coefficient(row, x, 2.0)
        assert master.coefficients[(0, 0)] == 3.0

    def test_unknown_handles(self, scripted_master):
        master = scripted_master((0.0, []))
        master.create_problem("p")
        x = master.add_variable("x")
        row = master.add_constraint("c", [(x, 1.0)], modifiable=True)
        with pytest.raises(ValueError):
            master.add_coefficient(row, VariableHandle(5, "ghost"), 1.0)
        with pytest.raises(ValueError):
            master.add_coefficient(ConstraintHandle(3, "ghost"), x, 1.0)
        with pytest.raises(ValueError):
            master.add_constraint("d", [(VariableHandle(9, "ghost"), 1.0)])

    def test_queries_before_solve(self, scripted_master):
        master = scripted_master((0.0, []))
        master.create_problem("p")
        master.add_variable("x")
        assert master.get_status() == SolutionStatus.NOT_SOLVED
        with pytest.raises(SolverError) as exc_info:
            master.get_objective_value()
        assert exc_info.value.status == SolutionStatus.NOT_SOLVED

    def test_queries_after_infeasible(self, scripted_master):
        master = scripted_master((SolutionStatus.INFEASIBLE, 0.0, []))
        master.create_problem("p")
        x = master.add_variable("x")
        assert master.solve() == SolutionStatus.INFEASIBLE
        with pytest.raises(SolverError) as exc_info:
            master.get_primal(x)
        assert exc_info.value.status == SolutionStatus.INFEASIBLE

    def test_model_change_resets_status(self, scripted_master):
        master = scripted_master((3.0, []))
        master.create_problem("p")
        master.add_variable("x")
        master.solve()
        assert master.get_objective_value() == 3.0
        master.add_variable("y")
        assert master.get_status() == SolutionStatus.NOT_SOLVED


# =============================================================================
# CoveringMaster Tests
# =============================================================================

class TestCoveringMaster:
    """Tests for CoveringMaster over a scripted adapter."""

    def test_rows_and_initial_patterns(self, scripted_master, example_items):
        adapter = scripted_master((90.0, [1.0, 1.0, 1.0]))
        master = CoveringMaster(example_items, adapter=adapter)

        assert adapter.sense == ObjectiveSense.MINIMIZE
        assert adapter.rows == [
            ("demand_0", 40.0, math.inf),
            ("demand_1", 30.0, math.inf),
            ("demand_2", 20.0, math.inf),
        ]
        assert master.num_columns == 3
        assert adapter.coefficients == {(0, 0): 1.0, (1, 1): 1.0, (2, 2): 1.0}
        assert adapter.objective == [1.0, 1.0, 1.0]

    def test_no_items(self, scripted_master):
        with pytest.raises(ValueError):
            CoveringMaster([], adapter=scripted_master((0.0, [])))

    def test_add_column_coefficients(self, scripted_master, example_items):
        adapter = scripted_master((90.0, [1.0, 1.0, 1.0]))
        master = CoveringMaster(example_items, adapter=adapter)
        column = master.add_column(Column(counts=(1, 2, 0)))

        assert column.column_id == 3
        assert adapter.coefficients[(0, 3)] == 1.0
        assert adapter.coefficients[(1, 3)] == 2.0
        assert (2, 3) not in adapter.coefficients

    def test_duplicate_column(self, scripted_master, example_items):
        master = CoveringMaster(example_items, adapter=scripted_master((90.0, [1.0] * 3)))
        master.add_column(Column(counts=(5, 0, 0)))
        with pytest.raises(ValueError, match="already"):
            master.add_column(Column(counts=(5, 0, 0)))
        assert master.has_column(Column(counts=(1, 0, 0)))

    def test_column_length_mismatch(self, scripted_master, example_items):
        master = CoveringMaster(example_items, adapter=scripted_master((90.0, [1.0] * 3)))
        with pytest.raises(ValueError):
            master.add_column(Column(counts=(1, 1)))

    def test_rejected_column_leaves_master_unchanged(self, scripted_master, example_items):
        """A column touching a non-modifiable row is refused before the adapter sees it."""
        adapter = scripted_master((58.0, [0.2, 1.0, 1.0]))
        master = CoveringMaster(example_items, adapter=adapter)
        row = ConstraintHandle(2, "demand_2")
        adapter.set_modifiable(row, False)

        with pytest.raises(ValueError, match="not modifiable"):
            master.add_column(Column(counts=(0, 0, 2)))
        assert master.num_columns == 3
        assert adapter.num_variables == 3
        assert not master.has_column(Column(counts=(0, 0, 2)))

        adapter.set_modifiable(row, True)
        added = master.add_column(Column(counts=(5, 0, 0)))
        assert added.column_id == 3

        adapter.primal = [0.0, 30.0, 20.0, 8.0]
        solution = master.solve_lp()
        assert solution.column_values == {1: 30.0, 2: 20.0, 3: 8.0}

    def test_adapter_failure_keeps_columns_aligned(self, scripted_master, example_items):
        """A failing coefficient write never gets the column into the pool."""
        adapter = scripted_master((58.0, [0.2, 1.0, 1.0]))
        master = CoveringMaster(example_items, adapter=adapter)

        def fail(row, col, coeff):
            raise RuntimeError("engine rejected the coefficient")

        original = adapter._add_coefficient_impl
        adapter._add_coefficient_impl = fail
        with pytest.raises(RuntimeError):
            master.add_column(Column(counts=(0, 2, 0)))
        adapter._add_coefficient_impl = original

        assert master.num_columns == 3
        assert not master.has_column(Column(counts=(0, 2, 0)))

        # Variable 3 is left behind in the engine; the next column is variable 4
        added = master.add_column(Column(counts=(5, 0, 0)))
        assert added.column_id == 3
        adapter.primal = [0.0, 30.0, 20.0, 0.0, 8.0]
        solution = master.solve_lp()
        assert solution.column_values == {1: 30.0, 2: 20.0, 3: 8.0}

    def test_small_values_dropped_at_feasibility_tolerance(
        self, scripted_master, example_items, monkeypatch
    ):
        monkeypatch.setitem(config.tolerances, "feasibility", 1e-3)
        adapter = scripted_master((90.0, [1.0] * 3))
        adapter.primal = [40.0, 5e-4, 20.0]
        master = CoveringMaster(example_items, adapter=adapter)

        solution = master.solve_lp()
        assert solution.column_values == {0: 40.0, 2: 20.0}
        assert solution.get_active_columns() == [0, 2]

    def test_is_integer_uses_integrality_tolerance(
        self, scripted_master, example_items, monkeypatch
    ):
        adapter = scripted_master((90.0, [1.0] * 3))
        adapter.primal = [40.0, 30.0001, 20.0]
        solution = CoveringMaster(example_items, adapter=adapter).solve_lp()

        monkeypatch.setitem(config.tolerances, "integrality", 1e-5)
        assert not solution.is_integer
        monkeypatch.setitem(config.tolerances, "integrality", 1e-3)
        assert solution.is_integer

    def test_dual_vector(self, scripted_master, example_items):
        master = CoveringMaster(example_items, adapter=scripted_master((58.0, [0.2, 1.0, 1.0])))
        with pytest.raises(SolverError):
            master.dual_vector()

        solution = master.solve_lp()
        assert solution.objective_value == 58.0
        assert solution.column_values == {0: 1.0}

        duals = master.dual_vector()
        assert duals == [0.2, 1.0, 1.0]
        duals[0] = 99.0
        assert master.dual_vector()[0] == 0.2

    def test_solve_lp_not_optimal(self, scripted_master, example_items):
        adapter = scripted_master((SolutionStatus.TIME_LIMIT, 0.0, []))
        master = CoveringMaster(example_items, adapter=adapter)
        with pytest.raises(SolverError) as exc_info:
            master.solve_lp()
        assert exc_info.value.status == SolutionStatus.TIME_LIMIT

    def test_solve_ip_restores_continuous(self, scripted_master, example_items):
        adapter = scripted_master((90.0, [1.0] * 3))
        master = CoveringMaster(example_items, adapter=adapter)
        solution = master.solve_ip()

        assert solution.is_ip
        assert adapter.integer == [False, False, False]

    def test_solve_ip_failure_restores_continuous(self, scripted_master, example_items):
        adapter = scripted_master((SolutionStatus.INFEASIBLE, 0.0, []))
        master = CoveringMaster(example_items, adapter=adapter)
        with pytest.raises(SolverError):
            master.solve_ip()
        assert adapter.integer == [False, False, False]


# =============================================================================
# HiGHS Tests
# =============================================================================

@requires_highs
class TestHiGHSMasterProblem:
    """Tests for the HiGHS adapter."""

    def create_problem(self):
        from colgen.master import HiGHSMasterProblem

        master = HiGHSMasterProblem()
        master.create_problem("test")
        return master

    def test_simple_lp(self):
        """min x + y s.t. x + 2y >= 4."""
        master = self.create_problem()
        x = master.add_variable("x", obj=1.0)
        y = master.add_variable("y", obj=1.0)
        row = master.add_constraint("r", [(x, 1.0), (y, 2.0)], lhs=4.0)

        assert master.solve() == SolutionStatus.OPTIMAL
        assert master.get_objective_value() == pytest.approx(2.0)
        assert master.get_primal(y) == pytest.approx(2.0)
        assert master.get_dual(row) == pytest.approx(0.5)

    def test_coefficients_accumulate(self):
        """Adding 1 to a coefficient of 1 gives 2x >= 4."""
        master = self.create_problem()
        x = master.add_variable("x", obj=1.0)
        row = master.add_constraint("r", [(x, 1.0)], lhs=4.0, modifiable=True)
        master.add_coefficient(row, x, 1.0)

        master.solve()
        assert master.get_primal(x) == pytest.approx(2.0)
        assert master.get_model_stats()["num_nonzeros"] == 1

    def test_infeasible(self):
        master = self.create_problem()
        x = master.add_variable("x", ub=1.0, obj=1.0)
        master.add_constraint("r", [(x, 1.0)], lhs=4.0)

        assert master.solve() != SolutionStatus.OPTIMAL
        with pytest.raises(SolverError):
            master.get_objective_value()

    def test_covering_master_initial_lp(self, example_items):
        """Single-item patterns: one roll per piece, every dual is 1."""
        master = CoveringMaster(example_items)
        solution = master.solve_lp()

        assert solution.objective_value == pytest.approx(90.0)
        assert master.dual_vector() == pytest.approx([1.0, 1.0, 1.0])

    def test_covering_master_added_pattern(self, example_items):
        master = CoveringMaster(example_items)
        master.add_column(Column(counts=(5, 0, 0)))
        solution = master.solve_lp()

        # 40 / 5 + 30 + 20
        assert solution.objective_value == pytest.approx(58.0)
        assert master.dual_vector()[0] == pytest.approx(0.2)

    def test_covering_master_ip(self, example_items):
        master = CoveringMaster(example_items)
        master.add_column(Column(counts=(0, 2, 0)))
        solution = master.solve_ip()

        assert solution.is_ip
        assert solution.objective_value == pytest.approx(40.0 + 15.0 + 20.0)
        assert master.solve_lp().objective_value == pytest.approx(75.0)

    def test_verbosity_follows_config(self, monkeypatch):
        from colgen.master import HiGHSMasterProblem

        monkeypatch.setattr(config, "solver_verbosity", 1)
        assert HiGHSMasterProblem().verbosity == 1
        assert HiGHSMasterProblem(verbosity=0).verbosity == 0
