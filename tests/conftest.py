"""
Shared pytest fixtures for colgen tests.
"""

import pytest

from colgen.master.base import MasterProblem
from colgen.master.solution import SolutionStatus


def pytest_configure(config):
    """Add custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")


class ScriptedMaster(MasterProblem):
    """
    In-memory master adapter that replays scripted solve results.

    Each entry of ``script`` is ``(status, objective, duals)``; the n-th
    solve returns the n-th entry (the last entry repeats). The model
    itself is only recorded, never optimized.
    Primal values come from ``primal`` (indexed by variable) when set.
    """

    def __init__(self, script):
        super().__init__()
        self.script = list(script)
        self.solve_calls = 0
        self.objective = []
        self.integer = []
        self.rows = []
        self.coefficients = {}
        self.primal = None
        self._current = None

    def _create_problem_impl(self, name, sense):
        pass

    def _add_variable_impl(self, name, lb, ub, obj, is_integer):
        self.objective.append(obj)
        self.integer.append(is_integer)

    def _add_constraint_impl(self, name, indices, coeffs, lhs, rhs):
        row = len(self.rows)
        self.rows.append((name, lhs, rhs))
        for col, coeff in zip(indices, coeffs):
            self.coefficients[(row, col)] = self.coefficients.get((row, col), 0.0) + coeff

    def _add_coefficient_impl(self, row, col, coeff):
        self.coefficients[(row, col)] = self.coefficients.get((row, col), 0.0) + coeff

    def _solve_impl(self):
        self._current = self.script[min(self.solve_calls, len(self.script) - 1)]
        self.solve_calls += 1
        return self._current[0]

    def _get_objective_value_impl(self):
        return self._current[1]

    def _get_dual_impl(self, row):
        return self._current[2][row]

    def _get_primal_impl(self, col):
        if self.primal is not None:
            return self.primal[col]
        return 1.0 if col == 0 else 0.0

    def _set_integer_impl(self, col, is_integer):
        self.integer[col] = is_integer


@pytest.fixture
def scripted_master():
    """
    Factory building a ScriptedMaster.

    Arguments are ``(objective, duals)`` pairs for OPTIMAL solves or full
    ``(status, objective, duals)`` triples.
    """
    def factory(*script):
        entries = [
            entry if len(entry) == 3 else (SolutionStatus.OPTIMAL, entry[0], list(entry[1]))
            for entry in script
        ]
        return ScriptedMaster(entries)
    return factory


@pytest.fixture
def example_data():
    """Plain data of the three-item cutting stock example."""
    return {"widths": [20, 35, 50], "demands": [40, 30, 20], "capacity": 100}


@pytest.fixture
def example_instance(example_data):
    """The three-item cutting stock example."""
    from colgen.applications.cutting_stock import CuttingStockInstance

    return CuttingStockInstance.from_dict(dict(example_data, name="example_csp"))


@pytest.fixture
def example_items(example_data):
    """Items of the three-item example."""
    from colgen.core.item import make_items

    return make_items(example_data["widths"], example_data["demands"])


@pytest.fixture
def simple_csp_instance():
    """A slightly larger CSP instance for testing."""
    from colgen.applications.cutting_stock import CuttingStockInstance

    return CuttingStockInstance(
        widths=[45, 36, 31, 14],
        demands=[10, 10, 10, 10],
        capacity=100,
        name="test_csp",
    )
