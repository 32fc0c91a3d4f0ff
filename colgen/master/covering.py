"""
Covering master problem.

The restricted master of a covering problem:

    min  sum_j c_j * lambda_j
    s.t. sum_j a_ij * lambda_j >= demand_i   for all items i
         lambda_j >= 0

where a_ij is the count of item i in pattern j. Each covering row is
modifiable, so new patterns add their coefficients to existing rows.

The master is seeded with one single-item pattern per item, which makes
it feasible from the first solve. Patterns are only ever added.
"""

import logging
import math
import time
from typing import Optional, Sequence

from colgen.config import get_tolerance
from colgen.core.column import Column, ColumnPool
from colgen.core.item import Item
from colgen.master.base import (
    ConstraintHandle,
    MasterProblem,
    ObjectiveSense,
    SolverError,
    VariableHandle,
)
from colgen.master.solution import MasterSolution, SolutionStatus

logger = logging.getLogger(__name__)


class CoveringMaster:
    """
    Restricted master problem over item covering rows.

    Attributes:
        items: The items to cover (row i belongs to items[i])
        adapter: The MasterProblem adapter doing the LP/MIP work

    Example:
        >>> items = make_items([20, 35, 50], [40, 30, 20])
        >>> master = CoveringMaster(items)
        >>> solution = master.solve_lp()
        >>> solution.objective_value
        90.0
        >>> master.dual_vector()
        [1.0, 1.0, 1.0]
    """

    def __init__(
        self,
        items: Sequence[Item],
        adapter: Optional[MasterProblem] = None,
        name: str = "covering",
        initial_columns: bool = True,
        verbosity: Optional[int] = None,
    ):
        """
        Build the covering rows (and the initial patterns).

        Args:
            items: Items to cover
            adapter: Master adapter (default: a new HiGHSMasterProblem)
            name: Problem name
            initial_columns: Seed one single-item pattern per item
            verbosity: HiGHS output level when the default adapter is built
                (default: config.solver_verbosity)

        Raises:
            ValueError: If there are no items
        """
        if not items:
            raise ValueError("Covering master needs at least one item")

        if adapter is None:
            from colgen.master.highs import HiGHSMasterProblem
            adapter = HiGHSMasterProblem(verbosity=verbosity)

        self._items = list(items)
        self._adapter = adapter
        self._pool = ColumnPool()
        self._variables: list[VariableHandle] = []
        self._last_solution: Optional[MasterSolution] = None

        adapter.create_problem(name, ObjectiveSense.MINIMIZE)
        self._rows: list[ConstraintHandle] = [
            adapter.add_constraint(
                f"demand_{i}", [], lhs=float(item.demand), rhs=math.inf, modifiable=True
            )
            for i, item in enumerate(self._items)
        ]

        if initial_columns:
            for i in range(self.num_items):
                counts = [0] * self.num_items
                counts[i] = 1
                self.add_column(Column(counts=tuple(counts)), name=f"init_{i}")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def items(self) -> list[Item]:
        return self._items

    @property
    def num_items(self) -> int:
        return len(self._items)

    @property
    def adapter(self) -> MasterProblem:
        return self._adapter

    @property
    def num_columns(self) -> int:
        """Number of columns currently in the master problem."""
        return len(self._pool)

    @property
    def columns(self) -> list[Column]:
        """Columns in the order they were added."""
        return self._pool.all_columns()

    @property
    def last_solution(self) -> Optional[MasterSolution]:
        return self._last_solution

    # =========================================================================
    # Columns
    # =========================================================================

    def has_column(self, column: Column) -> bool:
        """Check if an identical pattern is already in the master."""
        return column in self._pool

    def add_column(self, column: Column, name: Optional[str] = None) -> Column:
        """
        Materialise a pattern as a master variable.

        The variable gets objective coefficient ``column.cost`` and
        coefficient ``count[i]`` in row i.

        Args:
            column: Pattern to add
            name: Variable name (default: ``pat_<id>``)

        Returns:
            The column with its column_id assigned

        Raises:
            ValueError: If the pattern has the wrong length, is already
                in the master, or uses a row that is not modifiable
        """
        if column.num_items != self.num_items:
            raise ValueError(
                f"Column has {column.num_items} counts, master has {self.num_items} items"
            )
        if self.has_column(column):
            raise ValueError(f"Column {column.as_dict()} is already in the master")
        if column.column_id is not None and self._pool.get(column.column_id) is not None:
            raise ValueError(f"Column id {column.column_id} already in the master")
        for i, count in enumerate(column.counts):
            if count and not self._adapter.is_modifiable(self._rows[i]):
                raise ValueError(f"Row '{self._rows[i].name}' is not modifiable")

        # The pool and the variable list only grow together, after the
        # adapter has accepted the variable and all of its coefficients.
        column_id = column.column_id if column.column_id is not None else self._pool.next_id
        var = self._adapter.add_variable(
            name or f"pat_{column_id}",
            lb=0.0,
            ub=math.inf,
            obj=column.cost,
        )
        for i, count in enumerate(column.counts):
            if count:
                self._adapter.add_coefficient(self._rows[i], var, count)

        column = self._pool.add(column.with_id(column_id))
        self._variables.append(var)

        logger.debug("Added column %d: %s", column.column_id, column.as_dict())
        return column

    def add_columns(self, columns: Sequence[Column]) -> list[Column]:
        return [self.add_column(col) for col in columns]

    # =========================================================================
    # Solving
    # =========================================================================

    def solve_lp(self) -> MasterSolution:
        """
        Solve the LP relaxation.

        Returns:
            Optimal MasterSolution with duals (one per item)

        Raises:
            SolverError: If the solver does not report OPTIMAL
        """
        start_time = time.time()
        status = self._adapter.solve()
        if status != SolutionStatus.OPTIMAL:
            raise SolverError(f"Master LP not solved to optimality: {status.name}", status)

        solution = self._collect_solution(status, start_time, is_ip=False)
        solution.dual_values = [self._adapter.get_dual(row) for row in self._rows]
        self._last_solution = solution
        return solution

    def solve_ip(self) -> MasterSolution:
        """
        Solve the integer restriction over the current patterns.

        All pattern variables are made integer for one solve and switched
        back to continuous afterwards, so the LP can be re-solved later.

        Raises:
            SolverError: If the solver does not report OPTIMAL
        """
        start_time = time.time()
        for var in self._variables:
            self._adapter.set_integer(var, True)
        try:
            status = self._adapter.solve()
            if status != SolutionStatus.OPTIMAL:
                raise SolverError(f"Master IP not solved to optimality: {status.name}", status)
            solution = self._collect_solution(status, start_time, is_ip=True)
        finally:
            for var in self._variables:
                self._adapter.set_integer(var, False)
        return solution

    def dual_vector(self) -> list[float]:
        """
        Duals of the last LP solve, one per item (a fresh copy).

        Raises:
            SolverError: If the LP has not been solved yet
        """
        if self._last_solution is None:
            raise SolverError("Master LP has not been solved", SolutionStatus.NOT_SOLVED)
        return list(self._last_solution.dual_values)

    def _collect_solution(
        self,
        status: SolutionStatus,
        start_time: float,
        is_ip: bool,
    ) -> MasterSolution:
        solution = MasterSolution(
            status=status,
            objective_value=self._adapter.get_objective_value(),
            num_columns=self.num_columns,
            is_ip=is_ip,
        )
        tol = get_tolerance("feasibility")
        for column, var in zip(self._pool, self._variables):
            value = self._adapter.get_primal(var)
            if abs(value) > tol:
                solution.column_values[column.column_id] = value
        solution.solve_time = time.time() - start_time
        return solution

    def __repr__(self) -> str:
        return f"CoveringMaster(items={self.num_items}, columns={self.num_columns})"
