"""
Column Generation controller.

This module implements the column generation loop that coordinates the
restricted master problem and a pricing oracle.

Algorithm Overview:
------------------
Each iteration:
1. Solve the master problem LP relaxation
2. Read one dual value per covering row
3. Price: ask the oracle for its best pattern under these duals
4. If its reduced cost is below -tolerance, add it to the master and
   repeat; otherwise the LP is optimal and the loop stops

Reaching the iteration budget first is a reported outcome
(``converged=False``), not an error. Columns are only ever added.

References:
----------
- Desaulniers, G., Desrosiers, J., & Solomon, M. M. (Eds.). (2006).
  Column generation. Springer Science & Business Media.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from colgen.config import config as global_config
from colgen.config import get_tolerance
from colgen.master.covering import CoveringMaster
from colgen.master.solution import MasterSolution
from colgen.pricing.base import PricingProblem
from colgen.solver.solution import CGIteration, CGSolution, CGStatus

logger = logging.getLogger(__name__)


@dataclass
class CGConfig:
    """
    Configuration for the column generation algorithm.

    Defaults come from the global ``colgen.config.config``.

    Attributes:
        max_iterations: Maximum number of CG iterations (>= 1)
        optimality_tolerance: A column improves iff its RC < -tolerance
        solve_ip: Whether to solve the integer restriction afterwards
        verbose: Log per-iteration progress at INFO instead of DEBUG
    """
    max_iterations: int = field(default_factory=lambda: global_config.max_iterations)
    optimality_tolerance: float = field(
        default_factory=lambda: global_config.get_tolerance("reduced_cost")
    )
    solve_ip: bool = False
    verbose: bool = False

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
        if self.optimality_tolerance < 0:
            raise ValueError(
                f"optimality_tolerance must be non-negative, got {self.optimality_tolerance}"
            )


# Type alias for callback functions
CGCallback = Callable[['ColumnGeneration', CGIteration], bool]


class ColumnGeneration:
    """
    Column generation algorithm controller.

    The controller owns its oracle and passes the duals to it directly;
    the loop depends only on the PricingProblem interface.

    Example:
        >>> from colgen.solver import ColumnGeneration, CGConfig
        >>> master = CoveringMaster(items)
        >>> oracle = KnapsackPricing(widths, capacity)
        >>> cg = ColumnGeneration(master, oracle, CGConfig(max_iterations=50))
        >>> solution = cg.solve()
        >>> print(f"LP value: {solution.objective_value}")

    Callbacks:
        Register callbacks to monitor progress:

        >>> def my_callback(cg, iteration):
        ...     print(f"Iteration {iteration.iteration}: obj={iteration.master_objective}")
        ...     return True  # Continue solving
        >>> cg.add_callback(my_callback)
    """

    def __init__(
        self,
        master: CoveringMaster,
        pricing: PricingProblem,
        config: Optional[CGConfig] = None,
    ):
        """
        Initialize the column generation controller.

        Args:
            master: Restricted master problem (already seeded with columns)
            pricing: Pricing oracle
            config: Configuration options (uses defaults if not provided)

        Raises:
            ValueError: If master and oracle disagree on the number of items
        """
        if master.num_items != pricing.num_items:
            raise ValueError(
                f"Master has {master.num_items} items, pricing expects {pricing.num_items}"
            )

        self._master = master
        self._pricing = pricing
        self._config = config or CGConfig()

        self._callbacks: list[CGCallback] = []

        self._solution: Optional[CGSolution] = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> CGConfig:
        """Configuration options."""
        return self._config

    @property
    def master(self) -> CoveringMaster:
        return self._master

    @property
    def pricing(self) -> PricingProblem:
        return self._pricing

    @property
    def is_solved(self) -> bool:
        """Whether solve() has been called."""
        return self._solution is not None

    @property
    def solution(self) -> Optional[CGSolution]:
        """The solution (None if not yet solved)."""
        return self._solution

    def add_callback(self, callback: CGCallback) -> None:
        """
        Add a callback function.

        Callbacks are called after each iteration that added a column,
        with the ColumnGeneration instance and iteration info. Return
        False to stop the algorithm (status FEASIBLE).

        Args:
            callback: Function taking (ColumnGeneration, CGIteration) -> bool
        """
        self._callbacks.append(callback)

    # =========================================================================
    # Main Algorithm
    # =========================================================================

    def solve(self) -> CGSolution:
        """
        Run the column generation algorithm.

        Returns:
            CGSolution with results and statistics

        Raises:
            SolverError: If a master solve is not optimal
            RuntimeError: If the oracle prices a column already in the master
        """
        start_time = time.time()

        solution = self._run_column_generation()

        if self._config.solve_ip:
            self._solve_ip(solution)

        solution.total_time = time.time() - start_time
        self._solution = solution
        return solution

    def _run_column_generation(self) -> CGSolution:
        iteration_history: list[CGIteration] = []
        total_master_time = 0.0
        total_pricing_time = 0.0
        tolerance = self._config.optimality_tolerance
        log = logger.info if self._config.verbose else logger.debug

        status = CGStatus.NOT_SOLVED
        last_master_solution: Optional[MasterSolution] = None
        iteration = 0

        while iteration < self._config.max_iterations:
            iteration += 1

            # Solve master problem
            master_start = time.time()
            master_solution = self._master.solve_lp()
            master_time = time.time() - master_start
            total_master_time += master_time
            last_master_solution = master_solution

            duals = self._master.dual_vector()

            # Solve pricing problem
            pricing_start = time.time()
            pricing_solution = self._pricing.price(duals)
            pricing_time = time.time() - pricing_start
            total_pricing_time += pricing_time

            num_added = 0
            if pricing_solution.is_improving(tolerance):
                column = pricing_solution.column
                if self._master.has_column(column):
                    raise RuntimeError(
                        f"Pricing returned column {column.as_dict()} already in the master "
                        f"(reduced cost {pricing_solution.reduced_cost:.3e}); "
                        f"check the optimality tolerance"
                    )
                self._master.add_column(column)
                num_added = 1

            iter_info = CGIteration(
                iteration=iteration,
                master_objective=master_solution.objective_value,
                reduced_cost=pricing_solution.reduced_cost,
                num_columns_added=num_added,
                master_time=master_time,
                pricing_time=pricing_time,
                total_columns=self._master.num_columns,
            )
            iteration_history.append(iter_info)

            log(
                "Iteration %d: obj=%.6f, rc=%.6f, added=%d, total=%d",
                iteration, master_solution.objective_value,
                pricing_solution.reduced_cost, num_added, self._master.num_columns,
            )

            if num_added == 0:
                status = CGStatus.OPTIMAL
                logger.info(
                    "Column generation converged after %d iterations (obj=%.6f)",
                    iteration, master_solution.objective_value,
                )
                break

            if not self._invoke_callbacks(iter_info):
                status = CGStatus.FEASIBLE
                logger.info("Column generation stopped by callback at iteration %d", iteration)
                break

        if status == CGStatus.NOT_SOLVED:
            status = CGStatus.ITERATION_LIMIT
            logger.warning(
                "Column generation hit the iteration limit (%d) without converging",
                self._config.max_iterations,
            )

        return self._build_solution(
            status=status,
            master_solution=last_master_solution,
            iteration_history=iteration_history,
            total_master_time=total_master_time,
            total_pricing_time=total_pricing_time,
        )

    def _solve_ip(self, solution: CGSolution) -> None:
        """Solve the integer restriction over the generated columns."""
        ip_start = time.time()
        ip_solution = self._master.solve_ip()
        solution.master_time += time.time() - ip_start

        solution.ip_objective = ip_solution.objective_value
        solution.ip_columns = self._active_columns(ip_solution)
        logger.info("Integer restriction: obj=%.6f", ip_solution.objective_value)

    def _build_solution(
        self,
        status: CGStatus,
        master_solution: Optional[MasterSolution],
        iteration_history: list[CGIteration],
        total_master_time: float,
        total_pricing_time: float,
    ) -> CGSolution:
        """Build the CGSolution from components."""
        return CGSolution(
            status=status,
            converged=status == CGStatus.OPTIMAL,
            objective_value=master_solution.objective_value if master_solution else None,
            columns=self._active_columns(master_solution) if master_solution else [],
            total_columns=self._master.num_columns,
            iterations=len(iteration_history),
            master_time=total_master_time,
            pricing_time=total_pricing_time,
            iteration_history=iteration_history,
        )

    def _active_columns(self, master_solution: MasterSolution) -> list:
        active = []
        tol = get_tolerance("feasibility")
        for col in self._master.columns:
            value = master_solution.column_values.get(col.column_id, 0.0)
            if value > tol:
                active.append(col.with_value(value))
        return active

    def _invoke_callbacks(self, iteration: CGIteration) -> bool:
        """
        Invoke all callbacks.

        Returns:
            True to continue, False to stop
        """
        for callback in self._callbacks:
            if not callback(self, iteration):
                return False
        return True

    def get_iteration_history(self) -> list[CGIteration]:
        """History of all iterations of the last solve."""
        if self._solution is None:
            return []
        return self._solution.iteration_history

    def __repr__(self) -> str:
        status = "solved" if self.is_solved else "not solved"
        return f"ColumnGeneration({self._master!r}, {self._pricing!r}, {status})"


def generate(
    master: CoveringMaster,
    oracle: PricingProblem,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
) -> CGSolution:
    """
    Run column generation until convergence or the iteration budget.

    Args:
        master: Restricted master problem
        oracle: Pricing oracle
        tolerance: Reduced-cost tolerance (default from global config)
        max_iterations: Iteration budget (default from global config)

    Returns:
        CGSolution; ``converged`` and ``iterations`` report the outcome
    """
    options = {}
    if tolerance is not None:
        options['optimality_tolerance'] = tolerance
    if max_iterations is not None:
        options['max_iterations'] = max_iterations
    return ColumnGeneration(master, oracle, CGConfig(**options)).solve()
