"""
Column generation solution module.

This module defines the data structures for representing the results
of the column generation algorithm.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional

from colgen.core.column import Column


class CGStatus(Enum):
    """
    Status of the column generation algorithm.
    """
    OPTIMAL = auto()           # No improving column left (LP optimum)
    FEASIBLE = auto()          # Stopped by a callback
    ITERATION_LIMIT = auto()   # Iteration budget exhausted
    NOT_SOLVED = auto()        # Not yet solved


@dataclass
class CGIteration:
    """
    Information about a single column generation iteration.

    Attributes:
        iteration: Iteration number (1-based)
        master_objective: Master LP objective value
        reduced_cost: Reduced cost of the priced column
        num_columns_added: Columns added in this iteration (0 or 1)
        master_time: Time spent on the master problem
        pricing_time: Time spent on the pricing problem
        total_columns: Total columns in master after this iteration
    """
    iteration: int
    master_objective: float
    reduced_cost: float
    num_columns_added: int
    master_time: float
    pricing_time: float
    total_columns: int


@dataclass
class CGSolution:
    """
    Result of the column generation algorithm.

    Non-convergence is an outcome, not an error: with status
    ITERATION_LIMIT, ``objective_value`` is still the last LP objective,
    a valid (possibly suboptimal) upper bound on the LP optimum.

    Attributes:
        status: Solution status
        converged: True iff pricing found no improving column
        objective_value: Final LP objective
        ip_objective: Integer restriction objective (if solved)
        columns: Columns with positive LP value (value set)
        ip_columns: Columns with positive integer value (if solved)
        total_columns: Columns in the master at the end
        iterations: Number of CG iterations run
        total_time: Total solve time
        master_time: Time spent on master problems
        pricing_time: Time spent on pricing problems
        iteration_history: History of each iteration

    Example:
        >>> solution = generate(master, oracle)
        >>> if solution.converged:
        ...     print(f"LP optimum: {solution.objective_value}")
    """
    status: CGStatus = CGStatus.NOT_SOLVED
    converged: bool = False

    objective_value: Optional[float] = None
    ip_objective: Optional[float] = None

    columns: List[Column] = field(default_factory=list)
    ip_columns: List[Column] = field(default_factory=list)

    total_columns: int = 0
    iterations: int = 0
    total_time: float = 0.0
    master_time: float = 0.0
    pricing_time: float = 0.0

    iteration_history: List[CGIteration] = field(default_factory=list)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def is_optimal(self) -> bool:
        """Check if the LP optimum was reached."""
        return self.status == CGStatus.OPTIMAL

    @property
    def num_active_columns(self) -> int:
        """Number of columns with positive value."""
        return len(self.columns)

    # =========================================================================
    # Methods
    # =========================================================================

    def get_column_values(self) -> Dict[int, float]:
        """Mapping from column ID to LP value for columns with positive value."""
        return {
            col.column_id: col.value
            for col in self.columns
            if col.column_id is not None and col.value is not None
        }

    def get_convergence_history(self) -> List[float]:
        """Objective values over iterations."""
        return [it.master_objective for it in self.iteration_history]

    def summary(self) -> str:
        """Return a human-readable summary."""
        lines = [
            "Column Generation Solution:",
            f"  Status: {self.status.name}",
            f"  Converged: {self.converged}",
        ]

        if self.objective_value is not None:
            lines.append(f"  Objective: {self.objective_value:.6f}")

        if self.ip_objective is not None:
            lines.append(f"  IP Objective: {self.ip_objective:.6f}")

        lines.extend([
            f"  Iterations: {self.iterations}",
            f"  Total columns: {self.total_columns}",
            f"  Active columns: {self.num_active_columns}",
            f"  Total time: {self.total_time:.3f}s",
            f"    Master: {self.master_time:.3f}s",
            f"    Pricing: {self.pricing_time:.3f}s",
        ])

        return "\n".join(lines)

    def __repr__(self) -> str:
        obj_str = f", obj={self.objective_value:.4f}" if self.objective_value is not None else ""
        return f"CGSolution({self.status.name}{obj_str}, iters={self.iterations})"
