"""
Master problem solution module.

This module defines the data structures for representing solutions
from the master problem solver.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional

from colgen.config import get_tolerance


class SolutionStatus(Enum):
    """
    Status of a master problem solve.

    Only OPTIMAL carries usable primal and dual values; every other
    status is treated as a solver failure by the covering master.
    """
    OPTIMAL = auto()           # Optimal solution found
    INFEASIBLE = auto()        # Problem is infeasible
    UNBOUNDED = auto()         # Problem is unbounded
    INF_OR_UNBOUNDED = auto()  # Infeasible or unbounded (solver couldn't determine)
    TIME_LIMIT = auto()        # Time limit reached
    ITERATION_LIMIT = auto()   # Iteration limit reached
    NOT_SOLVED = auto()        # Solve not called yet
    ERROR = auto()             # Solver error occurred


@dataclass
class MasterSolution:
    """
    Result of solving the covering master problem.

    Attributes:
        status: Solution status (OPTIMAL, INFEASIBLE, etc.)
        objective_value: Objective function value (None if not solved)
        column_values: Mapping from column_id to its value in solution
        dual_values: One dual value per covering row, in item order
        solve_time: Time spent solving in seconds
        num_columns: Number of columns in the model when solved
        is_ip: True if the solve was the integer restriction

    Example:
        >>> solution = master.solve_lp()
        >>> for i, dual in enumerate(solution.dual_values):
        ...     print(f"  Dual[{i}] = {dual}")
    """
    status: SolutionStatus = SolutionStatus.NOT_SOLVED

    objective_value: Optional[float] = None

    # Primal solution: column_id -> value (lambda)
    column_values: Dict[int, float] = field(default_factory=dict)

    # Dual solution: row i -> dual value (pi_i)
    dual_values: List[float] = field(default_factory=list)

    solve_time: float = 0.0
    num_columns: int = 0
    is_ip: bool = False

    # =========================================================================
    # Convenience Properties
    # =========================================================================

    @property
    def is_optimal(self) -> bool:
        """Check if solution is optimal."""
        return self.status == SolutionStatus.OPTIMAL

    @property
    def is_infeasible(self) -> bool:
        """Check if problem is infeasible."""
        return self.status == SolutionStatus.INFEASIBLE

    @property
    def is_integer(self) -> bool:
        """True if all column values are (nearly) integer."""
        tol = get_tolerance("integrality")
        for value in self.column_values.values():
            if abs(value - round(value)) > tol:
                return False
        return True

    # =========================================================================
    # Methods
    # =========================================================================

    def get_active_columns(self, tol: Optional[float] = None) -> List[int]:
        """
        Get column IDs with positive value in solution.

        Args:
            tol: Tolerance for considering a value positive
                (default: the feasibility tolerance)

        Returns:
            List of column IDs with value > tol
        """
        if tol is None:
            tol = get_tolerance("feasibility")
        return [
            col_id for col_id, value in self.column_values.items()
            if value > tol
        ]

    def summary(self) -> str:
        """Return a human-readable summary of the solution."""
        lines = [
            "MasterSolution:",
            f"  Status: {self.status.name}",
        ]

        if self.objective_value is not None:
            lines.append(f"  Objective: {self.objective_value:.6f}")

        active = self.get_active_columns()
        lines.append(f"  Active columns: {len(active)} / {self.num_columns}")
        lines.append(f"  Solve time: {self.solve_time:.3f}s")
        return "\n".join(lines)

    def __repr__(self) -> str:
        obj_str = f", obj={self.objective_value:.4f}" if self.objective_value is not None else ""
        kind = "IP" if self.is_ip else "LP"
        return f"MasterSolution({kind}, {self.status.name}{obj_str})"
