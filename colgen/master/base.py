"""
Master problem adapter abstract base class.

This module defines the thin interface column generation needs from an
external LP/MIP engine. The engine's own objects never leave the adapter:
variables and constraints are referred to through opaque integer handles.

Design Philosophy:
-----------------
- Public methods validate their arguments and handles, then delegate
- Required ``_*_impl`` methods are abstract and talk to the engine
- Any status other than OPTIMAL makes solution queries raise SolverError

Customization Guide:
-------------------
To plug in a different engine:

1. Subclass MasterProblem
2. Implement the ``_*_impl`` methods
3. Map the engine's status codes to SolutionStatus

Example:
    >>> class MyMaster(MasterProblem):
    ...     def _create_problem_impl(self, name, sense):
    ...         self._model = mysolver.Model(name)
    ...     ...
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from colgen.master.solution import SolutionStatus

logger = logging.getLogger(__name__)


class ObjectiveSense(Enum):
    """Direction of optimization."""
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


@dataclass(frozen=True)
class VariableHandle:
    """Opaque reference to a variable of the master problem."""
    index: int
    name: str = ""


@dataclass(frozen=True)
class ConstraintHandle:
    """Opaque reference to a linear constraint of the master problem."""
    index: int
    name: str = ""


class SolverError(RuntimeError):
    """
    Raised when the external solver does not return an optimal solution.

    Attributes:
        status: The SolutionStatus reported by the solver
    """

    def __init__(self, message: str, status: SolutionStatus = SolutionStatus.ERROR):
        super().__init__(message)
        self.status = status


class MasterProblem(ABC):
    """
    Abstract base class for master problem adapters.

    Lifecycle:
    ---------
    1. create_problem(name, sense)
    2. add_constraint(...) for each covering row (modifiable=True)
    3. add_variable(...) + add_coefficient(...) for each column
    4. solve(), then get_objective_value / get_dual / get_primal
    5. Repeat 3-4; set_integer(...) for an integer restriction solve

    Attributes:
        name: Problem name (set by create_problem)
        sense: Objective sense
    """

    def __init__(self):
        self._name: Optional[str] = None
        self._sense: ObjectiveSense = ObjectiveSense.MINIMIZE
        self._variables: list[VariableHandle] = []
        self._constraints: list[ConstraintHandle] = []
        self._modifiable: list[bool] = []
        self._status: SolutionStatus = SolutionStatus.NOT_SOLVED

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def sense(self) -> ObjectiveSense:
        return self._sense

    @property
    def num_variables(self) -> int:
        return len(self._variables)

    @property
    def num_constraints(self) -> int:
        return len(self._constraints)

    @property
    def is_created(self) -> bool:
        """True once create_problem has been called."""
        return self._name is not None

    # =========================================================================
    # Abstract Methods (MUST be implemented by subclasses)
    # =========================================================================

    @abstractmethod
    def _create_problem_impl(self, name: str, sense: ObjectiveSense) -> None:
        """Create an empty model in the engine."""
        pass

    @abstractmethod
    def _add_variable_impl(
        self,
        name: str,
        lb: float,
        ub: float,
        obj: float,
        is_integer: bool,
    ) -> None:
        """Append a variable (the next column index) to the engine model."""
        pass

    @abstractmethod
    def _add_constraint_impl(
        self,
        name: str,
        indices: list[int],
        coeffs: list[float],
        lhs: float,
        rhs: float,
    ) -> None:
        """Append a row ``lhs <= sum coeffs * x[indices] <= rhs``."""
        pass

    @abstractmethod
    def _add_coefficient_impl(self, row: int, col: int, coeff: float) -> None:
        """Add ``coeff`` to the matrix entry (row, col)."""
        pass

    @abstractmethod
    def _solve_impl(self) -> SolutionStatus:
        """Run the engine and return the mapped status."""
        pass

    @abstractmethod
    def _get_objective_value_impl(self) -> float:
        pass

    @abstractmethod
    def _get_dual_impl(self, row: int) -> float:
        pass

    @abstractmethod
    def _get_primal_impl(self, col: int) -> float:
        pass

    @abstractmethod
    def _set_integer_impl(self, col: int, is_integer: bool) -> None:
        pass

    # =========================================================================
    # Public API
    # =========================================================================

    def create_problem(
        self,
        name: str,
        sense: ObjectiveSense = ObjectiveSense.MINIMIZE,
    ) -> None:
        """
        Create the (empty) problem.

        Raises:
            ValueError: If the problem was already created
        """
        if self.is_created:
            raise ValueError(f"Problem '{self._name}' already created")
        self._name = name
        self._sense = sense
        self._create_problem_impl(name, sense)
        logger.debug("Created master problem '%s' (%s)", name, sense.value)

    def add_variable(
        self,
        name: str,
        lb: float = 0.0,
        ub: float = math.inf,
        obj: float = 0.0,
        is_integer: bool = False,
    ) -> VariableHandle:
        """
        Add a variable with bounds and objective coefficient.

        Returns:
            Handle of the new variable

        Raises:
            ValueError: If lb > ub or the problem was not created
        """
        self._require_created()
        if lb > ub:
            raise ValueError(f"Variable '{name}': lower bound {lb} > upper bound {ub}")
        self._add_variable_impl(name, lb, ub, obj, is_integer)
        handle = VariableHandle(len(self._variables), name)
        self._variables.append(handle)
        self._status = SolutionStatus.NOT_SOLVED
        return handle

    def add_constraint(
        self,
        name: str,
        terms: Sequence[Tuple[VariableHandle, float]],
        lhs: float = -math.inf,
        rhs: float = math.inf,
        modifiable: bool = False,
    ) -> ConstraintHandle:
        """
        Add a linear constraint ``lhs <= sum coeff * var <= rhs``.

        A constraint without terms is only accepted when it is modifiable,
        i.e. when columns will add their coefficients to it later.

        Returns:
            Handle of the new constraint

        Raises:
            ValueError: On empty terms of a non-modifiable constraint,
                unknown variable handles or lhs > rhs
        """
        self._require_created()
        if not terms and not modifiable:
            raise ValueError(f"Constraint '{name}' has no terms and is not modifiable")
        if lhs > rhs:
            raise ValueError(f"Constraint '{name}': lhs {lhs} > rhs {rhs}")

        indices = []
        coeffs = []
        for var, coeff in terms:
            self._check_variable(var)
            indices.append(var.index)
            coeffs.append(float(coeff))

        self._add_constraint_impl(name, indices, coeffs, lhs, rhs)
        handle = ConstraintHandle(len(self._constraints), name)
        self._constraints.append(handle)
        self._modifiable.append(modifiable)
        self._status = SolutionStatus.NOT_SOLVED
        return handle

    def set_modifiable(self, cons: ConstraintHandle, modifiable: bool = True) -> None:
        """Allow (or forbid) adding coefficients to an existing constraint."""
        self._check_constraint(cons)
        self._modifiable[cons.index] = modifiable

    def is_modifiable(self, cons: ConstraintHandle) -> bool:
        self._check_constraint(cons)
        return self._modifiable[cons.index]

    def add_coefficient(
        self,
        cons: ConstraintHandle,
        var: VariableHandle,
        coeff: float,
    ) -> None:
        """
        Add a coefficient of ``var`` to a modifiable constraint.

        Raises:
            ValueError: On unknown handles or a non-modifiable constraint
        """
        self._check_constraint(cons)
        self._check_variable(var)
        if not self._modifiable[cons.index]:
            raise ValueError(f"Constraint '{cons.name}' is not modifiable")
        self._add_coefficient_impl(cons.index, var.index, float(coeff))
        self._status = SolutionStatus.NOT_SOLVED

    def set_integer(self, var: VariableHandle, is_integer: bool = True) -> None:
        """Switch a variable between continuous and integer."""
        self._check_variable(var)
        self._set_integer_impl(var.index, is_integer)
        self._status = SolutionStatus.NOT_SOLVED

    def solve(self) -> SolutionStatus:
        """Solve the current model and return its status."""
        self._require_created()
        self._status = self._solve_impl()
        logger.debug("Master '%s' solved: %s", self._name, self._status.name)
        return self._status

    def get_status(self) -> SolutionStatus:
        return self._status

    def get_objective_value(self) -> float:
        self._require_solution()
        return self._get_objective_value_impl()

    def get_dual(self, cons: ConstraintHandle) -> float:
        self._check_constraint(cons)
        self._require_solution()
        return self._get_dual_impl(cons.index)

    def get_primal(self, var: VariableHandle) -> float:
        self._check_variable(var)
        self._require_solution()
        return self._get_primal_impl(var.index)

    # =========================================================================
    # Validation helpers
    # =========================================================================

    def _require_created(self) -> None:
        if not self.is_created:
            raise ValueError("create_problem() must be called first")

    def _require_solution(self) -> None:
        if self._status != SolutionStatus.OPTIMAL:
            raise SolverError(
                f"No optimal solution available (status {self._status.name})",
                status=self._status,
            )

    def _check_variable(self, var: VariableHandle) -> None:
        if not isinstance(var, VariableHandle):
            raise ValueError(f"Expected a VariableHandle, got {var!r}")
        if var.index < 0 or var.index >= len(self._variables):
            raise ValueError(f"Unknown variable handle {var!r}")

    def _check_constraint(self, cons: ConstraintHandle) -> None:
        if not isinstance(cons, ConstraintHandle):
            raise ValueError(f"Expected a ConstraintHandle, got {cons!r}")
        if cons.index < 0 or cons.index >= len(self._constraints):
            raise ValueError(f"Unknown constraint handle {cons!r}")
