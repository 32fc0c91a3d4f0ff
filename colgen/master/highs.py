"""
HiGHS implementation of the master problem adapter.

This module provides the ready-to-use master problem adapter on HiGHS,
a high-performance open-source LP/MIP solver, through its Python
bindings (highspy).

Usage:
    >>> from colgen.master import HiGHSMasterProblem
    >>> lp = HiGHSMasterProblem()
    >>> lp.create_problem("demo")
    >>> x = lp.add_variable("x", obj=1.0)
    >>> row = lp.add_constraint("cover", [(x, 2.0)], lhs=4.0)
    >>> lp.solve()
    <SolutionStatus.OPTIMAL: 1>
    >>> lp.get_primal(x)
    2.0
"""

import logging
import math
from typing import Optional

try:
    import highspy
    HIGHS_AVAILABLE = True
except ImportError:
    HIGHS_AVAILABLE = False

from colgen.config import config
from colgen.master.base import MasterProblem, ObjectiveSense
from colgen.master.solution import SolutionStatus

logger = logging.getLogger(__name__)


# HiGHS status mapping
def _map_highs_status(status) -> SolutionStatus:
    """Map HiGHS model status to our SolutionStatus."""
    if not HIGHS_AVAILABLE:
        return SolutionStatus.ERROR

    status_map = {
        highspy.HighsModelStatus.kNotset: SolutionStatus.NOT_SOLVED,
        highspy.HighsModelStatus.kLoadError: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kModelError: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kPresolveError: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kSolveError: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kPostsolveError: SolutionStatus.ERROR,
        highspy.HighsModelStatus.kModelEmpty: SolutionStatus.OPTIMAL,
        highspy.HighsModelStatus.kOptimal: SolutionStatus.OPTIMAL,
        highspy.HighsModelStatus.kInfeasible: SolutionStatus.INFEASIBLE,
        highspy.HighsModelStatus.kUnbounded: SolutionStatus.UNBOUNDED,
        highspy.HighsModelStatus.kUnboundedOrInfeasible: SolutionStatus.INF_OR_UNBOUNDED,
        highspy.HighsModelStatus.kTimeLimit: SolutionStatus.TIME_LIMIT,
        highspy.HighsModelStatus.kIterationLimit: SolutionStatus.ITERATION_LIMIT,
    }

    return status_map.get(status, SolutionStatus.ERROR)


def _to_highs_bound(value: float) -> float:
    if math.isinf(value):
        return highspy.kHighsInf if value > 0 else -highspy.kHighsInf
    return float(value)


class HiGHSMasterProblem(MasterProblem):
    """
    Master problem adapter using HiGHS.

    Variables and rows are appended to one ``highspy.Highs`` model; their
    positions in the model are the handle indices.

    Attributes:
        time_limit: Maximum solve time in seconds (None = no limit)
        verbosity: HiGHS output level (0 = silent, 1 = normal)
    """

    def __init__(
        self,
        time_limit: Optional[float] = None,
        verbosity: Optional[int] = None
    ):
        """
        Initialize the HiGHS adapter.

        Args:
            time_limit: Maximum solve time in seconds (None = no limit)
            verbosity: HiGHS output level (default: config.solver_verbosity)

        Raises:
            ImportError: If highspy is not installed
        """
        if not HIGHS_AVAILABLE:
            raise ImportError(
                "HiGHS is not available. Install it with: pip install highspy"
            )

        self._time_limit = time_limit
        self._verbosity = config.solver_verbosity if verbosity is None else verbosity
        self._highs: Optional[highspy.Highs] = None

        # (row, col) -> coefficient, mirrors the constraint matrix
        self._coefficients: dict[tuple, float] = {}

        super().__init__()

    @property
    def verbosity(self) -> int:
        return self._verbosity

    # =========================================================================
    # Abstract Method Implementations
    # =========================================================================

    def _create_problem_impl(self, name: str, sense: ObjectiveSense) -> None:
        self._highs = highspy.Highs()

        self._highs.setOptionValue('output_flag', self._verbosity > 0)
        self._highs.setOptionValue('log_to_console', self._verbosity > 0)

        if self._time_limit is not None:
            self._highs.setOptionValue('time_limit', self._time_limit)

        self._highs.setOptionValue(
            'mip_feasibility_tolerance', config.get_tolerance("integrality")
        )

        if sense == ObjectiveSense.MINIMIZE:
            self._highs.changeObjectiveSense(highspy.ObjSense.kMinimize)
        else:
            self._highs.changeObjectiveSense(highspy.ObjSense.kMaximize)

    def _add_variable_impl(
        self,
        name: str,
        lb: float,
        ub: float,
        obj: float,
        is_integer: bool,
    ) -> None:
        # addCol(cost, lower, upper, num_nz, indices, values)
        self._highs.addCol(
            float(obj),
            _to_highs_bound(lb),
            _to_highs_bound(ub),
            0,
            [],
            []
        )
        if is_integer:
            col = self._highs.getNumCol() - 1
            self._highs.changeColIntegrality(col, highspy.HighsVarType.kInteger)

    def _add_constraint_impl(
        self,
        name: str,
        indices: list[int],
        coeffs: list[float],
        lhs: float,
        rhs: float,
    ) -> None:
        row = self._highs.getNumRow()
        for col, coeff in zip(indices, coeffs):
            self._coefficients[(row, col)] = self._coefficients.get((row, col), 0.0) + coeff
        self._highs.addRow(
            _to_highs_bound(lhs),
            _to_highs_bound(rhs),
            len(indices),
            indices,
            coeffs
        )

    def _add_coefficient_impl(self, row: int, col: int, coeff: float) -> None:
        # changeCoeff overwrites, so accumulate onto the current entry
        value = self._coefficients.get((row, col), 0.0) + coeff
        self._coefficients[(row, col)] = value
        self._highs.changeCoeff(row, col, value)

    def _solve_impl(self) -> SolutionStatus:
        self._highs.run()
        status = _map_highs_status(self._highs.getModelStatus())
        if status != SolutionStatus.OPTIMAL:
            logger.warning("HiGHS finished with status %s", status.name)
        return status

    def _get_objective_value_impl(self) -> float:
        return self._highs.getInfo().objective_function_value

    def _get_dual_impl(self, row: int) -> float:
        return self._highs.getSolution().row_dual[row]

    def _get_primal_impl(self, col: int) -> float:
        return self._highs.getSolution().col_value[col]

    def _set_integer_impl(self, col: int, is_integer: bool) -> None:
        var_type = (
            highspy.HighsVarType.kInteger if is_integer
            else highspy.HighsVarType.kContinuous
        )
        self._highs.changeColIntegrality(col, var_type)

    # =========================================================================
    # HiGHS-specific Methods
    # =========================================================================

    def set_verbosity(self, level: int) -> None:
        """
        Set the solver verbosity level.

        Args:
            level: 0 = silent, 1 = normal, 2 = verbose
        """
        self._verbosity = level
        if self._highs is not None:
            self._highs.setOptionValue('output_flag', level > 0)
            self._highs.setOptionValue('log_to_console', level > 0)

    def get_model_stats(self) -> dict:
        """
        Get statistics about the model.

        Returns:
            Dictionary with model statistics
        """
        return {
            'num_columns': self._highs.getNumCol(),
            'num_rows': self._highs.getNumRow(),
            'num_nonzeros': self._highs.getNumNz(),
        }
