"""
Master problem module - LP/MIP side of column generation.

The master problem of a covering problem is:
- Covering: sum_j a_ij * lambda_j >= demand_i for each item i

This module provides:
- MasterProblem: Abstract adapter over an external LP/MIP engine
- HiGHSMasterProblem: Default adapter using the HiGHS solver
- CoveringMaster: Restricted master with one covering row per item
- MasterSolution / SolutionStatus: Solve results
- VariableHandle / ConstraintHandle: Opaque references into the model
- SolverError: Raised on any non-optimal solve

Usage:
------
    >>> from colgen.master import CoveringMaster
    >>> master = CoveringMaster(items)
    >>> solution = master.solve_lp()
    >>> duals = master.dual_vector()
"""

from colgen.master.base import (
    ConstraintHandle,
    MasterProblem,
    ObjectiveSense,
    SolverError,
    VariableHandle,
)
from colgen.master.covering import CoveringMaster
from colgen.master.highs import HIGHS_AVAILABLE, HiGHSMasterProblem
from colgen.master.solution import MasterSolution, SolutionStatus

__all__ = [
    "MasterProblem",
    "ObjectiveSense",
    "VariableHandle",
    "ConstraintHandle",
    "SolverError",
    "CoveringMaster",
    "MasterSolution",
    "SolutionStatus",
    "HiGHSMasterProblem",
    "HIGHS_AVAILABLE",
]
