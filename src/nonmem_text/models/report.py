"""
Pydantic models for parsed NONMEM reports (.lst files).

A Report is built once per source file and never mutated. Every numeric
sequence is an empty list (never None) when its section is absent.
"""

import math
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TerminationStatus(str, Enum):
    """Outcome of the estimation step."""

    SUCCESSFUL = 'Successful'
    TERMINATED = 'Terminated'
    UNKNOWN = 'Unknown'


class ParameterVectors(BaseModel):
    """Final THETA, OMEGA and SIGMA estimates in print order."""

    model_config = ConfigDict(frozen=True)

    theta: List[float] = Field(default_factory=list)
    omega: List[float] = Field(default_factory=list)
    sigma: List[float] = Field(default_factory=list)


class StandardErrors(BaseModel):
    """
    Standard errors of the parameter vectors (same shape).

    Elements NONMEM reports without a standard error (fixed elements,
    printed as dots) are NaN.
    """

    model_config = ConfigDict(frozen=True)

    theta_se: List[float] = Field(default_factory=list)
    omega_se: List[float] = Field(default_factory=list)
    sigma_se: List[float] = Field(default_factory=list)


class Report(BaseModel):
    """
    Structured content of one NONMEM report.

    OMEGA and SIGMA values are the lower-triangular matrix elements in the
    order NONMEM prints them (row by row).

    Example:
        >>> report = Report(eigenvalues=[0.5, 1.0, 2.0])
        >>> report.condition_number
        4.0
        >>> Report().condition_number is None
        True
    """

    model_config = ConfigDict(frozen=True)

    termination_status: TerminationStatus = TerminationStatus.UNKNOWN
    objective_function_value: Optional[float] = None
    parameter_vectors: ParameterVectors = Field(default_factory=ParameterVectors)
    standard_errors: StandardErrors = Field(default_factory=StandardErrors)
    eigenvalues: List[float] = Field(default_factory=list)
    gradients: List[float] = Field(default_factory=list)
    shrinkage: List[float] = Field(
        default_factory=list,
        description="ETA shrinkage, SD-based (%)"
    )
    relative_standard_errors: List[float] = Field(default_factory=list)
    eta_bar: List[float] = Field(default_factory=list)

    # === Diagnostics beyond the core sections ===
    etabar_se: List[float] = Field(default_factory=list)
    etabar_p_values: List[float] = Field(default_factory=list)
    eps_shrinkage: List[float] = Field(
        default_factory=list,
        description="EPS shrinkage, SD-based (%)"
    )
    estimation_method: Optional[str] = None
    near_boundary: bool = False
    covariance_step: bool = False
    estimation_time: Optional[float] = Field(default=None, description="Seconds")
    covariance_time: Optional[float] = Field(default=None, description="Seconds")

    # === Parameter setup and run messages ===
    initial_estimates: ParameterVectors = Field(default_factory=ParameterVectors)
    theta_labels: List[str] = Field(default_factory=list)
    omega_labels: List[str] = Field(
        default_factory=list,
        description="One label per diagonal element"
    )
    sigma_labels: List[str] = Field(
        default_factory=list,
        description="One label per diagonal element"
    )
    theta_fixed: List[bool] = Field(default_factory=list)
    omega_fixed: List[bool] = Field(default_factory=list)
    sigma_fixed: List[bool] = Field(default_factory=list)
    termination_text: Optional[str] = Field(
        default=None,
        description="Minimization message, one line per output line"
    )
    simulation_info: Optional[str] = None

    @property
    def condition_number(self) -> Optional[float]:
        """
        Ratio of the last to the first eigenvalue.

        NONMEM prints eigenvalues in ascending order, so this is max/min.
        Defined only when there are at least two eigenvalues; a zero first
        eigenvalue gives infinity.
        """
        if len(self.eigenvalues) < 2:
            return None
        first, last = self.eigenvalues[0], self.eigenvalues[-1]
        if first == 0:
            return math.inf
        return last / first

    @property
    def zero_gradient(self) -> bool:
        """True if any final gradient element is exactly zero."""
        return any(g == 0 for g in self.gradients)

    @property
    def is_empty(self) -> bool:
        """True when nothing at all was extracted (a "no data" report)."""
        return self == Report()
