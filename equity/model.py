# equity/model.py
"""Value types passed between the break-even engine and its callers."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


def is_number(value) -> bool:
    """Real-valued numbers, Decimal included; bool and complex are not."""
    return (
        isinstance(value, numbers.Number)
        and not isinstance(value, (bool, complex))
    )


class PreconditionViolation(ValueError):
    """Raised when an input falls outside the domain the engine accepts.

    ``errors`` maps each offending field to a short message so a UI can point
    at the right widget.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        detail = "; ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(f"Invalid inputs ({detail})")


@dataclass(frozen=True)
class InputSet:
    current_base_salary: float
    valuation: float  # currency units, not millions
    vesting_period_years: float
    annual_cpi_pct: float
    salary_pct: float  # share of current base retained, 0-100
    risk_multiplier: float

    @classmethod
    def from_params(cls, p: Dict[str, Any]) -> "InputSet":
        """Build from a params dict (see ``equity.params.default_params``).

        The dashboard collects valuation in millions (``valuation_m``); a plain
        ``valuation`` key in currency units takes precedence when present.
        """
        valuation: Optional[float] = p.get("valuation")
        if valuation is None and p.get("valuation_m") is not None:
            valuation = p["valuation_m"] * 1_000_000
        return cls(
            current_base_salary=p.get("current_salary"),
            valuation=valuation,
            vesting_period_years=p.get("vesting_period"),
            annual_cpi_pct=p.get("annual_cpi"),
            salary_pct=p.get("salary_percentage"),
            risk_multiplier=p.get("risk_multiplier"),
        )


@dataclass(frozen=True)
class PackageBreakdown:
    base_salary: float
    super_contribution: float
    total_package: float
    tax_owed: float
    take_home_annual: float
    take_home_monthly: float


@dataclass(frozen=True)
class ProjectionRow:
    year: int
    current_role_annual: float
    current_role_cumulative: float
    startup_annual: float
    startup_cumulative: float
    difference: float


@dataclass(frozen=True)
class ComputationResult:
    current: PackageBreakdown
    new: PackageBreakdown
    monthly_difference: float
    annual_sacrifice: float
    total_sacrifice: float
    breakeven_equity_pct: float
    equity_value_needed: float
    rows: Tuple[ProjectionRow, ...]

    @property
    def annual_takehome_difference(self) -> float:
        # after-tax decrease; smaller than annual_sacrifice once brackets drop
        return self.current.take_home_annual - self.new.take_home_annual

    @property
    def final_year(self) -> int:
        return self.rows[-1].year
