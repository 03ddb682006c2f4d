# equity/sim.py
import logging
import math
from dataclasses import asdict, fields, replace

import numpy as np
import pandas as pd

from equity.model import (
    ComputationResult,
    InputSet,
    PackageBreakdown,
    PreconditionViolation,
    ProjectionRow,
    is_number,
)
from equity.tax import compute_tax

logger = logging.getLogger(__name__)

SUPER_RATE = 0.12  # employer super, on top of base and outside taxable income
MAX_VESTING_YEARS = 50  # CPI compounding overflows floats on far longer horizons

COMPARISON_COLUMNS = {
    "year": "Year",
    "current_role_annual": "Current_Role_Annual",
    "current_role_cumulative": "Current_Role_Cumulative",
    "startup_annual": "Startup_Annual",
    "startup_cumulative": "Startup_Cumulative",
    "difference": "Difference",
}


def validate_inputs(inputs: InputSet) -> None:
    """Raise PreconditionViolation listing every field outside its domain."""
    errors = {}
    positive = ("current_base_salary", "valuation", "vesting_period_years", "risk_multiplier")
    for name in positive + ("annual_cpi_pct", "salary_pct"):
        v = getattr(inputs, name)
        if not is_number(v):
            errors[name] = "missing or not a number"
        elif not math.isfinite(v):
            errors[name] = "must be finite"
        elif name in positive and v <= 0:
            errors[name] = "must be > 0"

    cpi = inputs.annual_cpi_pct
    if "annual_cpi_pct" not in errors and cpi < 0:
        errors["annual_cpi_pct"] = "must be >= 0"
    pct = inputs.salary_pct
    if "salary_pct" not in errors and not (0 < pct <= 100):
        errors["salary_pct"] = "must be in (0, 100]"
    vesting = inputs.vesting_period_years
    if "vesting_period_years" not in errors and vesting > MAX_VESTING_YEARS:
        errors["vesting_period_years"] = f"must be <= {MAX_VESTING_YEARS}"

    if errors:
        logger.info("Rejected inputs: %s", errors)
        raise PreconditionViolation(errors)


def package_breakdown(base_salary: float) -> PackageBreakdown:
    super_contribution = base_salary * SUPER_RATE
    tax = compute_tax(base_salary)
    take_home = base_salary - tax
    return PackageBreakdown(
        base_salary=base_salary,
        super_contribution=super_contribution,
        total_package=base_salary + super_contribution,
        tax_owed=tax,
        take_home_annual=take_home,
        take_home_monthly=take_home / 12.0,
    )


def projection_rows(inputs: InputSet, new_base_salary: float, equity_value_needed: float):
    """Year-by-year cumulative package (base + super) for both roles.

    Rows run from year 0 (all zero) to ceil(vesting period). A fractional
    vesting period makes the last row a part-year, prorated by the fraction.
    Equity is added once, to the startup cumulative of the last row.
    """
    vesting = float(inputs.vesting_period_years)
    n_years = math.ceil(vesting)
    part_year = vesting - math.floor(vesting)
    cpi = inputs.annual_cpi_pct / 100.0

    current_annual = np.zeros(n_years + 1, dtype=float)
    current_cum = np.zeros(n_years + 1, dtype=float)
    startup_annual = np.zeros(n_years + 1, dtype=float)
    startup_cum = np.zeros(n_years + 1, dtype=float)

    with np.errstate(over="ignore", invalid="ignore"):
        for t in range(1, n_years + 1):
            try:
                growth = (1 + cpi) ** (t - 1)
            except OverflowError:
                growth = math.inf
            share = part_year if (t == n_years and part_year > 0) else 1.0

            base_t = inputs.current_base_salary * growth
            current_annual[t] = (base_t + base_t * SUPER_RATE) * share
            current_cum[t] = current_cum[t-1] + current_annual[t]

            startup_base_t = new_base_salary * growth
            startup_annual[t] = (startup_base_t + startup_base_t * SUPER_RATE) * share
            startup_cum[t] = startup_cum[t-1] + startup_annual[t]

        startup_cum[n_years] += equity_value_needed
        difference = startup_cum - current_cum

    # huge CPI or salary inside the vesting cap can still leave float range
    if not np.all(np.isfinite(difference)):
        raise PreconditionViolation({"annual_cpi_pct": "projection exceeds floating-point range"})

    return tuple(
        ProjectionRow(
            year=t,
            current_role_annual=float(current_annual[t]),
            current_role_cumulative=float(current_cum[t]),
            startup_annual=float(startup_annual[t]),
            startup_cumulative=float(startup_cum[t]),
            difference=float(difference[t]),
        )
        for t in range(n_years + 1)
    )


def compute(inputs: InputSet) -> ComputationResult:
    validate_inputs(inputs)
    # Decimal and other real types become floats for the arithmetic below
    inputs = replace(inputs, **{f.name: float(getattr(inputs, f.name)) for f in fields(inputs)})

    current = package_breakdown(inputs.current_base_salary)
    new = package_breakdown(inputs.current_base_salary * (inputs.salary_pct / 100.0))

    monthly_difference = current.take_home_monthly - new.take_home_monthly
    annual_sacrifice = current.total_package - new.total_package
    total_sacrifice = annual_sacrifice * inputs.vesting_period_years
    equity_value_needed = total_sacrifice * inputs.risk_multiplier
    breakeven_equity_pct = (equity_value_needed / inputs.valuation) * 100

    rows = projection_rows(inputs, new.base_salary, equity_value_needed)
    logger.debug(
        "Break-even %.4f%% (equity $%.0f over %s years, %d rows)",
        breakeven_equity_pct, equity_value_needed, inputs.vesting_period_years, len(rows),
    )

    return ComputationResult(
        current=current,
        new=new,
        monthly_difference=monthly_difference,
        annual_sacrifice=annual_sacrifice,
        total_sacrifice=total_sacrifice,
        breakeven_equity_pct=breakeven_equity_pct,
        equity_value_needed=equity_value_needed,
        rows=rows,
    )


def comparison_frame(result: ComputationResult) -> pd.DataFrame:
    df = pd.DataFrame([asdict(r) for r in result.rows], columns=list(COMPARISON_COLUMNS))
    return df.rename(columns=COMPARISON_COLUMNS)


# --- Sensitivity grid ---------------------------------------------------------

def breakeven_grid(p, salary_pcts, risk_multipliers):
    """
    Returns a (len(risk_multipliers) x len(salary_pcts)) array of break-even %.
    Rows = risk multiplier, Cols = salary percentage.
    """
    grid = np.zeros((len(risk_multipliers), len(salary_pcts)), dtype=float)
    for i, rm in enumerate(risk_multipliers):
        for j, pct in enumerate(salary_pcts):
            p2 = dict(p)
            p2["risk_multiplier"] = float(rm)
            p2["salary_percentage"] = float(pct)
            grid[i, j] = compute(InputSet.from_params(p2)).breakeven_equity_pct
    return grid
