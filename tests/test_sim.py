import math
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from equity.model import InputSet, PreconditionViolation
from equity.params import default_params
from equity.sim import (
    COMPARISON_COLUMNS,
    MAX_VESTING_YEARS,
    breakeven_grid,
    comparison_frame,
    compute,
    package_breakdown,
)
from equity.tax import compute_tax

# Base of 181,250 gives a 203,000 total package (base + 12% super).
PACKAGE_203K_BASE = 181_250


def make_inputs(**overrides):
    values = dict(
        current_base_salary=PACKAGE_203K_BASE,
        valuation=10_000_000,
        vesting_period_years=4,
        annual_cpi_pct=3.5,
        salary_pct=80,
        risk_multiplier=4,
    )
    values.update(overrides)
    return InputSet(**values)


def test_package_breakdown():
    pkg = package_breakdown(PACKAGE_203K_BASE)
    assert pkg.super_contribution == pytest.approx(21_750)
    assert pkg.total_package == pytest.approx(203_000)
    assert pkg.tax_owed == pytest.approx(compute_tax(PACKAGE_203K_BASE))
    assert pkg.take_home_annual == pytest.approx(PACKAGE_203K_BASE - pkg.tax_owed)
    assert pkg.take_home_monthly == pytest.approx(pkg.take_home_annual / 12)
    assert pkg.total_package >= pkg.base_salary >= pkg.take_home_annual >= 0


def test_default_scenario():
    result = compute(make_inputs())

    assert result.new.base_salary == pytest.approx(145_000)
    assert result.annual_sacrifice == pytest.approx(40_600)
    assert result.total_sacrifice == pytest.approx(162_400)
    assert result.equity_value_needed == pytest.approx(649_600)
    assert result.breakeven_equity_pct == pytest.approx(6.5, abs=0.5)
    assert result.breakeven_equity_pct == pytest.approx(6.496)


def test_take_home_vs_package_sacrifice():
    result = compute(make_inputs())

    # 181,250 -> 52,025.50 tax; 145,000 -> 37,888 tax
    assert result.current.tax_owed == pytest.approx(52_025.5)
    assert result.new.tax_owed == pytest.approx(37_888)
    assert result.annual_takehome_difference == pytest.approx(22_112.5)
    assert result.monthly_difference == pytest.approx(22_112.5 / 12)
    assert result.monthly_difference * 12 < result.annual_sacrifice


@pytest.mark.parametrize(
    "salary_pct, valuation, risk, expected, tol",
    [
        (90, 50_000_000, 2.5, 0.41, 0.05),
        (60, 5_000_000, 5, 32.5, 1.0),
    ],
)
def test_documented_scenarios(salary_pct, valuation, risk, expected, tol):
    result = compute(make_inputs(salary_pct=salary_pct, valuation=valuation, risk_multiplier=risk))
    assert result.breakeven_equity_pct == pytest.approx(expected, abs=tol)


def test_no_salary_cut_needs_no_equity():
    result = compute(make_inputs(salary_pct=100))
    assert result.annual_sacrifice == 0
    assert result.breakeven_equity_pct == 0
    assert result.monthly_difference == 0
    assert result.rows[-1].difference == pytest.approx(0)


def test_breakeven_not_clamped():
    result = compute(make_inputs(salary_pct=10, valuation=100_000, risk_multiplier=6))
    assert result.breakeven_equity_pct > 100


def test_year_zero_row_is_zero():
    row = compute(make_inputs()).rows[0]
    assert row.year == 0
    assert row.current_role_annual == 0
    assert row.current_role_cumulative == 0
    assert row.startup_annual == 0
    assert row.startup_cumulative == 0
    assert row.difference == 0


def test_projection_rows_integer_vesting():
    result = compute(make_inputs())
    rows = result.rows

    assert [r.year for r in rows] == [0, 1, 2, 3, 4]
    assert result.final_year == 4
    growth = [1.035 ** (t - 1) for t in range(1, 5)]
    for t, g in zip(range(1, 5), growth):
        assert rows[t].current_role_annual == pytest.approx(203_000 * g)
        assert rows[t].startup_annual == pytest.approx(162_400 * g)

    assert rows[4].current_role_cumulative == pytest.approx(203_000 * sum(growth))
    assert rows[4].startup_cumulative == pytest.approx(162_400 * sum(growth) + 649_600)
    for r in rows:
        assert r.difference == pytest.approx(r.startup_cumulative - r.current_role_cumulative)


def test_equity_injected_only_in_final_row():
    rows = compute(make_inputs()).rows
    for prev, row in zip(rows[:-1], rows[1:-1]):
        assert row.startup_cumulative == pytest.approx(prev.startup_cumulative + row.startup_annual)
    last, before = rows[-1], rows[-2]
    assert last.startup_cumulative - before.startup_cumulative - last.startup_annual == pytest.approx(649_600)


@pytest.mark.parametrize("cpi", [0, 3.5, 10])
def test_cumulative_strictly_increasing(cpi):
    rows = compute(make_inputs(annual_cpi_pct=cpi)).rows
    for prev, row in zip(rows, rows[1:]):
        assert row.current_role_cumulative > prev.current_role_cumulative
        assert row.startup_cumulative > prev.startup_cumulative


def test_fractional_vesting_rounds_up_and_prorates():
    result = compute(make_inputs(vesting_period_years=4.5))
    rows = result.rows

    assert [r.year for r in rows] == [0, 1, 2, 3, 4, 5]
    assert result.total_sacrifice == pytest.approx(40_600 * 4.5)
    assert rows[5].current_role_annual == pytest.approx(203_000 * 1.035 ** 4 * 0.5)
    assert rows[5].startup_annual == pytest.approx(162_400 * 1.035 ** 4 * 0.5)
    # equity lands in the part-year row, nowhere earlier
    assert rows[4].startup_cumulative == pytest.approx(162_400 * sum(1.035 ** k for k in range(4)))
    assert rows[5].startup_cumulative == pytest.approx(
        rows[4].startup_cumulative + rows[5].startup_annual + result.equity_value_needed
    )


def test_short_fractional_vesting():
    rows = compute(make_inputs(vesting_period_years=0.5)).rows
    assert [r.year for r in rows] == [0, 1]
    assert rows[1].current_role_annual == pytest.approx(203_000 * 0.5)


@pytest.mark.parametrize(
    "overrides, field",
    [
        (dict(salary_pct=150), "salary_pct"),
        (dict(salary_pct=0), "salary_pct"),
        (dict(current_base_salary=-1), "current_base_salary"),
        (dict(vesting_period_years=0), "vesting_period_years"),
        (dict(valuation=math.nan), "valuation"),
        (dict(risk_multiplier=math.inf), "risk_multiplier"),
        (dict(annual_cpi_pct=-0.5), "annual_cpi_pct"),
        (dict(annual_cpi_pct=None), "annual_cpi_pct"),
        (dict(risk_multiplier="4"), "risk_multiplier"),
    ],
)
def test_invalid_inputs_rejected(overrides, field):
    with pytest.raises(PreconditionViolation) as excinfo:
        compute(make_inputs(**overrides))
    assert field in excinfo.value.errors
    assert isinstance(excinfo.value, ValueError)


def test_all_bad_fields_reported():
    with pytest.raises(PreconditionViolation) as excinfo:
        compute(make_inputs(salary_pct=150, current_base_salary=-1, vesting_period_years=0))
    assert set(excinfo.value.errors) == {"salary_pct", "current_base_salary", "vesting_period_years"}


def test_input_set_from_params():
    inputs = InputSet.from_params(default_params())
    assert inputs.current_base_salary == 203_000
    assert inputs.valuation == 10_000_000
    assert inputs.vesting_period_years == 4
    assert inputs.annual_cpi_pct == 3.5
    assert inputs.salary_pct == 80
    assert inputs.risk_multiplier == 4

    p = default_params()
    p["valuation"] = 2_500_000
    assert InputSet.from_params(p).valuation == 2_500_000


def test_defaults_breakeven():
    # 203k base: 45,472/yr package sacrifice over 4 years at 4x on 10M
    result = compute(InputSet.from_params(default_params()))
    assert result.current.total_package == pytest.approx(227_360)
    assert result.breakeven_equity_pct == pytest.approx(7.27552)


def test_comparison_frame():
    result = compute(make_inputs())
    df = comparison_frame(result)

    assert list(df.columns) == list(COMPARISON_COLUMNS.values())
    assert len(df) == 5
    assert df["Year"].tolist() == [0, 1, 2, 3, 4]
    assert df["Startup_Cumulative"].iloc[-1] == pytest.approx(result.rows[-1].startup_cumulative)
    assert df.to_csv(index=False).splitlines()[0] == (
        "Year,Current_Role_Annual,Current_Role_Cumulative,Startup_Annual,Startup_Cumulative,Difference"
    )


def test_breakeven_grid():
    params = default_params()
    salary_pcts = [60, 80, 100]
    risks = [2, 4]
    grid = breakeven_grid(params, salary_pcts, risks)

    assert grid.shape == (2, 3)
    assert np.allclose(grid[:, 2], 0.0)
    assert grid[1, 1] == pytest.approx(compute(InputSet.from_params(params)).breakeven_equity_pct)
    assert np.allclose(grid[1], grid[0] * 2)


def test_breakeven_grid_propagates_bad_inputs():
    with pytest.raises(PreconditionViolation):
        breakeven_grid(default_params(), [120], [4])


def test_vesting_period_capped():
    assert compute(make_inputs(vesting_period_years=MAX_VESTING_YEARS)).final_year == MAX_VESTING_YEARS
    for years in (MAX_VESTING_YEARS + 0.5, 30_000):
        with pytest.raises(PreconditionViolation) as excinfo:
            compute(make_inputs(vesting_period_years=years))
        assert "vesting_period_years" in excinfo.value.errors


def test_runaway_cpi_rejected_not_overflowed():
    with pytest.raises(PreconditionViolation) as excinfo:
        compute(make_inputs(vesting_period_years=MAX_VESTING_YEARS, annual_cpi_pct=1e12))
    assert "annual_cpi_pct" in excinfo.value.errors


def test_decimal_and_fraction_inputs():
    expected = compute(make_inputs())
    result = compute(make_inputs(
        current_base_salary=Decimal("181250"),
        valuation=Decimal("10000000"),
        annual_cpi_pct=Decimal("3.5"),
        salary_pct=Fraction(80),
    ))
    assert result.breakeven_equity_pct == pytest.approx(expected.breakeven_equity_pct)
    assert isinstance(result.current.base_salary, float)
    assert result.rows[-1].difference == pytest.approx(expected.rows[-1].difference)


def test_decimal_nan_rejected():
    with pytest.raises(PreconditionViolation) as excinfo:
        compute(make_inputs(valuation=Decimal("NaN")))
    assert excinfo.value.errors["valuation"] == "must be finite"
