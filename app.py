# app.py
import numpy as np
import streamlit as st
from equity.params import default_params, INPUT_LIMITS
from equity.model import InputSet, PreconditionViolation
from equity.sim import compute, comparison_frame, breakeven_grid
from equity.charts import (
    FINAL_YEAR_NOTE,
    comparison_chart,
    comparison_table,
    empty_chart,
    format_dollars,
    sensitivity_heatmap,
    style_comparison_table,
)


def _freeze_params(params: dict):
    """Stable, hashable representation for caching keys."""
    return tuple(sorted(params.items()))


@st.cache_data(show_spinner=False)
def _compute_breakeven_grid(params_key, salary_pcts, risk_multipliers):
    params = dict(params_key)
    return breakeven_grid(params, list(salary_pcts), list(risk_multipliers))


st.set_page_config(page_title="Startup Equity Analysis", layout="wide")
st.title("Startup Equity Analysis Dashboard")

BASE_DEFAULTS = default_params()
SLIDER_KEYS = ("salary_percentage",)


def _default_widget_value(key):
    value = BASE_DEFAULTS[key]
    return int(value) if key in SLIDER_KEYS else float(value)


def _reset_inputs():
    for key in BASE_DEFAULTS:
        st.session_state[key] = _default_widget_value(key)


for _key in BASE_DEFAULTS:
    if _key not in st.session_state:
        st.session_state[_key] = _default_widget_value(_key)


def _number_input(label, key, fmt=None):
    lo, hi, step = INPUT_LIMITS[key]
    return st.number_input(label, float(lo), float(hi), step=float(step), key=key, format=fmt)


# Sidebar
with st.sidebar:
    st.header("Offer Inputs")
    current_salary = _number_input("Current Base Salary ($)", "current_salary", "%.0f")
    st.caption("Super (12%) will be calculated separately")
    valuation_m = _number_input("Company Valuation ($M)", "valuation_m", "%.1f")
    vesting_period = _number_input("Vesting Period (Years)", "vesting_period", "%.1f")
    annual_cpi = _number_input("Expected Annual CPI (%)", "annual_cpi", "%.1f")
    pct_lo, pct_hi, pct_step = INPUT_LIMITS["salary_percentage"]
    salary_percentage = st.slider(
        "New Salary (% of Current)",
        int(pct_lo),
        int(pct_hi),
        step=int(pct_step),
        format="%d%%",
        key="salary_percentage",
    )
    risk_multiplier = _number_input("Risk Multiplier for Equity", "risk_multiplier", "%.1f")
    st.caption("Accounts for illiquidity and startup risk")
    st.divider()
    st.button("Reset to Defaults", on_click=_reset_inputs, use_container_width=True)

params = dict(BASE_DEFAULTS)
params.update(dict(
    current_salary=current_salary,
    valuation_m=valuation_m,
    vesting_period=vesting_period,
    annual_cpi=annual_cpi,
    salary_percentage=salary_percentage,
    risk_multiplier=risk_multiplier,
))

try:
    result = compute(InputSet.from_params(params))
except PreconditionViolation as err:
    result = None
    input_error = err


def _money(value):
    return "--" if result is None else format_dollars(value)


# Tabs
tab_analysis, tab_map, tab_questions, tab_about = st.tabs(
    ["📈 Analysis", "🧭 Sensitivity Map", "💬 Questions for Discussion", "ℹ️ Assumptions"]
)

# ---------------------------------------------------------------------------
# 📈 ANALYSIS TAB
# ---------------------------------------------------------------------------
with tab_analysis:
    if result is None:
        st.warning(f"Enter valid inputs to see the analysis. {input_error}")

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Monthly Take-Home Difference", _money(result and result.monthly_difference))
    m2.metric("Annual Package Sacrifice", _money(result and result.annual_sacrifice))
    m3.metric("Break-Even Equity", "--" if result is None else f"{result.breakeven_equity_pct:.2f}%")
    m4.metric("Equity Value (Current Val.)", _money(result and result.equity_value_needed))

    sub_chart, sub_table, sub_takehome = st.tabs(["Chart", "Table", "Take-Home"])

    with sub_chart:
        fig = empty_chart() if result is None else comparison_chart(result)
        st.plotly_chart(fig, use_container_width=True)

    with sub_table:
        if result is None:
            st.info("Enter valid inputs to see breakdown")
        else:
            table = comparison_table(result)
            st.dataframe(style_comparison_table(table, result), use_container_width=True, hide_index=True)
            st.caption(FINAL_YEAR_NOTE)
            st.download_button(
                "Download comparison (CSV)",
                comparison_frame(result).to_csv(index=False).encode("utf-8"),
                file_name="startup_equity_comparison.csv",
                mime="text/csv",
            )

    with sub_takehome:
        left, right = st.columns(2)
        for col, title, pkg in (
            (left, "Current Role", result and result.current),
            (right, "Startup Offer", result and result.new),
        ):
            with col:
                st.subheader(title)
                st.markdown(f"**Base:** {_money(pkg and pkg.base_salary)}")
                st.markdown(f"**Super (12%):** {_money(pkg and pkg.super_contribution)}")
                st.markdown(f"**Total Package:** {_money(pkg and pkg.total_package)}")
                st.markdown(f"**Tax:** {_money(pkg and pkg.tax_owed)}")
                st.markdown(f"**Annual Take-Home:** {_money(pkg and pkg.take_home_annual)}")
                st.markdown(f"#### Monthly Take-Home: {_money(pkg and pkg.take_home_monthly)}")

        st.divider()
        st.subheader("Package Decrease Summary")
        d1, d2, d3 = st.columns(3)
        d1.metric("Package Decrease (Annual)", _money(result and result.annual_sacrifice))
        d2.metric("Effective After Tax (Annual)", _money(result and result.annual_takehome_difference))
        d3.metric(
            "Effective After Tax (Monthly)",
            _money(result and result.annual_takehome_difference / 12),
        )
        st.caption("Package Decrease = Current Total Package - Startup Total Package")
        st.caption("Effective Decrease = Current Take-Home - Startup Take-Home (accounts for tax savings from lower salary)")

# ---------------------------------------------------------------------------
# 🧭 SENSITIVITY MAP TAB
# ---------------------------------------------------------------------------
with tab_map:
    st.header("Sensitivity Map (Salary % × Risk Multiplier)")
    if result is None:
        st.caption("Enter valid inputs to generate the sensitivity map.")
    else:
        cA, cB = st.columns(2)
        with cA:
            pct_min, pct_max = st.slider("New salary range (%)", 10, 100, (50, 100), 5)
        with cB:
            risk_min, risk_max = st.slider("Risk multiplier range", 1.0, 10.0, (2.0, 6.0), 0.5)

        salary_pcts = tuple(np.arange(pct_min, pct_max + 1, 5).tolist())
        risk_multipliers = tuple(np.arange(risk_min, risk_max + 0.25, 0.5).round(2).tolist())

        Z = _compute_breakeven_grid(_freeze_params(params), salary_pcts, risk_multipliers)
        st.plotly_chart(sensitivity_heatmap(Z, salary_pcts, risk_multipliers), use_container_width=True)
        st.caption(
            f"Grid used → salary levels: {len(salary_pcts)} from {salary_pcts[0]}% to {salary_pcts[-1]}%; "
            f"risk levels: {len(risk_multipliers)} from {risk_multipliers[0]}x to {risk_multipliers[-1]}x."
        )

# ---------------------------------------------------------------------------
# 💬 QUESTIONS TAB
# ---------------------------------------------------------------------------
with tab_questions:
    st.header("Equity Compensation Discussion Guide")
    st.markdown("""
    ### 1. The equity package
    • Equity % on a fully-diluted basis, and the instrument (options, shares, RSUs)?
    • Vesting schedule, and what happens if I leave before the next fundraise?

    ### 2. Cap table
    • Founder split, founder vesting, and the size of the option pool?
    • Expected dilution from the seed round, and is the pool topped up before or after?

    ### 3. Funding
    • Who is committed so far, on what terms (cap, discount, SAFE or note)?
    • Runway from other revenue, and the plan B if the raise slips?

    ### 4. Exit & liquidation
    • Liquidation preferences, participating or not?
    • Target exit value and timeline; what is my stake worth at $30M, $50M, $100M after preferences?

    ### 5. Protection
    • Cliff length, single or double-trigger acceleration, post-termination exercise window?

    ### 6. For this calculator
    • Which valuation to use (low / mid / high, pre or post seed)?
    """)

# ---------------------------------------------------------------------------
# ℹ️ ASSUMPTIONS TAB
# ---------------------------------------------------------------------------
with tab_about:
    st.header("How This Calculator Works")
    st.markdown("""
    ### Break-Even Equity Formula
    ```
    current_total = current_base + current_base × 0.12
    new_total = new_base + new_base × 0.12
    annual_sacrifice = current_total - new_total
    total_sacrifice = annual_sacrifice × vesting_period
    equity_value_needed = total_sacrifice × risk_multiplier
    break_even_equity_pct = equity_value_needed / valuation × 100
    ```

    ### Key Assumptions
    1. **Superannuation**: both packages include 12% super on base salary.
    2. **Tax**: 2024-25 Australian resident brackets plus the 2% Medicare levy, on base salary only.
    3. **Risk multiplier**: a 4x multiplier means $4 of equity value per $1 of package sacrifice.
    4. **Salary growth**: both roles grow with CPI each year.
    5. **Equity realization**: once, at the end of the vesting period. A fractional period adds a
       final part-year row, prorated, which also carries the equity.
    6. **Valuation**: current valuation, no dilution.

    ### Not Modelled
    • Dilution from future rounds
    • Liquidity later than the vesting period
    • Different tax treatment of equity
    """)
