# equity/params.py
def default_params():
    return dict(
        current_salary=203_000,   # base, super (12%) added on top
        valuation_m=10,           # company valuation in $M
        vesting_period=4,         # years, 0.5 steps allowed
        annual_cpi=3.5,           # % per year, applied to both roles
        salary_percentage=80,     # new base as % of current base
        risk_multiplier=4,        # $ of equity needed per $1 of sacrifice
    )


# Widget ranges as (min, max, step). The engine itself only enforces the
# domain checks in equity.sim.validate_inputs.
INPUT_LIMITS = dict(
    current_salary=(50_000, 500_000, 5_000),
    valuation_m=(1, 50, 1),
    vesting_period=(1.0, 10.0, 0.5),
    annual_cpi=(0.0, 10.0, 0.1),
    salary_percentage=(50, 100, 5),
    risk_multiplier=(2.0, 6.0, 0.5),
)
