import pytest

from equity.charts import (
    INVALID_INPUTS_MESSAGE,
    comparison_chart,
    comparison_table,
    empty_chart,
    format_dollars,
    sensitivity_heatmap,
    summarize_results,
)
from equity.model import InputSet
from equity.params import default_params
from equity.sim import breakeven_grid, compute


@pytest.fixture
def result():
    p = default_params()
    p["current_salary"] = 181_250
    return compute(InputSet.from_params(p))


def test_format_dollars():
    assert format_dollars(1234.4) == "$1,234"
    assert format_dollars(-1234.6) == "-$1,235"
    assert format_dollars(-0.4) == "$0"
    assert format_dollars(0) == "$0"


def test_comparison_chart_drops_year_zero(result):
    fig = comparison_chart(result)
    assert len(fig.data) == 2
    current, startup = fig.data
    assert list(current.x) == [1, 2, 3, 4]
    assert startup.y[-1] == pytest.approx(result.rows[-1].startup_cumulative)
    assert startup.line.dash == "dash"


def test_empty_chart_message():
    fig = empty_chart()
    assert fig.layout.annotations[0].text == INVALID_INPUTS_MESSAGE
    assert len(fig.data) == 0


def test_comparison_table_marks_final_year(result):
    table = comparison_table(result)
    assert table["Year"].tolist() == [1, 2, 3, 4]
    assert table["Current Package (Annual)"].iloc[0] == "$203,000"
    assert table["Startup Cumulative"].iloc[-1].endswith(" *")
    assert not table["Startup Cumulative"].iloc[0].endswith("*")


def test_summarize_results(result):
    charts, kpis = summarize_results(result)
    assert set(charts) == {"comparison"}
    values = dict(zip(kpis["Metric"], kpis["Value"]))
    assert values["Break-Even Equity"] == "6.50%"
    assert values["Annual Package Sacrifice"] == "$40,600"
    assert values["Equity Value Needed"] == "$649,600"


def test_sensitivity_heatmap():
    pcts, risks = [70, 80, 90], [2, 3]
    grid = breakeven_grid(default_params(), pcts, risks)
    fig = sensitivity_heatmap(grid, pcts, risks)
    assert list(fig.data[0].x) == ["70%", "80%", "90%"]
    assert list(fig.data[0].y) == ["2x", "3x"]
