# equity/charts.py
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import plotly.io as pio

from equity.model import ComputationResult


# --- Plot styling -----------------------------------------------------------

FONT_FAMILY = "Inter, Helvetica Neue, Arial, sans-serif"
COLORWAY = [
    "#3498DB",  # current role blue
    "#27AE60",  # startup green
    "#E67E22",  # warning amber
    "#C0392B",  # sacrifice red
    "#1B3A4B",  # deep blue
]
CURRENT = COLORWAY[0]
STARTUP = COLORWAY[1]
NEUTRAL_LINE = "#BEC5D1"
GRID_COLOR = "#E5E5E5"
LOSS_FILL = "#ffcccc"
GAIN_FILL = "#ccffcc"
FINAL_ROW_FILL = "#ffffcc"

TEMPLATE_NAME = "breakeven_investor"

_TEMPLATE = go.layout.Template(
    layout=dict(
        font=dict(family=FONT_FAMILY, size=12, color="#0F172A"),
        title=dict(font=dict(family=FONT_FAMILY, size=20, color="#0F172A")),
        paper_bgcolor="white",
        plot_bgcolor="#FAFAFA",
        margin=dict(l=60, r=20, t=60, b=50),
        colorway=COLORWAY,
        hoverlabel=dict(bgcolor="#0F172A", font=dict(color="white", family=FONT_FAMILY, size=12)),
        legend=dict(
            x=0.05,
            y=0.95,
            bgcolor="rgba(255, 255, 255, 0.8)",
            bordercolor="#CCCCCC",
            borderwidth=1,
            font=dict(size=11)
        ),
        xaxis=dict(
            showgrid=True,
            gridcolor=GRID_COLOR,
            zeroline=False,
            linecolor=NEUTRAL_LINE,
            linewidth=1,
        ),
        yaxis=dict(
            showgrid=True,
            gridcolor=GRID_COLOR,
            zeroline=False,
            linecolor=NEUTRAL_LINE,
            linewidth=1,
        ),
    )
)

pio.templates[TEMPLATE_NAME] = _TEMPLATE

INVALID_INPUTS_MESSAGE = "Enter valid inputs to see comparison"
FINAL_YEAR_NOTE = "* Includes equity value realized at exit"


def format_dollars(value):
    """Whole-dollar string with the sign ahead of the symbol, e.g. -$1,234."""
    sign = "-" if round(value) < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def empty_chart(message=INVALID_INPUTS_MESSAGE):
    fig = go.Figure()
    fig.update_layout(
        template=TEMPLATE_NAME,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        annotations=[dict(
            text=message,
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
            showarrow=False,
            font=dict(size=16, color="#999"),
        )],
    )
    return fig


def comparison_chart(result: ComputationResult):
    rows = [r for r in result.rows if r.year > 0]
    years = [r.year for r in rows]
    hover = "<b>Year %{x}</b><br>Total Package Cumulative: %{y:$,.0f}<br><extra></extra>"

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=years,
            y=[r.current_role_cumulative for r in rows],
            name="Current Role (package + super, with CPI increases)",
            mode="lines+markers",
            line=dict(color=CURRENT, width=3),
            marker=dict(size=8),
            hovertemplate=hover,
        )
    )
    fig.add_trace(
        go.Scatter(
            x=years,
            y=[r.startup_cumulative for r in rows],
            name="Startup (package + super, with CPI + equity at exit)",
            mode="lines+markers",
            line=dict(color=STARTUP, width=3, dash="dash"),
            marker=dict(size=8),
            hovertemplate=hover,
        )
    )
    fig.update_layout(template=TEMPLATE_NAME, hovermode="x unified")
    fig.update_xaxes(title_text="Years", tickmode="linear", dtick=1)
    fig.update_yaxes(title_text="Cumulative Compensation ($)", tickformat="$,.0f")
    return fig


def comparison_table(result: ComputationResult):
    """Display table of years 1..N with dollar strings; the last startup cumulative is starred."""
    rows = [r for r in result.rows if r.year > 0]
    table = pd.DataFrame({
        "Year": [r.year for r in rows],
        "Current Package (Annual)": [format_dollars(r.current_role_annual) for r in rows],
        "Current Cumulative": [format_dollars(r.current_role_cumulative) for r in rows],
        "Startup Package (Annual)": [format_dollars(r.startup_annual) for r in rows],
        "Startup Cumulative": [format_dollars(r.startup_cumulative) for r in rows],
        "Difference": [format_dollars(r.difference) for r in rows],
    })
    if len(table):
        last = table.index[-1]
        table.loc[last, "Startup Cumulative"] = table.loc[last, "Startup Cumulative"] + " *"
    return table


def style_comparison_table(table, result: ComputationResult):
    differences = [r.difference for r in result.rows if r.year > 0]
    last = table.index[-1] if len(table) else None

    def _difference_fill(col):
        return [f"background-color: {GAIN_FILL if d >= 0 else LOSS_FILL}" for d in differences]

    def _final_row_fill(row):
        fill = f"background-color: {FINAL_ROW_FILL}" if row.name == last else ""
        return [fill] * len(row)

    return (
        table.style
        .apply(_final_row_fill, axis=1)
        .apply(_difference_fill, subset=["Difference"])
        .hide(axis="index")
    )


def summarize_results(result: ComputationResult):
    kpis = pd.DataFrame({
        "Metric": [
            "Monthly Take-Home Difference",
            "Annual Package Sacrifice",
            "Effective After-Tax Decrease (Annual)",
            "Total Sacrifice over Vesting",
            "Equity Value Needed",
            "Break-Even Equity",
        ],
        "Value": [
            format_dollars(result.monthly_difference),
            format_dollars(result.annual_sacrifice),
            format_dollars(result.annual_takehome_difference),
            format_dollars(result.total_sacrifice),
            format_dollars(result.equity_value_needed),
            f"{result.breakeven_equity_pct:.2f}%",
        ]
    })

    charts = dict(
        comparison=comparison_chart(result),
    )
    return charts, kpis


def sensitivity_heatmap(grid, salary_pcts, risk_multipliers):
    fig = px.imshow(
        grid,
        x=[f"{p:g}%" for p in salary_pcts],
        y=[f"{r:g}x" for r in risk_multipliers],
        color_continuous_scale="Viridis",
        origin="lower",
        aspect="auto",
        text_auto=".2f",
        labels=dict(x="New Salary (% of Current)", y="Risk Multiplier", color="Break-even (%)"),
        title="Break-Even Equity by Salary Cut and Risk Multiplier",
    )
    fig.update_traces(hovertemplate="Salary=%{x}<br>Risk=%{y}<br>Equity=%{z:.2f}%<extra></extra>")
    fig.update_layout(
        template=TEMPLATE_NAME,
        coloraxis_colorbar=dict(title="Equity (%)", ticksuffix="%"),
    )
    return fig
