"""Sweep salary cut and risk multiplier and export a break-even heatmap."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import plotly.io as pio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from equity.charts import sensitivity_heatmap
from equity.cli_params import args_to_params, build_parser, configure_logging
from equity.model import PreconditionViolation
from equity.sim import breakeven_grid


def main(argv: list[str] | None = None) -> None:
    parser = build_parser("Compute break-even equity across salary cuts and risk multipliers.")
    parser.add_argument("--pct-min", type=float, default=50.0,
                        help="Lowest new-salary percentage (default: 50).")
    parser.add_argument("--pct-max", type=float, default=100.0,
                        help="Highest new-salary percentage (default: 100).")
    parser.add_argument("--pct-step", type=float, default=5.0,
                        help="Salary percentage step (default: 5).")
    parser.add_argument("--risk-min", type=float, default=2.0,
                        help="Lowest risk multiplier (default: 2).")
    parser.add_argument("--risk-max", type=float, default=6.0,
                        help="Highest risk multiplier (default: 6).")
    parser.add_argument("--risk-step", type=float, default=0.5,
                        help="Risk multiplier step (default: 0.5).")
    parser.add_argument(
        "--output-dir",
        type=str,
        default="outputs/sensitivity",
        help="Directory where the grid and heatmap will be saved (default: outputs/sensitivity).",
    )
    parser.add_argument(
        "--skip-png",
        action="store_true",
        help="Only write the HTML heatmap (PNG export needs kaleido).",
    )
    args = parser.parse_args(argv)
    configure_logging(args)

    if args.pct_max < args.pct_min or args.risk_max < args.risk_min:
        parser.error("Range maximums must be >= their minimums.")
    if args.pct_step <= 0 or args.risk_step <= 0:
        parser.error("Steps must be > 0.")

    params = args_to_params(args)
    salary_pcts = np.arange(args.pct_min, args.pct_max + args.pct_step / 2, args.pct_step).round(4).tolist()
    risk_multipliers = np.arange(args.risk_min, args.risk_max + args.risk_step / 2, args.risk_step).round(4).tolist()

    try:
        grid = breakeven_grid(params, salary_pcts, risk_multipliers)
    except PreconditionViolation as err:
        parser.error(str(err))

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    table = pd.DataFrame(grid, index=pd.Index(risk_multipliers, name="risk_multiplier"),
                         columns=[f"{p:g}" for p in salary_pcts])
    table.to_csv(output_dir / "breakeven_grid.csv")

    fig = sensitivity_heatmap(grid, salary_pcts, risk_multipliers)
    pio.write_html(fig, output_dir / "breakeven_grid.html", include_plotlyjs="cdn")
    if not args.skip_png:
        try:
            pio.write_image(fig, output_dir / "breakeven_grid.png", format="png", scale=2)
        except (ValueError, RuntimeError) as err:
            print(f"[warn] Skipped PNG export for breakeven_grid: {err}", file=sys.stderr)

    print(f"Saved sensitivity outputs to {output_dir.resolve()}")


if __name__ == "__main__":
    main()
