"""Compute the break-even equity for one offer and export the comparison."""

from __future__ import annotations

import sys
from pathlib import Path

import plotly.io as pio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from equity.charts import summarize_results
from equity.cli_params import args_to_params, build_parser, configure_logging
from equity.model import InputSet, PreconditionViolation
from equity.sim import comparison_frame, compute


def main(argv: list[str] | None = None) -> None:
    parser = build_parser("Compare a startup offer against the current role and save the projection.")
    parser.add_argument(
        "--output-dir",
        type=str,
        default="outputs/breakeven",
        help="Directory where the chart and CSV outputs will be saved (default: outputs/breakeven).",
    )
    parser.add_argument(
        "--skip-png",
        action="store_true",
        help="Only write HTML charts (PNG export needs kaleido).",
    )
    args = parser.parse_args(argv)
    configure_logging(args)

    params = args_to_params(args)
    try:
        result = compute(InputSet.from_params(params))
    except PreconditionViolation as err:
        parser.error(str(err))
    charts, kpis = summarize_results(result)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    comparison_frame(result).to_csv(output_dir / "comparison.csv", index=False)
    kpis.to_csv(output_dir / "kpis.csv", index=False)

    def save_plot(fig, stem: str) -> None:
        html_path = output_dir / f"{stem}.html"
        png_path = output_dir / f"{stem}.png"
        pio.write_html(fig, html_path, include_plotlyjs="cdn")
        if args.skip_png:
            return
        try:
            pio.write_image(fig, png_path, format="png", scale=2)
        except (ValueError, RuntimeError) as err:
            print(f"[warn] Skipped PNG export for {stem}: {err}", file=sys.stderr)

    save_plot(charts["comparison"], "comparison")

    print(f"Break-even equity: {result.breakeven_equity_pct:.2f}%")
    print(f"Saved results to {output_dir.resolve()}")


if __name__ == "__main__":
    main()
