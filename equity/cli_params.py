"""Helpers for CLI scripts to collect break-even parameters."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict

from equity.params import default_params


def build_parser(description: str) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description=description)
    defaults = default_params()

    p.add_argument("--current-salary", type=float, default=defaults["current_salary"],
                   help="Current base salary in $/year, excluding super (default: 203000).")
    p.add_argument("--valuation-m", type=float, default=defaults["valuation_m"],
                   help="Company valuation in $M (default: 10).")
    p.add_argument("--vesting-period", type=float, default=defaults["vesting_period"],
                   help="Vesting period in years, fractions allowed (default: 4).")
    p.add_argument("--annual-cpi", type=float, default=defaults["annual_cpi"],
                   help="Expected annual CPI percentage (default: 3.5).")
    p.add_argument("--salary-percentage", type=float, default=defaults["salary_percentage"],
                   help="New base salary as a percentage of current (default: 80).")
    p.add_argument("--risk-multiplier", type=float, default=defaults["risk_multiplier"],
                   help="Equity dollars required per dollar of package sacrifice (default: 4).")
    p.add_argument("--log-level", type=str, default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging level for the engine (default: WARNING).")

    return p


def args_to_params(args: argparse.Namespace) -> Dict[str, Any]:
    params = default_params()

    params["current_salary"] = float(args.current_salary)
    params["valuation_m"] = float(args.valuation_m)
    params["vesting_period"] = float(args.vesting_period)
    params["annual_cpi"] = float(args.annual_cpi)
    params["salary_percentage"] = float(args.salary_percentage)
    params["risk_multiplier"] = float(args.risk_multiplier)

    return params


def configure_logging(args: argparse.Namespace) -> None:
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
