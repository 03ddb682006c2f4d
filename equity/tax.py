# equity/tax.py
"""Australian resident income tax (2024-25) plus Medicare levy.

Brackets are ordered ``(threshold, base_tax_at_threshold, marginal_rate)``
tuples; income above ``threshold`` pays ``base + (income - threshold) * rate``.
Super is not taxable income here, so callers pass base salary only.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

from equity.model import PreconditionViolation, is_number

Bracket = Tuple[float, float, float]

AU_2024_25_BRACKETS: Tuple[Bracket, ...] = (
    (0, 0, 0.0),
    (18_200, 0, 0.16),
    (45_000, 4_288, 0.30),
    (135_000, 31_288, 0.37),
    (190_000, 51_638, 0.45),
)
MEDICARE_LEVY_RATE = 0.02


def _check_income(taxable_income) -> float:
    if not is_number(taxable_income) or not math.isfinite(taxable_income) or taxable_income < 0:
        raise PreconditionViolation({"taxable_income": "must be a finite number >= 0"})
    return float(taxable_income)


def income_tax(taxable_income: float, brackets: Sequence[Bracket] = AU_2024_25_BRACKETS) -> float:
    taxable_income = _check_income(taxable_income)
    for threshold, base, rate in reversed(brackets):
        if taxable_income > threshold:
            return base + (taxable_income - threshold) * rate
    return 0.0


def medicare_levy(taxable_income: float, levy_rate: float = MEDICARE_LEVY_RATE) -> float:
    taxable_income = _check_income(taxable_income)
    return taxable_income * levy_rate


def compute_tax(
    taxable_income: float,
    brackets: Sequence[Bracket] = AU_2024_25_BRACKETS,
    levy_rate: float = MEDICARE_LEVY_RATE,
) -> float:
    """Total liability: bracketed income tax plus the flat levy on the full amount."""
    return income_tax(taxable_income, brackets) + medicare_levy(taxable_income, levy_rate)
