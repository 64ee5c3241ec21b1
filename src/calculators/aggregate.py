"""Combine income tax, levies and offsets into a single result."""

from collections.abc import Sequence
from decimal import Decimal

from src.calculators.income_tax import marginal_rate
from src.calculators.levies import levy_amount
from src.calculators.tax_data import BUDGET_REPAIR_LEVY, MEDICARE_LEVY, TaxBracket
from src.db.models import (
    BracketCalculation,
    LevyCalculation,
    OffsetCalculation,
    TaxCalculationResult,
)

_ZERO = Decimal("0")


def aggregate(
    financial_year: str,
    income: Decimal,
    income_tax: Decimal,
    bracket_breakdown: list[BracketCalculation],
    levy_breakdown: list[LevyCalculation],
    total_levies: Decimal,
    offset_breakdown: list[OffsetCalculation],
    total_offsets: Decimal,
    brackets: Sequence[TaxBracket],
) -> TaxCalculationResult:
    """Build the final result. Offsets never push net tax below zero."""
    gross_tax = income_tax + total_levies
    net_tax_payable = max(_ZERO, gross_tax - total_offsets)
    effective_rate = net_tax_payable / income if income > 0 else _ZERO

    return TaxCalculationResult(
        financial_year=financial_year,
        taxable_income=income,
        income_tax=income_tax,
        medicare_levy=levy_amount(levy_breakdown, MEDICARE_LEVY),
        budget_repair_levy=levy_amount(levy_breakdown, BUDGET_REPAIR_LEVY),
        total_levies=total_levies,
        tax_offsets=total_offsets,
        net_tax_payable=net_tax_payable,
        net_income=income - net_tax_payable,
        effective_rate=effective_rate,
        marginal_rate=marginal_rate(income, brackets),
        bracket_breakdown=bracket_breakdown,
        levy_breakdown=levy_breakdown,
        offset_breakdown=offset_breakdown,
    )
