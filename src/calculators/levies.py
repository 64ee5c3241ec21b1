"""Levy calculator: Medicare levy and historical flat-rate surcharges."""

from collections.abc import Sequence
from decimal import Decimal

from src.calculators.tax_data import MEDICARE_LEVY, TaxLevy
from src.db.models import LevyCalculation

_ZERO = Decimal("0")


def compute_levy(income: Decimal, levy: TaxLevy) -> LevyCalculation:
    """Apply a single levy.

    Once income exceeds the threshold the whole income is levied at the
    flat rate (no marginal phase-in), up to the levy's max_income cap.
    """
    if income <= levy.threshold_income:
        levied_income = _ZERO
    elif levy.max_income is not None:
        levied_income = min(income, levy.max_income)
    else:
        levied_income = income

    return LevyCalculation(
        levy_type=levy.levy_type,
        threshold_income=levy.threshold_income,
        rate=levy.rate,
        levied_income=levied_income,
        amount=levied_income * levy.rate,
    )


def compute_levies(
    income: Decimal,
    levies: Sequence[TaxLevy],
    include_medicare_levy: bool = True,
) -> tuple[list[LevyCalculation], Decimal]:
    """Calculate every levy in a financial year's table.

    Args:
        income: Taxable income (must be >= 0).
        levies: The year's levy rows. Surcharges such as the Budget Repair
            Levy only appear in the years they applied.
        include_medicare_levy: When False the Medicare levy is skipped.
            Other levies are always applied.

    Returns:
        (breakdown, total_levies).
    """
    breakdown = [
        compute_levy(income, levy)
        for levy in levies
        if include_medicare_levy or levy.levy_type != MEDICARE_LEVY
    ]
    total = sum((row.amount for row in breakdown), _ZERO)
    return breakdown, total


def levy_amount(breakdown: Sequence[LevyCalculation], levy_type: str) -> Decimal:
    """Total amount charged for one levy type (0 when absent)."""
    return sum((row.amount for row in breakdown if row.levy_type == levy_type), _ZERO)
