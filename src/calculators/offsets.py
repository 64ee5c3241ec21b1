"""Tax offset calculator: LITO and other linearly phased-out offsets."""

from collections.abc import Sequence
from decimal import Decimal

from src.calculators.tax_data import TaxOffset
from src.db.models import OffsetCalculation

_ZERO = Decimal("0")


def compute_offset(income: Decimal, offset: TaxOffset) -> Decimal:
    """Offset amount for one offset row, floored at zero."""
    if offset.max_income is not None and income > offset.max_income:
        return _ZERO

    if offset.phase_out_start is not None and income > offset.phase_out_start:
        reduction = (income - offset.phase_out_start) * (offset.phase_out_rate or _ZERO)
        return max(_ZERO, offset.max_offset - reduction)

    return offset.max_offset


def compute_offsets(
    income: Decimal,
    offsets: Sequence[TaxOffset],
    include_offsets: bool = True,
) -> tuple[list[OffsetCalculation], Decimal]:
    """Calculate the offsets for a financial year.

    Args:
        income: Taxable income (must be >= 0).
        offsets: The year's offset rows.
        include_offsets: When False no offsets are applied.

    Returns:
        (breakdown, total_offsets). Breakdown is empty when offsets are
        excluded.
    """
    if not include_offsets:
        return [], _ZERO

    breakdown = [
        OffsetCalculation(
            offset_type=offset.offset_type,
            max_offset=offset.max_offset,
            phase_out_start=offset.phase_out_start,
            phase_out_rate=offset.phase_out_rate,
            amount=compute_offset(income, offset),
        )
        for offset in offsets
    ]
    total = sum((row.amount for row in breakdown), _ZERO)
    return breakdown, total
