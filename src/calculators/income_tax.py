"""Income tax calculator: progressive brackets with cumulative fixed amounts."""

from collections.abc import Sequence
from decimal import Decimal

from src.calculators.tax_data import TaxBracket
from src.db.models import BracketCalculation

_ZERO = Decimal("0")


def compute_income_tax(
    income: Decimal,
    brackets: Sequence[TaxBracket],
) -> tuple[Decimal, list[BracketCalculation]]:
    """Calculate base income tax with a per-bracket breakdown.

    Each bracket's fixed_amount already holds the tax on every lower
    bracket, so the total is the closed-form value of the bracket the
    income falls into:

        fixed_amount + rate * (income - min_income + 1)

    It is never a sum over brackets. Breakdown rows carry both the
    marginal contribution of each bracket (tax_in_bracket, additive) and
    its closed-form value (cumulative_tax).

    Args:
        income: Taxable income (must be >= 0).
        brackets: One financial year's brackets, in any order.

    Returns:
        (total_tax, breakdown) where breakdown lists every bracket reached.
    """
    total_tax = _ZERO
    breakdown: list[BracketCalculation] = []

    for bracket in sorted(brackets, key=lambda b: b.order):
        if income <= bracket.min_income:
            break

        upper = income if bracket.max_income is None else min(income, bracket.max_income)
        taxable = upper - bracket.min_income + 1
        tax_in_bracket = taxable * bracket.rate
        total_tax = bracket.fixed_amount + tax_in_bracket

        breakdown.append(
            BracketCalculation(
                min_income=bracket.min_income,
                max_income=bracket.max_income,
                rate=bracket.rate,
                fixed_amount=bracket.fixed_amount,
                taxable_in_bracket=taxable,
                tax_in_bracket=tax_in_bracket,
                cumulative_tax=total_tax,
            )
        )

        if bracket.max_income is None or income <= bracket.max_income:
            break

    return total_tax, breakdown


def find_bracket(income: Decimal, brackets: Sequence[TaxBracket]) -> TaxBracket:
    """Return the bracket whose [min_income, max_income] range holds the income.

    Incomes in the cent-sized gap between two brackets resolve to the lower
    one; anything above the last bounded bracket resolves to the top bracket.
    """
    ordered = sorted(brackets, key=lambda b: b.order)
    current = ordered[0]
    for bracket in ordered:
        if income < bracket.min_income:
            break
        current = bracket
    return current


def marginal_rate(income: Decimal, brackets: Sequence[TaxBracket]) -> Decimal:
    """Rate applying to the next dollar of income."""
    return find_bracket(income, brackets).rate
