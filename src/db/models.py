"""Pydantic models for calculation requests and results."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

# --- Request ---


class TaxCalculationRequest(BaseModel):
    """Input to a single tax calculation.

    Bounds are checked by the engine, not here, so the same rules apply
    whether the request came over HTTP or from code.
    """

    financial_year: str
    taxable_income: Decimal
    include_medicare_levy: bool = True
    include_offsets: bool = True


# --- Breakdown rows ---


class BracketCalculation(BaseModel):
    """One bracket reached by the income, for display and audit."""

    model_config = ConfigDict(frozen=True)

    min_income: Decimal
    max_income: Decimal | None = None
    rate: Decimal
    fixed_amount: Decimal
    taxable_in_bracket: Decimal
    tax_in_bracket: Decimal  # rate * taxable_in_bracket
    cumulative_tax: Decimal  # fixed_amount + tax_in_bracket


class LevyCalculation(BaseModel):
    """A single levy applied to the income."""

    model_config = ConfigDict(frozen=True)

    levy_type: str
    threshold_income: Decimal
    rate: Decimal
    levied_income: Decimal
    amount: Decimal


class OffsetCalculation(BaseModel):
    """A single tax offset after phase-out."""

    model_config = ConfigDict(frozen=True)

    offset_type: str
    max_offset: Decimal
    phase_out_start: Decimal | None = None
    phase_out_rate: Decimal | None = None
    amount: Decimal


# --- Result ---


class TaxCalculationResult(BaseModel):
    """Fully itemized result of a tax calculation."""

    model_config = ConfigDict(frozen=True)

    financial_year: str
    taxable_income: Decimal
    income_tax: Decimal
    medicare_levy: Decimal
    budget_repair_levy: Decimal
    total_levies: Decimal
    tax_offsets: Decimal
    net_tax_payable: Decimal
    net_income: Decimal
    effective_rate: Decimal
    marginal_rate: Decimal
    bracket_breakdown: list[BracketCalculation] = []
    levy_breakdown: list[LevyCalculation] = []
    offset_breakdown: list[OffsetCalculation] = []

