"""Tax engine: validate a request, load rules, run the calculators, aggregate."""

import logging
import re
from collections.abc import Iterable
from decimal import Decimal

from src.calculators.aggregate import aggregate
from src.calculators.errors import TaxValidationError
from src.calculators.income_tax import compute_income_tax
from src.calculators.levies import compute_levies
from src.calculators.offsets import compute_offsets
from src.calculators.tax_data import TaxBracket
from src.db.models import TaxCalculationRequest, TaxCalculationResult
from src.rule_cache import RuleTableCache

logger = logging.getLogger(__name__)

_FINANCIAL_YEAR_RE = re.compile(r"^\d{4}-\d{2}$")

DEFAULT_HISTORY_YEARS = 10


def validate_financial_year(financial_year: str) -> None:
    """Reject empty or malformed financial years such as "2024" or "24-25"."""
    if not financial_year or not financial_year.strip():
        raise TaxValidationError("Financial year is required.")
    if not _FINANCIAL_YEAR_RE.match(financial_year):
        raise TaxValidationError(
            f"Invalid financial year: {financial_year}. Expected the form 2024-25."
        )


class TaxEngine:
    """Public entry point for tax calculations.

    Unknown financial years raise RuleTableNotFoundError; the engine never
    falls back to a default year.
    """

    def __init__(self, cache: RuleTableCache) -> None:
        self._cache = cache

    async def calculate_tax(self, request: TaxCalculationRequest) -> TaxCalculationResult:
        """Calculate income tax, levies, offsets and summary figures.

        Args:
            request: Financial year, taxable income and levy/offset flags.

        Returns:
            A fully itemized TaxCalculationResult.

        Raises:
            TaxValidationError: Negative income or a missing/malformed year.
            RuleTableNotFoundError: No rules for the financial year.
            StoreUnavailableError: The rule store could not be read.
        """
        validate_financial_year(request.financial_year)
        if request.taxable_income < 0:
            raise TaxValidationError("Taxable income cannot be negative.")

        income = request.taxable_income
        logger.info("Calculating tax for %s, income: %s", request.financial_year, income)

        rules = await self._cache.get(request.financial_year)

        income_tax, bracket_breakdown = compute_income_tax(income, rules.brackets)
        levy_breakdown, total_levies = compute_levies(
            income, rules.levies, request.include_medicare_levy
        )
        offset_breakdown, total_offsets = compute_offsets(
            income, rules.offsets, request.include_offsets
        )

        return aggregate(
            financial_year=request.financial_year,
            income=income,
            income_tax=income_tax,
            bracket_breakdown=bracket_breakdown,
            levy_breakdown=levy_breakdown,
            total_levies=total_levies,
            offset_breakdown=offset_breakdown,
            total_offsets=total_offsets,
            brackets=rules.brackets,
        )

    async def get_tax_brackets(self, financial_year: str) -> list[TaxBracket]:
        """Return a year's brackets in order, read through the cache."""
        validate_financial_year(financial_year)
        rules = await self._cache.get(financial_year)
        return sorted(rules.brackets, key=lambda b: b.order)

    async def list_financial_years(self) -> list[str]:
        """Every financial year known to the rule store, newest first."""
        return await self._cache.store.list_financial_years()

    async def compare_tax_across_years(
        self,
        income: Decimal,
        years: Iterable[str],
        include_medicare_levy: bool = True,
        include_offsets: bool = True,
    ) -> list[TaxCalculationResult]:
        """Calculate the same income under several financial years, in the order given."""
        years = list(years)
        if not years:
            raise TaxValidationError("At least one financial year is required.")
        return [
            await self.calculate_tax(
                TaxCalculationRequest(
                    financial_year=year,
                    taxable_income=income,
                    include_medicare_levy=include_medicare_levy,
                    include_offsets=include_offsets,
                )
            )
            for year in years
        ]

    async def get_tax_history(
        self,
        income: Decimal,
        years: int = DEFAULT_HISTORY_YEARS,
        include_medicare_levy: bool = True,
        include_offsets: bool = True,
    ) -> list[TaxCalculationResult]:
        """Calculate the income under the most recent `years` financial years, newest first."""
        if years < 1:
            raise TaxValidationError("Number of years must be at least 1.")
        recent = (await self.list_financial_years())[:years]
        return await self.compare_tax_across_years(
            income, recent, include_medicare_levy, include_offsets
        )
