"""Calculate Australian income tax from the command line.

Uses the seeded rule tables (no database required).

Usage:
    python scripts/calculate_tax.py --income 85000 --year 2024-25
    python scripts/calculate_tax.py --income 200000 --year 2015-16 --no-offsets
    python scripts/calculate_tax.py --income 85000 --compare 2015-16 2024-25
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.calculators.errors import TaxEngineError
from src.db.models import TaxCalculationRequest, TaxCalculationResult
from src.db.rule_store import StaticRuleTableStore
from src.engine import TaxEngine
from src.rule_cache import RuleTableCache

logging.basicConfig(level=logging.WARNING, format="%(message)s")
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def print_result(result: TaxCalculationResult) -> None:
    """Log an itemized result."""
    logger.info("=" * 60)
    logger.info(
        "FINANCIAL YEAR %s: taxable income $%s",
        result.financial_year,
        f"{result.taxable_income:,.2f}",
    )
    logger.info("=" * 60)

    logger.info("BRACKETS")
    logger.info("-" * 40)
    for b in result.bracket_breakdown:
        upper = f"{b.max_income:,.0f}" if b.max_income is not None else "and over"
        logger.info(
            "  $%s - %-10s %5.1f%%  on $%s = $%s",
            f"{b.min_income:,.0f}",
            upper,
            b.rate * 100,
            f"{b.taxable_in_bracket:,.2f}",
            f"{b.tax_in_bracket:,.2f}",
        )

    for levy in result.levy_breakdown:
        logger.info("  %-20s $%s", f"{levy.levy_type} levy", f"{levy.amount:,.2f}")
    for offset in result.offset_breakdown:
        logger.info("  %-20s -$%s", f"{offset.offset_type} offset", f"{offset.amount:,.2f}")

    logger.info("-" * 40)
    logger.info("  Income tax:          $%s", f"{result.income_tax:,.2f}")
    logger.info("  Total levies:        $%s", f"{result.total_levies:,.2f}")
    logger.info("  Total offsets:       $%s", f"{result.tax_offsets:,.2f}")
    logger.info("  Net tax payable:     $%s", f"{result.net_tax_payable:,.2f}")
    logger.info("  Net income:          $%s", f"{result.net_income:,.2f}")
    logger.info("  Effective rate:      %.2f%%", result.effective_rate * 100)
    logger.info("  Marginal rate:       %.1f%%", result.marginal_rate * 100)
    logger.info("")


async def main() -> int:
    """Run one calculation, or compare several years."""
    parser = argparse.ArgumentParser(description="Australian Income Tax Calculator")
    parser.add_argument("--income", type=Decimal, required=True, help="Taxable income in AUD")
    parser.add_argument("--year", default="2024-25", help="Financial year (default: 2024-25)")
    parser.add_argument("--compare", nargs="+", metavar="YEAR", help="Compare several financial years")
    parser.add_argument("--no-medicare", action="store_true", help="Exclude the Medicare levy")
    parser.add_argument("--no-offsets", action="store_true", help="Exclude tax offsets")
    args = parser.parse_args()

    engine = TaxEngine(RuleTableCache(StaticRuleTableStore()))
    try:
        if args.compare:
            results = await engine.compare_tax_across_years(
                args.income, args.compare, not args.no_medicare, not args.no_offsets
            )
        else:
            results = [
                await engine.calculate_tax(
                    TaxCalculationRequest(
                        financial_year=args.year,
                        taxable_income=args.income,
                        include_medicare_levy=not args.no_medicare,
                        include_offsets=not args.no_offsets,
                    )
                )
            ]
    except TaxEngineError as exc:
        logger.error("Error: %s", exc)
        return 1

    for result in results:
        print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
