"""Seed tax_brackets, tax_levies and tax_offsets from config/rule_tables.yaml.

Re-running is safe: each year's rows are replaced.
"""

import logging
import sys
from pathlib import Path

import psycopg2

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings
from src.calculators.tax_data import RULE_TABLES, check_brackets

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def main() -> None:
    """Insert bracket, levy and offset seed data for every financial year."""
    conn = psycopg2.connect(settings.database_url_sync)
    cur = conn.cursor()

    try:
        for year, rules in sorted(RULE_TABLES.items()):
            check_brackets(rules.brackets)

            # Delete existing rows for this year (idempotent re-seed)
            for table in ("tax_brackets", "tax_levies", "tax_offsets"):
                cur.execute(f"DELETE FROM {table} WHERE financial_year = %s", (year,))

            for bracket in rules.brackets:
                cur.execute(
                    """
                    INSERT INTO tax_brackets
                        (financial_year, min_income, max_income, rate, fixed_amount, bracket_order)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (
                        year,
                        bracket.min_income,
                        bracket.max_income,
                        bracket.rate,
                        bracket.fixed_amount,
                        bracket.order,
                    ),
                )

            for levy in rules.levies:
                cur.execute(
                    """
                    INSERT INTO tax_levies
                        (financial_year, levy_type, threshold_income, rate, max_income)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (year, levy.levy_type, levy.threshold_income, levy.rate, levy.max_income),
                )

            for offset in rules.offsets:
                cur.execute(
                    """
                    INSERT INTO tax_offsets
                        (financial_year, offset_type, max_income, max_offset,
                         phase_out_start, phase_out_rate)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (
                        year,
                        offset.offset_type,
                        offset.max_income,
                        offset.max_offset,
                        offset.phase_out_start,
                        offset.phase_out_rate,
                    ),
                )

            logger.info(
                "Seeded %s (%d brackets, %d levies, %d offsets)",
                year,
                len(rules.brackets),
                len(rules.levies),
                len(rules.offsets),
            )

        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()

    logger.info("Seeded %d financial years.", len(RULE_TABLES))


if __name__ == "__main__":
    main()
