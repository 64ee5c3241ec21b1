"""Async logging of completed calculations to the tax_calculation_history table."""

import logging
from uuid import UUID

import asyncpg

from src.db.models import TaxCalculationResult

logger = logging.getLogger(__name__)


async def log_calculation(
    pool: asyncpg.Pool,
    result: TaxCalculationResult,
    client_ip: str | None = None,
    user_agent: str | None = None,
) -> UUID | None:
    """Insert a row into tax_calculation_history and return its ID.

    Fire-and-forget friendly: errors are logged, not raised.
    Returns the row UUID on success, None on failure.
    """
    try:
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO tax_calculation_history
                    (financial_year, taxable_income, calculated_tax,
                     calculation_details, client_ip, user_agent)
                VALUES ($1, $2, $3, $4::jsonb, $5, $6)
                RETURNING id
                """,
                result.financial_year,
                result.taxable_income,
                result.net_tax_payable,
                result.model_dump_json(),
                client_ip,
                user_agent[:500] if user_agent else None,
            )
            return UUID(str(row["id"])) if row else None
    except Exception:
        logger.exception("Failed to log calculation")
        return None


async def get_calculation_stats(pool: asyncpg.Pool) -> dict:
    """Get aggregate calculation stats for the health endpoint."""
    try:
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT
                    COUNT(*) AS total_calculations,
                    COUNT(*) FILTER (WHERE created_at > NOW() - INTERVAL '1 hour')
                        AS calculations_last_hour,
                    COUNT(DISTINCT financial_year) AS financial_years_used
                FROM tax_calculation_history
                """
            )
            if not row:
                return {}
            return {k: v for k, v in dict(row).items() if v is not None}
    except Exception:
        logger.exception("Failed to get calculation stats")
        return {}
