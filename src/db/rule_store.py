"""Rule table stores: where the engine reads per-year brackets, levies and offsets."""

import logging
from collections.abc import Mapping
from typing import Protocol

import asyncpg

from src.calculators.errors import RuleTableNotFoundError, StoreUnavailableError
from src.calculators.tax_data import (
    RULE_TABLES,
    RuleTableSet,
    TaxBracket,
    TaxLevy,
    TaxOffset,
)

logger = logging.getLogger(__name__)

_STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, TimeoutError)


class RuleTableStore(Protocol):
    """Read-only source of rule tables."""

    async def fetch_rule_table_set(self, financial_year: str) -> RuleTableSet:
        """Return the year's rule tables, brackets sorted by order."""
        ...

    async def list_financial_years(self) -> list[str]:
        """Return every financial year with rules, newest first."""
        ...


class StaticRuleTableStore:
    """In-process store over a fixed mapping (the seeded YAML tables by default)."""

    def __init__(self, tables: Mapping[str, RuleTableSet] | None = None) -> None:
        self._tables = dict(RULE_TABLES if tables is None else tables)

    async def fetch_rule_table_set(self, financial_year: str) -> RuleTableSet:
        try:
            return self._tables[financial_year]
        except KeyError:
            raise RuleTableNotFoundError(financial_year) from None

    async def list_financial_years(self) -> list[str]:
        return sorted(self._tables, reverse=True)


class PostgresRuleTableStore:
    """Rule tables read from the tax_brackets, tax_levies and tax_offsets tables."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def fetch_rule_table_set(self, financial_year: str) -> RuleTableSet:
        """Fetch one year's rules in a single connection.

        Raises:
            RuleTableNotFoundError: No active brackets for the year.
            StoreUnavailableError: The database could not be queried.
        """
        try:
            async with self._pool.acquire() as conn:
                bracket_rows = await conn.fetch(
                    """
                    SELECT min_income, max_income, rate, fixed_amount, bracket_order
                    FROM tax_brackets
                    WHERE financial_year = $1 AND is_active = TRUE
                    ORDER BY bracket_order
                    """,
                    financial_year,
                )
                levy_rows = await conn.fetch(
                    """
                    SELECT levy_type, threshold_income, rate, max_income
                    FROM tax_levies
                    WHERE financial_year = $1 AND is_active = TRUE
                    ORDER BY levy_type
                    """,
                    financial_year,
                )
                offset_rows = await conn.fetch(
                    """
                    SELECT offset_type, max_income, max_offset,
                           phase_out_start, phase_out_rate
                    FROM tax_offsets
                    WHERE financial_year = $1 AND is_active = TRUE
                    ORDER BY offset_type
                    """,
                    financial_year,
                )
        except _STORE_ERRORS as exc:
            logger.exception("Failed to fetch rule tables for %s", financial_year)
            raise StoreUnavailableError(
                f"Rule table store unavailable while fetching {financial_year}"
            ) from exc

        if not bracket_rows:
            raise RuleTableNotFoundError(financial_year)

        return RuleTableSet(
            financial_year=financial_year,
            brackets=tuple(
                TaxBracket(
                    financial_year=financial_year,
                    min_income=r["min_income"],
                    max_income=r["max_income"],
                    rate=r["rate"],
                    fixed_amount=r["fixed_amount"],
                    order=r["bracket_order"],
                )
                for r in bracket_rows
            ),
            levies=tuple(
                TaxLevy(
                    financial_year=financial_year,
                    levy_type=r["levy_type"],
                    threshold_income=r["threshold_income"],
                    rate=r["rate"],
                    max_income=r["max_income"],
                )
                for r in levy_rows
            ),
            offsets=tuple(
                TaxOffset(
                    financial_year=financial_year,
                    offset_type=r["offset_type"],
                    max_income=r["max_income"],
                    max_offset=r["max_offset"],
                    phase_out_start=r["phase_out_start"],
                    phase_out_rate=r["phase_out_rate"],
                )
                for r in offset_rows
            ),
        )

    async def list_financial_years(self) -> list[str]:
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    """
                    SELECT DISTINCT financial_year
                    FROM tax_brackets
                    WHERE is_active = TRUE
                    ORDER BY financial_year DESC
                    """
                )
        except _STORE_ERRORS as exc:
            logger.exception("Failed to list financial years")
            raise StoreUnavailableError("Rule table store unavailable") from exc
        return [r["financial_year"] for r in rows]
