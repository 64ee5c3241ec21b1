"""Shared test fixtures."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.calculators.tax_data import RuleTableSet, TaxBracket, TaxLevy, TaxOffset
from src.db.rule_store import StaticRuleTableStore
from src.engine import TaxEngine
from src.rule_cache import RuleTableCache

D = Decimal


def make_brackets(year: str, rows: list[tuple[int, int | None, str, int]]) -> tuple[TaxBracket, ...]:
    """Build brackets from (min_income, max_income, rate, fixed_amount) rows."""
    return tuple(
        TaxBracket(
            financial_year=year,
            min_income=D(lo),
            max_income=D(hi) if hi is not None else None,
            rate=D(rate),
            fixed_amount=D(fixed),
            order=order,
        )
        for order, (lo, hi, rate, fixed) in enumerate(rows, start=1)
    )


@pytest.fixture
def brackets_2024_25() -> tuple[TaxBracket, ...]:
    """Stage 3 brackets, as seeded for 2024-25."""
    return make_brackets(
        "2024-25",
        [
            (0, 18200, "0", 0),
            (18201, 45000, "0.16", 0),
            (45001, 135000, "0.30", 4288),
            (135001, 190000, "0.37", 31288),
            (190001, None, "0.45", 51638),
        ],
    )


@pytest.fixture
def fixture_rules(brackets_2024_25: tuple[TaxBracket, ...]) -> RuleTableSet:
    """A deterministic rule set with a simple LITO and a capped surcharge."""
    return RuleTableSet(
        financial_year="2099-00",
        brackets=brackets_2024_25,
        levies=(
            TaxLevy("2099-00", "Medicare", D("0"), D("0.02")),
            TaxLevy("2099-00", "Surcharge", D("100000"), D("0.01"), max_income=D("150000")),
        ),
        offsets=(
            TaxOffset("2099-00", "LITO", None, D("700"), D("37500"), D("0.05")),
        ),
    )


@pytest.fixture
def static_store() -> StaticRuleTableStore:
    """Store over the seeded YAML rule tables."""
    return StaticRuleTableStore()


@pytest.fixture
def engine(static_store: StaticRuleTableStore) -> TaxEngine:
    """Engine over the seeded rule tables with a fresh cache."""
    return TaxEngine(RuleTableCache(static_store))


@pytest.fixture
def mock_store(fixture_rules: RuleTableSet) -> AsyncMock:
    """Async mock of a RuleTableStore returning the fixture rules."""
    store = AsyncMock()
    store.fetch_rule_table_set.return_value = fixture_rules
    store.list_financial_years.return_value = ["2099-00"]
    return store


@pytest.fixture
def mock_db_pool() -> MagicMock:
    """Mock of asyncpg.Pool with context-managed acquire().

    asyncpg.Pool.acquire() returns an async context manager (not a coroutine),
    so we use MagicMock for the pool and configure __aenter__/__aexit__ manually.
    """
    conn = AsyncMock()
    conn.fetch.return_value = []

    acm = MagicMock()
    acm.__aenter__ = AsyncMock(return_value=conn)
    acm.__aexit__ = AsyncMock(return_value=False)

    pool = MagicMock()
    pool.acquire.return_value = acm
    return pool
