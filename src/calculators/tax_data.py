"""Australian tax rule types and the seeded per-year rule tables.

Rule rows are immutable NamedTuples. The seeded tables are read from
config/rule_tables.yaml; the engine never reads them directly but goes
through a RuleTableStore, so tests can hand it their own fixtures.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, NamedTuple

from config import load_yaml_config
from config.settings import settings

MEDICARE_LEVY = "Medicare"
BUDGET_REPAIR_LEVY = "BudgetRepair"


class TaxBracket(NamedTuple):
    """A single income tax bracket.

    fixed_amount is the cumulative tax on every lower bracket.
    """

    financial_year: str
    min_income: Decimal
    max_income: Decimal | None  # None = top bracket, no cap
    rate: Decimal
    fixed_amount: Decimal
    order: int


class TaxLevy(NamedTuple):
    """A flat-rate levy charged on the whole income once over a threshold."""

    financial_year: str
    levy_type: str
    threshold_income: Decimal
    rate: Decimal
    max_income: Decimal | None = None  # cap on levied income


class TaxOffset(NamedTuple):
    """A tax offset that phases out linearly above phase_out_start."""

    financial_year: str
    offset_type: str
    max_income: Decimal | None  # eligibility ceiling
    max_offset: Decimal
    phase_out_start: Decimal | None = None
    phase_out_rate: Decimal | None = None


class RuleTableSet(NamedTuple):
    """All rule rows for a single financial year."""

    financial_year: str
    brackets: tuple[TaxBracket, ...]
    levies: tuple[TaxLevy, ...]
    offsets: tuple[TaxOffset, ...]


def _dec(value: Any) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))


def _parse_year(year: str, raw: dict[str, Any]) -> RuleTableSet:
    brackets = tuple(
        TaxBracket(
            financial_year=year,
            min_income=_dec(b["min_income"]),
            max_income=_dec(b.get("max_income")),
            rate=_dec(b["rate"]),
            fixed_amount=_dec(b["fixed_amount"]),
            order=order,
        )
        for order, b in enumerate(raw["brackets"], start=1)
    )
    levies = tuple(
        TaxLevy(
            financial_year=year,
            levy_type=lv["levy_type"],
            threshold_income=_dec(lv["threshold_income"]),
            rate=_dec(lv["rate"]),
            max_income=_dec(lv.get("max_income")),
        )
        for lv in raw.get("levies") or []
    )
    offsets = tuple(
        TaxOffset(
            financial_year=year,
            offset_type=o["offset_type"],
            max_income=_dec(o.get("max_income")),
            max_offset=_dec(o["max_offset"]),
            phase_out_start=_dec(o.get("phase_out_start")),
            phase_out_rate=_dec(o.get("phase_out_rate")),
        )
        for o in raw.get("offsets") or []
    )
    return RuleTableSet(year, brackets, levies, offsets)


def load_rule_tables(filename: str | Path | None = None) -> dict[str, RuleTableSet]:
    """Parse a rule table YAML file into RuleTableSets keyed by financial year."""
    raw = load_yaml_config(filename or settings.rule_tables_file)
    return {year: _parse_year(year, data) for year, data in raw["years"].items()}


def check_brackets(brackets: tuple[TaxBracket, ...] | list[TaxBracket]) -> None:
    """Raise ValueError unless brackets are contiguous with one open top bracket."""
    ordered = sorted(brackets, key=lambda b: b.order)
    if not ordered:
        raise ValueError("No brackets")
    open_ended = [b for b in ordered if b.max_income is None]
    if len(open_ended) != 1 or ordered[-1].max_income is not None:
        raise ValueError("Exactly one top bracket with no max_income is required")
    for lower, upper in zip(ordered, ordered[1:]):
        if upper.min_income != lower.max_income + 1:
            raise ValueError(
                f"Gap or overlap between brackets {lower.order} and {upper.order} "
                f"({lower.max_income} -> {upper.min_income})"
            )


RULE_TABLES: dict[str, RuleTableSet] = load_rule_tables()

FINANCIAL_YEARS: tuple[str, ...] = tuple(sorted(RULE_TABLES, reverse=True))
