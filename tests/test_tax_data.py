"""Tests for the seeded rule tables and bracket validation."""

from decimal import Decimal

import pytest

from src.calculators.tax_data import (
    FINANCIAL_YEARS,
    RULE_TABLES,
    TaxBracket,
    check_brackets,
    load_rule_tables,
)

D = Decimal


def test_ten_financial_years() -> None:
    assert FINANCIAL_YEARS == (
        "2024-25",
        "2023-24",
        "2022-23",
        "2021-22",
        "2020-21",
        "2019-20",
        "2018-19",
        "2017-18",
        "2016-17",
        "2015-16",
    )


@pytest.mark.parametrize("year", FINANCIAL_YEARS)
def test_brackets_contiguous(year: str) -> None:
    check_brackets(RULE_TABLES[year].brackets)


@pytest.mark.parametrize("year", FINANCIAL_YEARS)
def test_values_are_decimals(year: str) -> None:
    rules = RULE_TABLES[year]
    for bracket in rules.brackets:
        assert isinstance(bracket.rate, Decimal)
        assert isinstance(bracket.fixed_amount, Decimal)
        assert bracket.financial_year == year
    for levy in rules.levies:
        assert isinstance(levy.rate, Decimal)


def test_rates_exact() -> None:
    """Quoted YAML rates load without float noise."""
    rates = [b.rate for b in RULE_TABLES["2017-18"].brackets]
    assert rates == [D("0"), D("0.19"), D("0.325"), D("0.37"), D("0.45")]


def test_budget_repair_levy_years() -> None:
    years = {
        year
        for year, rules in RULE_TABLES.items()
        if any(levy.levy_type == "BudgetRepair" for levy in rules.levies)
    }
    assert years == {"2015-16", "2016-17", "2017-18"}
    levy = next(lv for lv in RULE_TABLES["2015-16"].levies if lv.levy_type == "BudgetRepair")
    assert levy.threshold_income == D("180000")
    assert levy.rate == D("0.02")


@pytest.mark.parametrize("year", FINANCIAL_YEARS)
def test_medicare_every_year(year: str) -> None:
    medicare = [lv for lv in RULE_TABLES[year].levies if lv.levy_type == "Medicare"]
    assert len(medicare) == 1
    assert medicare[0].rate == D("0.02")


def test_lito_parameters() -> None:
    old = RULE_TABLES["2015-16"].offsets[0]
    new = RULE_TABLES["2024-25"].offsets[0]
    assert (old.max_offset, old.phase_out_start, old.phase_out_rate) == (D("445"), D("37000"), D("0.015"))
    assert (new.max_offset, new.phase_out_start, new.phase_out_rate) == (D("700"), D("37500"), D("0.05"))
    assert new.max_income == D("45000")


def test_shared_brackets_parsed_per_year() -> None:
    """YAML anchors reuse rows, but each year's brackets carry their own year."""
    assert RULE_TABLES["2021-22"].brackets[0].financial_year == "2021-22"
    assert RULE_TABLES["2022-23"].brackets[0].financial_year == "2022-23"


def test_load_rule_tables_returns_fresh_mapping() -> None:
    assert load_rule_tables() == RULE_TABLES


def _bracket(lo: str, hi: str | None, order: int) -> TaxBracket:
    return TaxBracket("2099-00", D(lo), D(hi) if hi else None, D("0.1"), D("0"), order)


def test_check_brackets_gap() -> None:
    with pytest.raises(ValueError, match="Gap or overlap"):
        check_brackets([_bracket("0", "100", 1), _bracket("102", None, 2)])


def test_check_brackets_needs_one_top_bracket() -> None:
    with pytest.raises(ValueError, match="top bracket"):
        check_brackets([_bracket("0", "100", 1), _bracket("101", "200", 2)])
    with pytest.raises(ValueError, match="top bracket"):
        check_brackets([_bracket("0", None, 1), _bracket("101", None, 2)])


def test_check_brackets_empty() -> None:
    with pytest.raises(ValueError):
        check_brackets([])


def test_load_rule_tables_from_absolute_path(tmp_path) -> None:  # type: ignore[no-untyped-def]
    rules_file = tmp_path / "rules.yaml"
    rules_file.write_text(
        """
years:
  "2099-00":
    brackets:
      - {min_income: 0, max_income: 10000, rate: "0", fixed_amount: 0}
      - {min_income: 10001, max_income: null, rate: "0.25", fixed_amount: 0}
"""
    )

    tables = load_rule_tables(rules_file)

    rules = tables["2099-00"]
    assert [b.order for b in rules.brackets] == [1, 2]
    assert rules.brackets[1].rate == D("0.25")
    assert rules.levies == ()
    assert rules.offsets == ()
