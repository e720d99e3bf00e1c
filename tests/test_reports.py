"""
Tests for the aggregation queries (balance, by-category, monthly reports).
"""

from datetime import datetime

import pytest

from app.errors import ValidationError
from app.schemas import TransactionCreate
from app.services.reports import (
    get_balance,
    get_monthly_summary,
    get_months_archive,
    get_months_comparison,
    get_spending_by_category,
)
from app.services.transactions import create_transaction


def add(db, owner, category_id, amount, kind, date):
    return create_transaction(
        db,
        owner,
        TransactionCreate(category_id=category_id, amount=amount, kind=kind, transaction_date=date),
    )


@pytest.fixture
def ledger(db, owner, other_owner, categories):
    add(db, owner, categories["salary"], "3000", "income", "2024-01-01")
    add(db, owner, categories["food"], "120.50", "expense", "2024-01-10")
    add(db, owner, categories["rent"], "900", "expense", "2024-01-31T23:59:59")
    add(db, owner, categories["food"], "80", "expense", "2024-02-01")
    add(db, owner, categories["salary"], "3000", "income", "2024-03-01")
    add(db, owner, categories["fuel"], "45.25", "expense", "2024-03-15")
    # someone else's data must never leak into owner's numbers
    add(db, other_owner, categories["food"], "999", "expense", "2024-01-15")
    return categories


class TestBalance:
    def test_empty_is_all_zero(self, db, owner):
        assert get_balance(db, owner) == {"income": 0, "expense": 0, "balance": 0}

    def test_all_time(self, db, owner, ledger):
        result = get_balance(db, owner)
        assert result == {"income": 600000, "expense": 114575, "balance": 485425}

    def test_balance_is_income_minus_expense(self, db, owner, ledger):
        result = get_balance(db, owner)
        assert result["balance"] == result["income"] - result["expense"]

    def test_closed_range_is_inclusive(self, db, owner, ledger):
        result = get_balance(db, owner, datetime(2024, 1, 1), datetime(2024, 1, 31, 23, 59, 59))
        assert result == {"income": 300000, "expense": 102050, "balance": 197950}

    def test_single_bound(self, db, owner, ledger):
        result = get_balance(db, owner, start=datetime(2024, 3, 1))
        assert result == {"income": 300000, "expense": 4525, "balance": 295475}

    def test_only_expenses_gives_negative_balance(self, db, owner, categories):
        add(db, owner, categories["food"], "10", "expense", "2024-05-05")
        assert get_balance(db, owner) == {"income": 0, "expense": 1000, "balance": -1000}

    def test_store_unavailable_degrades_to_zero(self, broken_db):
        assert get_balance(broken_db, 1) == {"income": 0, "expense": 0, "balance": 0}


class TestSpendingByCategory:
    def test_groups_expenses_only(self, db, owner, ledger):
        result = {r["category_id"]: r["total"] for r in get_spending_by_category(db, owner)}
        assert result == {
            ledger["food"]: 20050,
            ledger["rent"]: 90000,
            ledger["fuel"]: 4525,
        }
        assert ledger["salary"] not in result

    def test_partition_sums_to_expense_total(self, db, owner, ledger):
        by_category = get_spending_by_category(db, owner)
        assert sum(r["total"] for r in by_category) == get_balance(db, owner)["expense"]

    def test_categories_without_spend_are_absent(self, db, owner, ledger):
        result = get_spending_by_category(db, owner, datetime(2024, 2, 1), datetime(2024, 2, 29))
        assert result == [{"category_id": ledger["food"], "total": 8000}]

    def test_empty(self, db, owner):
        assert get_spending_by_category(db, owner) == []

    def test_store_unavailable_degrades_to_empty(self, broken_db):
        assert get_spending_by_category(broken_db, 1) == []


class TestMonthlyReports:
    def test_monthly_summary_respects_month_bounds(self, db, owner, ledger):
        summary = get_monthly_summary(db, owner, "2024-01")
        assert summary["month"] == "2024-01"
        assert summary["income"] == 300000
        # the 23:59:59 rent on Jan 31 belongs to January
        assert summary["expense"] == 102050
        assert summary["balance"] == 197950
        assert {r["category_id"] for r in summary["by_category"]} == {ledger["food"], ledger["rent"]}

    def test_last_instant_of_month_is_counted(self, db, owner, categories):
        add(db, owner, categories["food"], "10", "expense", "2024-01-31T23:59:59.999500")

        jan = get_monthly_summary(db, owner, "2024-01")["expense"]
        feb = get_monthly_summary(db, owner, "2024-02")["expense"]

        assert get_months_archive(db, owner) == ["2024-01"]
        assert jan == 1000
        assert jan + feb == get_balance(db, owner)["expense"]

    def test_monthly_summary_for_empty_month(self, db, owner, ledger):
        summary = get_monthly_summary(db, owner, "2023-06")
        assert summary == {"month": "2023-06", "income": 0, "expense": 0, "balance": 0, "by_category": []}

    def test_comparison_preserves_input_order(self, db, owner, ledger):
        result = get_months_comparison(db, owner, ["2024-03", "2024-01"])
        assert [r["month"] for r in result] == ["2024-03", "2024-01"]
        assert result[0]["expense"] == 4525
        assert result[1]["expense"] == 102050

    @pytest.mark.parametrize("months", [["2024-01"], [f"2023-{m:02d}" for m in range(1, 13)] + ["2024-01"]])
    def test_comparison_month_count_limits(self, db, owner, months):
        with pytest.raises(ValidationError):
            get_months_comparison(db, owner, months)

    def test_comparison_rejects_bad_key(self, db, owner):
        with pytest.raises(ValidationError):
            get_months_comparison(db, owner, ["2024-01", "2024-1"])

    def test_archive_lists_months_with_data_newest_first(self, db, owner, ledger):
        assert get_months_archive(db, owner) == ["2024-03", "2024-02", "2024-01"]

    def test_archive_is_owner_scoped(self, db, other_owner, ledger):
        assert get_months_archive(db, other_owner) == ["2024-01"]

    def test_archive_store_unavailable(self, broken_db):
        assert get_months_archive(broken_db, 1) == []
