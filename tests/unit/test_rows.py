"""Unit tests for store row mapping"""

from datetime import date

import pytest

from household_ledger.domain.exceptions import InvalidTransactionDataError
from household_ledger.infrastructure.rows import (
    normalize_threshold_amount,
    to_benefit_tiers,
    to_payment_methods,
    to_transaction,
    to_transactions,
)
from household_ledger.utils.coercion import coerce_flag, coerce_int


@pytest.mark.parametrize(
    "raw, expected",
    [(12, 12), ("-1200", -1200), ("12.7", 12), ("abc", 0), (None, 0), ("", 0), (float("nan"), 0), (True, 1)],
)
def test_coerce_int(raw, expected):
    """Test unparseable numbers default to zero"""
    assert coerce_int(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [(1, True), (0, False), ("1", True), ("0", False), ("true", True), ("False", False), (None, False), (True, True)],
)
def test_coerce_flag(raw, expected):
    """Test integer, boolean and string flags"""
    assert coerce_flag(raw) is expected


def test_transaction_from_database_row():
    """Test snake_case row with 0/1 integer flags"""
    txn = to_transaction(
        {
            "id": "t1",
            "payment_method_id": "card_a",
            "transaction_date": "2025-03-14",
            "amount": "-45000",
            "category": "food",
            "memo": None,
            "is_installment": 1,
            "installment_months": 3,
            "exclude_from_billing": 0,
            "exclude_from_performance": 1,
            "created_at": "2025-03-14T10:00:00Z",
        }
    )

    assert txn.id == "t1"
    assert txn.transaction_date == date(2025, 3, 14)
    assert txn.amount == -45000
    assert txn.is_expense is True
    assert txn.exclude_from_performance is True
    assert txn.exclude_from_billing is False
    assert txn.is_installment is True
    assert txn.installment_months == 3


def test_transaction_from_camel_case_payload():
    """Test API-shaped payloads map the same way"""
    txn = to_transaction(
        {
            "id": "t2",
            "paymentMethodId": "",
            "transactionDate": "2025-03-01",
            "amount": 5000,
            "excludeFromBilling": True,
            "paymentMethodName": "Wallet",
        }
    )

    assert txn.payment_method_id is None
    assert txn.exclude_from_billing is True
    assert txn.payment_method_name == "Wallet"
    assert txn.installment_months == 1


def test_transaction_unparseable_amount_defaults_to_zero():
    """Test garbage amount becomes 0 instead of failing the row"""
    txn = to_transaction({"id": "t3", "transaction_date": "2025-03-01", "amount": "lots"})

    assert txn.amount == 0


def test_transaction_without_date_raises():
    """Test rows without a usable date raise InvalidTransactionDataError"""
    with pytest.raises(InvalidTransactionDataError):
        to_transaction({"id": "t4", "transaction_date": "2025-02-30", "amount": -100})


def test_to_transactions_skips_malformed_rows():
    """Test malformed rows are dropped and the rest survive"""
    rows = [
        {"id": "ok", "transaction_date": "2025-03-01", "amount": -100},
        {"id": "no_date", "amount": -100},
        {"id": "bad_date", "transaction_date": "soon", "amount": -100},
        {"transaction_date": "2025-03-02", "amount": -100},
    ]

    transactions = to_transactions(rows)

    assert [t.id for t in transactions] == ["ok"]


def test_payment_method_rows():
    """Test type normalisation and day clamping"""
    methods = to_payment_methods(
        [
            {"id": "card_a", "name": "Deep", "type": "credit", "billing_day": "14", "performance_start_day": 15, "is_active": 1},
            {"id": "card_b", "name": "Odd", "type": "CREDIT", "billing_day": 40, "performance_start_day": "x"},
            {"id": "acct", "name": "Salary", "type": "ACCOUNT", "billing_day": None, "is_active": 0},
            {"id": "mystery", "name": "?", "type": "CRYPTO", "billing_day": ""},
            {"name": "no id"},
        ]
    )

    assert [m.id for m in methods] == ["card_a", "card_b", "acct", "mystery"]
    assert methods[0].is_credit and methods[0].billing_day == 14 and methods[0].performance_start_day == 15
    assert methods[1].billing_day == 31
    assert methods[1].performance_start_day == 1
    assert methods[2].billing_day is None
    assert methods[2].is_active is False
    assert methods[3].type == "CASH"
    assert methods[3].billing_day is None


def test_benefit_tier_rows():
    """Test tier thresholds coerce and rows without a card are skipped"""
    tiers = to_benefit_tiers(
        [
            {"id": "t1", "payment_method_id": "card_a", "threshold_amount": "300000", "benefit_desc": "Cafe", "sort_order": 1},
            {"id": "t2", "paymentMethodId": "card_a", "thresholdAmount": "oops", "benefitDesc": "Lounge"},
            {"id": "t3", "threshold_amount": 100},
        ]
    )

    assert [t.id for t in tiers] == ["t1", "t2"]
    assert tiers[0].threshold_amount == 300_000
    assert tiers[1].threshold_amount == 0
    assert tiers[1].sort_order == 0


@pytest.mark.parametrize(
    "raw, expected",
    [(300000, 300000), ("150000", 150000), ("99.5", 100), (-5000, 0), ("-1", 0), (float("inf"), 0), (None, 0), ("", 0)],
)
def test_normalize_threshold_amount(raw, expected):
    """Test thresholds are whole and never negative"""
    assert normalize_threshold_amount(raw) == expected


def test_benefit_tier_negative_threshold_is_zero():
    """Test a negative stored threshold maps to 0"""
    tiers = to_benefit_tiers([{"id": "t1", "payment_method_id": "card_a", "threshold_amount": -300000}])

    assert tiers[0].threshold_amount == 0
