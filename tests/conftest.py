"""Pytest fixtures for testing"""

import itertools
from datetime import date
from typing import Callable, Optional

import pytest

from household_ledger.domain.models import (
    BenefitTier,
    PaymentMethodConfig,
    Transaction,
)

_ids = itertools.count(1)


def make_transaction(
    day: str,
    amount: int,
    payment_method_id: Optional[str] = None,
    exclude_from_performance: bool = False,
    exclude_from_billing: bool = False,
    category: Optional[str] = None,
    memo: Optional[str] = None,
    txn_id: Optional[str] = None,
    payment_method_name: Optional[str] = None,
) -> Transaction:
    """Build a transaction from an ISO date string"""
    return Transaction(
        id=txn_id or f"tx_{next(_ids)}",
        payment_method_id=payment_method_id,
        transaction_date=date.fromisoformat(day),
        amount=amount,
        category=category,
        memo=memo,
        exclude_from_performance=exclude_from_performance,
        exclude_from_billing=exclude_from_billing,
        payment_method_name=payment_method_name,
    )


@pytest.fixture
def txn() -> Callable[..., Transaction]:
    """Transaction factory"""
    return make_transaction


@pytest.fixture
def today() -> date:
    """Fixed "today" so previous-period logic is deterministic"""
    return date(2025, 3, 10)


@pytest.fixture
def credit_card() -> PaymentMethodConfig:
    """Credit card: performance period starts on the 15th, billed on the 14th"""
    return PaymentMethodConfig(
        id="card_a",
        name="Deep Dream",
        type="CREDIT",
        billing_day=14,
        performance_start_day=15,
    )


@pytest.fixture
def calendar_credit_card() -> PaymentMethodConfig:
    """Credit card using calendar months and no billing day"""
    return PaymentMethodConfig(id="card_b", name="Zero Edition", type="CREDIT")


@pytest.fixture
def check_card() -> PaymentMethodConfig:
    return PaymentMethodConfig(id="check_1", name="Nori Check", type="CHECK")


@pytest.fixture
def cash() -> PaymentMethodConfig:
    return PaymentMethodConfig(id="cash", name="Wallet", type="CASH")


@pytest.fixture
def cards(credit_card, calendar_credit_card, check_card, cash) -> list[PaymentMethodConfig]:
    return [credit_card, calendar_credit_card, check_card, cash]


@pytest.fixture
def tiers() -> list[BenefitTier]:
    """Three tiers for card_a, deliberately out of threshold order"""
    return [
        BenefitTier(id="tier_3", payment_method_id="card_a", threshold_amount=1_000_000, benefit_desc="Airport lounge", sort_order=3),
        BenefitTier(id="tier_1", payment_method_id="card_a", threshold_amount=300_000, benefit_desc="5% cafe discount", sort_order=1),
        BenefitTier(id="tier_2", payment_method_id="card_a", threshold_amount=600_000, benefit_desc="Free streaming", sort_order=2),
    ]


@pytest.fixture
def household_transactions() -> list[Transaction]:
    """
    Two months of household activity around March 2025.

    card_a March window is 2025-02-15..2025-03-14, February window
    2025-01-15..2025-02-14.
    """
    return [
        # card_a, February performance window
        make_transaction("2025-01-20", -100_000, "card_a", txn_id="t1"),
        make_transaction("2025-02-14", -50_000, "card_a", txn_id="t2"),
        # card_a, March performance window
        make_transaction("2025-02-15", -200_000, "card_a", txn_id="t3"),
        make_transaction("2025-03-01", -150_000, "card_a", exclude_from_billing=True, txn_id="t4"),
        make_transaction("2025-03-05", -100_000, "card_a", exclude_from_performance=True, txn_id="t5"),
        make_transaction("2025-03-14", -100_000, "card_a", txn_id="t6"),
        # card_a, April performance window
        make_transaction("2025-03-15", -30_000, "card_a", txn_id="t7"),
        # card_b, calendar month
        make_transaction("2025-03-31", -40_000, "card_b", txn_id="b1"),
        # check card
        make_transaction("2025-02-28", -9_999, "check_1", txn_id="c4"),
        make_transaction("2025-03-02", -20_000, "check_1", txn_id="c1"),
        make_transaction("2025-03-03", -5_000, "check_1", exclude_from_billing=True, txn_id="c2"),
        make_transaction("2025-03-04", -7_000, "check_1", exclude_from_performance=True, txn_id="c3"),
        # cash and income
        make_transaction("2025-03-20", -12_000, "cash", txn_id="k1"),
        make_transaction("2025-02-25", 3_000_000, None, category="salary", txn_id="i2"),
        make_transaction("2025-03-25", 3_000_000, None, category="salary", txn_id="i1"),
    ]
