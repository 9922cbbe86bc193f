"""Pydantic models mapping raw store rows onto domain entities"""

import logging
import math
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from household_ledger.config import settings
from household_ledger.domain.exceptions import InvalidTransactionDataError
from household_ledger.domain.models import (
    CASH,
    PAYMENT_METHOD_TYPES,
    BenefitTier,
    PaymentMethodConfig,
    Transaction,
)
from household_ledger.infrastructure.observability.metrics import skipped_rows_counter
from household_ledger.utils.coercion import coerce_flag, coerce_int
from household_ledger.utils.date_utils import clamp_day, parse_iso_date

logger = logging.getLogger(__name__)


def normalize_threshold_amount(value: Any) -> int:
    """Tier threshold as a non-negative whole amount; unparseable values become 0"""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(parsed):
        return 0
    return max(0, math.floor(parsed + 0.5))


class _StoreRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PaymentMethodRow(_StoreRow):
    """Row from the payment method store"""

    id: str
    name: str = ""
    type: str = CASH
    billing_day: Optional[int] = Field(default=None, alias="billingDay")
    performance_start_day: int = Field(default=1, alias="performanceStartDay")
    is_active: bool = Field(default=True, alias="isActive")

    @field_validator("id", "name", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, v: Any) -> str:
        value = str(v or "").strip().upper()
        return value if value in PAYMENT_METHOD_TYPES else CASH

    @field_validator("billing_day", mode="before")
    @classmethod
    def _billing_day(cls, v: Any) -> Optional[int]:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return clamp_day(v)

    @field_validator("performance_start_day", mode="before")
    @classmethod
    def _start_day(cls, v: Any) -> int:
        return clamp_day(v, fallback=settings.default_performance_start_day)

    @field_validator("is_active", mode="before")
    @classmethod
    def _active(cls, v: Any) -> bool:
        return True if v is None else coerce_flag(v)

    def to_domain(self) -> PaymentMethodConfig:
        return PaymentMethodConfig(
            id=self.id,
            name=self.name,
            type=self.type,
            billing_day=self.billing_day,
            performance_start_day=self.performance_start_day,
            is_active=self.is_active,
        )


class BenefitTierRow(_StoreRow):
    """Row from the benefit tier store"""

    id: str
    payment_method_id: str = Field(alias="paymentMethodId")
    threshold_amount: int = Field(default=0, alias="thresholdAmount")
    benefit_desc: str = Field(default="", alias="benefitDesc")
    sort_order: int = Field(default=0, alias="sortOrder")

    @field_validator("id", "payment_method_id", "benefit_desc", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("threshold_amount", mode="before")
    @classmethod
    def _threshold(cls, v: Any) -> int:
        return normalize_threshold_amount(v)

    @field_validator("sort_order", mode="before")
    @classmethod
    def _sort_order(cls, v: Any) -> int:
        return coerce_int(v)

    def to_domain(self) -> BenefitTier:
        return BenefitTier(
            id=self.id,
            payment_method_id=self.payment_method_id,
            threshold_amount=self.threshold_amount,
            benefit_desc=self.benefit_desc,
            sort_order=self.sort_order,
        )


class TransactionRow(_StoreRow):
    """Row from the transaction store"""

    id: str
    payment_method_id: Optional[str] = Field(default=None, alias="paymentMethodId")
    transaction_date: date = Field(alias="transactionDate")
    amount: int = 0
    category: Optional[str] = None
    memo: Optional[str] = None
    exclude_from_performance: bool = Field(default=False, alias="excludeFromPerformance")
    exclude_from_billing: bool = Field(default=False, alias="excludeFromBilling")
    is_installment: bool = Field(default=False, alias="isInstallment")
    installment_months: int = Field(default=1, alias="installmentMonths")
    payment_method_name: Optional[str] = Field(default=None, alias="paymentMethodName")

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("payment_method_id", mode="before")
    @classmethod
    def _optional_id(cls, v: Any) -> Optional[str]:
        return None if v in (None, "") else str(v)

    @field_validator("category", "memo", "payment_method_name", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("transaction_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> date:
        return parse_iso_date(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> int:
        return coerce_int(v)

    @field_validator("installment_months", mode="before")
    @classmethod
    def _installments(cls, v: Any) -> int:
        return max(1, coerce_int(v, default=1))

    @field_validator(
        "exclude_from_performance", "exclude_from_billing", "is_installment", mode="before"
    )
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return coerce_flag(v)

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            payment_method_id=self.payment_method_id,
            transaction_date=self.transaction_date,
            amount=self.amount,
            category=self.category,
            memo=self.memo,
            exclude_from_performance=self.exclude_from_performance,
            exclude_from_billing=self.exclude_from_billing,
            is_installment=self.is_installment,
            installment_months=self.installment_months,
            payment_method_name=self.payment_method_name,
        )


def to_transaction(row: Mapping[str, Any]) -> Transaction:
    """Map one store row, raising InvalidTransactionDataError when it has no usable date"""
    try:
        return TransactionRow.model_validate(row).to_domain()
    except ValidationError as e:
        raise InvalidTransactionDataError(
            f"Transaction {row.get('id')!r} is malformed: {e.error_count()} error(s)"
        ) from e


def to_transactions(rows: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    """Map store rows, skipping rows that cannot be placed on the calendar"""
    transactions = []
    for row in rows:
        try:
            transactions.append(to_transaction(row))
        except InvalidTransactionDataError as e:
            skipped_rows_counter.labels(entity="transaction").inc()
            logger.warning(f"Skipping transaction row: {e}", extra={"row_id": str(row.get("id"))})
    return transactions


def to_payment_methods(rows: Iterable[Mapping[str, Any]]) -> List[PaymentMethodConfig]:
    """Map payment method rows; rows without an id are skipped"""
    methods = []
    for row in rows:
        try:
            methods.append(PaymentMethodRow.model_validate(row).to_domain())
        except ValidationError as e:
            skipped_rows_counter.labels(entity="payment_method").inc()
            logger.warning(f"Skipping payment method row: {e.error_count()} error(s)")
    return methods


def to_benefit_tiers(rows: Iterable[Mapping[str, Any]]) -> List[BenefitTier]:
    """Map benefit tier rows; rows without an id or card are skipped"""
    tiers = []
    for row in rows:
        try:
            tiers.append(BenefitTierRow.model_validate(row).to_domain())
        except ValidationError as e:
            skipped_rows_counter.labels(entity="benefit_tier").inc()
            logger.warning(f"Skipping benefit tier row: {e.error_count()} error(s)")
    return tiers
