"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

MonthKey = str  # "YYYY-MM"

CREDIT = "CREDIT"
CHECK = "CHECK"
ACCOUNT = "ACCOUNT"
CASH = "CASH"
PAYMENT_METHOD_TYPES = (CREDIT, CHECK, ACCOUNT, CASH)


@dataclass
class PaymentMethodConfig:
    """Card or account that transactions are recorded against"""

    id: str
    name: str
    type: str  # CREDIT | CHECK | ACCOUNT | CASH
    billing_day: Optional[int] = None
    performance_start_day: int = 1
    is_active: bool = True

    @property
    def is_credit(self) -> bool:
        return self.type == CREDIT


@dataclass
class BenefitTier:
    """Spending threshold that unlocks a card benefit"""

    id: str
    payment_method_id: str
    threshold_amount: int
    benefit_desc: str
    sort_order: int = 0


@dataclass
class Transaction:
    """Ledger entry; negative amount = expense, positive = income"""

    id: str
    payment_method_id: Optional[str]
    transaction_date: date
    amount: int
    category: Optional[str] = None
    memo: Optional[str] = None
    exclude_from_performance: bool = False
    exclude_from_billing: bool = False
    is_installment: bool = False
    installment_months: int = 1
    payment_method_name: Optional[str] = None

    @property
    def is_expense(self) -> bool:
        return self.amount < 0


@dataclass
class PerformanceWindow:
    """Inclusive date range a card's spending accumulates over"""

    start: date
    end: date
    start_day: int

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass
class BillingWindow:
    """Inclusive date range of spending that appears on one statement"""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass
class CashflowSummary:
    """Income and expense totals for one calendar month"""

    month: MonthKey
    income: int
    expense: int
    balance: int
    carry_over: Optional[int] = None

    @property
    def closing_balance(self) -> int:
        """Month balance with prior months rolled in"""
        return self.balance + (self.carry_over or 0)


@dataclass
class CardUsageTransaction:
    """Transaction that counted toward a card's performance"""

    id: str
    transaction_date: date
    amount: int
    category: Optional[str]
    memo: Optional[str]


@dataclass
class TierStatus:
    """Benefit tier with its achievement flag for one period"""

    id: str
    payment_method_id: str
    threshold_amount: int
    benefit_desc: str
    sort_order: int
    achieved: bool


@dataclass
class PeriodPerformance:
    """Spending accumulated by a card over one performance window"""

    window: PerformanceWindow
    amount: int
    usage_transactions: List[CardUsageTransaction]
    tiers: List[TierStatus]
    next_tier_remaining: Optional[int]


@dataclass
class CardPerformance:
    """Per-card performance for the queried month"""

    payment_method_id: str
    card_name: str
    payment_method_type: str
    billing_day: Optional[int]
    performance_start_day: int
    current: PeriodPerformance
    previous: Optional[PeriodPerformance] = None
    # charge date of the current window, credit cards with a billing day only
    expected_billing_date: Optional[date] = None

    @property
    def current_performance(self) -> int:
        return self.current.amount

    @property
    def performance_period_start(self) -> date:
        return self.current.window.start

    @property
    def performance_period_end(self) -> date:
        return self.current.window.end


@dataclass
class CardBilling:
    """Amounts one credit card will charge this month and next"""

    payment_method_id: str
    card_name: str
    billing_day: int
    current_month_billing: int
    next_month_billing: int
    # billing month key -> window of spending resolved into it
    windows: Dict[MonthKey, List[PerformanceWindow]] = field(default_factory=dict)


@dataclass
class BillingSummary:
    """Billing totals across all credit cards"""

    month: MonthKey
    next_month: MonthKey
    cards: List[CardBilling]
    current_month_total: int
    next_month_total: int


@dataclass
class DashboardResult:
    """Everything the dashboard needs for one reporting month"""

    month: MonthKey
    cashflow: CashflowSummary
    card_performances: List[CardPerformance]
    billing: BillingSummary


@dataclass
class ListedTransaction:
    """Transaction row for list views, labelled with its billing month in billing mode"""

    transaction: Transaction
    billing_month_key: Optional[MonthKey] = None


@dataclass
class MonthlyTrends:
    """Cumulative income and per-method expense series by month"""

    months: List[MonthKey]
    cumulative_income: List[int]
    cumulative_expense_by_method: Dict[str, List[int]]
