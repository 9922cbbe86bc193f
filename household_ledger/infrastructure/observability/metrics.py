"""Prometheus metrics for dashboard computations and input quality"""

from prometheus_client import Counter, Histogram

# Dashboard metrics
dashboard_counter = Counter(
    "household_ledger_dashboard_total",
    "Total dashboard computations",
    ["carry_over"],  # enabled | disabled
)

dashboard_duration_histogram = Histogram(
    "household_ledger_dashboard_duration_seconds",
    "Dashboard computation time",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)

tier_achievement_counter = Counter(
    "household_ledger_tier_evaluations_total",
    "Benefit tier evaluations by outcome",
    ["outcome"],  # achieved | pending
)

# Input quality metrics
month_fallback_counter = Counter(
    "household_ledger_month_fallback_total",
    "Malformed month parameters replaced with the current month",
)

skipped_rows_counter = Counter(
    "household_ledger_skipped_rows_total",
    "Store rows dropped because they could not be mapped",
    ["entity"],  # transaction | payment_method | benefit_tier
)


def record_dashboard(carry_over_enabled: bool, duration_seconds: float) -> None:
    """Record one dashboard computation"""
    label = "enabled" if carry_over_enabled else "disabled"
    dashboard_counter.labels(carry_over=label).inc()
    dashboard_duration_histogram.observe(duration_seconds)


def record_tiers(achieved: int, pending: int) -> None:
    """Record tier outcomes for one performance period"""
    if achieved:
        tier_achievement_counter.labels(outcome="achieved").inc(achieved)
    if pending:
        tier_achievement_counter.labels(outcome="pending").inc(pending)
